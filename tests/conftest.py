"""Shared fixtures for the stream resolver tests."""

import json
from unittest.mock import Mock

import pytest

from video_resolver.core.config import (
    AppConfig,
    ExtractionConfig,
    RateLimitConfig,
    ServerConfig,
    reset_config,
    set_config,
)

WATCH_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


class FakeInvoker:
    """Scripted stand-in for ExtractionInvoker.

    Each queued output is either the stdout string to return or an
    exception to raise, consumed one per invoke() call.
    """

    def __init__(self, outputs=None, available=True):
        self.outputs = list(outputs or [])
        self.available = available
        self.calls = []
        self.probe_calls = 0

    async def check_available(self):
        self.probe_calls += 1
        return self.available

    async def invoke(self, url, timeout):
        self.calls.append((url, timeout))
        result = self.outputs.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def app_config():
    """Config built only from init values so env vars and config files cannot leak in."""
    config = AppConfig(
        extraction=ExtractionConfig(),
        rate_limit=RateLimitConfig(),
        server=ServerConfig(),
    )
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def sample_formats():
    """A yt-dlp style format list covering every classification bucket."""
    return [
        {"format_id": "sb0", "url": "https://i.ytimg.com/sb/0", "ext": "mhtml", "vcodec": "none", "acodec": "none"},
        {"format_id": "139", "url": "https://media/a48", "ext": "m4a", "vcodec": "none", "acodec": "mp4a.40.5", "abr": 48, "filesize": 100},
        {"format_id": "140", "url": "https://media/a128", "ext": "m4a", "vcodec": "none", "acodec": "mp4a.40.2", "abr": 128, "filesize": 200},
        {"format_id": "18", "url": "https://media/c360", "ext": "mp4", "vcodec": "avc1.42001E", "acodec": "mp4a.40.2", "height": 360, "width": 640, "fps": 30, "filesize": 300},
        {"format_id": "22", "url": "https://media/c720", "ext": "mp4", "vcodec": "avc1.64001F", "acodec": "mp4a.40.2", "height": 720, "width": 1280, "fps": 30},
        {"format_id": "136", "url": "https://media/v720", "ext": "mp4", "vcodec": "avc1.4d401f", "acodec": "none", "height": 720, "width": 1280, "fps": 30, "filesize": 500},
        {"format_id": "137", "url": "https://media/v1080", "ext": "mp4", "vcodec": "avc1.640028", "acodec": "none", "height": 1080, "width": 1920, "fps": 30, "filesize": 1000},
    ]


@pytest.fixture
def sample_info(sample_formats):
    return {
        "id": "dQw4w9WgXcQ",
        "title": "Test Video",
        "description": "Test description",
        "duration": 212,
        "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
        "uploader": "Test Channel",
        "upload_date": "20091025",
        "view_count": 1000000,
        "formats": sample_formats,
    }


@pytest.fixture
def sample_stdout(sample_info):
    return json.dumps(sample_info)


@pytest.fixture
def single_stream_stdout():
    return json.dumps(
        {
            "id": "abc123",
            "title": "Single",
            "formats": [
                {"url": "https://media/only720", "ext": "mp4", "vcodec": "avc1", "acodec": "mp4a", "height": 720, "width": 1280},
            ],
        }
    )


@pytest.fixture
def completed_process():
    """Factory for mocked subprocess.run results."""

    def _make(returncode=0, stdout="", stderr=""):
        result = Mock()
        result.returncode = returncode
        result.stdout = stdout
        result.stderr = stderr
        return result

    return _make


@pytest.fixture
def make_invoker():
    return FakeInvoker


@pytest.fixture
def watch_url():
    return WATCH_URL
