"""Tests for YouTubeMetadataParser."""

import json

import pytest

from video_resolver.core.exceptions import MetadataParseError
from video_resolver.services.youtube.metadata_parser import YouTubeMetadataParser


class TestParseOutput:
    @pytest.fixture
    def parser(self):
        return YouTubeMetadataParser()

    def test_parses_top_level_fields(self, parser, sample_stdout):
        metadata = parser.parse_output(sample_stdout)

        assert metadata.id == "dQw4w9WgXcQ"
        assert metadata.title == "Test Video"
        assert metadata.description == "Test description"
        assert metadata.duration == 212
        assert metadata.thumbnail_url == "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
        assert metadata.uploader == "Test Channel"
        assert metadata.upload_date == "20091025"
        assert metadata.view_count == 1000000
        assert len(metadata.formats) == 7

    def test_maps_format_fields(self, parser, sample_stdout):
        metadata = parser.parse_output(sample_stdout)
        fmt = metadata.formats[-1]

        assert fmt.url == "https://media/v1080"
        assert fmt.extension == "mp4"
        assert fmt.video_codec == "avc1.640028"
        assert fmt.audio_codec == "none"
        assert fmt.height == 1080
        assert fmt.width == 1920
        assert fmt.fps == 30
        assert fmt.file_size_bytes == 1000

    def test_audio_bitrate_keeps_fraction(self, parser):
        stdout = json.dumps({"formats": [{"vcodec": "none", "acodec": "opus", "abr": 129.478}]})
        fmt = parser.parse_output(stdout).formats[0]

        assert fmt.average_bitrate_kbps == 129.478

    def test_missing_fields_are_absent(self, parser):
        metadata = parser.parse_output("{}")

        assert metadata.id is None
        assert metadata.title is None
        assert metadata.duration is None
        assert metadata.formats == []

    def test_wrong_types_are_treated_as_absent(self, parser):
        stdout = json.dumps(
            {
                "title": 42,
                "view_count": "not a number",
                "formats": [{"height": True, "filesize": None, "url": ["x"]}, "junk"],
            }
        )
        metadata = parser.parse_output(stdout)

        assert metadata.title is None
        assert metadata.view_count is None
        assert len(metadata.formats) == 1
        assert metadata.formats[0].height is None
        assert metadata.formats[0].url is None

    def test_numeric_strings_are_accepted(self, parser):
        stdout = json.dumps({"duration": "212", "formats": [{"height": "720"}]})
        metadata = parser.parse_output(stdout)

        assert metadata.duration == 212
        assert metadata.formats[0].height == 720

    def test_non_list_formats_yield_no_formats(self, parser):
        metadata = parser.parse_output(json.dumps({"id": "abc", "formats": {"0": {}}}))

        assert metadata.formats == []

    @pytest.mark.parametrize("stdout", ["", "not json", "{\"id\": ", "WARNING: something\n{}"])
    def test_invalid_json_raises(self, parser, stdout):
        with pytest.raises(MetadataParseError):
            parser.parse_output(stdout)

    @pytest.mark.parametrize("stdout", ["[]", "null", "42", "\"text\""])
    def test_non_object_json_raises(self, parser, stdout):
        with pytest.raises(MetadataParseError, match="Expected a JSON object"):
            parser.parse_output(stdout)
