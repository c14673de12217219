"""Tests for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from video_resolver.core.interfaces import IRateLimiter, RateLimitDecision
from video_resolver.web import create_app
from video_resolver.web.app import SECURITY_HEADERS


class FakeLimiter:
    """Limiter that always allows and records the client keys it saw."""

    def __init__(self):
        self.keys = []
        self.started = False
        self.stopped = False

    async def hit(self, client_key, now=None):
        self.keys.append(client_key)
        return RateLimitDecision(allowed=True, remaining=42)

    def tracked_clients(self):
        return len(set(self.keys))

    def start(self):
        self.started = True

    async def stop(self):
        self.stopped = True


@pytest.fixture
def client_for(app_config):
    """Build a TestClient around a scripted invoker."""
    clients = []

    def _make(invoker):
        client = TestClient(create_app(app_config, invoker=invoker))
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


class TestExtractVideo:
    def test_success(self, client_for, make_invoker, watch_url, sample_stdout):
        client = client_for(make_invoker([sample_stdout]))

        response = client.post("/api/extract-video", json={"url": watch_url})

        assert response.status_code == 200
        body = response.json()
        assert body["availableQualities"] == ["1080p", "720p", "360p"]
        assert body["streams"][0]["audioUrl"] == "https://media/a128"

    def test_missing_url(self, client_for, make_invoker):
        response = client_for(make_invoker()).post("/api/extract-video", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "URL is required"}

    def test_body_not_json(self, client_for, make_invoker):
        response = client_for(make_invoker()).post(
            "/api/extract-video", content=b"url=x", headers={"Content-Type": "text/plain"}
        )

        assert response.status_code == 400

    def test_non_object_body(self, client_for, make_invoker):
        response = client_for(make_invoker()).post("/api/extract-video", json=["url"])

        assert response.status_code == 400

    def test_invalid_url(self, client_for, make_invoker):
        response = client_for(make_invoker()).post(
            "/api/extract-video", json={"url": "https://example.com/watch?v=abc"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid YouTube URL"}

    def test_tool_unavailable(self, client_for, make_invoker, watch_url):
        response = client_for(make_invoker(available=False)).post(
            "/api/extract-video", json={"url": watch_url}
        )

        assert response.status_code == 503
        assert response.json()["fallback"] == "Please use YouTube embed instead"


class TestRateLimiting:
    def test_blocks_after_limit(self, app_config, client_for, make_invoker):
        app_config.rate_limit.max_requests = 2
        client = client_for(make_invoker())

        assert client.post("/api/extract-video", json={}).status_code == 400
        assert client.post("/api/extract-video", json={}).status_code == 400
        response = client.post("/api/extract-video", json={})

        assert response.status_code == 429
        assert response.json()["error"] == "Too many requests"
        assert int(response.headers["Retry-After"]) == response.json()["retryAfter"]

    def test_forwarded_for_used_when_proxy_trusted(self, app_config, client_for, make_invoker):
        app_config.rate_limit.max_requests = 1
        app_config.server.trust_proxy = True
        client = client_for(make_invoker())

        first = client.get("/api/health", headers={"X-Forwarded-For": "1.1.1.1"})
        second = client.get("/api/health", headers={"X-Forwarded-For": "2.2.2.2, 10.0.0.1"})
        third = client.get("/api/health", headers={"X-Forwarded-For": "1.1.1.1"})

        assert first.status_code == 200
        assert second.status_code == 200
        assert third.status_code == 429

    def test_forwarded_for_ignored_by_default(self, app_config, client_for, make_invoker):
        app_config.rate_limit.max_requests = 1
        client = client_for(make_invoker())

        client.get("/api/health", headers={"X-Forwarded-For": "1.1.1.1"})
        response = client.get("/api/health", headers={"X-Forwarded-For": "2.2.2.2"})

        assert response.status_code == 429


    def test_allowed_response_reports_remaining(self, app_config, client_for, make_invoker):
        app_config.rate_limit.max_requests = 5
        client = client_for(make_invoker())

        first = client.get("/api/health")
        second = client.get("/api/health")

        assert first.headers["X-RateLimit-Limit"] == "5"
        assert first.headers["X-RateLimit-Remaining"] == "4"
        assert second.headers["X-RateLimit-Remaining"] == "3"

    def test_injected_limiter_is_used_and_owned_by_app(self, app_config, make_invoker):
        limiter = FakeLimiter()
        assert isinstance(limiter, IRateLimiter)

        with TestClient(create_app(app_config, invoker=make_invoker(), limiter=limiter)) as client:
            response = client.get("/api/status")
            assert limiter.started is True

        assert limiter.stopped is True
        assert limiter.keys == ["testclient"]
        assert response.headers["X-RateLimit-Remaining"] == "42"
        assert response.json()["services"]["trackedClients"] == 1


class TestHealthAndStatus:
    def test_health(self, client_for, make_invoker):
        response = client_for(make_invoker()).get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["ytDlpAvailable"] is True
        assert body["environment"] == "development"
        assert body["version"] == "1.0.0"

    def test_status(self, client_for, make_invoker):
        response = client_for(make_invoker(available=False)).get("/api/status")

        body = response.json()
        assert body["services"]["ytDlpAvailable"] is False
        assert body["services"]["trackedClients"] == 1
        assert body["environment"]["port"] == 3001
        assert "pythonVersion" in body["system"]


class TestHeaders:
    def test_development_allows_any_origin(self, client_for, make_invoker):
        response = client_for(make_invoker()).get(
            "/api/health", headers={"Origin": "http://localhost:5173"}
        )

        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"

    def test_production_restricts_origins_and_sets_security_headers(
        self, app_config, client_for, make_invoker
    ):
        app_config.server.environment = "production"
        app_config.server.cors_origin = "https://app.example"
        client = client_for(make_invoker())

        allowed = client.get("/api/health", headers={"Origin": "https://app.example"})
        denied = client.get("/api/health", headers={"Origin": "https://evil.example"})

        assert allowed.headers["access-control-allow-origin"] == "https://app.example"
        assert "access-control-allow-origin" not in denied.headers
        for name, value in SECURITY_HEADERS.items():
            assert allowed.headers[name] == value
