from __future__ import annotations

import platform
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..application.orchestrator import ExtractionOrchestrator
from ..core.config import AppConfig, get_config
from ..core.interfaces import IExtractionInvoker, IRateLimiter
from ..services.rate_limit.limiter import RateLimiter
from ..services.youtube.tool_invoker import ExtractionInvoker
from ..utils.logger import get_logger

logger = get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _max_rss() -> str | None:
    if sys.platform == "win32":
        return None
    import resource

    max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS bytes
    divisor = 1024 * 1024 if sys.platform == "darwin" else 1024
    return f"{round(max_rss / divisor)} MB"


def client_key(request: Request, trust_proxy: bool) -> str:
    if trust_proxy:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client:
        return request.client.host
    return "unknown"


def create_app(
    config: AppConfig | None = None,
    invoker: IExtractionInvoker | None = None,
    limiter: IRateLimiter | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    The limiter and invoker are owned by the returned app; tests pass fakes
    for both.
    """
    config = config or get_config()
    invoker = invoker or ExtractionInvoker(config)
    limiter = limiter or RateLimiter(config.rate_limit)
    orchestrator = ExtractionOrchestrator(invoker=invoker, config=config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limiter.start()
        logger.info(f"[WEB] Video extraction server ready ({config.server.environment})")
        try:
            yield
        finally:
            await limiter.stop()

    app = FastAPI(title="Video Stream Resolver", version=config.server.version, lifespan=lifespan)
    app.state.config = config
    app.state.invoker = invoker
    app.state.limiter = limiter
    app.state.orchestrator = orchestrator
    app.state.started_at = time.monotonic()

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        if request.url.path.startswith(config.rate_limit.path_prefix):
            key = client_key(request, config.server.trust_proxy)
            decision = await limiter.hit(key)
            if not decision.allowed:
                return JSONResponse(
                    {"error": "Too many requests", "retryAfter": decision.retry_after},
                    status_code=429,
                    headers={"Retry-After": str(decision.retry_after)},
                )
            response = await call_next(request)
            response.headers["X-RateLimit-Limit"] = str(config.rate_limit.max_requests)
            response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
            return response
        return await call_next(request)

    if config.server.is_production:

        @app.middleware("http")
        async def security_headers(request: Request, call_next):
            response = await call_next(request)
            for name, value in SECURITY_HEADERS.items():
                response.headers[name] = value
            return response

    if config.server.is_production:
        cors_kwargs = {"allow_origins": config.server.cors_origins}
    else:
        cors_kwargs = {"allow_origin_regex": ".*"}
    app.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "x-extraction-strategy"],
        **cors_kwargs,
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"[WEB] Server error on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            {
                "error": "Internal server error",
                "details": "Internal error" if config.server.is_production else str(exc),
            },
            status_code=500,
        )

    @app.post("/api/extract-video", response_class=JSONResponse)
    async def extract_video(request: Request) -> JSONResponse:
        try:
            payload = await request.json()
        except ValueError:
            payload = None
        url = payload.get("url") if isinstance(payload, dict) else None

        outcome = await orchestrator.extract(url)
        return JSONResponse(outcome.body, status_code=outcome.status_code)

    @app.get("/api/health", response_class=JSONResponse)
    async def health() -> JSONResponse:
        available = await invoker.check_available()
        return JSONResponse(
            {
                "status": "OK",
                "message": "Video extraction service is running",
                "environment": config.server.environment,
                "uptime": int(time.monotonic() - app.state.started_at),
                "ytDlpAvailable": available,
                "timestamp": _utc_now(),
                "version": config.server.version,
            }
        )

    @app.get("/api/status", response_class=JSONResponse)
    async def status() -> JSONResponse:
        available = await invoker.check_available()
        return JSONResponse(
            {
                "status": "OK",
                "system": {
                    "pythonVersion": platform.python_version(),
                    "platform": sys.platform,
                    "arch": platform.machine(),
                    "uptime": int(time.monotonic() - app.state.started_at),
                    "memory": {"maxRss": _max_rss()},
                },
                "services": {
                    "ytDlpAvailable": available,
                    "corsEnabled": True,
                    "rateLimitEnabled": True,
                    "trackedClients": limiter.tracked_clients(),
                },
                "environment": {
                    "env": config.server.environment,
                    "port": config.server.port,
                    "debug": config.server.debug,
                    "corsOrigin": config.server.cors_origin or "default",
                },
                "timestamp": _utc_now(),
            }
        )

    return app
