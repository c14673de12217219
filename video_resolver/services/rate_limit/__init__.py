"""Per-client request limiting."""

from .limiter import RateLimiter

__all__ = ["RateLimiter"]
