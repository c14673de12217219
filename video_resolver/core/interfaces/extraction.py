"""Interfaces for the extraction tool and the request limiter."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after: int = 0
    remaining: int = 0


@runtime_checkable
class IExtractionInvoker(Protocol):
    async def check_available(self) -> bool: ...

    async def invoke(self, url: str, timeout: float) -> str: ...


@runtime_checkable
class IRateLimiter(Protocol):
    """Per-client limiter owned by the web app for its whole lifetime."""

    async def hit(self, client_key: str, now: float | None = None) -> RateLimitDecision: ...

    def tracked_clients(self) -> int: ...

    def start(self) -> None: ...

    async def stop(self) -> None: ...
