import asyncio
import math
import time
from dataclasses import dataclass

from video_resolver.core.config import RateLimitConfig
from video_resolver.core.interfaces import RateLimitDecision
from video_resolver.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window request counter keyed by client address.

    All reads and writes of the counter map happen under one asyncio lock,
    so concurrent requests from the same client cannot undercount.
    """

    def __init__(self, config: RateLimitConfig, clock=time.monotonic):
        self.window_seconds = config.window_seconds
        self.max_requests = config.max_requests
        self.sweep_interval = config.sweep_interval_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = asyncio.Lock()
        self._sweeper: asyncio.Task | None = None

    async def hit(self, client_key: str, now: float | None = None) -> RateLimitDecision:
        """Count one request for ``client_key`` and decide whether it may proceed."""
        now = self._clock() if now is None else now

        async with self._lock:
            window = self._windows.get(client_key)

            if window is None or now > window.reset_at:
                self._windows[client_key] = _Window(count=1, reset_at=now + self.window_seconds)
                return RateLimitDecision(allowed=True, remaining=self.max_requests - 1)

            if window.count >= self.max_requests:
                retry_after = max(math.ceil(window.reset_at - now), 0)
                logger.warning(
                    f"[RATE_LIMITER] {client_key} exceeded {self.max_requests} requests, retry in {retry_after}s"
                )
                return RateLimitDecision(allowed=False, retry_after=retry_after)

            window.count += 1
            return RateLimitDecision(allowed=True, remaining=self.max_requests - window.count)

    async def sweep(self, now: float | None = None) -> int:
        """Drop windows that have already expired. Returns how many were removed."""
        now = self._clock() if now is None else now
        async with self._lock:
            expired = [key for key, window in self._windows.items() if now > window.reset_at]
            for key in expired:
                del self._windows[key]
        if expired:
            logger.debug(f"[RATE_LIMITER] Swept {len(expired)} expired windows")
        return len(expired)

    async def reset(self) -> None:
        async with self._lock:
            self._windows.clear()

    def tracked_clients(self) -> int:
        return len(self._windows)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            await self.sweep()

    def start(self) -> None:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_forever())

    async def stop(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
