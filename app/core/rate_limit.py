"""
Per-IP request throttling
"""
import logging
import time
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request, status

from app.core.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window limiter keyed by client IP

    Used as a FastAPI dependency; over-limit requests get HTTP 429.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        # ip -> (window start, hits in window)
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._last_sweep = clock()

    def hit(self, key: str) -> bool:
        """Count one request; False once the window's budget is spent"""
        now = self.clock()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)

        started, count = self._windows.get(key, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0

        if count >= self.max_requests:
            self._windows[key] = (started, count)
            return False

        self._windows[key] = (started, count + 1)
        return True

    def _sweep(self, now: float) -> None:
        """Drop windows that have expired; runs at most once per window"""
        self._windows = {
            key: window for key, window in self._windows.items()
            if now - window[0] < self.window_seconds
        }
        self._last_sweep = now

    def retry_after(self, key: str) -> int:
        started, _ = self._windows.get(key, (self.clock(), 0))
        return max(0, int(self.window_seconds - (self.clock() - started)))

    def reset(self) -> None:
        self._windows.clear()
        self._last_sweep = self.clock()

    async def __call__(self, request: Request) -> None:
        client_ip = request.client.host if request.client else "unknown"
        if not self.hit(client_ip):
            logger.warning(f"Rate limit exceeded for {client_ip}")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests from this IP, please try again later",
                headers={"Retry-After": str(self.retry_after(client_ip))}
            )


rate_limiter = RateLimiter(settings.RATE_LIMIT_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS)
