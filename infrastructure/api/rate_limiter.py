"""Sliding-window rate limiting for the match-data service."""
import asyncio
import time
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence, Tuple
import logging

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Sliding-window rate limiter over any number of windows.

    Each window is ``(max_requests, seconds)``; Riot keys carry two of them,
    a short burst window (per 1 s) and a long one (per 120 s). A request is
    admitted only when every window has room.
    """

    def __init__(self, windows: Sequence[Tuple[int, float]]):
        if not windows:
            raise ValueError("at least one rate limit window is required")
        self.windows: List[Tuple[int, float]] = [(int(n), float(s)) for n, s in windows]
        self._times: List[Deque[float]] = [deque() for _ in self.windows]
        self._lock = asyncio.Lock()

    @classmethod
    def per_second_and_two_minutes(cls, per_1_sec: int, per_2_min: int) -> "RateLimiter":
        return cls([(per_1_sec, 1.0), (per_2_min, 120.0)])

    def _evict(self, now: float) -> None:
        for (_, span), times in zip(self.windows, self._times):
            while times and now - times[0] > span:
                times.popleft()

    def _wait_time(self, now: float) -> float:
        wait = 0.0
        for (limit, span), times in zip(self.windows, self._times):
            if len(times) >= limit and times:
                wait = max(wait, span - (now - times[0]) + 0.01)
        return wait

    async def acquire(self) -> None:
        async with self._lock:
            while True:
                now = time.monotonic()
                self._evict(now)
                wait = self._wait_time(now)
                if wait <= 0:
                    for times in self._times:
                        times.append(now)
                    return
                logger.debug(f"Rate limit: waiting {wait:.2f}s")
                await asyncio.sleep(max(wait, 0.05))

    def get_status(self) -> List[Tuple[int, int]]:
        """(used, limit) per window."""
        now = time.monotonic()
        return [
            (sum(1 for t in times if now - t <= span), limit)
            for (limit, span), times in zip(self.windows, self._times)
        ]

    async def reset(self) -> None:
        async with self._lock:
            for times in self._times:
                times.clear()


class EndpointRateLimiter:
    """Per-endpoint rate limiters with a shared default."""

    def __init__(self):
        self.limiters: Dict[str, RateLimiter] = {}
        self._default: Optional[RateLimiter] = None

    def set_default_limiter(self, requests_per_1_sec: int, requests_per_2_min: int) -> None:
        self._default = RateLimiter.per_second_and_two_minutes(requests_per_1_sec, requests_per_2_min)

    def add_endpoint_limiter(self, endpoint: str, requests_per_1_sec: int, requests_per_2_min: int) -> None:
        self.limiters[endpoint] = RateLimiter.per_second_and_two_minutes(
            requests_per_1_sec, requests_per_2_min
        )

    def _limiter(self, endpoint: str) -> Optional[RateLimiter]:
        return self.limiters.get(endpoint, self._default)

    async def acquire(self, endpoint: str = "default") -> None:
        limiter = self._limiter(endpoint)
        if limiter:
            await limiter.acquire()

    async def reset_endpoint(self, endpoint: str = "default") -> None:
        limiter = self._limiter(endpoint)
        if limiter:
            await limiter.reset()
