from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from config import settings
from core.logging.logger import StructuredLogger
from domain.errors import RemoteUnavailable

T = TypeVar("T")

TransientPredicate = Callable[[BaseException], bool]
Supplier = Callable[[], Awaitable[T]]


def is_remote_unavailable(exc: BaseException) -> bool:
    return isinstance(exc, RemoteUnavailable)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with exponential backoff.

    Attempt ``n`` (1-based) that fails transiently sleeps
    ``backoff_base_ms * backoff_factor ** (n - 1) + jitter_ms`` before the
    next one, or the server's ``retry_after`` when that is longer.
    """

    max_attempts: int = 3
    backoff_base_ms: int = 500
    backoff_factor: float = 2.0
    jitter_ms: int = 0

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=max(1, settings.MAX_RETRIES),
            backoff_base_ms=settings.RETRY_BACKOFF_MS,
            backoff_factor=settings.RETRY_FACTOR,
        )

    def backoff_seconds(self, attempt: int, exc: Optional[BaseException] = None) -> float:
        backoff_ms = int(self.backoff_base_ms * math.pow(self.backoff_factor, attempt - 1)) + self.jitter_ms
        retry_after = getattr(exc, "retry_after", None)
        if isinstance(retry_after, (int, float)) and retry_after > 0:
            backoff_ms = max(backoff_ms, int(retry_after * 1000))
        return backoff_ms / 1000.0

    async def run(
        self,
        supplier: Supplier[T],
        *,
        logger: StructuredLogger,
        is_transient: TransientPredicate = is_remote_unavailable,
        context: dict | None = None,
    ) -> T:
        """Execute an async supplier, retrying transient errors.

        Non-transient errors and the last transient one propagate unchanged.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await supplier()
            except Exception as e:
                transient = is_transient(e)
                if attempt >= self.max_attempts or not transient:
                    raise
                delay = self.backoff_seconds(attempt, e)
                logger.warning(
                    lambda: f"retry-attempt {attempt}/{self.max_attempts} in {delay:.2f}s",
                    extra={"retry_context": {**(context or {}), "error": str(e)}},
                )
                await asyncio.sleep(delay)
        raise RuntimeError("RetryPolicy.max_attempts must be at least 1")
