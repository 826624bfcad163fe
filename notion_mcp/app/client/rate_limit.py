"""Sliding-window admission control for outbound Notion requests.

Notion allows an average of three requests per second per integration.
The limiter keeps the send instants of recent requests and delays a new
request until admitting it would not put more than ``max_requests`` sends
inside any trailing ``window_seconds`` interval.
"""

import asyncio
import time
from collections import deque
from typing import Awaitable, Callable, Deque, Tuple

from notion_mcp.app.core.logging import get_log_context, get_logger

logger = get_logger(__name__)


class SlidingWindowRateLimiter:
    """Delay-only sliding window limiter.

    Requests are never rejected or reordered; ``acquire`` only suspends the
    caller. The prune/wait/record sequence runs under one ``asyncio.Lock``,
    so concurrent callers are admitted one at a time in the order they
    started waiting.

    Args:
        max_requests: Maximum admissions per window
        window_seconds: Trailing window length in seconds
        margin_seconds: Extra delay added on top of the computed wait
        clock: Monotonic time source in seconds
        sleep: Coroutine used to wait
    """

    def __init__(
        self,
        max_requests: int = 3,
        window_seconds: float = 1.0,
        margin_seconds: float = 0.05,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.margin_seconds = margin_seconds
        self._clock = clock
        self._sleep = sleep
        self._timestamps: Deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def timestamps(self) -> Tuple[float, ...]:
        """Admission instants currently retained (oldest first)."""
        return tuple(self._timestamps)

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window_seconds:
            self._timestamps.popleft()

    async def acquire(self) -> float:
        """Wait until a request may be sent, then record it.

        Returns:
            Seconds spent waiting (0.0 when admitted immediately)
        """
        async with self._lock:
            now = self._clock()
            self._prune(now)

            waited = 0.0
            if len(self._timestamps) >= self.max_requests:
                oldest = self._timestamps[0]
                waited = self.window_seconds - (now - oldest) + self.margin_seconds
                if waited > 0:
                    logger.debug(
                        f"Rate limit reached ({self.max_requests}/{self.window_seconds}s), "
                        f"waiting {waited:.3f}s",
                        extra=get_log_context(wait_seconds=round(waited, 3)),
                    )
                    await self._sleep(waited)
                else:
                    waited = 0.0

            # Record the actual send instant, not when the check began
            sent_at = self._clock()
            self._prune(sent_at)
            self._timestamps.append(sent_at)
            return waited

    def reset(self) -> None:
        """Forget all recorded admissions."""
        self._timestamps.clear()
