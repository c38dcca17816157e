"""
Shared rate limiter for outbound upstream calls.

Permits are handed out in fixed refresh cycles: ``limit_for_period`` permits
per ``limit_refresh_period`` seconds. A caller that finds the current cycle
exhausted reserves a permit in a future cycle and sleeps until it starts, as
long as that wait fits in ``timeout``; otherwise ``RateLimited`` is raised
and nothing is reserved.
"""
import asyncio
import logging
import threading
import time
from typing import Awaitable, Callable, Optional

from holiday_insights.errors import RateLimited
from holiday_insights.models.holiday import FetchKey

logger = logging.getLogger(__name__)


class RateLimiter:
    """Process-wide permit source. Safe to share between tasks and threads."""

    def __init__(
        self,
        name: str,
        limit_for_period: int = 50,
        limit_refresh_period: float = 1.0,
        timeout: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the limiter.

        Args:
            name: Name used in log entries
            limit_for_period: Permits available per refresh cycle
            limit_refresh_period: Cycle length in seconds
            timeout: Longest a caller may wait for a permit, in seconds
            clock: Monotonic time source (injectable for tests)
            sleep: Async sleep used while waiting for a reserved permit
        """
        if limit_for_period < 1:
            raise ValueError("limit_for_period must be at least 1")
        if limit_refresh_period <= 0:
            raise ValueError("limit_refresh_period must be positive")
        self.name = name
        self.limit_for_period = limit_for_period
        self.limit_refresh_period = limit_refresh_period
        self.timeout = timeout
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._cycle_start = clock()
        # Negative values count permits already reserved in future cycles.
        self._available = limit_for_period

    def _refresh(self, now: float) -> None:
        cycles = int((now - self._cycle_start) // self.limit_refresh_period)
        if cycles > 0:
            self._cycle_start += cycles * self.limit_refresh_period
            self._available = min(
                self._available + cycles * self.limit_for_period,
                self.limit_for_period,
            )

    def reserve(self) -> Optional[float]:
        """
        Reserve one permit.

        Returns:
            Seconds to wait before the permit may be used, or None if the
            wait would exceed the timeout (no permit is reserved then).
        """
        with self._lock:
            now = self._clock()
            self._refresh(now)
            if self._available > 0:
                self._available -= 1
                return 0.0
            cycles_ahead = (-self._available) // self.limit_for_period + 1
            wait = self._cycle_start + cycles_ahead * self.limit_refresh_period - now
            if wait > self.timeout:
                return None
            self._available -= 1
            return wait

    @property
    def available_permits(self) -> int:
        with self._lock:
            self._refresh(self._clock())
            return self._available

    async def acquire(self, key: Optional[FetchKey] = None) -> None:
        """Wait for a permit, raising ``RateLimited`` if none arrives in time."""
        wait = self.reserve()
        if wait is None:
            logger.warning(
                "Rate limiter denied permit",
                extra={"limiter": self.name, "timeout_seconds": self.timeout, "key": key},
            )
            raise RateLimited(f"Rate limiter '{self.name}' denied permit", key)
        if wait > 0:
            logger.debug(
                "Waiting for rate limiter permit",
                extra={"limiter": self.name, "wait_seconds": round(wait, 3)},
            )
            await self._sleep(wait)
