"""Retry with jittered exponential backoff."""
import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to retry and how long to wait in between."""

    max_retries: int = 2
    base_delay: float = 0.3
    jitter: float = 0.2
    max_delay: float = 10.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")
        if not 0.0 <= self.jitter <= 1.0:
            raise ValueError("jitter must be between 0 and 1")

    def backoff(self, attempt: int, rng: Optional[random.Random] = None) -> float:
        """
        Delay before retry number ``attempt + 1``.

        The nominal delay is ``base_delay * 2**attempt`` capped at
        ``max_delay``; a uniform offset of up to ``jitter`` times that delay
        is then added or subtracted.

        Args:
            attempt: Retry index, 0 for the first retry
            rng: Random source (module-level random if None)

        Returns:
            Delay in seconds, never negative
        """
        delay = min(self.base_delay * (2 ** attempt), self.max_delay)
        spread = delay * self.jitter
        offset = (rng or random).uniform(-spread, spread)
        return max(0.0, delay + offset)


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    is_retryable: Callable[[BaseException], bool],
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    rng: Optional[random.Random] = None,
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
) -> T:
    """
    Run ``operation`` until it succeeds, fails terminally or retries run out.

    The last failure is re-raised unchanged once ``policy.max_retries``
    retries have been spent, or straight away when ``is_retryable`` says no.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        policy: Retry count and backoff schedule
        is_retryable: Classifier deciding whether a failure may be retried
        sleep: Async sleep between attempts (injectable for tests)
        rng: Random source for jitter
        on_retry: Called with (retry number, failure, delay) before sleeping

    Returns:
        Whatever the first successful attempt returns
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as exc:
            if attempt >= policy.max_retries or not is_retryable(exc):
                raise
            delay = policy.backoff(attempt, rng)
            attempt += 1
            if on_retry is not None:
                on_retry(attempt, exc, delay)
            await sleep(delay)
