"""Nager.Date public holiday source with rate limiting, retry and timeout."""
import asyncio
import logging
import random
from typing import Awaitable, Callable, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from holiday_insights.adapters.base import HolidaySource
from holiday_insights.errors import (
    HolidayServiceError,
    InvalidUpstreamPayload,
    NoHolidayData,
    UnsupportedCountry,
    UpstreamClientError,
    UpstreamConnectionError,
    UpstreamServerError,
    UpstreamTimeout,
    is_retryable,
)
from holiday_insights.models.holiday import FetchKey, PublicHoliday
from holiday_insights.resilience.rate_limiter import RateLimiter
from holiday_insights.resilience.retry import RetryPolicy, retry_async

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://date.nager.at/api/v3"

_HOLIDAY_LIST = TypeAdapter(List[PublicHoliday])


def classify_response(key: FetchKey, response: httpx.Response) -> List[PublicHoliday]:
    """
    Turn an upstream response into holidays or a classified error.

    Args:
        key: The (year, country) the response answers
        response: Raw httpx response

    Returns:
        Holidays in upstream order

    Raises:
        UnsupportedCountry: 404
        UpstreamClientError: any other 4xx
        UpstreamServerError: 5xx
        NoHolidayData: 204 or an empty body
        InvalidUpstreamPayload: body is not a list of holidays
    """
    status = response.status_code
    if status == 404:
        raise UnsupportedCountry(key)
    if 400 <= status < 500:
        raise UpstreamClientError(status, key)
    if status >= 500:
        raise UpstreamServerError(status, key)
    if status == 204 or not response.content.strip():
        raise NoHolidayData(f"Upstream returned no content for {key.year}/{key.country_code}", key)
    try:
        return _HOLIDAY_LIST.validate_python(response.json())
    except (ValidationError, ValueError) as exc:
        raise InvalidUpstreamPayload(f"Unreadable holiday payload: {exc}", key) from exc


class NagerDateAdapter(HolidaySource):
    """Fetches ``GET {base_url}/PublicHolidays/{year}/{countryCode}``."""

    name = "nager"

    def __init__(
        self,
        rate_limiter: RateLimiter,
        retry_policy: Optional[RetryPolicy] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 25.0,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the adapter.

        Args:
            rate_limiter: Shared limiter; one permit per outbound attempt
            retry_policy: Backoff schedule for transient failures
            base_url: Upstream API root
            timeout_seconds: Budget for a whole fetch, retries included
            client: Pre-built httpx client (its base_url takes precedence)
            sleep: Async sleep between retries (injectable for tests)
            rng: Random source for backoff jitter
        """
        self.rate_limiter = rate_limiter
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout_seconds = timeout_seconds
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"accept": "application/json"},
        )
        self._sleep = sleep
        self._rng = rng

    async def fetch_public_holidays(self, year: int, country_code: str) -> List[PublicHoliday]:
        """Fetch one (year, country) list, retrying transient failures."""
        key = FetchKey(year, country_code)

        def log_retry(attempt: int, exc: Exception, delay: float) -> None:
            logger.warning(
                "Retrying upstream call",
                extra={
                    "year": year,
                    "country_code": country_code,
                    "attempt": attempt,
                    "delay_seconds": round(delay, 3),
                    "error_kind": type(exc).__name__,
                },
            )

        try:
            holidays = await asyncio.wait_for(
                retry_async(
                    lambda: self._attempt(key),
                    self.retry_policy,
                    is_retryable,
                    sleep=self._sleep,
                    rng=self._rng,
                    on_retry=log_retry,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            error = UpstreamTimeout(
                f"No answer within {self.timeout_seconds}s for {year}/{country_code}", key
            )
            self._log_failure(key, error)
            raise error from None
        except HolidayServiceError as exc:
            self._log_failure(key, exc)
            raise

        logger.debug(
            "Fetched public holidays",
            extra={"year": year, "country_code": country_code, "count": len(holidays)},
        )
        return holidays

    async def _attempt(self, key: FetchKey) -> List[PublicHoliday]:
        await self.rate_limiter.acquire(key)
        path = f"/PublicHolidays/{key.year}/{key.country_code}"
        try:
            response = await self.client.get(path)
        except httpx.TimeoutException as exc:
            raise UpstreamTimeout(f"Upstream timed out: {exc!r}", key) from exc
        except httpx.TransportError as exc:
            raise UpstreamConnectionError(f"Upstream connection failed: {exc!r}", key) from exc
        return classify_response(key, response)

    def _log_failure(self, key: FetchKey, exc: HolidayServiceError) -> None:
        logger.error(
            "Nager API call failed: %s",
            exc,
            extra={
                "operation": "public_holidays",
                "year": key.year,
                "country_code": key.country_code,
                "error_kind": exc.kind,
            },
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
