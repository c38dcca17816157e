"""Process-wide wiring of the holiday core."""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from holiday_insights.adapters.base import HolidaySource
from holiday_insights.adapters.factory import get_holiday_source
from holiday_insights.config import Settings
from holiday_insights.resilience.cache import ResultCache
from holiday_insights.resilience.rate_limiter import RateLimiter
from holiday_insights.services.aggregator import HolidayAggregator
from holiday_insights.services.holiday_client import HolidayClient
from holiday_insights.services.weekend import WeekendPolicy

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Shared components: one rate limiter and one cache per level for the whole process."""

    settings: Settings
    rate_limiter: RateLimiter
    source: HolidaySource
    raw_cache: ResultCache
    derived_cache: ResultCache
    client: HolidayClient
    weekend_policy: WeekendPolicy
    aggregator: HolidayAggregator

    async def aclose(self) -> None:
        await self.source.aclose()


def build_container(settings: Settings, source: Optional[HolidaySource] = None) -> Container:
    """
    Build the core from settings.

    Args:
        settings: Application settings
        source: Holiday source to use instead of the one named in settings

    Returns:
        Container with every shared component
    """
    rate_limiter = RateLimiter(
        "nager",
        limit_for_period=settings.rate_limit_for_period,
        limit_refresh_period=settings.rate_limit_refresh_seconds,
        timeout=settings.rate_limit_timeout_seconds,
    )
    if source is None:
        source = get_holiday_source(settings, rate_limiter)
    raw_cache = ResultCache("public_holidays", max_entries=settings.cache_max_entries)
    derived_cache = ResultCache("derived", max_entries=settings.cache_max_entries)
    client = HolidayClient(source, raw_cache)
    weekend_policy = WeekendPolicy(settings.weekend_default, settings.weekend_overrides)
    aggregator = HolidayAggregator(client, weekend_policy, derived_cache)
    logger.info(
        "Holiday core ready",
        extra={
            "source": source.name,
            "max_retries": settings.max_retries,
            "backoff_ms": settings.backoff_ms,
            "jitter": settings.jitter,
            "timeout_seconds": settings.request_timeout_seconds,
            "cache_max_entries": settings.cache_max_entries,
        },
    )
    return Container(
        settings=settings,
        rate_limiter=rate_limiter,
        source=source,
        raw_cache=raw_cache,
        derived_cache=derived_cache,
        client=client,
        weekend_policy=weekend_policy,
        aggregator=aggregator,
    )


def get_aggregator(request: Request) -> HolidayAggregator:
    """FastAPI dependency returning the application's aggregator."""
    return request.app.state.container.aggregator
