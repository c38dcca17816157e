"""Factory for creating holiday sources."""
from holiday_insights.adapters.base import HolidaySource
from holiday_insights.adapters.nager import NagerDateAdapter
from holiday_insights.adapters.static import StaticHolidaySource
from holiday_insights.config import Settings
from holiday_insights.resilience.rate_limiter import RateLimiter
from holiday_insights.resilience.retry import RetryPolicy


def retry_policy_from_settings(settings: Settings) -> RetryPolicy:
    return RetryPolicy(
        max_retries=settings.max_retries,
        base_delay=settings.backoff_ms / 1000.0,
        jitter=settings.jitter,
        max_delay=settings.max_backoff_ms / 1000.0,
    )


def get_holiday_source(settings: Settings, rate_limiter: RateLimiter) -> HolidaySource:
    """
    Create the holiday source named by ``settings.holiday_source``.

    Args:
        settings: Application settings
        rate_limiter: Shared limiter handed to network-backed sources

    Returns:
        HolidaySource instance
    """
    kind = settings.holiday_source.lower()
    if kind == "nager":
        return NagerDateAdapter(
            rate_limiter=rate_limiter,
            retry_policy=retry_policy_from_settings(settings),
            base_url=settings.nager_base_url,
            timeout_seconds=settings.request_timeout_seconds,
        )
    elif kind == "static":
        if settings.static_holidays_file:
            return StaticHolidaySource.from_file(settings.static_holidays_file)
        return StaticHolidaySource()
    raise ValueError(f"Unknown holiday source: {settings.holiday_source}")
