"""Shared fixtures for holiday core tests."""
from datetime import date
from typing import Optional

import pytest

from holiday_insights.adapters.static import StaticHolidaySource
from holiday_insights.models.holiday import PublicHoliday
from holiday_insights.resilience.cache import ResultCache
from holiday_insights.services.aggregator import HolidayAggregator
from holiday_insights.services.holiday_client import HolidayClient
from holiday_insights.services.weekend import WeekendPolicy


async def no_sleep(seconds: float) -> None:
    """Stand-in for asyncio.sleep that returns immediately."""
    return None


def holiday(iso_date: str, name: str, local_name: Optional[str] = None) -> PublicHoliday:
    """Shorthand for building a holiday record."""
    return PublicHoliday(
        date=date.fromisoformat(iso_date),
        name=name,
        local_name=local_name if local_name is not None else name,
    )


@pytest.fixture
def source():
    """Empty in-memory holiday source; tests add the lists they need."""
    return StaticHolidaySource()


@pytest.fixture
def weekend_policy():
    """Saturday/Sunday by default, Friday/Saturday for AE."""
    return WeekendPolicy(["SATURDAY", "SUNDAY"], {"AE": ["FRIDAY", "SATURDAY"]})


@pytest.fixture
def aggregator(source, weekend_policy):
    """Aggregator over the in-memory source with fresh caches."""
    client = HolidayClient(source, ResultCache("public_holidays"))
    return HolidayAggregator(client, weekend_policy, ResultCache("derived"))
