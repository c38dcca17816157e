"""Derived holiday answers built from cached raw lists."""
import asyncio
import logging
from datetime import date
from typing import Awaitable, Callable, Dict, Hashable, Iterable, List, Sequence, Tuple

from holiday_insights.errors import HolidayServiceError
from holiday_insights.models.holiday import (
    CommonHoliday,
    CountryHolidayCount,
    HolidaySummary,
    PublicHoliday,
)
from holiday_insights.resilience.cache import ResultCache
from holiday_insights.services.holiday_client import HolidayClient
from holiday_insights.services.weekend import WeekendPolicy

logger = logging.getLogger(__name__)


def _local_names_by_date(holidays: Iterable[PublicHoliday]) -> Dict[date, str]:
    """Map each date to its local name; the first entry wins on duplicate dates."""
    by_date: Dict[date, str] = {}
    for h in holidays:
        by_date.setdefault(h.date, h.local_name)
    return by_date


class HolidayAggregator:
    """Computes last-N holidays, weekday holiday counts and shared holiday dates."""

    def __init__(self, client: HolidayClient, weekend_policy: WeekendPolicy, cache: ResultCache):
        self.client = client
        self.weekend_policy = weekend_policy
        self.cache = cache

    async def _cached(self, key: Tuple[Hashable, ...], compute: Callable[[], Awaitable[tuple]]) -> list:
        try:
            result = await self.cache.get_or_compute(key, compute)
        except HolidayServiceError as exc:
            logger.warning(
                "Derived operation failed",
                extra={
                    "operation": key[0],
                    "arguments": key[1:],
                    "error_kind": exc.kind,
                    "fetch_key": exc.key,
                },
            )
            raise
        return list(result)

    async def last_holidays(self, country_code: str, today: date, count: int = 3) -> List[HolidaySummary]:
        """
        Return up to ``count`` holidays on or before ``today``, newest first.

        Looks at the current and the previous year. Equal dates keep their
        merged order (current year first, upstream order within a year).

        Args:
            country_code: Uppercased ISO alpha-2 code
            today: Reference date; later holidays are ignored
            count: Maximum number of entries

        Returns:
            List of HolidaySummary sorted by date descending
        """
        if count < 0:
            raise ValueError("count must not be negative")

        async def compute() -> Tuple[HolidaySummary, ...]:
            current, previous = await asyncio.gather(
                self.client.get_public_holidays(today.year, country_code),
                self.client.get_public_holidays(today.year - 1, country_code),
            )
            past = [h for h in (*current, *previous) if h.date <= today]
            past.sort(key=lambda h: h.date, reverse=True)
            result = tuple(HolidaySummary(date=h.date, name=h.name) for h in past[:count])
            logger.info(
                "Last holidays computed",
                extra={"country_code": country_code, "today": today.isoformat(), "entries": len(result)},
            )
            return result

        return await self._cached(("last_holidays", country_code, today, count), compute)

    async def last_three_holidays(self, country_code: str, today: date) -> List[HolidaySummary]:
        return await self.last_holidays(country_code, today, 3)

    async def weekday_holiday_counts(self, year: int, country_codes: Sequence[str]) -> List[CountryHolidayCount]:
        """
        Count, per country, the holidays in ``year`` that fall outside its weekend.

        Countries are fetched concurrently. One failure fails the whole call;
        the other fetches are left to finish and their results dropped.

        Args:
            year: Calendar year
            country_codes: Uppercased ISO alpha-2 codes, any order

        Returns:
            One CountryHolidayCount per input code, sorted by country code
        """
        codes = tuple(country_codes)

        async def count_one(code: str) -> CountryHolidayCount:
            holidays = await self.client.get_public_holidays(year, code)
            weekdays = sum(
                1 for h in holidays if not self.weekend_policy.is_weekend(code, h.date.weekday())
            )
            return CountryHolidayCount(country_code=code, weekday_holiday_count=weekdays)

        async def compute() -> Tuple[CountryHolidayCount, ...]:
            counts = await asyncio.gather(*(count_one(code) for code in codes))
            result = tuple(sorted(counts, key=lambda c: c.country_code))
            logger.info(
                "Weekday counts computed",
                extra={"year": year, "countries": len(result)},
            )
            return result

        return await self._cached(("weekday_counts", year, codes), compute)

    async def common_holiday_dates(self, year: int, country_a: str, country_b: str) -> List[CommonHoliday]:
        """
        Return the dates that are holidays in both countries, oldest first.

        Args:
            year: Calendar year
            country_a: Uppercased ISO alpha-2 code, supplies ``local_name_a``
            country_b: Uppercased ISO alpha-2 code, supplies ``local_name_b``

        Returns:
            List of CommonHoliday sorted by date ascending
        """

        async def compute() -> Tuple[CommonHoliday, ...]:
            holidays_a, holidays_b = await asyncio.gather(
                self.client.get_public_holidays(year, country_a),
                self.client.get_public_holidays(year, country_b),
            )
            names_a = _local_names_by_date(holidays_a)
            names_b = _local_names_by_date(holidays_b)
            shared = sorted(names_a.keys() & names_b.keys())
            result = tuple(
                CommonHoliday(date=d, local_name_a=names_a[d], local_name_b=names_b[d]) for d in shared
            )
            logger.info(
                "Common dates computed",
                extra={"year": year, "country_a": country_a, "country_b": country_b, "entries": len(result)},
            )
            return result

        return await self._cached(("common_dates", year, country_a, country_b), compute)
