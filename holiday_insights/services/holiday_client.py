"""Cache-aside access to raw upstream holiday lists."""
from typing import Tuple

from holiday_insights.adapters.base import HolidaySource
from holiday_insights.models.holiday import FetchKey, PublicHoliday
from holiday_insights.resilience.cache import ResultCache


class HolidayClient:
    """Serves raw holiday lists, fetching each (year, country) at most once."""

    OPERATION = "public_holidays"

    def __init__(self, source: HolidaySource, cache: ResultCache):
        self.source = source
        self.cache = cache

    async def get_public_holidays(self, year: int, country_code: str) -> Tuple[PublicHoliday, ...]:
        """
        Return the holidays of ``country_code`` in ``year``, in upstream order.

        The tuple is shared with the cache and must be treated as read-only.
        Failures propagate and are not cached.
        """
        key = FetchKey(year, country_code)

        async def load() -> Tuple[PublicHoliday, ...]:
            return tuple(await self.source.fetch_public_holidays(key.year, key.country_code))

        return await self.cache.get_or_compute((self.OPERATION,) + tuple(key), load)
