"""In-memory holiday source for local runs and tests."""
import asyncio
import json
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from holiday_insights.adapters.base import HolidaySource
from holiday_insights.errors import UnsupportedCountry
from holiday_insights.models.holiday import FetchKey, PublicHoliday


class StaticHolidaySource(HolidaySource):
    """
    Serves holidays from a fixed table and records every call.

    Countries absent from the table answer like an upstream 404. A known
    country with no list for the requested year yields an empty list.
    """

    name = "static"

    def __init__(
        self,
        holidays: Optional[Dict[Tuple[int, str], Iterable[PublicHoliday]]] = None,
        delay: float = 0.0,
    ):
        self._holidays: Dict[FetchKey, List[PublicHoliday]] = {}
        self._failures: Dict[FetchKey, Exception] = {}
        self.calls: Counter = Counter()
        self.delay = delay
        for (year, country_code), items in (holidays or {}).items():
            self.add(year, country_code, items)

    def add(self, year: int, country_code: str, holidays: Iterable[PublicHoliday]) -> None:
        self._holidays[FetchKey(year, country_code.upper())] = list(holidays)

    def fail(self, year: int, country_code: str, error: Exception) -> None:
        """Make every fetch of (year, country) raise ``error``."""
        self._failures[FetchKey(year, country_code.upper())] = error

    def clear_failures(self) -> None:
        self._failures.clear()

    @property
    def countries(self) -> set:
        return {key.country_code for key in self._holidays}

    async def fetch_public_holidays(self, year: int, country_code: str) -> List[PublicHoliday]:
        key = FetchKey(year, country_code)
        self.calls[key] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if key in self._failures:
            raise self._failures[key]
        if key in self._holidays:
            return list(self._holidays[key])
        if country_code in self.countries:
            return []
        raise UnsupportedCountry(key)

    @classmethod
    def from_file(cls, path: str) -> "StaticHolidaySource":
        """
        Load a table shaped like ``{"GB": {"2021": [<upstream holiday>, ...]}}``.

        Each holiday uses the upstream JSON field names (``date``, ``name``,
        ``localName``, ...).
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        source = cls()
        for country_code, years in data.items():
            for year, items in years.items():
                source.add(int(year), country_code, [PublicHoliday.model_validate(h) for h in items])
        return source
