"""Base holiday source interface."""
from abc import ABC, abstractmethod
from typing import List

from holiday_insights.models.holiday import PublicHoliday


class HolidaySource(ABC):
    """Abstract base class for upstream holiday sources."""

    name: str = "base"

    @abstractmethod
    async def fetch_public_holidays(self, year: int, country_code: str) -> List[PublicHoliday]:
        """
        Fetch the public holidays of one country for one year.

        Args:
            year: Calendar year
            country_code: ISO 3166-1 alpha-2 code, already uppercased

        Returns:
            Holidays in the order the source lists them

        Raises:
            UnsupportedCountry: The source has no data for the country
            UpstreamUnavailable: Any other classified failure
        """
        pass

    async def aclose(self) -> None:
        """Release any resources held by the source."""
        return None
