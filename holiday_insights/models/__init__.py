from .holiday import (
    FetchKey,
    PublicHoliday,
    HolidaySummary,
    CountryHolidayCount,
    CommonHoliday,
)

__all__ = [
    "FetchKey",
    "PublicHoliday",
    "HolidaySummary",
    "CountryHolidayCount",
    "CommonHoliday",
]
