from .base import HolidaySource
from .nager import NagerDateAdapter
from .static import StaticHolidaySource
from .factory import get_holiday_source

__all__ = [
    "HolidaySource",
    "NagerDateAdapter",
    "StaticHolidaySource",
    "get_holiday_source",
]
