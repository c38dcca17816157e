from .weekend import WeekendPolicy
from .holiday_client import HolidayClient
from .aggregator import HolidayAggregator

__all__ = [
    "WeekendPolicy",
    "HolidayClient",
    "HolidayAggregator",
]
