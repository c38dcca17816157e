"""Per-country weekend days."""
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Union

WEEKDAY_NAMES = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")

DEFAULT_WEEKEND = ("SATURDAY", "SUNDAY")


def parse_weekday(value: Union[str, int]) -> int:
    """
    Convert a weekday name or number to ``date.weekday()`` numbering.

    Accepts full names in any case ("Friday"), three-letter abbreviations
    ("fri") and integers 0 (Monday) to 6 (Sunday).
    """
    if isinstance(value, int):
        if 0 <= value <= 6:
            return value
        raise ValueError(f"Weekday number out of range: {value}")
    text = value.strip().upper()
    for index, name in enumerate(WEEKDAY_NAMES):
        if text == name or (len(text) == 3 and name.startswith(text)):
            return index
    raise ValueError(f"Unknown weekday: {value!r}")


def _weekend_set(days: Iterable[Union[str, int]]) -> FrozenSet[int]:
    result = frozenset(parse_weekday(d) for d in days)
    if not result:
        raise ValueError("A weekend must contain at least one day")
    return result


class WeekendPolicy:
    """Resolves the weekend days of a country: an override if configured, else the default."""

    def __init__(
        self,
        default: Iterable[Union[str, int]] = DEFAULT_WEEKEND,
        overrides: Optional[Mapping[str, Iterable[Union[str, int]]]] = None,
    ):
        self.default: FrozenSet[int] = _weekend_set(default)
        self.overrides: Dict[str, FrozenSet[int]] = {
            code.upper(): _weekend_set(days) for code, days in (overrides or {}).items()
        }

    def weekend_days_for(self, country_code: str) -> FrozenSet[int]:
        return self.overrides.get(country_code.upper(), self.default)

    def is_weekend(self, country_code: str, weekday: int) -> bool:
        return weekday in self.weekend_days_for(country_code)
