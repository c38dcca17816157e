"""Holiday records fetched from upstream and the derived results built from them."""
from datetime import date
from typing import List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field


class FetchKey(NamedTuple):
    """Identity of one upstream call."""

    year: int
    country_code: str


class PublicHoliday(BaseModel):
    """One public holiday as listed by the upstream source."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: date
    name: str = Field(..., description="Canonical (English) holiday name")
    local_name: str = Field(..., alias="localName", description="Holiday name in the local language")
    country_code: Optional[str] = Field(None, alias="countryCode")
    fixed: Optional[bool] = None
    global_: Optional[bool] = Field(None, alias="global")
    counties: Optional[List[str]] = None
    launch_year: Optional[int] = Field(None, alias="launchYear")
    types: List[str] = Field(default_factory=list)


class HolidaySummary(BaseModel):
    """A past holiday: its date and canonical name."""

    model_config = ConfigDict(frozen=True)

    date: date
    name: str


class CountryHolidayCount(BaseModel):
    """Number of holidays in a year that fall on a working day for a country."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    country_code: str = Field(..., alias="countryCode")
    weekday_holiday_count: int = Field(..., ge=0, alias="weekdayHolidayCount")


class CommonHoliday(BaseModel):
    """A date that is a holiday in both countries, with each country's local name."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: date
    local_name_a: str = Field(..., alias="localNameA")
    local_name_b: str = Field(..., alias="localNameB")
