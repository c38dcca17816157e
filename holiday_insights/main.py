"""FastAPI main application."""
import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Path, Query, Request
from fastapi.responses import JSONResponse

from holiday_insights.config import settings
from holiday_insights.dependencies import build_container, get_aggregator
from holiday_insights.errors import UnsupportedCountry, UpstreamUnavailable
from holiday_insights.logging_config import configure_logging
from holiday_insights.models.holiday import CommonHoliday, CountryHolidayCount, HolidaySummary
from holiday_insights.services.aggregator import HolidayAggregator

logger = logging.getLogger(__name__)

COUNTRY_CODE_PATTERN = r"^[A-Za-z]{2}$"
COUNTRY_CODE_MESSAGE = "Use ISO 3166-1 alpha-2 code"


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    container = build_container(settings)
    app.state.container = container
    try:
        yield
    finally:
        await container.aclose()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)


@app.exception_handler(UnsupportedCountry)
async def unsupported_country_handler(request: Request, exc: UnsupportedCountry):
    return JSONResponse(status_code=404, content={"detail": "Unsupported country code"})


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
    return JSONResponse(
        status_code=503,
        content={"detail": "Holiday data source unavailable", "error": exc.kind},
    )


def parse_country_list(countries_csv: str) -> List[str]:
    """Split a comma-separated country list into uppercased two-letter codes."""
    codes = [c.strip().upper() for c in countries_csv.split(",") if c.strip()]
    if not codes:
        raise HTTPException(status_code=400, detail="At least one country code is required")
    invalid = [c for c in codes if len(c) != 2 or not c.isascii() or not c.isalpha()]
    if invalid:
        raise HTTPException(status_code=400, detail=f"{COUNTRY_CODE_MESSAGE}: {', '.join(invalid)}")
    return codes


@app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok"}


@app.get(
    "/api/holidays/last-3/{country_code}",
    response_model=List[HolidaySummary],
    summary="Last 3 celebrated holidays",
)
async def last_three(
    country_code: str = Path(..., pattern=COUNTRY_CODE_PATTERN, description=COUNTRY_CODE_MESSAGE),
    aggregator: HolidayAggregator = Depends(get_aggregator),
):
    """The three most recent holidays up to and including today, newest first."""
    logger.info("GET /last-3/%s", country_code)
    return await aggregator.last_three_holidays(country_code.upper(), date.today())


@app.get(
    "/api/holidays/weekday-count",
    response_model=List[CountryHolidayCount],
    summary="Weekday holiday counts",
)
async def weekday_count(
    year: int = Query(..., ge=1900, le=2200),
    countries: str = Query(..., min_length=1, description="Comma-separated country codes"),
    aggregator: HolidayAggregator = Depends(get_aggregator),
):
    """Holidays falling on a working day, per country, sorted by country code."""
    codes = parse_country_list(countries)
    logger.info("GET /weekday-count year=%s countries=%s", year, codes)
    return await aggregator.weekday_holiday_counts(year, codes)


@app.get(
    "/api/holidays/common-dates",
    response_model=List[CommonHoliday],
    summary="Common holiday dates",
)
async def common_dates(
    year: int = Query(..., ge=1900, le=2200),
    country_a: str = Query(..., alias="countryA", pattern=COUNTRY_CODE_PATTERN),
    country_b: str = Query(..., alias="countryB", pattern=COUNTRY_CODE_PATTERN),
    aggregator: HolidayAggregator = Depends(get_aggregator),
):
    """Dates that are holidays in both countries, oldest first."""
    logger.info("GET /common-dates year=%s countryA=%s countryB=%s", year, country_a, country_b)
    return await aggregator.common_holiday_dates(year, country_a.upper(), country_b.upper())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
