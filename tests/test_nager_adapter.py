"""Tests for the Nager.Date adapter: classification, retry, rate limiting, timeout."""
import asyncio
import json
import logging
from datetime import date

import httpx
import pytest

from holiday_insights.adapters.nager import NagerDateAdapter
from holiday_insights.errors import (
    InvalidUpstreamPayload,
    NoHolidayData,
    RateLimited,
    UnsupportedCountry,
    UpstreamClientError,
    UpstreamConnectionError,
    UpstreamServerError,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from holiday_insights.resilience.rate_limiter import RateLimiter
from holiday_insights.resilience.retry import RetryPolicy

from conftest import no_sleep

BASE_URL = "http://nager.test/api/v3"

GB_2021 = [
    {"date": "2021-12-27", "localName": "Christmas Day", "name": "Christmas Day", "countryCode": "GB",
     "fixed": False, "global": True, "counties": None, "launchYear": None, "types": ["Public"]},
    {"date": "2021-01-01", "localName": "New Year's Day", "name": "New Year's Day", "countryCode": "GB",
     "fixed": False, "global": True, "counties": None, "launchYear": None, "types": ["Public"]},
    {"date": "2021-12-25", "localName": "Christmas", "name": "Christmas", "countryCode": "GB"},
]


class ScriptedUpstream:
    """MockTransport handler replaying one scripted response (or error) per request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item


def make_adapter(upstream, max_retries=2, limiter=None, timeout_seconds=25.0, sleep=no_sleep):
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(upstream))
    return NagerDateAdapter(
        rate_limiter=limiter or RateLimiter("test", limit_for_period=100),
        retry_policy=RetryPolicy(max_retries=max_retries, base_delay=0.3, jitter=0.2),
        timeout_seconds=timeout_seconds,
        client=client,
        sleep=sleep,
    )


@pytest.mark.asyncio
async def test_success_preserves_upstream_order():
    upstream = ScriptedUpstream(httpx.Response(200, json=GB_2021))
    adapter = make_adapter(upstream)

    holidays = await adapter.fetch_public_holidays(2021, "GB")

    assert [h.date for h in holidays] == [date(2021, 12, 27), date(2021, 1, 1), date(2021, 12, 25)]
    assert holidays[0].local_name == "Christmas Day"
    assert holidays[0].global_ is True
    assert str(upstream.requests[0].url) == f"{BASE_URL}/PublicHolidays/2021/GB"


@pytest.mark.asyncio
async def test_not_found_is_unsupported_country_and_not_retried():
    upstream = ScriptedUpstream(httpx.Response(404))
    adapter = make_adapter(upstream)

    with pytest.raises(UnsupportedCountry) as excinfo:
        await adapter.fetch_public_holidays(2021, "YU")

    assert len(upstream.requests) == 1
    assert excinfo.value.key == (2021, "YU")


@pytest.mark.asyncio
async def test_other_client_errors_are_terminal():
    upstream = ScriptedUpstream(httpx.Response(400, text="bad request"))
    adapter = make_adapter(upstream)

    with pytest.raises(UpstreamClientError) as excinfo:
        await adapter.fetch_public_holidays(2021, "GB")

    assert excinfo.value.status_code == 400
    assert isinstance(excinfo.value, UpstreamUnavailable)
    assert len(upstream.requests) == 1


@pytest.mark.asyncio
async def test_server_error_then_success_is_retried():
    upstream = ScriptedUpstream(httpx.Response(503), httpx.Response(200, json=GB_2021))
    adapter = make_adapter(upstream)

    holidays = await adapter.fetch_public_holidays(2021, "GB")

    assert len(holidays) == 3
    assert len(upstream.requests) == 2


@pytest.mark.asyncio
async def test_persistent_server_error_exhausts_retries():
    upstream = ScriptedUpstream(httpx.Response(500))
    adapter = make_adapter(upstream, max_retries=2)

    with pytest.raises(UpstreamServerError) as excinfo:
        await adapter.fetch_public_holidays(2021, "GB")

    assert excinfo.value.status_code == 500
    assert len(upstream.requests) == 3


@pytest.mark.asyncio
async def test_connection_errors_are_retried():
    upstream = ScriptedUpstream(
        httpx.ConnectError("connection refused"),
        httpx.ReadTimeout("read timed out"),
        httpx.Response(200, json=GB_2021),
    )
    adapter = make_adapter(upstream)

    holidays = await adapter.fetch_public_holidays(2021, "GB")

    assert len(holidays) == 3
    assert len(upstream.requests) == 3


@pytest.mark.asyncio
async def test_persistent_connection_error_surfaces_last_failure():
    upstream = ScriptedUpstream(httpx.ConnectError("connection refused"))
    adapter = make_adapter(upstream, max_retries=1)

    with pytest.raises(UpstreamConnectionError):
        await adapter.fetch_public_holidays(2021, "GB")

    assert len(upstream.requests) == 2


@pytest.mark.asyncio
async def test_empty_body_is_no_data_and_not_retried():
    upstream = ScriptedUpstream(httpx.Response(204))
    adapter = make_adapter(upstream)

    with pytest.raises(NoHolidayData):
        await adapter.fetch_public_holidays(2021, "GB")

    assert len(upstream.requests) == 1


@pytest.mark.asyncio
async def test_empty_list_is_a_valid_answer():
    upstream = ScriptedUpstream(httpx.Response(200, json=[]))
    adapter = make_adapter(upstream)

    assert await adapter.fetch_public_holidays(2021, "GB") == []


@pytest.mark.asyncio
async def test_malformed_payload_is_terminal():
    upstream = ScriptedUpstream(httpx.Response(200, content=json.dumps([{"date": "not-a-date"}]).encode()))
    adapter = make_adapter(upstream)

    with pytest.raises(InvalidUpstreamPayload):
        await adapter.fetch_public_holidays(2021, "GB")

    assert len(upstream.requests) == 1


@pytest.mark.asyncio
async def test_rate_limiter_denial_is_retried_then_surfaces():
    limiter = RateLimiter("test", limit_for_period=1, limit_refresh_period=60.0, timeout=0.0)
    upstream = ScriptedUpstream(httpx.Response(200, json=GB_2021))
    adapter = make_adapter(upstream, limiter=limiter)

    await adapter.fetch_public_holidays(2021, "GB")
    with pytest.raises(RateLimited):
        await adapter.fetch_public_holidays(2020, "GB")

    assert len(upstream.requests) == 1


@pytest.mark.asyncio
async def test_whole_call_is_bounded_by_timeout():
    upstream = ScriptedUpstream(httpx.Response(500))
    adapter = make_adapter(upstream, max_retries=5, timeout_seconds=0.05, sleep=asyncio.sleep)

    with pytest.raises(UpstreamTimeout):
        await adapter.fetch_public_holidays(2021, "GB")


@pytest.mark.asyncio
async def test_final_failure_is_logged_once(caplog):
    upstream = ScriptedUpstream(httpx.Response(502))
    adapter = make_adapter(upstream, max_retries=2)

    with caplog.at_level(logging.WARNING, logger="holiday_insights.adapters.nager"):
        with pytest.raises(UpstreamServerError):
            await adapter.fetch_public_holidays(2021, "GB")

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    retries = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(errors) == 1
    assert errors[0].error_kind == "UpstreamServerError"
    assert errors[0].country_code == "GB"
    assert len(retries) == 2
