"""Error taxonomy for upstream holiday fetches and derived operations."""
from typing import Optional

from holiday_insights.models.holiday import FetchKey


class HolidayServiceError(Exception):
    """Base class for every classified failure raised by the core."""

    def __init__(self, message: str, key: Optional[FetchKey] = None):
        super().__init__(message)
        self.key = key

    @property
    def kind(self) -> str:
        return type(self).__name__


class UnsupportedCountry(HolidayServiceError):
    """Upstream has no data for the requested country (HTTP 404). Never retried."""

    def __init__(self, key: Optional[FetchKey] = None):
        super().__init__("Unsupported country code", key)


class UpstreamUnavailable(HolidayServiceError):
    """The upstream source could not produce a usable answer."""


class TransientUpstreamError(UpstreamUnavailable):
    """Retryable failure: network, timeout, server error or rate limit."""


class RateLimited(TransientUpstreamError):
    """No rate-limiter permit became available within the wait budget."""


class UpstreamTimeout(TransientUpstreamError):
    """The upstream call did not complete within its time budget."""


class UpstreamConnectionError(TransientUpstreamError):
    """Connection refused, reset or otherwise broken at the transport level."""


class UpstreamServerError(TransientUpstreamError):
    """Upstream answered with a 5xx status."""

    def __init__(self, status_code: int, key: Optional[FetchKey] = None):
        super().__init__(f"Upstream server error: HTTP {status_code}", key)
        self.status_code = status_code


class UpstreamClientError(UpstreamUnavailable):
    """Upstream rejected the request with a 4xx status other than 404."""

    def __init__(self, status_code: int, key: Optional[FetchKey] = None):
        super().__init__(f"Upstream rejected request: HTTP {status_code}", key)
        self.status_code = status_code


class InvalidUpstreamPayload(UpstreamUnavailable):
    """Upstream body could not be read as a list of holidays."""


class NoHolidayData(UpstreamUnavailable):
    """Upstream answered successfully but with no content at all."""


def is_retryable(exc: BaseException) -> bool:
    """Return True if the failure is worth another attempt."""
    return isinstance(exc, TransientUpstreamError)
