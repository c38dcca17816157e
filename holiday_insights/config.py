"""Configuration settings for the application."""
from typing import Dict, List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "Holiday Insights API"
    debug: bool = False
    log_level: str = "INFO"

    # Upstream source
    holiday_source: str = "nager"
    nager_base_url: str = "https://date.nager.at/api/v3"
    static_holidays_file: Optional[str] = None

    # Retry with jittered exponential backoff
    max_retries: int = 2
    backoff_ms: int = 300
    max_backoff_ms: int = 10_000
    jitter: float = 0.2

    # Whole-call budget, retries included
    request_timeout_seconds: float = 25.0

    # Shared rate limiter
    rate_limit_for_period: int = 50
    rate_limit_refresh_seconds: float = 1.0
    rate_limit_timeout_seconds: float = 5.0

    # None keeps every entry
    cache_max_entries: Optional[int] = 4096

    weekend_default: List[str] = ["SATURDAY", "SUNDAY"]
    weekend_overrides: Dict[str, List[str]] = {}

    class Config:
        env_file = ".env"
        env_prefix = "HOLIDAYS_"
        case_sensitive = False


settings = Settings()
