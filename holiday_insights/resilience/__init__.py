from .cache import ResultCache, CacheStats
from .rate_limiter import RateLimiter
from .retry import RetryPolicy, retry_async

__all__ = [
    "ResultCache",
    "CacheStats",
    "RateLimiter",
    "RetryPolicy",
    "retry_async",
]
