"""Runtime - rate limiting, retry and in-flight deduplication."""

from helm.runtime.governor import Governor, RateWindow
from helm.runtime.retry import (
    calculate_delay,
    is_rate_limit_error,
    is_timeout_error,
    retry_delay,
    should_retry,
)

__all__ = [
    "Governor",
    "RateWindow",
    "calculate_delay",
    "is_rate_limit_error",
    "is_timeout_error",
    "retry_delay",
    "should_retry",
]
