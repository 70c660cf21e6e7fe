"""Retry classification and backoff for provider calls."""

from __future__ import annotations

from ..config.limits import RateLimitConfig
from ..errors import LLMRateLimitError, LLMTimeoutError

RATE_LIMIT_MESSAGES = (
    "too many requests",
    "rate limit",
    "429",
    "too many",
    "rate-limit",
    "rate_limit",
)

RATE_LIMIT_STATUSES = frozenset({429, "429", "TOO_MANY_REQUESTS", "RateLimitError"})


def is_rate_limit_error(error: BaseException | None) -> bool:
    if error is None:
        return False
    if isinstance(error, LLMRateLimitError):
        return True

    message = str(error).lower()
    if any(marker in message for marker in RATE_LIMIT_MESSAGES):
        return True

    for attr in ("status", "status_code", "code"):
        status = getattr(error, attr, None)
        if status is not None and _hashable(status) and status in RATE_LIMIT_STATUSES:
            return True
    return False


def is_timeout_error(error: BaseException | None) -> bool:
    return isinstance(error, (LLMTimeoutError, TimeoutError))


def should_retry(error: BaseException, config: RateLimitConfig) -> bool:
    if is_timeout_error(error):
        return config.retry_on_timeout
    return is_rate_limit_error(error)


def calculate_delay(attempt: int, config: RateLimitConfig) -> float:
    """Backoff before retry number ``attempt + 1``: base * 2^attempt, capped."""
    return min(config.base_delay * (2 ** attempt), config.max_delay)


def retry_delay(error: BaseException, attempt: int, config: RateLimitConfig) -> float:
    """Backoff for ``error``, never shorter than the provider's ``retry_after_ms`` hint."""
    delay = calculate_delay(attempt, config)
    retry_after_ms = getattr(error, "retry_after_ms", None)
    if isinstance(retry_after_ms, (int, float)) and retry_after_ms > 0:
        delay = max(delay, min(retry_after_ms / 1000, config.max_delay))
    return delay


def _hashable(value: object) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True
