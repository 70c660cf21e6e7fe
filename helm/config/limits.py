"""Rate limit and retry configuration for the governor."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class RateLimitConfig:
    max_requests: int = 120
    window: float = 60.0  # seconds
    max_retries: int = 5
    base_delay: float = 1.0
    max_delay: float = 60.0
    timeout: float | None = 60.0
    retry_on_timeout: bool = False

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if self.window <= 0:
            raise ValueError("window must be > 0")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

    def with_overrides(self, **changes) -> RateLimitConfig:
        return replace(self, **changes)


DEFAULT_RATE_LIMIT = RateLimitConfig()

PROVIDER_RATE_LIMITS: dict[str, RateLimitConfig] = {
    "deepseek": RateLimitConfig(max_requests=90, max_retries=3),
    "groq": RateLimitConfig(max_requests=60, max_retries=3),
    "gemini": RateLimitConfig(max_requests=60, max_retries=3),
    "openrouter": RateLimitConfig(max_requests=40, max_retries=3, base_delay=2.0),
}
