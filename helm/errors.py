"""Structured error hierarchy for the orchestration engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import CallFailure


class HelmError(Exception):
    def __init__(self, code: str, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.cause = cause

    @classmethod
    def wrap(cls, err: Exception) -> HelmError:
        if isinstance(err, HelmError):
            return err
        return HelmError("UNKNOWN", str(err), err)


class ConfigurationError(HelmError):
    def __init__(self, message: str) -> None:
        super().__init__("CONFIG_INVALID", message)


class LLMError(HelmError):
    def __init__(
        self,
        code: str,
        provider: str,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
        model: str | None = None,
    ) -> None:
        super().__init__(code, message, cause)
        self.provider = provider
        self.model = model
        self.status_code = status_code


class LLMRateLimitError(LLMError):
    def __init__(
        self,
        provider: str,
        model: str | None = None,
        retry_after_ms: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            "LLM_RATE_LIMIT", provider, f"Rate limited by {provider}", 429, cause, model
        )
        self.retry_after_ms = retry_after_ms


class LLMAuthError(LLMError):
    def __init__(self, provider: str, model: str | None = None, cause: Exception | None = None) -> None:
        super().__init__("LLM_AUTH_ERROR", provider, f"Auth failed for {provider}", 401, cause, model)


class LLMTimeoutError(LLMError):
    def __init__(
        self, provider: str, timeout: float, model: str | None = None, cause: Exception | None = None
    ) -> None:
        super().__init__(
            "LLM_TIMEOUT", provider, f"{provider} timeout after {timeout:g} seconds", cause=cause, model=model
        )
        self.timeout = timeout


class LLMEmptyResponseError(LLMError):
    def __init__(self, provider: str, model: str | None = None) -> None:
        super().__init__("LLM_EMPTY_RESPONSE", provider, f"{provider} returned empty response", model=model)


class ProviderExhaustedError(HelmError):
    """Every configured provider/model attempt for a use case failed."""

    def __init__(self, use_case: str, failures: list[CallFailure]) -> None:
        if failures:
            detail = "; ".join(f"{f.provider}/{f.model}: {f.message}" for f in failures)
            message = f"All AI providers failed for use case: {use_case}. Errors: {detail}"
        else:
            message = f"No AI provider configured for use case: {use_case}"
        super().__init__("LLM_ALL_PROVIDERS_FAILED", message)
        self.use_case = use_case
        self.failures = list(failures)


class ToolError(HelmError):
    def __init__(self, code: str, tool_name: str, message: str, cause: Exception | None = None) -> None:
        super().__init__(code, message, cause)
        self.tool_name = tool_name


class ToolNotFoundError(ToolError):
    def __init__(self, tool_name: str) -> None:
        super().__init__("TOOL_NOT_FOUND", tool_name, f"Tool '{tool_name}' not found")
