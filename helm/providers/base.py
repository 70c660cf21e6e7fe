"""Base transport: SDK call plus translation of SDK errors into ``LLMError``s."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import HelmError, LLMAuthError, LLMError, LLMRateLimitError, LLMTimeoutError
from ..types import CompletionRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class SDKErrorTypes:
    """Exception classes of one vendor SDK, grouped by how they are reported."""

    rate_limit: tuple[type[BaseException], ...] = ()
    auth: tuple[type[BaseException], ...] = ()
    timeout: tuple[type[BaseException], ...] = ()
    status: tuple[type[BaseException], ...] = ()


def map_sdk_error(
    exc: Exception,
    provider: str,
    model: str | None,
    errors: SDKErrorTypes,
    timeout: float = DEFAULT_TIMEOUT,
) -> HelmError:
    if isinstance(exc, HelmError):
        return exc
    if isinstance(exc, errors.rate_limit):
        return LLMRateLimitError(provider, model=model, retry_after_ms=_retry_after_ms(exc), cause=exc)
    if isinstance(exc, errors.auth):
        return LLMAuthError(provider, model=model, cause=exc)
    if isinstance(exc, errors.timeout):
        return LLMTimeoutError(provider, timeout, model=model, cause=exc)
    status_code = getattr(exc, "status_code", None) if isinstance(exc, errors.status) else None
    if status_code == 429:
        return LLMRateLimitError(provider, model=model, retry_after_ms=_retry_after_ms(exc), cause=exc)
    return LLMError("LLM_PROVIDER_ERROR", provider, str(exc), status_code, exc, model)


def _retry_after_ms(exc: BaseException) -> int | None:
    response = getattr(exc, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    value = headers.get("retry-after")
    try:
        return int(float(value) * 1000) if value is not None else None
    except (TypeError, ValueError):
        return None


class BaseTransport:
    """Subclass and implement ``_do_complete``; ``complete`` maps SDK failures."""

    provider: str = "base"
    error_types = SDKErrorTypes()

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    async def complete(self, request: CompletionRequest) -> str:
        try:
            return await self._do_complete(request)
        except Exception as e:
            mapped = map_sdk_error(e, self.provider, request.model, self.error_types, self.timeout)
            if mapped is e:
                raise
            logger.debug("%s/%s raised %s", self.provider, request.model, type(e).__name__)
            raise mapped from e

    async def _do_complete(self, request: CompletionRequest) -> str:
        raise NotImplementedError
