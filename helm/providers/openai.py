"""OpenAI-compatible transport (deepseek, groq, openrouter, gemini)."""

from __future__ import annotations

from collections.abc import Mapping

import openai
from openai import AsyncOpenAI

from ..types import CompletionRequest
from .base import DEFAULT_TIMEOUT, BaseTransport, SDKErrorTypes
from .clients import ClientKey, ProviderClients, shared_clients

OPENAI_ERRORS = SDKErrorTypes(
    rate_limit=(openai.RateLimitError,),
    auth=(openai.AuthenticationError, openai.PermissionDeniedError),
    timeout=(openai.APITimeoutError,),
    status=(openai.APIStatusError,),
)


def _user_content(request: CompletionRequest) -> str | list[dict]:
    if request.image is None:
        return request.prompt
    return [
        {"type": "text", "text": request.prompt},
        {"type": "image_url", "image_url": {"url": request.image.data_uri()}},
    ]


class OpenAICompatibleTransport(BaseTransport):
    error_types = OPENAI_ERRORS

    def __init__(
        self,
        provider: str,
        api_key: str,
        base_url: str | None = None,
        *,
        default_headers: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        clients: ProviderClients | None = None,
    ) -> None:
        super().__init__(timeout)
        self.provider = provider
        self.base_url = base_url
        key = ClientKey.build(provider, api_key, base_url, timeout=timeout, headers=default_headers)
        self._client = (clients or shared_clients()).get(key, AsyncOpenAI)

    async def _do_complete(self, request: CompletionRequest) -> str:
        resp = await self._client.chat.completions.create(
            model=request.model,
            messages=[{"role": "user", "content": _user_content(request)}],
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        )
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""
