"""Anthropic Claude transport."""

from __future__ import annotations

import anthropic
from anthropic import AsyncAnthropic

from ..types import CompletionRequest
from .base import DEFAULT_TIMEOUT, BaseTransport, SDKErrorTypes
from .clients import ClientKey, ProviderClients, shared_clients

ANTHROPIC_ERRORS = SDKErrorTypes(
    rate_limit=(anthropic.RateLimitError,),
    auth=(anthropic.AuthenticationError, anthropic.PermissionDeniedError),
    timeout=(anthropic.APITimeoutError,),
    status=(anthropic.APIStatusError,),
)


def _content_blocks(request: CompletionRequest) -> str | list[dict]:
    if request.image is None:
        return request.prompt
    return [
        {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": request.image.mime_type,
                "data": request.image.data,
            },
        },
        {"type": "text", "text": request.prompt},
    ]


class AnthropicTransport(BaseTransport):
    provider = "anthropic"
    error_types = ANTHROPIC_ERRORS

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        clients: ProviderClients | None = None,
    ) -> None:
        super().__init__(timeout)
        key = ClientKey.build(self.provider, api_key, base_url, timeout=timeout)
        self._client = (clients or shared_clients()).get(key, AsyncAnthropic)

    async def _do_complete(self, request: CompletionRequest) -> str:
        resp = await self._client.messages.create(
            model=request.model,
            max_tokens=request.max_tokens,
            temperature=min(request.temperature, 1.0),
            messages=[{"role": "user", "content": _content_blocks(request)}],
        )
        return "".join(block.text for block in resp.content if block.type == "text")
