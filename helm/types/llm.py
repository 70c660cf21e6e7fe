"""Provider call types."""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ImagePayload:
    data: str  # base64
    mime_type: str = "image/jpeg"

    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class CallOverrides:
    temperature: float | None = None
    max_tokens: int | None = None
    image: ImagePayload | None = None


@dataclass(frozen=True)
class CompletionRequest:
    provider: str
    model: str
    prompt: str
    temperature: float = 0.7
    max_tokens: int = 1000
    image: ImagePayload | None = None


@dataclass(frozen=True)
class CallSuccess:
    text: str
    provider: str
    model: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class CallFailure:
    provider: str
    model: str
    error_class: str
    message: str
    rate_limited: bool = False

    @property
    def ok(self) -> bool:
        return False


CallOutcome = CallSuccess | CallFailure


@runtime_checkable
class ProviderTransport(Protocol):
    def complete(self, request: CompletionRequest) -> Awaitable[str]: ...
