"""Invocation and tool-execution types."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolSpec:
    """Catalog entry describing one callable operation to the model."""

    name: str
    description: str = ""


@dataclass
class Invocation:
    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    span: tuple[int, int] = (0, 0)
    convention: str = ""


@dataclass
class InvocationResult:
    invocation_id: str
    name: str
    result: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SessionContext:
    user_id: str | None = None
    roles: list[str] = field(default_factory=list)
    conversation_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


ToolExecutor = Callable[[Sequence[Invocation], SessionContext], Awaitable[list[InvocationResult]]]
