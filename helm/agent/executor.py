"""Tool registry usable directly as the loop's tool executor."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ..errors import ToolNotFoundError
from ..types import Invocation, InvocationResult, SessionContext, ToolSpec

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any], SessionContext], Any | Awaitable[Any]]


@dataclass(frozen=True)
class RegisteredTool:
    spec: ToolSpec
    handler: Handler


class ToolRegistry:
    """
    Maps operation names to handlers.

    Handlers take ``(arguments, context)`` and may be sync or async. Calling
    the registry executes a batch in order; a failing or unknown operation
    becomes an error result without affecting the rest of the batch.
    """

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}

    def register(self, name: str, handler: Handler, description: str = "") -> ToolSpec:
        spec = ToolSpec(name=name, description=description)
        self._tools[name] = RegisteredTool(spec=spec, handler=handler)
        return spec

    def tool(self, name: str | None = None, description: str | None = None):
        """Decorator form of ``register``; the docstring is the default description."""

        def decorator(fn: Handler) -> Handler:
            self.register(name or fn.__name__, fn, description or inspect.getdoc(fn) or "")
            return fn

        return decorator

    def get(self, name: str) -> RegisteredTool | None:
        return self._tools.get(name)

    def list(self) -> list[ToolSpec]:
        return [t.spec for t in self._tools.values()]

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    async def execute(self, invocation: Invocation, context: SessionContext | None = None) -> InvocationResult:
        context = context or SessionContext()
        tool = self._tools.get(invocation.name)
        if tool is None:
            return InvocationResult(
                invocation.id, invocation.name, error=str(ToolNotFoundError(invocation.name))
            )
        try:
            result = tool.handler(dict(invocation.arguments), context)
            if inspect.isawaitable(result):
                result = await result
            return InvocationResult(invocation.id, invocation.name, result=result)
        except Exception as e:
            logger.exception("Tool execution error: %s", invocation.name)
            return InvocationResult(invocation.id, invocation.name, error=str(e) or type(e).__name__)

    async def __call__(
        self, invocations: Sequence[Invocation], context: SessionContext
    ) -> list[InvocationResult]:
        return [await self.execute(inv, context) for inv in invocations]
