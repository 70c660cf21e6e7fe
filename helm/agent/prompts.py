"""Prompt assembly for the orchestration loop."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..types import ConversationTurn, InvocationResult, ToolSpec

OPERATIONS_TEMPLATE = """Available tools:
{operations}

To use a tool, respond with a JSON block like this:
```tool_call
{{"name": "tool_name", "arguments": {{"arg1": "value1"}}}}
```

You can make multiple tool calls, but try to limit it to one or two if possible. \
After receiving tool results, provide your final response to the user."""


def as_tool_spec(entry: ToolSpec | Mapping[str, Any]) -> ToolSpec:
    if isinstance(entry, ToolSpec):
        return entry
    return ToolSpec(name=entry["name"], description=entry.get("description", ""))


def as_turn(turn: ConversationTurn | Mapping[str, Any]) -> ConversationTurn:
    if isinstance(turn, ConversationTurn):
        return turn
    return ConversationTurn(role=turn["role"], content=turn["content"])


def render_operations(catalog: Iterable[ToolSpec]) -> str:
    lines = "\n".join(f"- {spec.name}: {spec.description}" for spec in catalog)
    return OPERATIONS_TEMPLATE.format(operations=lines)


def build_system_prompt(system_prompt: str, catalog: Sequence[ToolSpec]) -> str:
    if not catalog:
        return system_prompt
    return f"{system_prompt}\n\n{render_operations(catalog)}"


def render_prompt(system_prompt: str, catalog: Sequence[ToolSpec], turns: Iterable[ConversationTurn]) -> str:
    """System turn (with the operations block) then every turn as ``role: content``."""
    system = ConversationTurn(role="system", content=build_system_prompt(system_prompt, catalog))
    return "\n\n".join(turn.render() for turn in [system, *turns])


def render_result(result: InvocationResult) -> str:
    if result.error is not None:
        return f"Tool {result.name} error: {result.error}"
    return f"Tool {result.name} result:\n{json.dumps(result.result, indent=2, default=str)}"


def render_results_turn(results: Iterable[InvocationResult], instruction: str) -> ConversationTurn:
    body = "\n\n".join(render_result(r) for r in results)
    return ConversationTurn(role="user", content=f"Tool results:\n{body}\n\n{instruction}")
