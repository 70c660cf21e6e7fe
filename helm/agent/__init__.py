"""Agent - the orchestration loop and its tool execution helpers."""

from helm.agent.executor import RegisteredTool, ToolRegistry
from helm.agent.loop import CompletionRouter, OrchestrationLoop, run_session
from helm.agent.prompts import render_operations, render_prompt, render_result, render_results_turn
from helm.types import ToolSpec

__all__ = [
    "RegisteredTool",
    "ToolRegistry",
    "ToolSpec",
    "CompletionRouter",
    "OrchestrationLoop",
    "run_session",
    "render_operations",
    "render_prompt",
    "render_result",
    "render_results_turn",
]
