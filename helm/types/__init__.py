"""Core type definitions, re-exported from the sub-modules."""

from .llm import (
    CallFailure, CallOutcome, CallOverrides, CallSuccess, CompletionRequest, ImagePayload,
    ProviderTransport,
)
from .messages import ConversationTurn, Role, assistant_turn, system_turn, user_turn
from .session import LoopState, OrchestrationTurn, SessionResult
from .tools import Invocation, InvocationResult, SessionContext, ToolExecutor, ToolSpec

__all__ = [
    "CallFailure", "CallOutcome", "CallOverrides", "CallSuccess", "CompletionRequest", "ImagePayload",
    "ProviderTransport",
    "ConversationTurn", "Role", "assistant_turn", "system_turn", "user_turn",
    "LoopState", "OrchestrationTurn", "SessionResult",
    "Invocation", "InvocationResult", "SessionContext", "ToolExecutor", "ToolSpec",
]
