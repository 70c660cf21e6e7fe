"""
helm - language-model orchestration engine

Rate-governed provider fallback, command extraction from free-text model
output and a bounded call/execute/feed-back loop.
"""

from helm.agent import OrchestrationLoop, ToolRegistry, run_session
from helm.config import RateLimitConfig, RouterConfig, SessionConfig, default_router_config
from helm.errors import (
    ConfigurationError,
    HelmError,
    LLMEmptyResponseError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    ProviderExhaustedError,
)
from helm.extraction import CommandExtractor, ExtractionResult, extract
from helm.providers import ProviderRouter, build_transports
from helm.runtime import Governor
from helm.types import (
    CallOverrides,
    CallSuccess,
    ConversationTurn,
    ImagePayload,
    Invocation,
    InvocationResult,
    LoopState,
    SessionContext,
    SessionResult,
    ToolSpec,
)

__version__ = "0.1.0"

__all__ = [
    "OrchestrationLoop",
    "ToolRegistry",
    "run_session",
    "RateLimitConfig",
    "RouterConfig",
    "SessionConfig",
    "default_router_config",
    "ConfigurationError",
    "HelmError",
    "LLMEmptyResponseError",
    "LLMError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "ProviderExhaustedError",
    "CommandExtractor",
    "ExtractionResult",
    "extract",
    "ProviderRouter",
    "build_transports",
    "Governor",
    "CallOverrides",
    "CallSuccess",
    "ConversationTurn",
    "ImagePayload",
    "Invocation",
    "InvocationResult",
    "LoopState",
    "SessionContext",
    "SessionResult",
    "ToolSpec",
]
