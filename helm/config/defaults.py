"""Built-in development and production routing profiles."""

from __future__ import annotations

from .router import RouterConfig

_CHAT_MODEL = "openai/gpt-4o-mini"

PROVIDER_MODELS: dict[str, dict[str, list[str]]] = {
    "openrouter": {
        "development": [_CHAT_MODEL, "meta-llama/llama-3.3-70b-instruct:free"],
        "production": [_CHAT_MODEL, "anthropic/claude-3.5-haiku"],
    },
    "deepseek": {
        "development": ["deepseek-chat"],
        "production": ["deepseek-chat", "deepseek-reasoner"],
    },
    "groq": {
        "development": ["llama-3.1-8b-instant"],
        "production": ["llama-3.3-70b-versatile", "llama-3.1-8b-instant"],
    },
    "gemini": {
        "development": ["gemini-2.0-flash"],
        "production": ["gemini-2.0-flash", "gemini-1.5-flash"],
    },
}


def _override(models: list[str], temperature: float, max_tokens: int, provider: str = "openrouter") -> dict:
    return {
        "providers": [
            {"provider": provider, "models": models, "temperature": temperature, "max_tokens": max_tokens}
        ],
        "temperature": temperature,
        "max_tokens": max_tokens,
    }


_USE_CASE_OVERRIDES = {
    # Lower temperature keeps tool calls deterministic.
    "owner-chat": _override([_CHAT_MODEL], 0.3, 8000),
    "prospect-chat": _override([_CHAT_MODEL], 0.7, 6000),
    "assistant-chat": _override([_CHAT_MODEL], 0.5, 8000),
    "boat-details": _override([_CHAT_MODEL], 0.2, 4000),
    "suggest-sailboats": _override([_CHAT_MODEL], 0.3, 2000),
    "generate-journey": _override([_CHAT_MODEL], 0.5, 8000),
    "document-classification": _override(["google/gemini-2.0-flash-001"], 0.1, 1024),
}


def _profile(environment: str, order: list[str], temperature: float, max_tokens: int) -> dict:
    return {
        "providers": [
            {"provider": provider, "models": PROVIDER_MODELS[provider][environment]}
            for provider in order
        ],
        "default_temperature": temperature,
        "default_max_tokens": max_tokens,
        "use_case_overrides": _USE_CASE_OVERRIDES,
    }


DEFAULT_ROUTER_CONFIG = {
    "environments": {
        "development": _profile("development", ["openrouter", "deepseek", "groq", "gemini"], 0.5, 4000),
        "production": _profile("production", ["openrouter", "groq", "deepseek", "gemini"], 0.3, 8000),
    }
}


def default_router_config() -> RouterConfig:
    return RouterConfig.model_validate(DEFAULT_ROUTER_CONFIG)
