"""Credential lookup for model providers."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

PROVIDER_KEY_ENV_VARS: dict[str, str] = {
    "deepseek": "DEEPSEEK_API_KEY",
    "groq": "GROQ_API_KEY",
    "gemini": "GOOGLE_GEMINI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


@runtime_checkable
class CredentialSource(Protocol):
    def get(self, provider: str) -> str | None: ...


class EnvCredentialSource:
    """Reads provider API keys from environment variables at lookup time."""

    def __init__(
        self,
        env_vars: Mapping[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._env_vars = dict(env_vars or PROVIDER_KEY_ENV_VARS)
        self._environ = environ

    def get(self, provider: str) -> str | None:
        var = self._env_vars.get(provider)
        if var is None:
            var = f"{provider.upper().replace('-', '_')}_API_KEY"
        environ = self._environ if self._environ is not None else os.environ
        value = environ.get(var)
        return value.strip() if value and value.strip() else None


class StaticCredentialSource:
    def __init__(self, keys: Mapping[str, str | None]) -> None:
        self._keys = dict(keys)

    def get(self, provider: str) -> str | None:
        return self._keys.get(provider) or None
