"""Provider presets: endpoints and transport factories keyed by provider name."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from ..config.credentials import CredentialSource, EnvCredentialSource
from ..types import ProviderTransport
from .anthropic import AnthropicTransport
from .base import DEFAULT_TIMEOUT
from .clients import ProviderClients
from .openai import OpenAICompatibleTransport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderPreset:
    name: str
    base_url: str | None = None
    kind: Literal["openai", "anthropic"] = "openai"
    headers: Mapping[str, str] = field(default_factory=dict)


def openrouter_headers(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Attribution headers OpenRouter uses to identify the calling app."""
    environ = environ if environ is not None else os.environ
    headers = {"X-Title": environ.get("HELM_APP_TITLE", "helm")}
    if environ.get("HELM_APP_URL"):
        headers["HTTP-Referer"] = environ["HELM_APP_URL"]
    return headers


PROVIDER_PRESETS: dict[str, ProviderPreset] = {
    "deepseek": ProviderPreset("deepseek", "https://api.deepseek.com/v1"),
    "groq": ProviderPreset("groq", "https://api.groq.com/openai/v1"),
    "openrouter": ProviderPreset("openrouter", "https://openrouter.ai/api/v1"),
    "gemini": ProviderPreset("gemini", "https://generativelanguage.googleapis.com/v1beta/openai/"),
    "anthropic": ProviderPreset("anthropic", kind="anthropic"),
}


def create_transport(
    provider: str,
    api_key: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    clients: ProviderClients | None = None,
    presets: Mapping[str, ProviderPreset] | None = None,
) -> ProviderTransport:
    presets = PROVIDER_PRESETS if presets is None else presets
    try:
        preset = presets[provider]
    except KeyError:
        raise ValueError(f"Unknown provider preset: {provider}") from None

    if preset.kind == "anthropic":
        return AnthropicTransport(api_key, preset.base_url, timeout=timeout, clients=clients)

    headers = dict(preset.headers)
    if provider == "openrouter" and not headers:
        headers = openrouter_headers()
    return OpenAICompatibleTransport(
        provider, api_key, preset.base_url, default_headers=headers, timeout=timeout, clients=clients
    )


def build_transports(
    credentials: CredentialSource | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    clients: ProviderClients | None = None,
    presets: Mapping[str, ProviderPreset] | None = None,
) -> dict[str, ProviderTransport]:
    """One transport per preset whose provider has a credential."""
    credentials = credentials or EnvCredentialSource()
    presets = PROVIDER_PRESETS if presets is None else presets
    transports: dict[str, ProviderTransport] = {}
    for name in presets:
        api_key = credentials.get(name)
        if not api_key:
            logger.debug("No credential for %s, transport not created", name)
            continue
        transports[name] = create_transport(name, api_key, timeout=timeout, clients=clients, presets=presets)
    return transports
