"""Providers - transports for model vendors and the fallback router."""

from helm.providers.anthropic import AnthropicTransport
from helm.providers.base import BaseTransport, SDKErrorTypes, map_sdk_error
from helm.providers.clients import ClientKey, ProviderClients, shared_clients
from helm.providers.openai import OpenAICompatibleTransport
from helm.providers.presets import (
    PROVIDER_PRESETS,
    ProviderPreset,
    build_transports,
    create_transport,
    openrouter_headers,
)
from helm.providers.router import ProviderRouter, dedup_key_for

__all__ = [
    "AnthropicTransport",
    "BaseTransport",
    "SDKErrorTypes",
    "map_sdk_error",
    "ClientKey",
    "ProviderClients",
    "shared_clients",
    "OpenAICompatibleTransport",
    "PROVIDER_PRESETS",
    "ProviderPreset",
    "build_transports",
    "create_transport",
    "openrouter_headers",
    "ProviderRouter",
    "dedup_key_for",
]
