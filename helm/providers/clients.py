"""
SDK client registry shared by transports.

Transports for the same provider endpoint and credential reuse one SDK client
and therefore one HTTP connection pool. Clients are always built with SDK
retries disabled; the Governor owns retry policy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientKey:
    """Connection-level identity of an SDK client. Request parameters never belong here."""

    provider: str
    api_key: str
    base_url: str | None = None
    timeout: float = 60.0
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def build(
        cls,
        provider: str,
        api_key: str,
        base_url: str | None = None,
        *,
        timeout: float = 60.0,
        headers: Mapping[str, str] | None = None,
    ) -> ClientKey:
        return cls(provider, api_key, base_url, float(timeout), tuple(sorted((headers or {}).items())))

    def sdk_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "api_key": self.api_key,
            "base_url": self.base_url,
            "timeout": self.timeout,
            "max_retries": 0,
        }
        if self.headers:
            kwargs["default_headers"] = dict(self.headers)
        return kwargs


class ProviderClients:
    """Lazily built SDK clients, one per ``ClientKey``."""

    def __init__(self) -> None:
        self._clients: dict[ClientKey, Any] = {}

    def get(self, key: ClientKey, factory: Callable[..., Any]) -> Any:
        client = self._clients.get(key)
        if client is None:
            logger.debug("Creating %s client for %s", factory.__name__, key.provider)
            client = self._clients[key] = factory(**key.sdk_kwargs())
        return client

    def __contains__(self, key: object) -> bool:
        return key in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def providers(self) -> list[str]:
        return sorted({key.provider for key in self._clients})

    async def aclose(self) -> None:
        """Close every client's HTTP pool and forget them."""
        clients, self._clients = list(self._clients.values()), {}
        for client in clients:
            await client.close()


_shared = ProviderClients()


def shared_clients() -> ProviderClients:
    """Process-wide registry used when a transport is not given its own."""
    return _shared
