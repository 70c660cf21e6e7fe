"""
Pytest Configuration and Fixtures
"""

import asyncio

import pytest

from helm.config import RateLimitConfig, RouterConfig
from helm.runtime import Governor
from helm.types import CallSuccess


class FakeClock:
    """Simulated monotonic clock; ``sleep`` advances time instead of waiting."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += max(seconds, 0.0)
        await asyncio.sleep(0)


class ScriptedTransport:
    """Replays a script of texts/exceptions; the last entry repeats."""

    def __init__(self, *script, delay: float = 0.0):
        self.script = list(script) or ["ok"]
        self.delay = delay
        self.requests = []

    async def complete(self, request):
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, BaseException):
            raise item
        return item


class ScriptedRouter:
    """Router stand-in returning scripted completions in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    async def call(self, use_case, prompt, overrides=None):
        self.calls.append((use_case, prompt))
        item = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(item, BaseException):
            raise item
        return CallSuccess(text=item, provider="fake", model="fake-1")


def make_router_config(*specs, use_case_overrides=None, temperature=0.5, max_tokens=4000):
    return RouterConfig.model_validate(
        {
            "environments": {
                "development": {
                    "providers": list(specs),
                    "default_temperature": temperature,
                    "default_max_tokens": max_tokens,
                    "use_case_overrides": use_case_overrides or {},
                }
            }
        }
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep routing deterministic regardless of the developer's shell."""
    for var in ("HELM_ENV", "HELM_LLM_PROVIDER"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def governor(clock) -> Governor:
    """Governor on simulated time, no retries, no per-provider limits."""
    return Governor(
        RateLimitConfig(max_retries=0, timeout=None),
        limits={},
        clock=clock,
        sleep=clock.sleep,
    )


@pytest.fixture
def transport_factory():
    return ScriptedTransport


@pytest.fixture
def router_factory():
    return ScriptedRouter


@pytest.fixture
def router_config_factory():
    return make_router_config
