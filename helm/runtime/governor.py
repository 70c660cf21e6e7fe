"""
Governor - per-key throttling, retry and in-flight deduplication

Every provider attempt goes through ``Governor.execute(key, operation)``:

1. In-flight dedup: a caller whose dedup key already has an outstanding call
   awaits that call's outcome instead of issuing a second one.
2. Admission: a sliding window of request timestamps per key. When the window
   is full the caller sleeps until the oldest timestamp ages out.
3. Retry: rate-limited failures are retried with exponential backoff; any
   other failure propagates immediately.
4. Timeout: each attempt runs under its own deadline and surfaces as
   ``LLMTimeoutError``.

State is owned by the Governor instance (one per process, passed by
reference to the router). Windows are guarded by one ``asyncio.Lock`` per key
so the prune-check-record sequence is atomic; different keys never contend.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from functools import partial
from typing import Any, TypeVar

from ..config.limits import DEFAULT_RATE_LIMIT, PROVIDER_RATE_LIMITS, RateLimitConfig
from ..errors import LLMTimeoutError
from .retry import retry_delay, should_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


@dataclass
class RateWindow:
    """Admission timestamps for one key, oldest first."""

    timestamps: deque[float] = field(default_factory=deque)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def prune(self, now: float, window: float) -> None:
        cutoff = now - window
        while self.timestamps and self.timestamps[0] <= cutoff:
            self.timestamps.popleft()

    def __len__(self) -> int:
        return len(self.timestamps)


def split_key(key: str) -> tuple[str, str | None]:
    provider, sep, model = key.partition(":")
    return provider, (model if sep else None)


class Governor:
    def __init__(
        self,
        default: RateLimitConfig | None = None,
        *,
        limits: Mapping[str, RateLimitConfig] | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.default = default or DEFAULT_RATE_LIMIT
        self._limits = dict(PROVIDER_RATE_LIMITS if limits is None else limits)
        self._clock = clock
        self._sleep = sleep
        self._windows: dict[str, RateWindow] = {}
        self._in_flight: dict[str, asyncio.Future] = {}
        # Rate key -> dedup keys of its outstanding calls.
        self._pending_by_key: dict[str, set[str]] = {}

    def config_for(self, key: str) -> RateLimitConfig:
        if key in self._limits:
            return self._limits[key]
        prefix, _ = split_key(key)
        return self._limits.get(prefix, self.default)

    # -- Public API --

    async def execute(
        self,
        key: str,
        operation: Callable[[], Awaitable[T]],
        *,
        dedup_key: str | None = None,
    ) -> T:
        dedup_key = dedup_key or key

        while True:
            pending = self._in_flight.get(dedup_key)
            if pending is None or pending.done():
                break
            logger.debug("Joining in-flight call for %s", dedup_key)
            try:
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if not pending.cancelled() or (current is not None and current.cancelling()):
                    raise
                logger.debug("In-flight call for %s was cancelled, issuing our own", dedup_key)

        task = asyncio.ensure_future(self._run_with_retry(key, operation))
        self._in_flight[dedup_key] = task
        self._pending_by_key.setdefault(key, set()).add(dedup_key)
        task.add_done_callback(partial(self._release, key, dedup_key))
        return await task

    async def admit(self, key: str) -> None:
        """Block until ``key``'s window has room, then record this request."""
        config = self.config_for(key)
        window = self._window(key)
        async with window.lock:
            now = self._clock()
            window.prune(now, config.window)
            while len(window) >= config.max_requests:
                wait = window.timestamps[0] + config.window - now
                logger.debug("Rate limit exceeded for %s, waiting %.3fs", key, wait)
                await self._sleep(wait)
                now = self._clock()
                window.prune(now, config.window)
            window.timestamps.append(now)

    def status(self, key: str) -> dict[str, Any]:
        config = self.config_for(key)
        window = self._windows.get(key)
        now = self._clock()
        current = sum(1 for ts in window.timestamps if ts > now - config.window) if window else 0
        pending = [self._in_flight.get(d) for d in self._pending_by_key.get(key, ())]
        return {
            "key": key,
            "current_requests": current,
            "max_requests": config.max_requests,
            "window": config.window,
            "is_limited": current >= config.max_requests,
            "pending": any(p is not None and not p.done() for p in pending),
        }

    def clear(self, key: str | None = None) -> None:
        """Forget window and in-flight state for ``key``, or for every key.

        Outstanding calls keep running; new callers just stop joining them.
        """
        if key is None:
            self._windows.clear()
            self._in_flight.clear()
            self._pending_by_key.clear()
            return
        self._windows.pop(key, None)
        for dedup_key in self._pending_by_key.pop(key, set()):
            self._in_flight.pop(dedup_key, None)

    # -- Internals --

    def _window(self, key: str) -> RateWindow:
        window = self._windows.get(key)
        if window is None:
            window = self._windows[key] = RateWindow()
        return window

    def _release(self, key: str, dedup_key: str, task: asyncio.Future) -> None:
        if self._in_flight.get(dedup_key) is not task:
            return
        del self._in_flight[dedup_key]
        pending = self._pending_by_key.get(key)
        if pending is not None:
            pending.discard(dedup_key)
            if not pending:
                del self._pending_by_key[key]

    async def _run_with_retry(self, key: str, operation: Callable[[], Awaitable[T]]) -> T:
        config = self.config_for(key)
        for attempt in range(config.max_retries + 1):
            await self.admit(key)
            try:
                return await self._attempt(key, operation, config)
            except Exception as e:
                if attempt >= config.max_retries or not should_retry(e, config):
                    raise
                delay = retry_delay(e, attempt, config)
                logger.debug(
                    "Rate limit hit for %s, retrying in %.2fs (attempt %d/%d)",
                    key, delay, attempt + 1, config.max_retries,
                )
                await self._sleep(delay)
        raise AssertionError("unreachable")  # pragma: no cover

    async def _attempt(
        self, key: str, operation: Callable[[], Awaitable[T]], config: RateLimitConfig
    ) -> T:
        if config.timeout is None:
            return await operation()
        try:
            return await asyncio.wait_for(operation(), timeout=config.timeout)
        except TimeoutError as e:
            provider, model = split_key(key)
            raise LLMTimeoutError(provider, config.timeout, model=model, cause=e) from e
