"""
Provider Router - ordered fallback across providers and models

For a use case the router resolves the ordered list of provider/model attempts
(``RouterConfig.resolve``) and tries them one at a time through the Governor.
The first non-empty completion wins; every failure is recorded and the chain
advances. When nothing succeeds a ``ProviderExhaustedError`` carries one
``CallFailure`` per attempt.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Mapping

from ..config.credentials import CredentialSource, EnvCredentialSource
from ..config.router import ProviderAttemptSpec, RouterConfig, provider_override_from_env
from ..errors import LLMEmptyResponseError, ProviderExhaustedError
from ..runtime.governor import Governor
from ..runtime.retry import is_rate_limit_error
from ..types import CallFailure, CallOverrides, CallSuccess, CompletionRequest, ProviderTransport

logger = logging.getLogger(__name__)


def dedup_key_for(request: CompletionRequest) -> str:
    """Identical concurrent requests share a key; any differing parameter splits it."""
    payload = json.dumps(
        {
            "prompt": request.prompt,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "image": request.image.data_uri() if request.image else None,
        },
        sort_keys=True,
    )
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"{request.provider}:{request.model}:{digest}"


class ProviderRouter:
    def __init__(
        self,
        config: RouterConfig,
        transports: Mapping[str, ProviderTransport],
        governor: Governor,
        *,
        credentials: CredentialSource | None = None,
        environment: str | None = None,
        provider_override: str | None = None,
    ) -> None:
        self.config = config
        self.transports = dict(transports)
        self.governor = governor
        self.credentials = credentials or EnvCredentialSource()
        self.environment = environment
        self.provider_override = provider_override

    async def call(
        self,
        use_case: str,
        prompt: str,
        overrides: CallOverrides | None = None,
    ) -> CallSuccess:
        overrides = overrides or CallOverrides()
        route = self.config.resolve(
            use_case,
            environment=self.environment,
            provider_override=self.provider_override or provider_override_from_env(),
        )
        await self.governor.admit(f"use-case:{use_case}")

        failures: list[CallFailure] = []
        for spec in route.specs:
            transport = self._transport_for(spec)
            if transport is None:
                continue

            temperature, max_tokens = route.params_for(spec, overrides.temperature, overrides.max_tokens)
            for model in spec.models:
                request = CompletionRequest(
                    provider=spec.provider,
                    model=model,
                    prompt=prompt,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    image=overrides.image,
                )
                try:
                    text = await self.governor.execute(
                        f"{spec.provider}:{model}",
                        lambda t=transport, r=request: self._attempt(t, r),
                        dedup_key=dedup_key_for(request),
                    )
                except Exception as e:
                    failure = CallFailure(
                        provider=spec.provider,
                        model=model,
                        error_class=type(e).__name__,
                        message=str(e),
                        rate_limited=is_rate_limit_error(e),
                    )
                    failures.append(failure)
                    logger.warning(
                        "%s/%s failed for %s: %s", spec.provider, model, use_case, failure.message
                    )
                    continue

                logger.info("AI call succeeded with %s/%s for %s", spec.provider, model, use_case)
                return CallSuccess(text=text, provider=spec.provider, model=model)

        logger.error("All providers failed for %s (%d attempts)", use_case, len(failures))
        raise ProviderExhaustedError(use_case, failures)

    def _transport_for(self, spec: ProviderAttemptSpec) -> ProviderTransport | None:
        if not self.credentials.get(spec.provider):
            logger.warning("Skipping %s: no API key configured", spec.provider)
            return None
        transport = self.transports.get(spec.provider)
        if transport is None:
            logger.warning("Skipping %s: no transport registered", spec.provider)
        return transport

    @staticmethod
    async def _attempt(transport: ProviderTransport, request: CompletionRequest) -> str:
        text = await transport.complete(request)
        if not text or not text.strip():
            raise LLMEmptyResponseError(request.provider, model=request.model)
        return text
