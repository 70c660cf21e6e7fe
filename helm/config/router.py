"""
Provider routing configuration.

Pydantic models describing, per environment profile, the ordered chain of
providers/models to try and the generation defaults. A profile may carry
per-use-case overrides that replace the provider chain and/or the defaults.

Precedence when resolving generation parameters for one attempt:
per-call override > provider spec > use-case default > environment default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ConfigurationError

Environment = Literal["development", "production"]

HARD_DEFAULT_TEMPERATURE = 0.7
HARD_DEFAULT_MAX_TOKENS = 1000


def current_environment(environ: dict[str, str] | None = None) -> Environment:
    env = (environ if environ is not None else os.environ).get("HELM_ENV", "")
    return "production" if env.strip().lower() == "production" else "development"


def provider_override_from_env(environ: dict[str, str] | None = None) -> str | None:
    value = (environ if environ is not None else os.environ).get("HELM_LLM_PROVIDER", "")
    return value.strip() or None


class ProviderAttemptSpec(BaseModel):
    """One provider and the models to try on it, in order."""

    model_config = ConfigDict(frozen=True)

    provider: str = Field(..., min_length=1, description="Provider identifier")
    models: tuple[str, ...] = Field(..., min_length=1, description="Models to try in order")
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(None, gt=0)

    @field_validator("models", mode="before")
    @classmethod
    def _coerce_models(cls, value: Any) -> Any:
        if isinstance(value, str):
            return (value,)
        return value


class UseCaseOverride(BaseModel):
    model_config = ConfigDict(frozen=True)

    providers: tuple[ProviderAttemptSpec, ...] | None = None
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(None, gt=0)


class EnvironmentProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    providers: tuple[ProviderAttemptSpec, ...] = ()
    default_temperature: float = Field(0.5, ge=0.0, le=2.0)
    default_max_tokens: int = Field(4000, gt=0)
    use_case_overrides: dict[str, UseCaseOverride] = Field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedRoute:
    use_case: str
    environment: str
    specs: tuple[ProviderAttemptSpec, ...]
    temperature: float | None
    max_tokens: int | None

    def params_for(
        self,
        spec: ProviderAttemptSpec,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> tuple[float, int]:
        final_temperature = _first_set(
            temperature, spec.temperature, self.temperature, HARD_DEFAULT_TEMPERATURE
        )
        final_max_tokens = _first_set(
            max_tokens, spec.max_tokens, self.max_tokens, HARD_DEFAULT_MAX_TOKENS
        )
        return final_temperature, final_max_tokens


def _first_set(*values):
    for value in values:
        if value is not None:
            return value
    return None


class RouterConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    environments: dict[str, EnvironmentProfile] = Field(default_factory=dict)

    def profile(self, environment: str) -> EnvironmentProfile:
        try:
            return self.environments[environment]
        except KeyError:
            raise ConfigurationError(f"No configuration for environment: {environment}") from None

    def resolve(
        self,
        use_case: str,
        environment: str | None = None,
        provider_override: str | None = None,
    ) -> ResolvedRoute:
        environment = environment or current_environment()
        profile = self.profile(environment)

        if provider_override:
            spec = next((s for s in profile.providers if s.provider == provider_override), None)
            if spec is None:
                raise ConfigurationError(
                    f"Provider {provider_override} not configured for environment {environment}"
                )
            # A pinned provider ignores use-case overrides and uses its own defaults.
            return ResolvedRoute(
                use_case=use_case,
                environment=environment,
                specs=(spec,),
                temperature=_first_set(spec.temperature, 0.5),
                max_tokens=_first_set(spec.max_tokens, 4000),
            )

        override = profile.use_case_overrides.get(use_case)
        specs = override.providers if override and override.providers else profile.providers
        if not specs:
            raise ConfigurationError(f"No providers configured for environment: {environment}")

        return ResolvedRoute(
            use_case=use_case,
            environment=environment,
            specs=tuple(specs),
            temperature=_first_set(override.temperature if override else None, profile.default_temperature),
            max_tokens=_first_set(override.max_tokens if override else None, profile.default_max_tokens),
        )
