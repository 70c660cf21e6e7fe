"""
Helm Configuration Module - unified configuration exports
"""

from helm.config.credentials import (
    PROVIDER_KEY_ENV_VARS,
    CredentialSource,
    EnvCredentialSource,
    StaticCredentialSource,
)
from helm.config.defaults import default_router_config
from helm.config.limits import (
    DEFAULT_RATE_LIMIT,
    PROVIDER_RATE_LIMITS,
    RateLimitConfig,
)
from helm.config.router import (
    EnvironmentProfile,
    ProviderAttemptSpec,
    ResolvedRoute,
    RouterConfig,
    UseCaseOverride,
    current_environment,
    provider_override_from_env,
)
from helm.config.session import FALLBACK_MESSAGE, RESULTS_INSTRUCTION, SessionConfig

__all__ = [
    "PROVIDER_KEY_ENV_VARS",
    "CredentialSource",
    "EnvCredentialSource",
    "StaticCredentialSource",
    "default_router_config",
    "DEFAULT_RATE_LIMIT",
    "PROVIDER_RATE_LIMITS",
    "RateLimitConfig",
    "EnvironmentProfile",
    "ProviderAttemptSpec",
    "ResolvedRoute",
    "RouterConfig",
    "UseCaseOverride",
    "current_environment",
    "provider_override_from_env",
    "FALLBACK_MESSAGE",
    "RESULTS_INSTRUCTION",
    "SessionConfig",
]
