"""
Tests for routing configuration resolution
"""

import pytest
from pydantic import ValidationError

from helm.config import (
    ProviderAttemptSpec,
    RouterConfig,
    current_environment,
    default_router_config,
    provider_override_from_env,
)
from helm.errors import ConfigurationError


@pytest.fixture
def config():
    return RouterConfig.model_validate(
        {
            "environments": {
                "development": {
                    "providers": [
                        {"provider": "openrouter", "models": ["a", "b"], "temperature": 0.9},
                        {"provider": "groq", "models": "llama"},
                    ],
                    "default_temperature": 0.5,
                    "default_max_tokens": 4000,
                    "use_case_overrides": {
                        "boat-details": {"temperature": 0.2, "max_tokens": 2000},
                        "classify": {
                            "providers": [{"provider": "gemini", "models": ["flash"]}],
                            "max_tokens": 1024,
                        },
                    },
                },
                "production": {
                    "providers": [{"provider": "groq", "models": ["llama-70b"]}],
                    "default_temperature": 0.3,
                    "default_max_tokens": 8000,
                },
            }
        }
    )


class TestEnvironment:
    def test_production(self):
        assert current_environment({"HELM_ENV": "production"}) == "production"

    @pytest.mark.parametrize("value", ["", "staging", "dev", "test"])
    def test_anything_else_is_development(self, value):
        assert current_environment({"HELM_ENV": value}) == "development"

    def test_missing_is_development(self):
        assert current_environment({}) == "development"

    def test_provider_override(self):
        assert provider_override_from_env({"HELM_LLM_PROVIDER": " groq "}) == "groq"
        assert provider_override_from_env({}) is None


class TestProviderAttemptSpec:
    def test_single_model_string_coerced(self):
        spec = ProviderAttemptSpec(provider="groq", models="llama")
        assert spec.models == ("llama",)

    def test_models_required(self):
        with pytest.raises(ValidationError):
            ProviderAttemptSpec(provider="groq", models=[])

    def test_frozen(self):
        spec = ProviderAttemptSpec(provider="groq", models=["x"])
        with pytest.raises(ValidationError):
            spec.provider = "other"


class TestResolve:
    def test_environment_profile_chain(self, config):
        route = config.resolve("assistant-chat", environment="development")
        assert [s.provider for s in route.specs] == ["openrouter", "groq"]
        assert route.specs[0].models == ("a", "b")

    def test_environment_from_env_var(self, config, monkeypatch):
        monkeypatch.setenv("HELM_ENV", "production")
        route = config.resolve("assistant-chat")
        assert route.environment == "production"
        assert [s.provider for s in route.specs] == ["groq"]

    def test_use_case_override_replaces_chain(self, config):
        route = config.resolve("classify", environment="development")
        assert [s.provider for s in route.specs] == ["gemini"]

    def test_use_case_override_without_providers_keeps_chain(self, config):
        route = config.resolve("boat-details", environment="development")
        assert [s.provider for s in route.specs] == ["openrouter", "groq"]

    def test_unknown_environment(self, config):
        with pytest.raises(ConfigurationError):
            config.resolve("assistant-chat", environment="qa")

    def test_empty_chain(self):
        config = RouterConfig.model_validate({"environments": {"development": {}}})
        with pytest.raises(ConfigurationError):
            config.resolve("assistant-chat", environment="development")

    def test_provider_override_pins_single_spec(self, config):
        route = config.resolve("classify", environment="development", provider_override="groq")
        assert [s.provider for s in route.specs] == ["groq"]
        assert route.params_for(route.specs[0]) == (0.5, 4000)

    def test_unknown_provider_override(self, config):
        with pytest.raises(ConfigurationError):
            config.resolve("assistant-chat", environment="development", provider_override="nope")


class TestParameterPrecedence:
    def test_call_override_wins(self, config):
        route = config.resolve("boat-details", environment="development")
        assert route.params_for(route.specs[0], temperature=0.1, max_tokens=50) == (0.1, 50)

    def test_spec_beats_use_case(self, config):
        route = config.resolve("boat-details", environment="development")
        # openrouter spec pins temperature; max_tokens falls to the use case
        assert route.params_for(route.specs[0]) == (0.9, 2000)

    def test_use_case_beats_environment(self, config):
        route = config.resolve("boat-details", environment="development")
        assert route.params_for(route.specs[1]) == (0.2, 2000)

    def test_environment_default(self, config):
        route = config.resolve("assistant-chat", environment="development")
        assert route.params_for(route.specs[1]) == (0.5, 4000)

    def test_zero_temperature_is_respected(self, config):
        route = config.resolve("assistant-chat", environment="development")
        assert route.params_for(route.specs[1], temperature=0.0)[0] == 0.0


class TestDefaultConfig:
    def test_both_profiles_present(self):
        config = default_router_config()
        assert set(config.environments) == {"development", "production"}

    def test_development_order(self):
        route = default_router_config().resolve("unknown-use-case", environment="development")
        assert [s.provider for s in route.specs] == ["openrouter", "deepseek", "groq", "gemini"]
        assert route.params_for(route.specs[1]) == (0.5, 4000)

    def test_production_order(self):
        route = default_router_config().resolve("unknown-use-case", environment="production")
        assert [s.provider for s in route.specs] == ["openrouter", "groq", "deepseek", "gemini"]
        assert route.params_for(route.specs[1]) == (0.3, 8000)

    def test_assistant_chat_override(self):
        route = default_router_config().resolve("assistant-chat", environment="development")
        assert route.specs[0].provider == "openrouter"
        assert route.params_for(route.specs[0]) == (0.5, 8000)
