"""
Tests for provider configuration loading and updates.
"""
import pytest

from chat_gateway.core.config import (
    AppConfig,
    ProviderSettings,
    default_config,
    load_config,
    merge_defaults,
)
from chat_gateway.core.errors import GatewayNotFoundError

from stubs import TEST_KEY

KEY_VARS = ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "OPENROUTER_API_KEY")


@pytest.fixture
def no_env_keys(monkeypatch):
    for name in KEY_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaultConfig:
    """Test built-in defaults."""

    def test_default_providers(self, no_env_keys):
        """Three vendors with model catalogues, none configured."""
        config = default_config()

        assert config.active_provider == "anthropic"
        assert set(config.providers) == {"anthropic", "openai", "openrouter"}
        assert config.providers["anthropic"].model == "claude-3-sonnet-20240229"
        assert "gpt-4" in config.providers["openai"].available_models
        assert all(s.available_models for s in config.providers.values())
        assert all(s.streaming for s in config.providers.values())
        assert config.get_provider_config("anthropic") is None

    def test_keys_from_environment(self, no_env_keys, monkeypatch):
        """Environment keys make a provider usable."""
        monkeypatch.setenv("OPENAI_API_KEY", TEST_KEY)

        provider_config = default_config().get_provider_config("openai")

        assert provider_config is not None
        assert provider_config.api_key.get_secret_value() == TEST_KEY
        assert provider_config.model == "gpt-4-turbo-preview"


class TestAppConfig:
    """Test settings lookups and updates."""

    def test_get_provider_config(self, app_config):
        """Stored settings become a per-call config."""
        provider_config = app_config.get_provider_config("anthropic")

        assert provider_config.model == "claude-3-haiku-20240307"
        assert provider_config.max_tokens == 1024

    def test_unknown_or_unconfigured_provider(self, app_config):
        """Missing provider or empty key resolves to None."""
        assert app_config.get_provider_config("mistral") is None
        assert app_config.get_provider_config("openrouter") is None

    def test_model_override(self, app_config):
        """A selection's model replaces the stored default."""
        settings = app_config.providers["openai"]
        assert settings.to_provider_config("gpt-3.5-turbo").model == "gpt-3.5-turbo"

    def test_streaming_flag(self, app_config):
        """Streaming policy is read per provider."""
        app_config.providers["openai"].streaming = False

        assert app_config.is_streaming_enabled("anthropic") is True
        assert app_config.is_streaming_enabled("openai") is False
        assert app_config.is_streaming_enabled("mistral") is False

    def test_set_active_provider(self, app_config):
        """Only known providers can be activated."""
        app_config.set_active_provider("openai")
        assert app_config.active_settings().model == "gpt-4"

        with pytest.raises(GatewayNotFoundError):
            app_config.set_active_provider("mistral")
        assert app_config.active_provider == "openai"

    def test_update_keeps_model_catalogue(self, no_env_keys):
        """Updating settings without models keeps the existing list."""
        config = default_config()
        models = list(config.providers["anthropic"].available_models)

        config.update_provider_settings(
            "anthropic",
            ProviderSettings(model="claude-3-opus-20240229", api_key=TEST_KEY, max_tokens=4096),
        )

        settings = config.providers["anthropic"]
        assert settings.available_models == models
        assert settings.max_tokens == 4096
        assert config.get_provider_config("anthropic") is not None


class TestLoadConfig:
    """Test YAML loading."""

    def test_load_with_env_expansion(self, tmp_path, monkeypatch, no_env_keys):
        """${VAR} values are read from the environment."""
        monkeypatch.setenv("MY_ANTHROPIC_KEY", TEST_KEY)
        path = tmp_path / "providers.yaml"
        path.write_text(
            "active_provider: anthropic\n"
            "providers:\n"
            "  anthropic:\n"
            "    api_key: ${MY_ANTHROPIC_KEY}\n"
            "    model: claude-3-haiku-20240307\n"
            "    max_tokens: 512\n"
            "    system_prompt: Be brief\n"
            "  openai:\n"
            "    api_key: literal-key\n"
            "    model: gpt-4\n"
            "    streaming: false\n"
        )

        config = load_config(str(path))

        anthropic = config.get_provider_config("anthropic")
        assert anthropic.api_key.get_secret_value() == TEST_KEY
        assert anthropic.max_tokens == 512
        assert anthropic.system_prompt == "Be brief"
        assert config.providers["openai"].api_key == "literal-key"
        assert config.is_streaming_enabled("openai") is False

    def test_missing_providers_and_models_filled(self, tmp_path, no_env_keys):
        """Defaults fill empty catalogues and absent providers."""
        path = tmp_path / "providers.yaml"
        path.write_text(
            "providers:\n"
            "  anthropic:\n"
            "    api_key: key\n"
        )

        config = load_config(str(path))

        assert set(config.providers) == {"anthropic", "openai", "openrouter"}
        assert config.providers["anthropic"].model == "claude-3-sonnet-20240229"
        assert config.providers["anthropic"].available_models == (
            default_config().providers["anthropic"].available_models
        )

    def test_missing_file_gives_defaults(self, tmp_path):
        """A nonexistent path falls back to defaults."""
        config = load_config(str(tmp_path / "absent.yaml"))
        assert set(config.providers) == {"anthropic", "openai", "openrouter"}

    def test_invalid_yaml_gives_defaults(self, tmp_path):
        """An unreadable file falls back to defaults."""
        path = tmp_path / "providers.yaml"
        path.write_text("providers: [unclosed\n")

        config = load_config(str(path))
        assert config.active_provider == "anthropic"
        assert set(config.providers) == {"anthropic", "openai", "openrouter"}

    def test_merge_keeps_custom_provider(self):
        """Providers without defaults are left as they are."""
        config = AppConfig(providers={"local": ProviderSettings(model="llama3", api_key="k")})

        merged = merge_defaults(config)

        assert merged.providers["local"].available_models == []
        assert "anthropic" in merged.providers
