"""
Configuration loading for provider settings.
"""

import os
import logging
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from ..models.message import ProviderConfig
from .errors import GatewayNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class ProviderSettings:
    """Stored settings for one provider."""
    model: str
    api_key: str = ""
    max_tokens: int = 1024
    streaming: bool = True
    available_models: List[str] = field(default_factory=list)
    base_url: Optional[str] = None
    system_prompt: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def to_provider_config(self, model: Optional[str] = None) -> ProviderConfig:
        """Build the per-call config, optionally overriding the model."""
        return ProviderConfig(
            api_key=self.api_key,
            model=model or self.model,
            max_tokens=self.max_tokens,
            base_url=self.base_url,
            system_prompt=self.system_prompt,
        )


@dataclass
class AppConfig:
    """Complete provider configuration."""
    active_provider: str = "anthropic"
    providers: Dict[str, ProviderSettings] = field(default_factory=dict)

    def get_provider_config(self, provider_id: str) -> Optional[ProviderConfig]:
        """
        Resolve the per-call config for a provider.

        Returns:
            ProviderConfig, or None when the provider is unknown or has no key
        """
        settings = self.providers.get(provider_id)
        if settings is None or not settings.is_configured:
            return None
        return settings.to_provider_config()

    def is_streaming_enabled(self, provider_id: str) -> bool:
        settings = self.providers.get(provider_id)
        return bool(settings and settings.streaming)

    def active_settings(self) -> ProviderSettings:
        return self.providers[self.active_provider]

    def set_active_provider(self, provider_id: str) -> None:
        if provider_id not in self.providers:
            raise GatewayNotFoundError("Provider not found", gateway=provider_id)
        self.active_provider = provider_id

    def update_provider_settings(self, provider_id: str, settings: ProviderSettings) -> None:
        """Replace a provider's settings, keeping its model catalogue if omitted."""
        current = self.providers.get(provider_id)
        if not settings.available_models and current is not None:
            settings = replace(settings, available_models=list(current.available_models))
        self.providers[provider_id] = settings


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load provider configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Loaded configuration, completed with defaults
    """
    if config_path is None:
        # Try common locations
        paths = [
            Path("config/chat-gateway/providers.yaml"),
            Path.home() / ".config/chat-gateway/providers.yaml",
        ]
        for p in paths:
            if p.exists():
                config_path = str(p)
                break

    if config_path is None or not Path(config_path).exists():
        logger.warning("No provider config file found, using defaults")
        return default_config()

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        return merge_defaults(_parse_config(data))

    except (OSError, yaml.YAMLError, TypeError, ValueError, AttributeError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}")
        return default_config()


def _expand_env(value: str) -> str:
    if value and value.startswith("${") and value.endswith("}"):
        return os.environ.get(value[2:-1], "")
    return value


def _parse_config(data: Dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary."""
    providers = {}

    for provider_id, p_data in (data.get("providers") or {}).items():
        p_data = p_data or {}
        providers[provider_id] = ProviderSettings(
            model=p_data.get("model", ""),
            api_key=_expand_env(str(p_data.get("api_key") or "")),
            max_tokens=int(p_data.get("max_tokens", 1024)),
            streaming=bool(p_data.get("streaming", True)),
            available_models=list(p_data.get("available_models") or []),
            base_url=p_data.get("base_url"),
            system_prompt=p_data.get("system_prompt"),
        )

    return AppConfig(
        active_provider=data.get("active_provider", "anthropic"),
        providers=providers,
    )


def merge_defaults(config: AppConfig) -> AppConfig:
    """Fill missing providers and empty model catalogues from the defaults."""
    defaults = default_config()

    for provider_id, settings in config.providers.items():
        default_settings = defaults.providers.get(provider_id)
        if default_settings is None:
            continue
        if not settings.available_models:
            logger.info(f"Populating available_models for provider {provider_id}")
            settings.available_models = list(default_settings.available_models)
        if not settings.model:
            settings.model = default_settings.model

    for provider_id, settings in defaults.providers.items():
        if provider_id not in config.providers:
            logger.info(f"Adding missing provider {provider_id}")
            config.providers[provider_id] = settings

    return config


def default_config() -> AppConfig:
    """Return default configuration."""
    return AppConfig(
        active_provider="anthropic",
        providers={
            "anthropic": ProviderSettings(
                api_key=os.environ.get("ANTHROPIC_API_KEY", ""),
                model="claude-3-sonnet-20240229",
                available_models=[
                    "claude-3-opus-20240229",
                    "claude-3-sonnet-20240229",
                    "claude-3-haiku-20240307",
                    "claude-2.1",
                ],
            ),
            "openai": ProviderSettings(
                api_key=os.environ.get("OPENAI_API_KEY", ""),
                model="gpt-4-turbo-preview",
                available_models=[
                    "gpt-4-turbo-preview",
                    "gpt-4-0125-preview",
                    "gpt-4",
                    "gpt-3.5-turbo",
                ],
            ),
            "openrouter": ProviderSettings(
                api_key=os.environ.get("OPENROUTER_API_KEY", ""),
                model="anthropic/claude-3-opus",
                available_models=[
                    "anthropic/claude-3-opus",
                    "anthropic/claude-3-sonnet",
                    "openai/gpt-4-turbo-preview",
                    "google/gemini-pro",
                    "meta/llama-3-70b",
                ],
            ),
        },
    )
