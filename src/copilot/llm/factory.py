"""Build an AIProvider from the AI section of the system configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import ConfigError
from .litellm_provider import LiteLLMProvider
from .provider import AIProvider

if TYPE_CHECKING:
    from ..config import AIModelConfig

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "anthropic", "local")

_LITELLM_PREFIXES = {
    "openai": "openai/",
    "anthropic": "anthropic/",
    "local": "ollama/",
}


def _format_model_name_for_litellm(provider: str, model_name: str) -> str:
    """Format model name for LiteLLM, which expects "provider/model"."""
    if "/" in model_name:
        return model_name
    return f"{_LITELLM_PREFIXES[provider]}{model_name}"


def create_ai_provider(config: AIModelConfig) -> AIProvider:
    """Create the provider named by ``config.provider``.

    Args:
        config: AI model configuration

    Returns:
        Configured AIProvider

    Raises:
        ConfigError: If the provider is not supported
    """
    if config.provider not in SUPPORTED_PROVIDERS:
        raise ConfigError(f"Unsupported AI provider: {config.provider}")

    model_name = _format_model_name_for_litellm(config.provider, config.model)
    logger.debug("Creating %s provider for model %s", config.provider, model_name)

    return LiteLLMProvider(
        model_name=model_name,
        api_key=config.api_key or None,
        base_url=config.base_url or None,
        max_retries=config.max_retries,
        timeout=config.timeout,
    )
