"""AI provider abstraction layer."""

from .provider import AIProvider, ChatCompletion, ChatMessage, ChatRequest, Choice, Usage
from .litellm_provider import LiteLLMProvider
from .factory import SUPPORTED_PROVIDERS, create_ai_provider

__all__ = [
    "AIProvider",
    "ChatCompletion",
    "ChatMessage",
    "ChatRequest",
    "Choice",
    "Usage",
    "LiteLLMProvider",
    "SUPPORTED_PROVIDERS",
    "create_ai_provider",
]
