"""LiteLLM provider for multi-provider AI support."""

import logging
from typing import Optional
import litellm
from ..exceptions import ProviderError, ProviderTimeoutError
from .provider import AIProvider, ChatCompletion, ChatMessage, ChatRequest, Choice, Usage

logger = logging.getLogger(__name__)


class LiteLLMProvider(AIProvider):
    """AI provider using LiteLLM for OpenAI, Anthropic and Ollama models."""

    def __init__(
        self,
        model_name: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        max_retries: int = 3,
        timeout: int = 60,
    ):
        self.model_name = model_name
        self.api_key = api_key
        self.base_url = base_url
        self.max_retries = max_retries
        self.timeout = timeout

    def generate(self, request: ChatRequest) -> ChatCompletion:
        """Generate a completion using LiteLLM.

        Args:
            request: Chat request; ``request.model`` overrides the configured model

        Returns:
            ChatCompletion mirroring the LiteLLM response

        Raises:
            ProviderTimeoutError: If the request exceeds ``timeout`` seconds
            ProviderError: On any other failure, with a clear error message
        """
        model = request.model or self.model_name
        kwargs = {
            "model": model,
            "messages": [message.model_dump() for message in request.messages],
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "max_retries": self.max_retries,
            "timeout": self.timeout,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.base_url:
            kwargs["api_base"] = self.base_url

        logger.debug("Calling %s with %d messages", model, len(request.messages))

        try:
            response = litellm.completion(**kwargs)
        except litellm.Timeout as e:
            raise ProviderTimeoutError(
                f"{model} did not respond within {self.timeout}s", timeout=self.timeout
            ) from e
        except litellm.AuthenticationError as e:
            provider = self._detect_provider(model)
            raise ProviderError(
                f"{provider} authentication failed. Set COPILOT_API_KEY in your .env file"
            ) from e
        except litellm.RateLimitError as e:
            raise ProviderError(f"Rate limit exceeded for {model}") from e
        except Exception as e:
            raise ProviderError(f"AI generation failed: {str(e)}") from e

        return self._to_completion(response, model)

    def _to_completion(self, response, model: str) -> ChatCompletion:
        try:
            choices = [
                Choice(
                    message=ChatMessage(
                        role="assistant", content=choice.message.content or ""
                    ),
                    finish_reason=choice.finish_reason,
                )
                for choice in response.choices
            ]
        except AttributeError as e:
            raise ProviderError(f"Unexpected response shape from {model}") from e

        if not choices:
            raise ProviderError(f"{model} returned no choices")

        usage = getattr(response, "usage", None)
        return ChatCompletion(
            choices=choices,
            usage=Usage(
                prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(usage, "total_tokens", 0) or 0,
            )
            if usage is not None
            else None,
            model=model,
        )

    def _detect_provider(self, model_name: str) -> str:
        """Detect provider from model name for error messages."""
        if model_name.startswith(("gpt-", "openai/", "o1")):
            return "OpenAI"
        elif model_name.startswith(("claude", "anthropic/")):
            return "Anthropic"
        elif model_name.startswith("ollama"):
            return "Ollama"
        else:
            return "AI Provider"
