"""Abstract AI provider interface in the chat-completions shape."""

from abc import ABC, abstractmethod
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str = ""


class ChatRequest(BaseModel):
    """Request handed to a provider."""

    messages: List[ChatMessage]
    max_tokens: int = 2000
    temperature: float = 0.7
    model: Optional[str] = None


class Choice(BaseModel):
    message: ChatMessage
    finish_reason: Optional[str] = None


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletion(BaseModel):
    """Provider response. Only ``choices[0]`` and ``usage`` are consumed."""

    choices: List[Choice] = Field(default_factory=list)
    usage: Optional[Usage] = None
    model: Optional[str] = None

    @property
    def content(self) -> str:
        return self.choices[0].message.content if self.choices else ""

    @property
    def finish_reason(self) -> Optional[str]:
        return self.choices[0].finish_reason if self.choices else None

    @property
    def total_tokens(self) -> int:
        return self.usage.total_tokens if self.usage else 0


class AIProvider(ABC):
    """Abstract base class for AI providers."""

    @abstractmethod
    def generate(self, request: ChatRequest) -> ChatCompletion:
        """Run a chat completion.

        Args:
            request: Messages plus sampling parameters

        Returns:
            ChatCompletion with at least one choice

        Raises:
            ProviderError: If the call fails or the answer is unusable
            ProviderTimeoutError: If the call runs past its deadline
        """
        pass
