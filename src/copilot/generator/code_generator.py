"""AI-backed code generation with response parsing."""

import logging
import re
import time
from typing import List, Optional

from ..config import CopilotConfig
from ..exceptions import ProviderTimeoutError
from ..llm.provider import AIProvider, ChatCompletion, ChatMessage, ChatRequest
from ..models import AIRequest, GeneratedCode, GenerationMetadata

logger = logging.getLogger(__name__)

_CODE_BLOCK = re.compile(r"```(?:\w+)?\n([\s\S]*?)\n```")
_SUGGESTIONS = re.compile(r"(?:Suggestions?|Recommendations?):\s*(.*?)(?:\n\n|$)", re.IGNORECASE | re.DOTALL)
_TESTS = re.compile(r"(?:Tests?|Test Code):\s*```(?:\w+)?\n([\s\S]*?)\n```", re.IGNORECASE)

RETRY_SUGGESTIONS = [
    "Please try again with a more specific prompt",
    "Check your internet connection",
]


class CodeGenerator:
    """Turns an AIRequest into GeneratedCode through an AIProvider.

    Provider failures never escape :meth:`generate`; they come back as a
    zero-confidence result with ``failure_reason`` set.
    """

    def __init__(self, provider: AIProvider, config: CopilotConfig):
        """Initialize generator.

        Args:
            provider: AI provider used for completions
            config: Model name and sampling parameters
        """
        self.provider = provider
        self.config = config

    def generate(self, request: AIRequest) -> GeneratedCode:
        """Generate code for a prompt pair.

        Args:
            request: System and user prompt

        Returns:
            GeneratedCode, or the soft-failure result if the provider failed
        """
        started = time.perf_counter()
        try:
            response = self.provider.generate(
                ChatRequest(
                    messages=[
                        ChatMessage(role="system", content=request.system),
                        ChatMessage(role="user", content=request.prompt),
                    ],
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                )
            )
            return self.parse_response(response, self._elapsed_ms(started))
        except Exception as e:
            logger.exception("AI generation failed")
            return self._handle_generation_error(e, self._elapsed_ms(started))

    def parse_response(self, response: ChatCompletion, processing_time: float = 0.0) -> GeneratedCode:
        content = response.content or ""
        return GeneratedCode(
            code=self.extract_code(content),
            explanation=self.extract_explanation(content),
            confidence=self.calculate_confidence(response),
            suggestions=self.extract_suggestions(content),
            tests=self.extract_tests(content),
            metadata=GenerationMetadata(
                model=self.config.model,
                tokens_used=response.total_tokens,
                processing_time=processing_time,
            ),
        )

    def extract_code(self, content: str) -> str:
        """First fenced block, else the whole content."""
        match = _CODE_BLOCK.search(content)
        if match:
            return match.group(1).strip()
        return content.strip()

    def extract_explanation(self, content: str) -> str:
        explanation = _CODE_BLOCK.sub("", content).strip()
        return explanation or "Generated code based on your request."

    def calculate_confidence(self, response: ChatCompletion) -> float:
        confidence = 0.5
        if response.finish_reason == "stop":
            confidence += 0.3
        tokens_used = response.total_tokens
        if 0 < tokens_used < self.config.max_tokens * 0.8:
            confidence += 0.2
        return min(confidence, 1.0)

    def extract_suggestions(self, content: str) -> List[str]:
        match = _SUGGESTIONS.search(content)
        if not match:
            return []
        return [s.strip() for s in match.group(1).split(",") if s.strip()]

    def extract_tests(self, content: str) -> Optional[str]:
        match = _TESTS.search(content)
        return match.group(1).strip() if match else None

    def _handle_generation_error(self, error: Exception, processing_time: float) -> GeneratedCode:
        return GeneratedCode(
            code="",
            explanation=f"Failed to generate code: {error}",
            confidence=0.0,
            suggestions=list(RETRY_SUGGESTIONS),
            metadata=GenerationMetadata(
                model=self.config.model, tokens_used=0, processing_time=processing_time
            ),
            failure_reason="timeout" if isinstance(error, ProviderTimeoutError) else "provider",
        )

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000
