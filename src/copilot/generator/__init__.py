"""AI-backed code generation."""

from .code_generator import RETRY_SUGGESTIONS, CodeGenerator

__all__ = ["CodeGenerator", "RETRY_SUGGESTIONS"]
