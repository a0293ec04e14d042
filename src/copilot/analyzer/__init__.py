"""Static code analysis."""

from .code_analyzer import CodeAnalyzer

__all__ = ["CodeAnalyzer"]
