"""Language parsers producing normalised syntax trees."""

from .base import CodeParser
from .models import SyntaxNode, LineIndex, BRANCH_TYPES, PATTERN_TYPES
from .python_parser import PythonParser
from .ts_parser import JavaScriptParser, TypeScriptParser
from .line_parsers import JavaParser, GoParser


def default_parsers() -> dict[str, CodeParser]:
    """Built-in parser table keyed by language name."""
    parsers: list[CodeParser] = [
        JavaScriptParser(),
        TypeScriptParser(),
        PythonParser(),
        JavaParser(),
        GoParser(),
    ]
    return {parser.get_language(): parser for parser in parsers}


__all__ = [
    "CodeParser",
    "SyntaxNode",
    "LineIndex",
    "BRANCH_TYPES",
    "PATTERN_TYPES",
    "PythonParser",
    "JavaScriptParser",
    "TypeScriptParser",
    "JavaParser",
    "GoParser",
    "default_parsers",
]
