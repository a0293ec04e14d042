"""Parser contract implemented by every language parser."""

from __future__ import annotations

from typing import Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import SyntaxNode


@runtime_checkable
class CodeParser(Protocol):
    """Turns source text into a SyntaxNode tree.

    The tree shape is opaque to callers except for the node ``type``
    vocabulary in ``copilot.parsers.models`` that the analyzer walks.
    """

    def parse(self, content: str) -> SyntaxNode:
        """Parse source text.

        Raises:
            CodeParseError: If the parser is grammar-backed and rejects the input.
        """
        ...

    def get_language(self) -> str:
        ...

    def get_extensions(self) -> list[str]:
        ...
