"""Syntax tree model shared by every parser."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterator

# Node types the analyzer counts as branches.
BRANCH_TYPES = frozenset({"IfStatement", "WhileStatement", "ForStatement", "SwitchStatement"})

# Node types that become patterns.
PATTERN_TYPES = {
    "FunctionDeclaration": "function",
    "ClassDeclaration": "class",
}


@dataclass
class SyntaxNode:
    """A node in a normalised, language-independent syntax tree.

    ``start``/``end`` are character offsets into the parsed source and
    ``line`` is 1-based.
    """

    type: str
    name: str | None = None
    start: int = 0
    end: int = 0
    line: int = 1
    children: list[SyntaxNode] = field(default_factory=list)

    def walk(self) -> Iterator[SyntaxNode]:
        """Yield this node and every descendant, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> dict:
        result = {
            "type": self.type,
            "start": self.start,
            "end": self.end,
            "line": self.line,
            "children": [c.to_dict() for c in self.children],
        }
        if self.name:
            result["name"] = self.name
        return result


class LineIndex:
    """Converts (row, byte column) positions into character offsets."""

    def __init__(self, source: str):
        self.source = source
        self.lines = source.split("\n")
        self._starts: list[int] = []
        offset = 0
        for line in self.lines:
            self._starts.append(offset)
            offset += len(line) + 1
        self._ascii = source.isascii()

    def offset(self, row: int, byte_column: int) -> int:
        """Character offset of a 0-based row and UTF-8 byte column."""
        if row >= len(self.lines):
            return len(self.source)
        line = self.lines[row]
        if self._ascii:
            column = byte_column
        else:
            column = len(line.encode("utf-8")[:byte_column].decode("utf-8", errors="ignore"))
        return self._starts[row] + min(column, len(line))

    def line_of(self, offset: int) -> int:
        """1-based line containing a character offset."""
        return bisect_right(self._starts, offset)

    def line_start(self, row: int) -> int:
        return self._starts[row] if row < len(self._starts) else len(self.source)
