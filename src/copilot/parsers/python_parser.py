"""Python parser using stdlib ast module."""

from __future__ import annotations

import ast

from ..exceptions import CodeParseError
from .models import LineIndex, SyntaxNode

_NODE_TYPES: dict[type, str] = {
    ast.FunctionDef: "FunctionDeclaration",
    ast.AsyncFunctionDef: "FunctionDeclaration",
    ast.ClassDef: "ClassDeclaration",
    ast.If: "IfStatement",
    ast.While: "WhileStatement",
    ast.For: "ForStatement",
    ast.AsyncFor: "ForStatement",
    ast.Match: "SwitchStatement",
    ast.Import: "ImportDeclaration",
    ast.ImportFrom: "ImportDeclaration",
}


class PythonParser:
    """Parse Python source using stdlib ast."""

    extensions = (".py", ".pyi")

    def parse(self, content: str) -> SyntaxNode:
        """Parse Python source into a statement-level SyntaxNode tree."""
        try:
            tree = ast.parse(content)
        except SyntaxError as e:
            raise CodeParseError("python", e.msg or "invalid syntax", e.lineno) from e

        index = LineIndex(content)
        return SyntaxNode(
            type="Module",
            start=0,
            end=len(content),
            line=1,
            children=self._statements(tree, index),
        )

    def get_language(self) -> str:
        return "python"

    def get_extensions(self) -> list[str]:
        return list(self.extensions)

    def _statements(self, node: ast.AST, index: LineIndex) -> list[SyntaxNode]:
        """Collect the nearest statement descendants of a node."""
        found: list[SyntaxNode] = []
        for child in ast.iter_child_nodes(node):
            if isinstance(child, ast.stmt):
                found.append(self._convert(child, index))
            else:
                # match_case, excepthandler, etc. carry statement bodies
                found.extend(self._statements(child, index))
        return found

    def _convert(self, node: ast.stmt, index: LineIndex) -> SyntaxNode:
        start = index.offset(node.lineno - 1, node.col_offset)
        end_line = node.end_lineno or node.lineno
        end_col = node.end_col_offset if node.end_col_offset is not None else node.col_offset
        return SyntaxNode(
            type=_NODE_TYPES.get(type(node), type(node).__name__),
            name=getattr(node, "name", None),
            start=start,
            end=index.offset(end_line - 1, end_col),
            line=node.lineno,
            children=self._statements(node, index),
        )
