"""JavaScript/TypeScript parsers using tree-sitter."""

from __future__ import annotations

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Parser

from .models import LineIndex, SyntaxNode

JS_LANGUAGE = Language(tsjs.language())
TS_LANGUAGE = Language(tsts.language_typescript())
TSX_LANGUAGE = Language(tsts.language_tsx())

# tree-sitter node type -> normalised type. Unlisted nodes are transparent:
# their mapped descendants are hoisted into the nearest mapped ancestor.
_NODE_TYPES: dict[str, str] = {
    "program": "Program",
    "if_statement": "IfStatement",
    "while_statement": "WhileStatement",
    "do_statement": "DoWhileStatement",
    "for_statement": "ForStatement",
    "for_in_statement": "ForStatement",
    "switch_statement": "SwitchStatement",
    "function_declaration": "FunctionDeclaration",
    "generator_function_declaration": "FunctionDeclaration",
    "class_declaration": "ClassDeclaration",
    "abstract_class_declaration": "ClassDeclaration",
    "class": "ClassExpression",
    "method_definition": "MethodDefinition",
    "function_expression": "FunctionExpression",
    "arrow_function": "ArrowFunctionExpression",
    "interface_declaration": "InterfaceDeclaration",
    "type_alias_declaration": "TypeAliasDeclaration",
    "import_statement": "ImportDeclaration",
    "export_statement": "ExportDeclaration",
    "lexical_declaration": "VariableDeclaration",
    "variable_declaration": "VariableDeclaration",
}


class TreeSitterParser:
    """Shared tree-sitter parsing and normalisation."""

    language_name = ""
    extensions: tuple[str, ...] = ()
    grammar: Language = JS_LANGUAGE

    def parse(self, content: str) -> SyntaxNode:
        tree = self._parse(content)
        index = LineIndex(content)
        root = self._convert(tree.root_node, index)
        root.start, root.end, root.line = 0, len(content), 1
        return root

    def has_errors(self, content: str) -> bool:
        """True when tree-sitter had to recover from a syntax error."""
        return self._parse(content).root_node.has_error

    def get_language(self) -> str:
        return self.language_name

    def get_extensions(self) -> list[str]:
        return list(self.extensions)

    def _parse(self, content: str):
        parser = Parser(self.grammar)
        return parser.parse(content.encode())

    def _convert(self, node, index: LineIndex) -> SyntaxNode:
        converted = SyntaxNode(
            type=_NODE_TYPES[node.type] if node.type in _NODE_TYPES else "Program",
            name=self._get_node_name(node),
            start=index.offset(*node.start_point),
            end=index.offset(*node.end_point),
            line=node.start_point[0] + 1,
        )
        converted.children = self._collect(node, index)
        return converted

    def _collect(self, node, index: LineIndex) -> list[SyntaxNode]:
        found: list[SyntaxNode] = []
        for child in node.named_children:
            if child.type in _NODE_TYPES:
                found.append(self._convert(child, index))
            else:
                found.extend(self._collect(child, index))
        return found

    def _get_node_name(self, node) -> str | None:
        name_node = node.child_by_field_name("name")
        if name_node is not None and name_node.text is not None:
            return name_node.text.decode()
        return None


class JavaScriptParser(TreeSitterParser):
    """Parse JavaScript source using tree-sitter."""

    language_name = "javascript"
    extensions = (".js", ".jsx", ".mjs", ".cjs")
    grammar = JS_LANGUAGE


class TypeScriptParser(TreeSitterParser):
    """Parse TypeScript source using tree-sitter.

    Uses the TSX grammar when ``jsx=True`` so components parse cleanly.
    """

    language_name = "typescript"
    extensions = (".ts", ".tsx")

    def __init__(self, jsx: bool = False):
        self.grammar = TSX_LANGUAGE if jsx else TS_LANGUAGE
