"""Line-heuristic parsers for Java and Go.

These do not understand the grammar. They recognise declarations and
control-flow keywords line by line, after dropping string literals and
``//`` comments, and emit the same node vocabulary as the grammar-backed
parsers so the analyzer treats every language alike. Block comments and
multi-line strings are not handled.
"""

from __future__ import annotations

import re

from .models import LineIndex, SyntaxNode

_STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'|`[^`]*`')

_BRANCH_TYPES = {
    "if": "IfStatement",
    "while": "WhileStatement",
    "for": "ForStatement",
    "switch": "SwitchStatement",
}


def _strip_line(line: str) -> str:
    line = _STRING_RE.sub('""', line)
    comment = line.find("//")
    return line[:comment] if comment != -1 else line


class LineParser:
    """Base class: subclasses supply declaration and branch regexes."""

    language_name = ""
    extensions: tuple[str, ...] = ()
    root_type = "File"
    declarations: tuple[tuple[re.Pattern, str], ...] = ()
    branch_re: re.Pattern = re.compile(r"$^")

    def parse(self, content: str) -> SyntaxNode:
        index = LineIndex(content)
        children: list[SyntaxNode] = []

        for row, raw in enumerate(index.lines):
            line = _strip_line(raw)
            if not line.strip():
                continue
            line_start = index.line_start(row)
            line_end = line_start + len(raw)

            for regex, node_type in self.declarations:
                match = regex.match(line)
                if match:
                    children.append(
                        SyntaxNode(
                            type=node_type,
                            name=match.group("name"),
                            start=line_start + match.start("name"),
                            end=line_end,
                            line=row + 1,
                        )
                    )
                    break

            for match in self.branch_re.finditer(line):
                children.append(
                    SyntaxNode(
                        type=_BRANCH_TYPES[match.group(1)],
                        start=line_start + match.start(1),
                        end=line_end,
                        line=row + 1,
                    )
                )

        return SyntaxNode(type=self.root_type, start=0, end=len(content), children=children)

    def get_language(self) -> str:
        return self.language_name

    def get_extensions(self) -> list[str]:
        return list(self.extensions)


_JAVA_MODIFIERS = r"(?:(?:public|private|protected|abstract|final|static|sealed|strictfp)\s+)*"
_JAVA_KEYWORDS = r"(?:if|else|while|for|switch|catch|return|new|throw|case)\b"


class JavaParser(LineParser):
    """Heuristic Java parser."""

    language_name = "java"
    extensions = (".java",)
    root_type = "CompilationUnit"
    declarations = (
        (re.compile(rf"^\s*{_JAVA_MODIFIERS}(?:class|record)\s+(?P<name>\w+)"), "ClassDeclaration"),
        (re.compile(rf"^\s*{_JAVA_MODIFIERS}interface\s+(?P<name>\w+)"), "InterfaceDeclaration"),
        (re.compile(rf"^\s*{_JAVA_MODIFIERS}enum\s+(?P<name>\w+)"), "EnumDeclaration"),
        (
            re.compile(
                rf"^\s*(?!\s)(?!{_JAVA_KEYWORDS}){_JAVA_MODIFIERS}(?:<[^>]+>\s+)?[\w<>\[\],.? ]+\s+"
                rf"(?!{_JAVA_KEYWORDS})(?P<name>\w+)\s*\([^;]*$"
            ),
            "MethodDeclaration",
        ),
    )
    branch_re = re.compile(r"\b(if|while|for|switch)\s*\(")


class GoParser(LineParser):
    """Heuristic Go parser."""

    language_name = "go"
    extensions = (".go",)
    root_type = "File"
    declarations = (
        (re.compile(r"^func\s+(?:\([^)]*\)\s*)?(?P<name>\w+)"), "FunctionDeclaration"),
        (re.compile(r"^type\s+(?P<name>\w+)\s+struct\b"), "StructDeclaration"),
        (re.compile(r"^type\s+(?P<name>\w+)\s+interface\b"), "InterfaceDeclaration"),
        (re.compile(r"^type\s+(?P<name>\w+)"), "TypeDeclaration"),
    )
    # Go has no while; a condition-only for covers it.
    branch_re = re.compile(r"\b(if|for|switch)\b")
