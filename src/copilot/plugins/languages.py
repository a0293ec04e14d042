"""Built-in language plugins."""

import re
from typing import Optional

from ..generator import CodeGenerator
from ..llm.prompts import SPECIALTY, SYSTEM_PROMPT
from ..models import AIRequest, CodeGenerationRequest, GeneratedCode
from ..parsers import GoParser, JavaParser, JavaScriptParser, PythonParser, TypeScriptParser
from .base import LanguagePlugin, LineFormatter, LineLinter, regex_rule

_DEF_OR_CLASS = re.compile(r"^\s*(?:async\s+)?(?:def|class)\s")

_JS_RULES = [
    regex_rule(r"\bvar\s", "Use of var detected", "Consider using const or let instead"),
    regex_rule(r"[^=!<>]==[^=]", "Loose equality comparison", "Use === for strict equality"),
]

_PY_RULES = [
    regex_rule(r"^\t+", "Tab indentation", "Indent with 4 spaces", severity=1),
    regex_rule(r"^\s*except\s*:", "Bare except clause", "Catch a specific exception type"),
]


class LanguageCodeGenerator:
    """Language-bound adapter from a plugin request onto the shared CodeGenerator."""

    def __init__(self, code_generator: CodeGenerator, display_name: str):
        self.code_generator = code_generator
        self.display_name = display_name

    def system_prompt(self, framework: Optional[str] = None) -> str:
        specialty = SPECIALTY.format(framework=framework) if framework else ""
        return SYSTEM_PROMPT.format(language=self.display_name, specialty=specialty)

    def generate(self, request: CodeGenerationRequest) -> GeneratedCode:
        return self.code_generator.generate(
            AIRequest(
                prompt=request.prompt,
                system=self.system_prompt(request.framework),
                options=request.options,
            )
        )


class JavaScriptPlugin(LanguagePlugin):
    name = "JavaScript"
    language = "javascript"
    version = "ES2020+"
    extensions = (".js", ".jsx", ".mjs", ".cjs")

    def __init__(self, code_generator: Optional[CodeGenerator] = None):
        super().__init__(
            parser=JavaScriptParser(),
            generator=LanguageCodeGenerator(code_generator, self.name) if code_generator else None,
            linter=LineLinter(_JS_RULES),
            formatter=LineFormatter(),
        )

    def _validate(self, code: str) -> bool:
        return not self.parser.has_errors(code)


class TypeScriptPlugin(LanguagePlugin):
    name = "TypeScript"
    language = "typescript"
    version = "TypeScript 5.x"
    extensions = (".ts", ".tsx")

    def __init__(self, code_generator: Optional[CodeGenerator] = None):
        super().__init__(
            parser=TypeScriptParser(),
            generator=LanguageCodeGenerator(code_generator, self.name) if code_generator else None,
            linter=LineLinter(_JS_RULES),
            formatter=LineFormatter(),
        )
        self._tsx_parser = TypeScriptParser(jsx=True)

    def _validate(self, code: str) -> bool:
        # Plain TS rejects JSX and TSX rejects angle-bracket casts; accept either.
        return not self.parser.has_errors(code) or not self._tsx_parser.has_errors(code)


class PythonPlugin(LanguagePlugin):
    name = "Python"
    language = "python"
    version = "Python 3.8+"
    extensions = (".py", ".pyi")

    def __init__(self, code_generator: Optional[CodeGenerator] = None):
        super().__init__(
            parser=PythonParser(),
            generator=LanguageCodeGenerator(code_generator, self.name) if code_generator else None,
            linter=LineLinter(_PY_RULES),
            formatter=LineFormatter(expand_tabs=True),
        )

    def _validate(self, code: str) -> bool:
        """Indentation after the first def/class must be a multiple of 4 spaces."""
        in_block = False
        for line in code.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if _DEF_OR_CLASS.match(line):
                in_block = True
            if in_block:
                indent = len(line) - len(line.lstrip(" "))
                if indent % 4 != 0:
                    return False
        return True


class JavaPlugin(LanguagePlugin):
    name = "Java"
    language = "java"
    version = "Java 11+"
    extensions = (".java",)

    def __init__(self, code_generator: Optional[CodeGenerator] = None):
        super().__init__(
            parser=JavaParser(),
            generator=LanguageCodeGenerator(code_generator, self.name) if code_generator else None,
            linter=LineLinter(),
            formatter=LineFormatter(),
        )

    def _validate(self, code: str) -> bool:
        return "public class" in code or "class " in code


class GoPlugin(LanguagePlugin):
    name = "Go"
    language = "go"
    version = "Go 1.18+"
    extensions = (".go",)

    def __init__(self, code_generator: Optional[CodeGenerator] = None):
        super().__init__(
            parser=GoParser(),
            generator=LanguageCodeGenerator(code_generator, self.name) if code_generator else None,
            linter=LineLinter(),
            formatter=LineFormatter(),
        )

    def _validate(self, code: str) -> bool:
        return "package main" in code or "func " in code


BUILTIN_PLUGINS = [JavaScriptPlugin, TypeScriptPlugin, PythonPlugin, JavaPlugin, GoPlugin]
