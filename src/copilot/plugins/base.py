"""Language plugin contract and shared line-based lint/format helpers."""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple, runtime_checkable

from pydantic import BaseModel, Field

from ..models import CodeGenerationRequest, CodeIssue, GeneratedCode, IssueLocation
from ..parsers import CodeParser

logger = logging.getLogger(__name__)

FEATURES = ("parsing", "generation", "linting", "formatting")

MAX_LINE_LENGTH = 100


@runtime_checkable
class LanguageGenerator(Protocol):
    def generate(self, request: CodeGenerationRequest) -> GeneratedCode: ...


@runtime_checkable
class CodeLinter(Protocol):
    def lint(self, code: str) -> List[CodeIssue]: ...


@runtime_checkable
class CodeFormatter(Protocol):
    def format(self, code: str) -> str: ...


@dataclass(frozen=True)
class PluginCapabilities:
    """Which optional collaborators a plugin carries."""

    parsing: bool = False
    generation: bool = False
    linting: bool = False
    formatting: bool = False

    def supports(self, feature: str) -> bool:
        return feature in FEATURES and getattr(self, feature)

    def features(self) -> List[str]:
        return [feature for feature in FEATURES if getattr(self, feature)]

    def to_dict(self) -> dict:
        return {feature: getattr(self, feature) for feature in FEATURES}


class LanguageInfo(BaseModel):
    """Public description of a registered language."""

    name: str
    version: str
    features: List[str] = Field(default_factory=list)
    extensions: List[str] = Field(default_factory=list)


# A line rule inspects (line, 1-based line number) and returns an issue or None.
LineRule = Callable[[str, int], Optional[CodeIssue]]


def long_line_rule(line: str, number: int) -> Optional[CodeIssue]:
    if len(line.rstrip()) > MAX_LINE_LENGTH:
        return CodeIssue(
            type="warning",
            message=f"Line exceeds {MAX_LINE_LENGTH} characters",
            severity=1,
            location=IssueLocation(line=number, column=MAX_LINE_LENGTH),
            suggestion="Consider breaking this line into multiple lines",
        )
    return None


def trailing_whitespace_rule(line: str, number: int) -> Optional[CodeIssue]:
    stripped = line.rstrip()
    if stripped != line:
        return CodeIssue(
            type="info",
            message="Trailing whitespace",
            severity=1,
            location=IssueLocation(line=number, column=len(stripped)),
            suggestion="Remove trailing whitespace",
        )
    return None


def regex_rule(
    pattern: str, message: str, suggestion: str, severity: int = 2, kind: str = "warning"
) -> LineRule:
    """Build a rule that reports the first match of ``pattern`` on a line."""
    compiled = re.compile(pattern)

    def rule(line: str, number: int) -> Optional[CodeIssue]:
        match = compiled.search(line)
        if match is None:
            return None
        return CodeIssue(
            type=kind,
            message=message,
            severity=severity,
            location=IssueLocation(line=number, column=match.start()),
            suggestion=suggestion,
        )

    return rule


SHARED_RULES: List[LineRule] = [long_line_rule, trailing_whitespace_rule]


class LineLinter:
    """Runs shared plus language-specific line rules over a source string."""

    def __init__(self, rules: Optional[List[LineRule]] = None):
        self.rules = SHARED_RULES + list(rules or [])

    def lint(self, code: str) -> List[CodeIssue]:
        issues: List[CodeIssue] = []
        for number, line in enumerate(code.splitlines(), start=1):
            for rule in self.rules:
                issue = rule(line, number)
                if issue is not None:
                    issues.append(issue)
        return issues


class LineFormatter:
    """Whitespace normaliser: trailing spaces, optional tab expansion, final newline."""

    def __init__(self, expand_tabs: bool = False, tab_size: int = 4):
        self.expand_tabs = expand_tabs
        self.tab_size = tab_size

    def format(self, code: str) -> str:
        if not code.strip():
            return ""
        lines = [line.rstrip() for line in code.splitlines()]
        if self.expand_tabs:
            lines = [line.expandtabs(self.tab_size) for line in lines]
        return "\n".join(lines).rstrip("\n") + "\n"


class LanguagePlugin(ABC):
    """Bundle of parser, generator, linter and formatter for one language.

    Only the parser is mandatory. Subclasses set ``name``, ``language``,
    ``version`` and ``extensions`` and implement :meth:`_validate`.
    """

    name: str = ""
    language: str = ""
    version: str = ""
    extensions: Tuple[str, ...] = ()

    def __init__(
        self,
        parser: CodeParser,
        generator: Optional[LanguageGenerator] = None,
        linter: Optional[CodeLinter] = None,
        formatter: Optional[CodeFormatter] = None,
    ):
        self.parser = parser
        self.generator = generator
        self.linter = linter
        self.formatter = formatter
        self._initialized = False

    def initialize(self) -> None:
        """Prepare the plugin. Repeated calls are no-ops."""
        if self._initialized:
            return
        logger.debug("Initializing %s plugin (%s)", self.name, self.version)
        self._initialized = True

    @property
    def capabilities(self) -> PluginCapabilities:
        return PluginCapabilities(
            parsing=self.parser is not None,
            generation=self.generator is not None,
            linting=self.linter is not None,
            formatting=self.formatter is not None,
        )

    def supports(self, feature: str) -> bool:
        return self.capabilities.supports(feature)

    def get_capabilities(self) -> List[str]:
        return self.capabilities.features()

    def validate_code(self, code: str) -> bool:
        """Cheap sanity check of a source string.

        Empty, whitespace-only and non-string input is rejected before the
        language-specific check runs.
        """
        if not isinstance(code, str) or not code.strip():
            return False
        return self._validate(code)

    @abstractmethod
    def _validate(self, code: str) -> bool:
        """Language-specific validity heuristic."""

    def get_language_info(self) -> LanguageInfo:
        return LanguageInfo(
            name=self.language,
            version=self.version,
            features=self.get_capabilities(),
            extensions=list(self.extensions),
        )
