"""Static code analysis: dependencies, exports, complexity, patterns, issues."""

import logging
import re
from typing import Iterable, Optional

from ..exceptions import ParserNotFoundError
from ..models import (
    AnalysisResult,
    AnalysisStructure,
    CodeFile,
    CodeIssue,
    IssueLocation,
    Location,
    Pattern,
    ProjectAnalysis,
    ProjectMetrics,
)
from ..parsers import BRANCH_TYPES, PATTERN_TYPES, CodeParser, SyntaxNode, default_parsers

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 100
PATTERN_CONFIDENCE = 0.9

_JS_LIKE = {"javascript", "typescript"}

_JS_IMPORT_FROM = re.compile(r"""^import\s.*?\bfrom\s+['"]([^'"]+)['"]""")
_JS_IMPORT_BARE = re.compile(r"""^import\s+['"]([^'"]+)['"]""")
_JS_REQUIRE = re.compile(r"""\brequire\(\s*['"]([^'"]+)['"]\s*\)""")
_JS_EXPORT = re.compile(
    r"^export\s+(?:default\s+)?(?:async\s+)?"
    r"(?:function\*?|class|const|let|var|interface|type|enum)\s+(\w+)"
)
_JS_VAR = re.compile(r"\bvar\s")
_PY_FROM = re.compile(r"^from\s+([\w.]+)\s+import\b")
_JAVA_IMPORT = re.compile(r"^import\s+(?:static\s+)?([\w.*]+)\s*;")
_GO_IMPORT = re.compile(r'^import\s+(?:[\w.]+\s+)?["`]([^"`]+)["`]')
_GO_BLOCK_ENTRY = re.compile(r'^(?:[\w.]+\s+)?["`]([^"`]+)["`]')


class CodeAnalyzer:
    """Runs a language parser over files and derives structural facts.

    The analyzer owns its parser table (built-in parsers by default). A file
    whose language has no parser is a hard error, never an empty result.
    """

    def __init__(self, parsers: Optional[dict[str, CodeParser]] = None):
        """Initialize analyzer.

        Args:
            parsers: Language name -> parser. Defaults to the built-in set.
        """
        self.parsers = parsers if parsers is not None else default_parsers()

    def analyze_file(self, file: CodeFile) -> AnalysisResult:
        """Analyze a single file.

        Args:
            file: File to analyze

        Returns:
            AnalysisResult for the file

        Raises:
            ParserNotFoundError: If the language has no parser
            CodeParseError: If a grammar-backed parser rejects the content
        """
        parser = self.parsers.get(file.language)
        if parser is None:
            raise ParserNotFoundError(file.language)

        try:
            ast = parser.parse(file.content)
        except Exception as e:
            logger.error("Failed to analyze file %s: %s", file.path, e)
            raise

        dependencies = self.extract_dependencies(file.content, file.language)
        return AnalysisResult(
            path=file.path,
            language=file.language,
            line_count=len(file.content.splitlines()),
            ast=ast,
            dependencies=dependencies,
            exports=self.extract_exports(file.content, file.language),
            imports=list(dependencies),
            complexity=self.calculate_complexity(ast),
            patterns=self.identify_patterns(ast),
            issues=self.identify_issues(file.content, file.language),
        )

    def analyze_project(self, files: Iterable[CodeFile], fail_fast: bool = True) -> ProjectAnalysis:
        """Analyze a batch of files and aggregate the results.

        Args:
            files: Files to analyze; each is analyzed independently
            fail_fast: Abort the whole batch on the first failing file. When
                False, failures are recorded per path and the rest aggregated.

        Returns:
            ProjectAnalysis over the successfully analyzed files
        """
        analyses: list[AnalysisResult] = []
        failures: dict[str, str] = {}

        for file in files:
            try:
                analyses.append(self.analyze_file(file))
            except Exception as e:
                if fail_fast:
                    logger.error("Failed to analyze project: %s", e)
                    raise
                failures[file.path] = str(e)

        if failures:
            logger.warning("Project analysis skipped %d file(s)", len(failures))

        return ProjectAnalysis(
            files=analyses,
            structure=self._build_structure(analyses),
            patterns=self._aggregate_patterns(analyses),
            dependencies=list(dict.fromkeys(d for a in analyses for d in a.dependencies)),
            metrics=self._calculate_metrics(analyses),
            failures=failures,
        )

    def get_supported_languages(self) -> list[str]:
        return list(self.parsers)

    def get_supported_extensions(self) -> list[str]:
        return [ext for parser in self.parsers.values() for ext in parser.get_extensions()]

    def is_language_supported(self, language: str) -> bool:
        return language in self.parsers

    # --- per-file extraction ----------------------------------------------

    def extract_dependencies(self, content: str, language: str) -> list[str]:
        """Line-scan import statements for a language."""
        deps: list[str] = []
        in_go_block = False

        for line in content.splitlines():
            stripped = line.strip()

            if language in _JS_LIKE:
                match = _JS_IMPORT_FROM.match(stripped) or _JS_IMPORT_BARE.match(stripped)
                if match:
                    deps.append(match.group(1))
                deps.extend(_JS_REQUIRE.findall(stripped))

            elif language == "python":
                if stripped.startswith("import "):
                    for part in stripped[len("import "):].split(","):
                        name = part.split(" as ")[0].strip()
                        if name:
                            deps.append(name)
                else:
                    match = _PY_FROM.match(stripped)
                    if match:
                        deps.append(match.group(1))

            elif language == "java":
                match = _JAVA_IMPORT.match(stripped)
                if match:
                    deps.append(match.group(1))

            elif language == "go":
                if in_go_block:
                    if stripped.startswith(")"):
                        in_go_block = False
                        continue
                    match = _GO_BLOCK_ENTRY.match(stripped)
                    if match:
                        deps.append(match.group(1))
                elif stripped.startswith("import ("):
                    in_go_block = True
                else:
                    match = _GO_IMPORT.match(stripped)
                    if match:
                        deps.append(match.group(1))

        return list(dict.fromkeys(deps))

    def extract_exports(self, content: str, language: str) -> list[str]:
        """Exported names. Only JavaScript/TypeScript have export syntax."""
        if language not in _JS_LIKE:
            return []

        exports: list[str] = []
        for line in content.splitlines():
            match = _JS_EXPORT.match(line.strip())
            if match:
                exports.append(match.group(1))
        return exports

    def calculate_complexity(self, ast: Optional[SyntaxNode]) -> int:
        """1 plus one per if/while/for/switch node anywhere in the tree."""
        if ast is None:
            return 1
        return 1 + sum(1 for node in ast.walk() if node.type in BRANCH_TYPES)

    def identify_patterns(self, ast: Optional[SyntaxNode]) -> list[Pattern]:
        if ast is None:
            return []
        return [
            Pattern(
                type=PATTERN_TYPES[node.type],
                name=node.name or "anonymous",
                confidence=PATTERN_CONFIDENCE,
                location=Location(start=node.start, end=node.end),
            )
            for node in ast.walk()
            if node.type in PATTERN_TYPES
        ]

    def identify_issues(self, content: str, language: str) -> list[CodeIssue]:
        issues: list[CodeIssue] = []

        for number, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()

            if len(stripped) > MAX_LINE_LENGTH:
                issues.append(
                    CodeIssue(
                        type="warning",
                        message="Line too long",
                        severity=1,
                        location=IssueLocation(line=number, column=0),
                        suggestion="Consider breaking this line into multiple lines",
                    )
                )

            if language in _JS_LIKE:
                match = _JS_VAR.search(line)
                if match:
                    issues.append(
                        CodeIssue(
                            type="warning",
                            message="Use of var detected",
                            severity=2,
                            location=IssueLocation(line=number, column=match.start()),
                            suggestion="Consider using const or let instead",
                        )
                    )

        return issues

    # --- project aggregation ----------------------------------------------

    def _build_structure(self, analyses: list[AnalysisResult]) -> AnalysisStructure:
        return AnalysisStructure(
            total_files=len(analyses),
            total_lines=sum(a.line_count for a in analyses),
            languages=sorted({a.language for a in analyses if a.language}),
        )

    def _aggregate_patterns(self, analyses: list[AnalysisResult]) -> list[Pattern]:
        """Project-wide patterns; confidence is occurrences per file, capped at 1."""
        counts: dict[tuple[str, str], int] = {}
        for analysis in analyses:
            for pattern in analysis.patterns:
                key = (pattern.type, pattern.name)
                counts[key] = counts.get(key, 0) + 1

        return [
            Pattern(type=kind, name=name, confidence=min(count / len(analyses), 1.0))
            for (kind, name), count in counts.items()
        ]

    def _calculate_metrics(self, analyses: list[AnalysisResult]) -> ProjectMetrics:
        total = sum(a.complexity for a in analyses)
        return ProjectMetrics(
            total_complexity=total,
            average_complexity=total / len(analyses) if analyses else 0.0,
            file_count=len(analyses),
            total_issues=sum(len(a.issues) for a in analyses),
        )
