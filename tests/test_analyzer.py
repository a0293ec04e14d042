"""Tests for the code analyzer."""

import pytest
from copilot.analyzer import CodeAnalyzer
from copilot.exceptions import CodeParseError, ParserNotFoundError
from copilot.models import CodeFile


def _file(content, language="javascript", path="x.js"):
    return CodeFile(path=path, content=content, language=language, size=len(content))


@pytest.fixture
def analyzer():
    return CodeAnalyzer()


def test_branch_complexity(analyzer):
    """Base 1 plus one for the if and one for the while."""
    result = analyzer.analyze_file(_file("if (a) { } while(b) { }"))
    assert result.complexity == 3


def test_complexity_without_branches(analyzer):
    assert analyzer.analyze_file(_file("const a = 1;")).complexity == 1


BRANCH_CASES = {
    "javascript": (
        "x.js",
        "function f(a) {{\n{body}  return a;\n}}\n",
        ["  if (a) {}\n", "  while (a) {}\n", "  for (;;) {}\n", "  switch (a) {}\n"],
    ),
    "python": (
        "x.py",
        "def f(a):\n{body}    return a\n",
        [
            "    if a:\n        pass\n",
            "    while a:\n        pass\n",
            "    for x in a:\n        pass\n",
            "    match a:\n        case _:\n            pass\n",
        ],
    ),
    "java": (
        "A.java",
        "class A {{\n  int f(int a) {{\n{body}    return a;\n  }}\n}}\n",
        ["    if (a > 0) {}\n", "    while (a > 0) {}\n", "    for (;;) {}\n", "    switch (a) {}\n"],
    ),
    "go": (
        "x.go",
        "package main\n\nfunc f(a int) int {{\n{body}\treturn a\n}}\n",
        ["\tif a > 0 {\n\t}\n", "\tfor a > 0 {\n\t}\n", "\tswitch a {\n\t}\n"],
    ),
}


@pytest.mark.parametrize("language", sorted(BRANCH_CASES))
def test_each_branch_adds_exactly_one(analyzer, language):
    path, template, constructs = BRANCH_CASES[language]

    body = ""
    assert analyzer.analyze_file(_file(template.format(body=body), language, path)).complexity == 1
    for added, construct in enumerate(constructs, start=1):
        body += construct
        content = template.format(body=body)
        assert analyzer.analyze_file(_file(content, language, path)).complexity == 1 + added


@pytest.mark.parametrize(
    "language,construct",
    [
        (language, construct)
        for language, (_, _, constructs) in BRANCH_CASES.items()
        for construct in constructs
    ],
)
def test_single_branch_complexity(analyzer, language, construct):
    path, template, _ = BRANCH_CASES[language]
    content = template.format(body=construct)
    assert analyzer.analyze_file(_file(content, language, path)).complexity == 2


def test_analyze_file_result(analyzer):
    content = (
        "import React from 'react';\n"
        "import './styles.css';\n"
        "const lodash = require('lodash');\n"
        "export function App() {}\n"
        "export class Store {}\n"
        "var legacy = 1;\n"
    )

    result = analyzer.analyze_file(_file(content, path="src/App.js"))

    assert result.path == "src/App.js"
    assert result.language == "javascript"
    assert result.line_count == 6
    assert result.dependencies == ["react", "./styles.css", "lodash"]
    assert result.imports == result.dependencies
    assert result.exports == ["App", "Store"]
    assert [(p.type, p.name) for p in result.patterns] == [("function", "App"), ("class", "Store")]
    assert all(p.confidence == 0.9 for p in result.patterns)
    assert result.patterns[0].location.start == content.index("function App")
    assert [i.message for i in result.issues] == ["Use of var detected"]
    assert result.issues[0].location.line == 6
    assert result.issues[0].location.column == 0
    assert result.issues[0].severity == 2
    assert result.ast.type == "Program"


def test_unknown_language_raises(analyzer):
    with pytest.raises(ParserNotFoundError):
        analyzer.analyze_file(_file("print 1", language="cobol"))


def test_python_syntax_error_propagates(analyzer):
    with pytest.raises(CodeParseError):
        analyzer.analyze_file(_file("def (:", language="python", path="bad.py"))


class TestDependencies:
    @pytest.fixture(autouse=True)
    def _analyzer(self, analyzer):
        self.analyzer = analyzer

    def test_python(self):
        content = "import os, sys as system\nfrom collections.abc import Mapping\nimport numpy as np\n"
        assert self.analyzer.extract_dependencies(content, "python") == [
            "os",
            "sys",
            "collections.abc",
            "numpy",
        ]

    def test_java(self):
        content = "import java.util.List;\nimport static org.junit.Assert.*;\nimport java.util.List;\n"
        assert self.analyzer.extract_dependencies(content, "java") == [
            "java.util.List",
            "org.junit.Assert.*",
        ]

    def test_go(self):
        content = 'import "fmt"\nimport (\n\t"strings"\n\tlog "github.com/sirupsen/logrus"\n)\n'
        assert self.analyzer.extract_dependencies(content, "go") == [
            "fmt",
            "strings",
            "github.com/sirupsen/logrus",
        ]

    def test_typescript_type_import(self):
        content = "import type { User } from './types';\nimport { a,\n  b } from 'multi';\n"
        assert self.analyzer.extract_dependencies(content, "typescript") == ["./types"]

    def test_exports_only_for_js_like(self):
        assert self.analyzer.extract_exports("export const a = 1;", "python") == []
        assert self.analyzer.extract_exports(
            "export interface User {}\nexport type Id = string;\nexport async function load() {}",
            "typescript",
        ) == ["User", "Id", "load"]


class TestIssues:
    def test_long_line(self, analyzer):
        content = "x = 1\n" + "y = '" + "a" * 120 + "'\n"
        issues = analyzer.identify_issues(content, "python")
        assert len(issues) == 1
        assert issues[0].message == "Line too long"
        assert issues[0].location.line == 2
        assert issues[0].severity == 1

    def test_long_line_measured_after_strip(self, analyzer):
        content = " " * 50 + "a" * 60
        assert analyzer.identify_issues(content, "python") == []

    def test_var_column(self, analyzer):
        issues = analyzer.identify_issues("  for (var i = 0;;) {}", "javascript")
        assert issues[0].location.column == 7

    def test_var_ignored_outside_js(self, analyzer):
        assert analyzer.identify_issues("var x = 1", "go") == []


class TestProjectAnalysis:
    def test_aggregation(self, analyzer):
        files = [
            _file("import a from 'a';\nfunction util() { if (x) {} }", path="a.js"),
            _file("import a from 'a';\nimport b from 'b';\nfunction util() {}", path="b.js"),
            _file("import os\n\nclass Job:\n    pass\n", language="python", path="job.py"),
        ]

        project = analyzer.analyze_project(files)

        assert project.structure.total_files == 3
        assert project.structure.total_lines == 2 + 3 + 4
        assert project.structure.languages == ["javascript", "python"]
        assert project.dependencies == ["a", "b", "os"]
        patterns = {(p.type, p.name): p.confidence for p in project.patterns}
        assert patterns[("function", "util")] == pytest.approx(2 / 3)
        assert patterns[("class", "Job")] == pytest.approx(1 / 3)
        assert project.metrics.total_complexity == 2 + 1 + 1
        assert project.metrics.average_complexity == pytest.approx(4 / 3)
        assert project.metrics.file_count == 3
        assert project.failures == {}

    def test_empty_batch(self, analyzer):
        project = analyzer.analyze_project([])
        assert project.files == []
        assert project.metrics.average_complexity == 0.0
        assert project.patterns == []

    def test_fail_fast_aborts_batch(self, analyzer):
        files = [_file("const a = 1;"), _file("x", language="cobol", path="x.cob")]
        with pytest.raises(ParserNotFoundError):
            analyzer.analyze_project(files)

    def test_tolerant_mode_records_failures(self, analyzer):
        files = [
            _file("const a = 1;"),
            _file("x", language="cobol", path="x.cob"),
            _file("def (:", language="python", path="bad.py"),
        ]

        project = analyzer.analyze_project(files, fail_fast=False)

        assert [f.path for f in project.files] == ["x.js"]
        assert set(project.failures) == {"x.cob", "bad.py"}
        assert "cobol" in project.failures["x.cob"]


def test_supported_languages(analyzer):
    assert analyzer.is_language_supported("go")
    assert not analyzer.is_language_supported("rust")
    assert ".py" in analyzer.get_supported_extensions()
    assert set(analyzer.get_supported_languages()) == {
        "javascript",
        "typescript",
        "python",
        "java",
        "go",
    }
