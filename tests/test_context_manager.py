"""Tests for context assembly, project detection and user history."""

from unittest.mock import Mock

import pytest
from copilot.context import ContextCache, ContextManager, ProjectSource
from copilot.context.manager import project_root_of
from copilot.models import (
    CodeContext,
    CodeGenerationRequest,
    ProjectConfig,
    ProjectDependency,
    ProjectFile,
    ProjectStructure,
    UserPreferences,
)


class DictProjectSource:
    """In-memory project source keyed by posix path."""

    def __init__(self, files=None, dependencies=None):
        self.files = files or {}
        self.dependencies = dependencies or []
        self.reads = []

    def read_file(self, path):
        self.reads.append(path)
        return self.files.get(path, "")

    def list_files(self, root):
        prefix = root.rstrip("/") + "/"
        return [
            ProjectFile(path=path, content=content, language="", size=len(content))
            for path, content in self.files.items()
            if path.startswith(prefix)
        ]

    def read_dependencies(self, root):
        return list(self.dependencies)

    def read_config(self, root):
        return ProjectConfig()


def _structure(*paths, dependencies=()):
    return ProjectStructure(
        root="app",
        files=[ProjectFile(path=p, content="", language="") for p in paths],
        dependencies=[ProjectDependency(name=name) for name in dependencies],
    )


@pytest.mark.parametrize(
    "path,expected",
    [
        ("src/components/Button.tsx", "src/components"),
        ("Button.tsx", ""),
        ("src\\App.tsx", "src"),
        (None, ""),
        ("", ""),
    ],
)
def test_project_root_of(path, expected):
    assert project_root_of(path) == expected


def test_dict_source_satisfies_protocol():
    assert isinstance(DictProjectSource(), ProjectSource)


class TestUserHistory:
    def setup_method(self):
        self.cache = ContextCache()
        self.manager = ContextManager(cache=self.cache)

    def test_history_is_cached(self):
        """Sequential lookups return the same history object."""
        first = self.manager.get_user_history("u1")
        second = self.manager.get_user_history("u1")
        assert first is second

    def test_history_survives_cache_clear(self):
        """Clearing only the cache falls back to the backing map."""
        self.manager.add_user_prompt("u1", "make a button")
        first = self.manager.get_user_history("u1")

        self.cache.clear()
        third = self.manager.get_user_history("u1")

        assert third == first
        assert third.recent_prompts == ["make a button"]

    def test_recent_prompts_newest_first_and_bounded(self):
        for i in range(12):
            self.manager.add_user_prompt("u1", f"prompt {i}")

        prompts = self.manager.get_user_history("u1").recent_prompts
        assert len(prompts) == 10
        assert prompts[0] == "prompt 11"
        assert prompts[-1] == "prompt 2"

    def test_preferred_patterns_deduplicated_and_bounded(self):
        for pattern in ["hooks", "hooks", "reducers", "context", "hoc", "render-props", "suspense"]:
            self.manager.add_preferred_pattern("u1", pattern)

        patterns = self.manager.get_user_history("u1").preferred_patterns
        assert patterns == ["suspense", "render-props", "hoc", "context", "reducers"]

    def test_common_mistakes_bounded(self):
        for i in range(7):
            self.manager.add_common_mistake("u1", f"mistake {i}")
        self.manager.add_common_mistake("u1", "mistake 6")

        mistakes = self.manager.get_user_history("u1").common_mistakes
        assert len(mistakes) == 5
        assert mistakes[0] == "mistake 6"

    def test_users_are_isolated(self):
        self.manager.add_user_prompt("u1", "one")
        assert self.manager.get_user_history("u2").recent_prompts == []

    def test_preferences_default_and_override(self):
        assert self.manager.get_user_preferences("u1") == UserPreferences()

        custom = UserPreferences(preferred_language="python", code_style="procedural")
        self.manager.set_user_preferences("u1", custom)
        self.cache.clear()

        assert self.manager.get_user_preferences("u1").preferred_language == "python"

    def test_clear_cache_drops_backing_maps(self):
        self.manager.add_user_prompt("u1", "one")
        self.manager.clear_cache()
        assert self.manager.get_user_history("u1").recent_prompts == []


class TestProjectDetection:
    def setup_method(self):
        self.manager = ContextManager()

    def test_primary_language_by_extension_count(self):
        structure = _structure("a.ts", "b.ts", "c.tsx", "d.js", "README.md")
        assert self.manager.detect_primary_language(structure) == "typescript"

    def test_primary_language_defaults_to_javascript(self):
        assert self.manager.detect_primary_language(_structure()) == "javascript"
        assert self.manager.detect_primary_language(_structure("Makefile")) == "javascript"
        assert self.manager.detect_primary_language(_structure("a.md", "b.md")) == "javascript"

    @pytest.mark.parametrize(
        "dependencies,expected",
        [
            (["react", "next"], "react"),
            (["next"], "nextjs"),
            (["vue"], "vue"),
            (["@angular/core"], "angular"),
            (["express"], "express"),
            (["fastapi"], "fastapi"),
            (["django"], "django"),
            (["flask"], "flask"),
            (["lodash"], None),
            ([], None),
        ],
    )
    def test_detect_framework(self, dependencies, expected):
        structure = _structure(dependencies=dependencies)
        assert self.manager.detect_framework(structure) == expected

    def test_empty_root_reads_nothing(self):
        source = Mock(spec=DictProjectSource)
        manager = ContextManager(source=source)

        project = manager.get_project_context("")

        assert project.structure.root == ""
        assert project.language == "javascript"
        source.list_files.assert_not_called()

    def test_project_context_from_source_is_cached(self):
        source = DictProjectSource(
            files={"app/main.py": "import os", "app/util.py": "def helper(): pass"},
            dependencies=[ProjectDependency(name="fastapi", version="0.110")],
        )
        manager = ContextManager(source=source)

        project = manager.get_project_context("app")

        assert project.language == "python"
        assert project.framework == "fastapi"
        assert project.dependencies == ["fastapi"]
        assert manager.get_project_context("app") is project
        assert manager.indexer.search("helper") == ["app/util.py"]


class TestEnrichment:
    def setup_method(self):
        self.source = DictProjectSource(
            files={
                "src/Button.tsx": "export const Button = () => null;",
                "src/ButtonGroup.tsx": "export const ButtonGroup = () => null;",
                "src/Header.tsx": "export const Header = () => null;",
            },
            dependencies=[ProjectDependency(name="react")],
        )
        self.manager = ContextManager(source=self.source)

    def test_enrich_none_gives_empty_context(self):
        context = self.manager.enrich(None)
        assert context.current_file == ""
        assert context.related_files == []
        assert context.project_structure is None

    def test_enrich_fills_file_project_and_preferences(self):
        self.manager.get_project_context("src")
        context = self.manager.enrich(CodeContext(current_file="src/Button.tsx"))

        assert context.surrounding_code == "export const Button = () => null;"
        assert context.related_files == ["src/ButtonGroup.tsx"]
        assert context.project_structure.root == "src"
        assert [d.name for d in context.project_structure.dependencies] == ["react"]
        assert context.user_preferences == UserPreferences()

    def test_enrich_keeps_caller_structure_and_preferences(self):
        structure = ProjectStructure(root="custom")
        preferences = UserPreferences(comment_style="none")
        original = CodeContext(
            current_file="src/Header.tsx",
            project_structure=structure,
            user_preferences=preferences,
        )

        context = self.manager.enrich(original)

        assert context.project_structure.root == "custom"
        assert context.user_preferences.comment_style == "none"
        assert original.surrounding_code is None

    def test_surrounding_code_is_cached(self):
        self.manager.get_surrounding_code("src/Header.tsx")
        self.manager.get_surrounding_code("src/Header.tsx")
        assert self.source.reads == ["src/Header.tsx"]

    def test_build_context(self):
        request = CodeGenerationRequest(
            prompt="add a prop",
            language="typescript",
            context=CodeContext(current_file="src/Button.tsx", user_id="u9"),
        )
        self.manager.add_user_prompt("u9", "earlier")

        window = self.manager.build_context(request)

        assert window.current_file == "src/Button.tsx"
        assert window.surrounding_code.startswith("export const Button")
        assert window.project_context.framework == "react"
        assert window.project_context.language == "typescript"
        assert window.user_history.recent_prompts == ["earlier"]

    def test_build_context_without_context(self):
        window = self.manager.build_context(CodeGenerationRequest(prompt="x", language="go"))

        assert window.current_file == ""
        assert window.surrounding_code == ""
        assert window.related_files == []
        assert window.project_context.structure.root == ""
