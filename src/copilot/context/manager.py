"""Context assembly: surrounding code, related files, project and user state."""

import logging
import posixpath
import threading
from typing import Dict, List, Optional

from ..models import (
    CodeContext,
    CodeGenerationRequest,
    ContextWindow,
    ProjectContext,
    ProjectStructure,
    UserHistory,
    UserPreferences,
)
from .cache import ContextCache
from .indexer import CodeIndexer
from .sources import NullProjectSource, ProjectSource

logger = logging.getLogger(__name__)

DEFAULT_USER_ID = "default-user"
DEFAULT_LANGUAGE = "javascript"

MAX_RECENT_PROMPTS = 10
MAX_PREFERRED_PATTERNS = 5
MAX_COMMON_MISTAKES = 5

EXTENSION_LANGUAGES = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "java": "java",
    "go": "go",
    "rs": "rust",
    "cpp": "cpp",
    "c": "c",
}

# Checked in order; the first dependency present names the framework.
FRAMEWORK_DEPENDENCIES = [
    ("react", "react"),
    ("next", "nextjs"),
    ("vue", "vue"),
    ("angular", "angular"),
    ("@angular/core", "angular"),
    ("express", "express"),
    ("fastapi", "fastapi"),
    ("django", "django"),
    ("flask", "flask"),
]


def project_root_of(file_path: Optional[str]) -> str:
    """Directory containing ``file_path``, or "" when there is none."""
    if not file_path:
        return ""
    return posixpath.dirname(file_path.replace("\\", "/"))


class ContextManager:
    """Builds and caches the context around generation requests.

    Project, history and preference lookups are cache-aside over a
    :class:`ContextCache`. Histories and preferences also live in backing
    maps, so cache expiry never loses them.
    """

    def __init__(
        self,
        source: Optional[ProjectSource] = None,
        cache: Optional[ContextCache] = None,
        indexer: Optional[CodeIndexer] = None,
    ):
        """Initialize context manager.

        Args:
            source: Where file contents and manifests are read from
            cache: Shared cache. Defaults to a 1000-entry, 5-minute cache.
            indexer: Keyword index fed with every file read
        """
        self.source = source if source is not None else NullProjectSource()
        self.cache = cache if cache is not None else ContextCache()
        self.indexer = indexer if indexer is not None else CodeIndexer()
        self._user_histories: Dict[str, UserHistory] = {}
        self._user_preferences: Dict[str, UserPreferences] = {}
        self._lock = threading.RLock()

    # --- assembly ---------------------------------------------------------

    def build_context(self, request: CodeGenerationRequest) -> ContextWindow:
        context = request.context or CodeContext()
        current_file = context.current_file or ""

        return ContextWindow(
            current_file=current_file,
            surrounding_code=self.get_surrounding_code(current_file),
            related_files=self.find_related_files(current_file),
            project_context=self.get_project_context(project_root_of(current_file)),
            user_history=self.get_user_history(context.user_id or DEFAULT_USER_ID),
        )

    def enrich(self, context: Optional[CodeContext] = None) -> CodeContext:
        """Fill in what a partial context leaves out.

        Caller-supplied project structure and preferences are kept. With no
        context at all an empty one is returned.
        """
        if context is None:
            return CodeContext(current_file="", related_files=[])

        enriched = context.model_copy()

        if context.current_file:
            enriched.surrounding_code = self.get_surrounding_code(context.current_file)
            enriched.related_files = self.find_related_files(context.current_file)
            if context.project_structure is None:
                root = project_root_of(context.current_file)
                enriched.project_structure = self.get_project_context(root).structure

        if context.user_preferences is None:
            enriched.user_preferences = self.get_user_preferences(
                context.user_id or DEFAULT_USER_ID
            )

        return enriched

    def get_surrounding_code(self, file_path: Optional[str]) -> str:
        if not file_path:
            return ""

        key = f"file:{file_path}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        content = self.source.read_file(file_path)
        if content:
            self.indexer.index_file(file_path, content)
        self.cache.set(key, content)
        return content

    def find_related_files(self, file_path: Optional[str]) -> List[str]:
        if not file_path:
            return []
        return self.indexer.find_related(file_path)

    # --- project ----------------------------------------------------------

    def get_project_context(self, project_path: str) -> ProjectContext:
        key = f"project:{project_path}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        structure = self._get_project_structure(project_path)
        project_context = ProjectContext(
            language=self.detect_primary_language(structure),
            framework=self.detect_framework(structure),
            dependencies=[dep.name for dep in structure.dependencies],
            structure=structure,
        )
        self.cache.set(key, project_context)
        logger.debug(
            "Built project context for %s: %s/%s",
            project_path or "<none>",
            project_context.language,
            project_context.framework,
        )
        return project_context

    def _get_project_structure(self, root: str) -> ProjectStructure:
        if not root:
            return ProjectStructure(root="")

        files = self.source.list_files(root)
        for file in files:
            if file.content:
                self.indexer.index_file(file.path, file.content)

        return ProjectStructure(
            root=root,
            files=files,
            dependencies=self.source.read_dependencies(root),
            config=self.source.read_config(root),
        )

    def detect_primary_language(self, structure: ProjectStructure) -> str:
        counts: Dict[str, int] = {}
        for file in structure.files:
            name = file.path.replace("\\", "/").rsplit("/", 1)[-1]
            if "." in name:
                extension = name.rsplit(".", 1)[-1].lower()
                counts[extension] = counts.get(extension, 0) + 1

        if not counts:
            return DEFAULT_LANGUAGE
        most_common = max(counts, key=counts.get)
        return EXTENSION_LANGUAGES.get(most_common, DEFAULT_LANGUAGE)

    def detect_framework(self, structure: ProjectStructure) -> Optional[str]:
        names = {dep.name.lower() for dep in structure.dependencies}
        for dependency, framework in FRAMEWORK_DEPENDENCIES:
            if dependency in names:
                return framework
        return None

    # --- user state -------------------------------------------------------

    def get_user_history(self, user_id: str) -> UserHistory:
        key = f"user:{user_id}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        with self._lock:
            history = self._user_histories.setdefault(user_id, UserHistory())
        self.cache.set(key, history)
        return history

    def get_user_preferences(self, user_id: str) -> UserPreferences:
        key = f"preferences:{user_id}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        with self._lock:
            preferences = self._user_preferences.setdefault(user_id, UserPreferences())
        self.cache.set(key, preferences)
        return preferences

    def set_user_preferences(self, user_id: str, preferences: UserPreferences) -> None:
        with self._lock:
            self._user_preferences[user_id] = preferences
        self.cache.set(f"preferences:{user_id}", preferences)

    def add_user_prompt(self, user_id: str, prompt: str) -> None:
        with self._lock:
            history = self.get_user_history(user_id)
            history.recent_prompts.insert(0, prompt)
            del history.recent_prompts[MAX_RECENT_PROMPTS:]
        self.cache.set(f"user:{user_id}", history)

    def add_preferred_pattern(self, user_id: str, pattern: str) -> None:
        with self._lock:
            history = self.get_user_history(user_id)
            self._push_unique(history.preferred_patterns, pattern, MAX_PREFERRED_PATTERNS)
        self.cache.set(f"user:{user_id}", history)

    def add_common_mistake(self, user_id: str, mistake: str) -> None:
        with self._lock:
            history = self.get_user_history(user_id)
            self._push_unique(history.common_mistakes, mistake, MAX_COMMON_MISTAKES)
        self.cache.set(f"user:{user_id}", history)

    @staticmethod
    def _push_unique(items: List[str], item: str, limit: int) -> None:
        if item in items:
            return
        items.insert(0, item)
        del items[limit:]

    def clear_cache(self) -> None:
        """Drop cached entries and the backing history/preference maps."""
        self.cache.clear()
        with self._lock:
            self._user_histories.clear()
            self._user_preferences.clear()
