"""Context assembly for generation requests."""

from .cache import ContextCache
from .indexer import CodeIndexer, levenshtein_distance, similarity
from .manager import DEFAULT_USER_ID, ContextManager, project_root_of
from .sources import NullProjectSource, ProjectSource

__all__ = [
    "ContextCache",
    "CodeIndexer",
    "levenshtein_distance",
    "similarity",
    "DEFAULT_USER_ID",
    "ContextManager",
    "project_root_of",
    "NullProjectSource",
    "ProjectSource",
]
