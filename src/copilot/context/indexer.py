"""Keyword index over file contents and filename-based relatedness."""

import re
import threading
from typing import Dict, List

MAX_RELATED = 5
SIMILARITY_THRESHOLD = 0.7

_PUNCTUATION = re.compile(r"[^\w\s]")


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance, computed row by row."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    current[j - 1] + 1,
                    previous[j] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """1 minus the edit distance normalised by the longer string's length."""
    longer, shorter = (a, b) if len(a) >= len(b) else (b, a)
    if not longer:
        return 1.0
    return (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)


def _stem(path: str) -> str:
    """Lowercased filename up to its first dot."""
    name = path.replace("\\", "/").rsplit("/", 1)[-1].lower()
    return name.split(".", 1)[0]


class CodeIndexer:
    """Inverted keyword index plus stored contents for indexed files."""

    def __init__(self):
        self._contents: Dict[str, str] = {}
        self._index: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    def index_file(self, path: str, content: str) -> None:
        keywords = self.extract_keywords(content)
        with self._lock:
            self._contents[path] = content
            for keyword in keywords:
                paths = self._index.setdefault(keyword, [])
                if path not in paths:
                    paths.append(path)

    def extract_keywords(self, content: str) -> List[str]:
        words = _PUNCTUATION.sub(" ", content.lower()).split()
        return list(dict.fromkeys(word for word in words if len(word) > 3))

    def find_related(self, path: str) -> List[str]:
        """Up to five indexed paths whose filename resembles ``path``'s.

        Results keep indexing order; there is no ranking.
        """
        stem = _stem(path)
        related = []
        for candidate in list(self._contents):
            if candidate == path:
                continue
            if self._is_similar(stem, _stem(candidate)):
                related.append(candidate)
                if len(related) == MAX_RELATED:
                    break
        return related

    def search(self, keyword: str) -> List[str]:
        return list(self._index.get(keyword.lower(), []))

    def get_content(self, path: str) -> str | None:
        return self._contents.get(path)

    def indexed_files(self) -> List[str]:
        return list(self._contents)

    def clear_index(self) -> None:
        with self._lock:
            self._contents.clear()
            self._index.clear()

    def _is_similar(self, a: str, b: str) -> bool:
        if a == b:
            return True
        # An empty stem (dotfiles) would be a substring of everything.
        if not a or not b:
            return False
        return a in b or b in a or similarity(a, b) > SIMILARITY_THRESHOLD
