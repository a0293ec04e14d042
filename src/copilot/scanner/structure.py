"""Project file discovery."""

import os
from pathlib import Path
from typing import List, Set
from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern
from ..config import ContextConfig


class StructureScanner:
    """Walks a project and lists the files worth reading."""

    def __init__(self, config: ContextConfig):
        """Initialize scanner with configuration.

        Args:
            config: Context configuration with ignored_dirs, max_file_size, max_files
        """
        self.config = config
        self.ignored_dirs: Set[str] = set(config.ignored_dirs)

    def collect_files(self, root: Path) -> List[str]:
        """Collect relative paths of readable project files.

        Args:
            root: Project root

        Returns:
            Sorted relative POSIX paths, at most ``max_files`` of them
        """
        if not root.is_dir():
            return []

        gitignore_spec = self._load_gitignore(root)
        files: List[str] = []

        for current, dirs, filenames in os.walk(root):
            current_path = Path(current)

            # Prune directories before descending further
            dirs[:] = sorted(
                d for d in dirs if not self._should_ignore(current_path / d, root, gitignore_spec)
            )

            for filename in sorted(filenames):
                file_path = current_path / filename
                if self._should_ignore(file_path, root, gitignore_spec):
                    continue
                files.append(file_path.relative_to(root).as_posix())

        return sorted(files)[: self.config.max_files]

    def _should_ignore(self, path: Path, root: Path, gitignore_spec: PathSpec | None) -> bool:
        rel_path = path.relative_to(root)
        if any(part in self.ignored_dirs for part in rel_path.parts):
            return True

        if gitignore_spec:
            candidate = rel_path.as_posix() + ("/" if path.is_dir() else "")
            if gitignore_spec.match_file(candidate):
                return True

        if path.is_file():
            try:
                return path.stat().st_size > self.config.max_file_size
            except OSError:
                return True

        return False

    def _load_gitignore(self, root: Path) -> PathSpec | None:
        """Load .gitignore patterns if present."""
        gitignore_path = root / ".gitignore"
        if not gitignore_path.exists():
            return None

        try:
            patterns = gitignore_path.read_text().splitlines()
        except OSError:
            return None

        if not patterns:
            return None

        return PathSpec.from_lines(GitWildMatchPattern, patterns)
