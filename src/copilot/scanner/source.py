"""Filesystem-backed project source."""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..config import ContextConfig
from ..context.manager import EXTENSION_LANGUAGES
from ..models import ProjectConfig, ProjectDependency, ProjectFile
from .metadata import MetadataExtractor
from .structure import StructureScanner

logger = logging.getLogger(__name__)


def language_for_path(path: str) -> str:
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return "text"
    return EXTENSION_LANGUAGES.get(name.rsplit(".", 1)[-1].lower(), "text")


class LocalProjectSource:
    """Reads project files, manifests and configs from local disk.

    Unreadable, oversized or binary files read as empty strings.
    """

    def __init__(self, config: Optional[ContextConfig] = None):
        self.config = config if config is not None else ContextConfig()
        self.scanner = StructureScanner(self.config)
        self.extractor = MetadataExtractor()

    def read_file(self, path: str) -> str:
        file_path = Path(path)
        try:
            if not file_path.is_file() or file_path.stat().st_size > self.config.max_file_size:
                return ""
            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable file %s: %s", path, e)
            return ""

    def list_files(self, root: str) -> List[ProjectFile]:
        root_path = Path(root)
        files: List[ProjectFile] = []

        for rel_path in self.scanner.collect_files(root_path):
            file_path = root_path / rel_path
            content = self.read_file(str(file_path))
            try:
                modified = datetime.fromtimestamp(file_path.stat().st_mtime)
            except OSError:
                modified = datetime.now()
            files.append(
                ProjectFile(
                    path=file_path.as_posix(),
                    content=content,
                    language=language_for_path(rel_path),
                    size=len(content),
                    last_modified=modified,
                )
            )

        logger.debug("Listed %d files under %s", len(files), root)
        return files

    def read_dependencies(self, root: str) -> List[ProjectDependency]:
        return self.extractor.extract_dependencies(Path(root))

    def read_config(self, root: str) -> ProjectConfig:
        return self.extractor.extract_config(Path(root))
