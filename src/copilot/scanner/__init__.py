"""Filesystem project scanning."""

from .metadata import MetadataExtractor
from .source import LocalProjectSource, language_for_path
from .structure import StructureScanner

__all__ = ["LocalProjectSource", "MetadataExtractor", "StructureScanner", "language_for_path"]
