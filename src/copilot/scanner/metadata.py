"""Dependency manifest and config file extraction."""

import json
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional
from ..models import ProjectConfig, ProjectDependency

TAILWIND_CONFIGS = [
    "tailwind.config.js",
    "tailwind.config.ts",
    "tailwind.config.cjs",
    "tailwind.config.mjs",
]

_REQUIREMENT = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)(?:\[[^\]]*\])?\s*(.*)$")


def _split_requirement(spec: str) -> ProjectDependency | None:
    """Parse "package>=1.0" into name and version constraint."""
    match = _REQUIREMENT.match(spec.split(";", 1)[0])
    if not match:
        return None
    return ProjectDependency(name=match.group(1), version=match.group(2).strip() or "*")


def _table(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _requirements(value: Any) -> List[str]:
    """Requirement strings from a manifest list; anything else yields nothing."""
    if not isinstance(value, list):
        return []
    return [spec for spec in value if isinstance(spec, str)]


class MetadataExtractor:
    """Reads package.json, pyproject.toml and frontend config files."""

    def extract_dependencies(self, root: Path) -> List[ProjectDependency]:
        """Collect declared dependencies.

        Args:
            root: Project root

        Returns:
            Runtime dependencies as "prod", dev/optional ones as "dev"
        """
        deps: List[ProjectDependency] = []

        package_json = self._read_json(root / "package.json")
        if package_json:
            for section, dep_type in (("dependencies", "prod"), ("devDependencies", "dev")):
                for name, version in _table(package_json, section).items():
                    deps.append(ProjectDependency(name=name, version=str(version), type=dep_type))

        pyproject = self._read_toml(root / "pyproject.toml")
        if pyproject:
            project = _table(pyproject, "project")
            for spec in _requirements(project.get("dependencies")):
                dep = _split_requirement(spec)
                if dep:
                    deps.append(dep)
            for group in _table(project, "optional-dependencies").values():
                for spec in _requirements(group):
                    dep = _split_requirement(spec)
                    if dep:
                        deps.append(dep.model_copy(update={"type": "dev"}))

        return deps

    def extract_config(self, root: Path) -> ProjectConfig:
        """Collect project configuration files.

        Args:
            root: Project root

        Returns:
            ProjectConfig with whatever files were present and parseable
        """
        other_configs: Dict[str, Any] = {}
        pyproject = self._read_toml(root / "pyproject.toml")
        if pyproject:
            other_configs["pyproject.toml"] = pyproject

        tailwind_config = None
        for name in TAILWIND_CONFIGS:
            path = root / name
            if path.exists():
                try:
                    tailwind_config = path.read_text(encoding="utf-8")
                except OSError:
                    continue
                break

        return ProjectConfig(
            package_json=self._read_json(root / "package.json"),
            ts_config=self._read_json(root / "tsconfig.json"),
            tailwind_config=tailwind_config,
            other_configs=other_configs,
        )

    def _read_json(self, path: Path) -> Optional[Dict[str, Any]]:
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            return None
        return data if isinstance(data, dict) else None

    def _read_toml(self, path: Path) -> Optional[Dict[str, Any]]:
        if not path.exists():
            return None
        try:
            return tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
            return None
