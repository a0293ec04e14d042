"""Project source contract: where file contents and manifests come from."""

from typing import List, Protocol, runtime_checkable

from ..models import ProjectConfig, ProjectDependency, ProjectFile


@runtime_checkable
class ProjectSource(Protocol):
    """Read access to a project. Implementations must not raise for missing paths."""

    def read_file(self, path: str) -> str:
        """Contents of ``path``, or an empty string when unreadable."""
        ...

    def list_files(self, root: str) -> List[ProjectFile]:
        ...

    def read_dependencies(self, root: str) -> List[ProjectDependency]:
        ...

    def read_config(self, root: str) -> ProjectConfig:
        ...


class NullProjectSource:
    """Source with no files. Used when the caller supplies nothing else."""

    def read_file(self, path: str) -> str:
        return ""

    def list_files(self, root: str) -> List[ProjectFile]:
        return []

    def read_dependencies(self, root: str) -> List[ProjectDependency]:
        return []

    def read_config(self, root: str) -> ProjectConfig:
        return ProjectConfig()
