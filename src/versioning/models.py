"""Data models for version resolution results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from artifacts.models import Artifact, Repository


@dataclass(frozen=True)
class ArtifactAvailableVersions:
    """Versions published for an artifact, in resolver order (ascending)."""
    artifact: Artifact
    available_versions: Tuple[str, ...]

    def __init__(self, artifact: Artifact, available_versions: Iterable[str]):
        if not isinstance(artifact, Artifact):
            raise ValueError(f"artifact must be an Artifact, got {artifact!r}")
        if available_versions is None:
            raise ValueError("available_versions must not be None")
        versions = tuple(available_versions)
        for version in versions:
            if not isinstance(version, str) or not version:
                raise ValueError(f"available_versions must only contain non-empty strings, got {version!r}")
        object.__setattr__(self, "artifact", artifact)
        object.__setattr__(self, "available_versions", versions)


@dataclass(frozen=True)
class ArtifactUpdateVersion:
    """Recommended update of an artifact."""
    artifact: Artifact
    update_version: str

    def __post_init__(self):
        if not isinstance(self.artifact, Artifact):
            raise ValueError(f"artifact must be an Artifact, got {self.artifact!r}")
        if not isinstance(self.update_version, str) or not self.update_version:
            raise ValueError(f"update_version must be a non-empty string, got {self.update_version!r}")


@dataclass(frozen=True)
class RepositoryFailure:
    """A repository query that failed while resolving an artifact."""
    repository: Repository
    message: str
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"{self.repository.id} ({self.repository.url}): {self.message}"
