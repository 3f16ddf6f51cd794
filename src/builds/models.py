"""Build file and build value objects handed over by build-file front ends."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Tuple

from artifacts.models import Artifact, Repository


class BuildFileType(Enum):
    """Supported build file kinds, keyed by their file name."""
    MAVEN = "pom.xml"
    GRADLE_GROOVY = "build.gradle"
    GRADLE_KOTLIN = "build.gradle.kts"

    @property
    def file_name(self) -> str:
        return self.value

    @classmethod
    def from_file_name(cls, file_name: str) -> Optional["BuildFileType"]:
        if not file_name:
            raise ValueError("file_name must be a non-empty string")
        for member in cls:
            if member.value == file_name:
                return member
        return None


@dataclass(frozen=True)
class BuildFile:
    """Location and kind of a build file."""
    type: BuildFileType
    path: Path

    def __post_init__(self):
        if not isinstance(self.type, BuildFileType):
            raise ValueError(f"type must be a BuildFileType, got {self.type!r}")
        if self.path is None or str(self.path) == "":
            raise ValueError("path must not be empty")
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))


@dataclass(frozen=True)
class Build:
    """Repositories and artifacts declared by one build file.

    Both sequences are copied into tuples so later changes to the caller's
    lists do not leak in.
    """
    file: BuildFile
    repositories: Tuple[Repository, ...]
    artifacts: Tuple[Artifact, ...]

    def __init__(self, file: BuildFile, repositories: Iterable[Repository], artifacts: Iterable[Artifact]):
        if not isinstance(file, BuildFile):
            raise ValueError(f"file must be a BuildFile, got {file!r}")
        if repositories is None or artifacts is None:
            raise ValueError("repositories and artifacts must not be None")
        repositories = tuple(repositories)
        artifacts = tuple(artifacts)
        if any(not isinstance(r, Repository) for r in repositories):
            raise ValueError("repositories must only contain Repository values")
        if any(not isinstance(a, Artifact) for a in artifacts):
            raise ValueError("artifacts must only contain Artifact values")
        object.__setattr__(self, "file", file)
        object.__setattr__(self, "repositories", repositories)
        object.__setattr__(self, "artifacts", artifacts)
