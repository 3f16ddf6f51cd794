"""Identity and entity model for artifacts and repositories."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


def _require_text(name: str, value: object) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string, got {value!r}")


class RepositoryType(Enum):
    """Kind of artifacts a remote repository is expected to serve."""
    NORMAL = "normal"
    PLUGIN = "plugin"


class BuildSystem(Enum):
    """Build ecosystem owning an artifact type."""
    MAVEN = "maven"
    GRADLE = "gradle"


class MavenArtifactType(Enum):
    """Artifact roles in a Maven POM.

    The value carries the repository type the artifact is resolved against.
    """
    PARENT = ("parent", RepositoryType.NORMAL)
    DEPENDENCY_MANAGEMENT_DEPENDENCY = ("dependency-management-dependency", RepositoryType.NORMAL)
    DEPENDENCY = ("dependency", RepositoryType.NORMAL)
    BUILD_EXTENSION = ("build-extension", RepositoryType.NORMAL)
    BUILD_PLUGIN_MANAGEMENT_PLUGIN = ("build-plugin-management-plugin", RepositoryType.PLUGIN)
    BUILD_PLUGIN_MANAGEMENT_PLUGIN_DEPENDENCY = (
        "build-plugin-management-plugin-dependency", RepositoryType.NORMAL
    )
    BUILD_PLUGIN = ("build-plugin", RepositoryType.PLUGIN)
    BUILD_PLUGIN_DEPENDENCY = ("build-plugin-dependency", RepositoryType.NORMAL)
    REPORTING_PLUGIN = ("reporting-plugin", RepositoryType.PLUGIN)
    PROFILE_BUILD_PLUGIN_MANAGEMENT_PLUGIN = (
        "profile-build-plugin-management-plugin", RepositoryType.PLUGIN
    )
    PROFILE_BUILD_PLUGIN_MANAGEMENT_PLUGIN_DEPENDENCY = (
        "profile-build-plugin-management-plugin-dependency", RepositoryType.NORMAL
    )
    PROFILE_BUILD_PLUGIN = ("profile-build-plugin", RepositoryType.PLUGIN)
    PROFILE_BUILD_PLUGIN_DEPENDENCY = ("profile-build-plugin-dependency", RepositoryType.NORMAL)
    PROFILE_DEPENDENCY_MANAGEMENT_DEPENDENCY = (
        "profile-dependency-management-dependency", RepositoryType.NORMAL
    )
    PROFILE_DEPENDENCY = ("profile-dependency", RepositoryType.NORMAL)
    PROFILE_REPORTING_PLUGIN = ("profile-reporting-plugin", RepositoryType.PLUGIN)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def build_system(self) -> BuildSystem:
        return BuildSystem.MAVEN

    @property
    def repository_type(self) -> RepositoryType:
        return self.value[1]

    @property
    def is_classpath(self) -> bool:
        return False

    @property
    def is_deprecated(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.label


class GradleArtifactType(Enum):
    """Gradle dependency configurations.

    The value is ``(label, classpath, deprecated)``. Classpath configurations
    aggregate the others and are never checked directly; the deprecated ones
    were removed in Gradle 7.
    """
    ANNOTATION_PROCESSOR = ("annotation-processor", False, False)
    API = ("api", False, False)
    COMPILE = ("compile", False, True)
    COMPILE_CLASSPATH = ("compile-classpath", True, False)
    COMPILE_ONLY = ("compile-only", False, False)
    COMPILE_ONLY_API = ("compile-only-api", False, False)
    IMPLEMENTATION = ("implementation", False, False)
    RUNTIME = ("runtime", False, True)
    RUNTIME_CLASSPATH = ("runtime-classpath", True, False)
    RUNTIME_ONLY = ("runtime-only", False, False)
    TEST_ANNOTATION_PROCESSOR = ("test-annotation-processor", False, False)
    TEST_COMPILE = ("test-compile", False, True)
    TEST_COMPILE_CLASSPATH = ("test-compile-classpath", True, False)
    TEST_COMPILE_ONLY = ("test-compile-only", False, False)
    TEST_IMPLEMENTATION = ("test-implementation", False, False)
    TEST_RUNTIME = ("test-runtime", False, True)
    TEST_RUNTIME_CLASSPATH = ("test-runtime-classpath", True, False)
    TEST_RUNTIME_ONLY = ("test-runtime-only", False, False)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def build_system(self) -> BuildSystem:
        return BuildSystem.GRADLE

    @property
    def repository_type(self) -> RepositoryType:
        return RepositoryType.NORMAL

    @property
    def is_classpath(self) -> bool:
        return self.value[1]

    @property
    def is_deprecated(self) -> bool:
        return self.value[2]

    @property
    def dependencies_task_name(self) -> str:
        """Configuration name as printed by ``gradle dependencies``."""
        head, *tail = self.name.lower().split("_")
        return head + "".join(part.capitalize() for part in tail)

    def __str__(self) -> str:
        return self.label


ArtifactType = Union[MavenArtifactType, GradleArtifactType]


def artifact_type_from_name(name: str) -> ArtifactType:
    """Look up an artifact type from ``"<build system>:<label>"``.

    The build system prefix defaults to maven, e.g. ``"build-plugin"`` or
    ``"gradle:test-implementation"``.
    """
    _require_text("name", name)
    system, _, label = name.rpartition(":")
    enum_cls = GradleArtifactType if system.lower() == BuildSystem.GRADLE.value else MavenArtifactType
    if system and system.lower() not in (BuildSystem.MAVEN.value, BuildSystem.GRADLE.value):
        raise ValueError(f"Unknown build system in artifact type {name!r}")
    for member in enum_cls:
        if member.label == label.lower():
            return member
    raise ValueError(f"Unknown artifact type {name!r}")


@dataclass(frozen=True)
class ArtifactIdentifier:
    """Maven coordinates without version: groupId and artifactId."""
    group_id: str
    artifact_id: str

    def __post_init__(self):
        _require_text("group_id", self.group_id)
        _require_text("artifact_id", self.artifact_id)

    @classmethod
    def parse(cls, text: str) -> "ArtifactIdentifier":
        """Parse ``groupId:artifactId``."""
        _require_text("text", text)
        parts = text.strip().split(":")
        if len(parts) != 2:
            raise ValueError(f"Expected groupId:artifactId, got {text!r}")
        return cls(parts[0].strip(), parts[1].strip())

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


@dataclass(frozen=True)
class Artifact:
    """A typed, optionally versioned artifact declared by a build.

    ``version`` is None when unspecified; such artifacts are never checked.
    ``version_inherited`` marks versions coming from a parent or a BOM.
    """
    type: ArtifactType
    identifier: ArtifactIdentifier
    version: Optional[str] = None
    version_inherited: bool = False

    def __post_init__(self):
        if not isinstance(self.type, (MavenArtifactType, GradleArtifactType)):
            raise ValueError(f"type must be an artifact type, got {self.type!r}")
        if not isinstance(self.identifier, ArtifactIdentifier):
            raise ValueError(f"identifier must be an ArtifactIdentifier, got {self.identifier!r}")
        if self.version is not None:
            _require_text("version", self.version)

    def with_type(self, artifact_type: ArtifactType) -> "Artifact":
        """Copy of this artifact reclassified under another type."""
        return Artifact(artifact_type, self.identifier, self.version, self.version_inherited)

    def with_version_inherited(self, version_inherited: bool) -> "Artifact":
        return Artifact(self.type, self.identifier, self.version, version_inherited)

    def __str__(self) -> str:
        if self.version is None:
            return f"{self.identifier}"
        return f"{self.identifier}:{self.version}"


@dataclass(frozen=True)
class Repository:
    """A remote repository serving ``maven-metadata.xml`` files."""
    type: RepositoryType
    id: str
    url: str

    def __post_init__(self):
        if not isinstance(self.type, RepositoryType):
            raise ValueError(f"type must be a RepositoryType, got {self.type!r}")
        _require_text("id", self.id)
        _require_text("url", self.url)

    def metadata_url(self, identifier: ArtifactIdentifier, file_name: str = "maven-metadata.xml") -> str:
        """URL of the version metadata file for ``identifier`` in this repository."""
        group_path = identifier.group_id.replace(".", "/")
        return f"{self.url.rstrip('/')}/{group_path}/{identifier.artifact_id}/{file_name}"
