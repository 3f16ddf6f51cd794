"""Artifact identity, types and repositories."""

from .models import (
    Artifact,
    ArtifactIdentifier,
    ArtifactType,
    BuildSystem,
    GradleArtifactType,
    MavenArtifactType,
    Repository,
    RepositoryType,
    artifact_type_from_name,
)

__all__ = [
    "Artifact",
    "ArtifactIdentifier",
    "ArtifactType",
    "BuildSystem",
    "GradleArtifactType",
    "MavenArtifactType",
    "Repository",
    "RepositoryType",
    "artifact_type_from_name",
]
