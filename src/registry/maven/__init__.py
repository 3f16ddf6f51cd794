"""Maven repository access: session and metadata listing."""

from .metadata import MavenMetadataService, MetadataFetchError, RepositoryMetadataService
from .session import MavenSession, MavenSessionError

__all__ = [
    "MavenMetadataService",
    "MavenSession",
    "MavenSessionError",
    "MetadataFetchError",
    "RepositoryMetadataService",
]
