"""Version and artifact filters."""

from .artifact import (
    ACCEPT_ALL,
    REJECT_ALL,
    ArtifactFilter,
    CompositeArtifactFilter,
    WildcardArtifactFilter,
)
from .ignore_parser import ArtifactFilterParseError, parse_ignore_file, parse_ignore_lines
from .version import (
    CompositeVersionFilterFactory,
    QualifierVersionFilterFactory,
    ReleaseVersionFilterFactory,
    VersionFilter,
    VersionFilterFactory,
    create_version_filter_factory,
    is_snapshot,
)

__all__ = [
    "ACCEPT_ALL",
    "REJECT_ALL",
    "ArtifactFilter",
    "ArtifactFilterParseError",
    "CompositeArtifactFilter",
    "CompositeVersionFilterFactory",
    "QualifierVersionFilterFactory",
    "ReleaseVersionFilterFactory",
    "VersionFilter",
    "VersionFilterFactory",
    "WildcardArtifactFilter",
    "create_version_filter_factory",
    "is_snapshot",
    "parse_ignore_file",
    "parse_ignore_lines",
]
