"""Version filters applied to candidate update versions.

A factory is bound to the artifact's declared version through ``create`` and
returns a ``VersionFilter`` whose ``accept`` tells whether a candidate version
may be offered as an update.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

_QUALIFIER_PATTERN = re.compile(r"^.*?[.\-]?([a-z]+)[.\-]?\d*$", re.IGNORECASE)
_PRERELEASE_PATTERN = re.compile(
    r"^.*?(?<![a-z])(?:alpha|a|beta|b|milestone|m|rc|cr|snapshot)[.\-]?\d*$",
    re.IGNORECASE,
)
_SNAPSHOT_SUFFIX = "-SNAPSHOT"


def _require_version(name: str, version: object) -> str:
    if not isinstance(version, str) or not version:
        raise ValueError(f"{name} must be a non-empty string, got {version!r}")
    return version


def is_snapshot(version: str) -> bool:
    """Return True only for canonical snapshots such as ``1.2.3-SNAPSHOT``."""
    return _require_version("version", version).endswith(_SNAPSHOT_SUFFIX)


def extract_qualifier(version: str) -> Optional[str]:
    """Trailing alphabetic qualifier of a version, ignoring a final build number."""
    match = _QUALIFIER_PATTERN.match(version)
    return match.group(1) if match else None


class VersionFilter:
    """Predicate over candidate version strings."""

    def __init__(self, predicate: Callable[[str], bool]):
        self._predicate = predicate

    def accept(self, version: str) -> bool:
        return bool(self._predicate(_require_version("version", version)))

    def __call__(self, version: str) -> bool:
        return self.accept(version)


class VersionFilterFactory(ABC):
    """Creates version filters bound to a declared artifact version."""

    @abstractmethod
    def create(self, artifact_version: str) -> VersionFilter:
        raise NotImplementedError


class QualifierVersionFilterFactory(VersionFilterFactory):
    """Keep candidates whose qualifier matches the declared one.

    Versions without a qualifier on either side are always compatible, so a
    ``1.0.0-rc1`` artifact may move to ``1.0.0-rc2`` or ``1.0.0`` but not to
    ``1.1.0-beta1``.
    """

    def create(self, artifact_version: str) -> VersionFilter:
        declared = extract_qualifier(_require_version("artifact_version", artifact_version))

        def _accept(version: str) -> bool:
            qualifier = extract_qualifier(version)
            return qualifier is None or declared is None or qualifier.lower() == declared.lower()

        return VersionFilter(_accept)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, QualifierVersionFilterFactory)

    def __hash__(self) -> int:
        return hash(QualifierVersionFilterFactory)


class ReleaseVersionFilterFactory(VersionFilterFactory):
    """Reject pre-release candidates (alpha, beta, milestone, rc, snapshot)."""

    def create(self, artifact_version: str) -> VersionFilter:
        _require_version("artifact_version", artifact_version)
        return VersionFilter(lambda version: _PRERELEASE_PATTERN.match(version) is None)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ReleaseVersionFilterFactory)

    def __hash__(self) -> int:
        return hash(ReleaseVersionFilterFactory)


class CompositeVersionFilterFactory(VersionFilterFactory):
    """Accept a candidate only when every child filter accepts it."""

    def __init__(self, *factories: VersionFilterFactory):
        if not factories:
            raise ValueError("factories must not be empty")
        if any(not isinstance(f, VersionFilterFactory) for f in factories):
            raise ValueError("factories must only contain VersionFilterFactory instances")
        self._factories: Tuple[VersionFilterFactory, ...] = tuple(dict.fromkeys(factories))

    @property
    def factories(self) -> Tuple[VersionFilterFactory, ...]:
        return self._factories

    def create(self, artifact_version: str) -> VersionFilter:
        _require_version("artifact_version", artifact_version)
        filters = [factory.create(artifact_version) for factory in self._factories]
        return VersionFilter(lambda version: all(f.accept(version) for f in filters))


def create_version_filter_factory(include_prereleases: bool = False) -> CompositeVersionFilterFactory:
    """Build the active filter chain.

    Qualifier consistency always applies; stable-only filtering is dropped
    when pre-releases are wanted.
    """
    factories: List[VersionFilterFactory] = [QualifierVersionFilterFactory()]
    if not include_prereleases:
        factories.append(ReleaseVersionFilterFactory())
    return CompositeVersionFilterFactory(*factories)
