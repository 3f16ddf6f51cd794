"""Artifact filters deciding which artifacts and updates get reported.

``accept(artifact)`` decides whether an artifact is checked at all and
``accept_update(artifact, update_version)`` whether a found update is
reported. Both return True to keep.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional, Tuple

from artifacts.models import Artifact

WILDCARD_SINGLE = "?"
WILDCARD_ANY = "*"


def _require_artifact(artifact: object) -> Artifact:
    if not isinstance(artifact, Artifact):
        raise ValueError(f"artifact must be an Artifact, got {artifact!r}")
    return artifact


def _require_update_version(update_version: object) -> str:
    if not isinstance(update_version, str) or not update_version:
        raise ValueError(f"update_version must be a non-empty string, got {update_version!r}")
    return update_version


def compile_wildcard(expression: str) -> "re.Pattern[str]":
    """Compile a ``?``/``*`` wildcard expression into a case-insensitive regex."""
    if not isinstance(expression, str) or not expression:
        raise ValueError(f"expression must be a non-empty string, got {expression!r}")
    parts = []
    for char in expression:
        if char == WILDCARD_SINGLE:
            parts.append(".")
        elif char == WILDCARD_ANY:
            parts.append(".*")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE | re.DOTALL)


class ArtifactFilter(ABC):
    """Two-stage predicate over artifacts and their update versions."""

    @abstractmethod
    def accept(self, artifact: Artifact) -> bool:
        raise NotImplementedError

    @abstractmethod
    def accept_update(self, artifact: Artifact, update_version: str) -> bool:
        raise NotImplementedError


class _ConstantArtifactFilter(ArtifactFilter):

    def __init__(self, result: bool, name: str):
        self._result = result
        self._name = name

    def accept(self, artifact: Artifact) -> bool:
        _require_artifact(artifact)
        return self._result

    def accept_update(self, artifact: Artifact, update_version: str) -> bool:
        _require_artifact(artifact)
        _require_update_version(update_version)
        return self._result

    def __repr__(self) -> str:
        return self._name


ACCEPT_ALL: ArtifactFilter = _ConstantArtifactFilter(True, "ACCEPT_ALL")
REJECT_ALL: ArtifactFilter = _ConstantArtifactFilter(False, "REJECT_ALL")


class WildcardArtifactFilter(ArtifactFilter):
    """Match artifacts by ``groupId[:artifactId[:updateVersion]]`` wildcards.

    Omitted parts match anything. Matching is case-insensitive.
    """

    def __init__(
        self,
        group_id_expression: str,
        artifact_id_expression: Optional[str] = None,
        update_version_expression: Optional[str] = None,
    ):
        self._group_id = compile_wildcard(group_id_expression)
        self._artifact_id = (
            compile_wildcard(artifact_id_expression) if artifact_id_expression is not None else None
        )
        self._update_version = (
            compile_wildcard(update_version_expression) if update_version_expression is not None else None
        )

    @classmethod
    def parse(cls, expression: str) -> "WildcardArtifactFilter":
        """Build a filter from a ``groupId[:artifactId[:updateVersion]]`` expression."""
        if not isinstance(expression, str) or not expression.strip():
            raise ValueError(f"expression must be a non-empty string, got {expression!r}")
        parts = expression.strip().split(":")
        if len(parts) > 3 or any(not p for p in parts):
            raise ValueError(f"Invalid filter expression {expression!r}")
        return cls(*parts)

    def accept(self, artifact: Artifact) -> bool:
        identifier = _require_artifact(artifact).identifier
        return bool(self._group_id.match(identifier.group_id)) and (
            self._artifact_id is None or bool(self._artifact_id.match(identifier.artifact_id))
        )

    def accept_update(self, artifact: Artifact, update_version: str) -> bool:
        _require_update_version(update_version)
        return self.accept(artifact) and (
            self._update_version is None or bool(self._update_version.match(update_version))
        )


class CompositeArtifactFilter(ArtifactFilter):
    """Combine filters with all/any/none semantics."""

    def __init__(self, match: Callable[[Iterable[bool]], bool], filters: Iterable[ArtifactFilter]):
        filters = tuple(filters)
        if not filters:
            raise ValueError("filters must not be empty")
        if any(not isinstance(f, ArtifactFilter) for f in filters):
            raise ValueError("filters must only contain ArtifactFilter instances")
        self._match = match
        self._filters: Tuple[ArtifactFilter, ...] = filters

    @classmethod
    def all(cls, *filters: ArtifactFilter) -> "CompositeArtifactFilter":
        return cls(all, filters)

    @classmethod
    def any(cls, *filters: ArtifactFilter) -> "CompositeArtifactFilter":
        return cls(any, filters)

    @classmethod
    def none(cls, *filters: ArtifactFilter) -> "CompositeArtifactFilter":
        return cls(lambda results: not any(results), filters)

    def accept(self, artifact: Artifact) -> bool:
        _require_artifact(artifact)
        return self._match(f.accept(artifact) for f in self._filters)

    def accept_update(self, artifact: Artifact, update_version: str) -> bool:
        _require_artifact(artifact)
        _require_update_version(update_version)
        return self._match(f.accept_update(artifact, update_version) for f in self._filters)
