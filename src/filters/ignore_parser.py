"""Parser for ``.depfresh-ignore`` files.

Each non-blank line is either ``groupId:artifactId`` (never check the
artifact) or ``groupId:artifactId:versionExpression`` (skip updates whose
version matches the ``?``/``*`` expression). Everything after ``#`` is a
comment.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from artifacts.models import Artifact, ArtifactIdentifier
from common.logging_utils import extra_context, is_debug_enabled
from .artifact import ArtifactFilter, _require_artifact, _require_update_version, compile_wildcard

logger = logging.getLogger(__name__)

COMMENT_START = "#"
SEPARATOR = ":"


class ArtifactFilterParseError(Exception):
    """Raised for a malformed ignore file line."""

    def __init__(self, reason: str, line: str, line_number: int, path: Optional[Path] = None):
        self.reason = reason
        self.line = line
        self.line_number = line_number
        self.path = path
        location = f"{path}:{line_number}" if path is not None else f"line {line_number}"
        super().__init__(f"{reason}: {line!r} ({location})")

    def with_path(self, path: Path) -> "ArtifactFilterParseError":
        return ArtifactFilterParseError(self.reason, self.line, self.line_number, path)


class IgnoreRulesArtifactFilter(ArtifactFilter):
    """Keeps artifacts and updates not matched by any ignore rule."""

    def __init__(self, identifiers: Set[ArtifactIdentifier], identifier_versions: Dict[ArtifactIdentifier, List]):
        self._identifiers = frozenset(identifiers)
        self._identifier_versions = {k: tuple(v) for k, v in identifier_versions.items()}

    @property
    def ignored_identifiers(self):
        return self._identifiers

    def accept(self, artifact: Artifact) -> bool:
        return _require_artifact(artifact).identifier not in self._identifiers

    def accept_update(self, artifact: Artifact, update_version: str) -> bool:
        _require_artifact(artifact)
        _require_update_version(update_version)
        patterns = self._identifier_versions.get(artifact.identifier)
        return patterns is None or not any(p.match(update_version) for p in patterns)


def parse_ignore_lines(lines: Iterable[str]) -> IgnoreRulesArtifactFilter:
    """Parse ignore rules from an iterable of lines.

    Raises:
        ArtifactFilterParseError: on a line that is not a valid rule.
    """
    identifiers: Set[ArtifactIdentifier] = set()
    identifier_versions: Dict[ArtifactIdentifier, List] = {}
    for line_number, raw in enumerate(lines, start=1):
        line = raw.split(COMMENT_START, 1)[0].strip()
        if not line:
            continue
        separators = line.count(SEPARATOR)
        if separators not in (1, 2):
            raise ArtifactFilterParseError("Unexpected format", line, line_number)
        parts = line.split(SEPARATOR)
        group_id, artifact_id = parts[0].strip(), parts[1].strip()
        if not group_id:
            raise ArtifactFilterParseError("Unexpected format, empty groupId", line, line_number)
        if not artifact_id:
            raise ArtifactFilterParseError("Unexpected format, empty artifactId", line, line_number)
        identifier = ArtifactIdentifier(group_id, artifact_id)
        if len(parts) == 2:
            if is_debug_enabled(logger):
                logger.debug("Ignoring artifact", extra=extra_context(
                    event="decision", component="ignore_parser", action="parse",
                    target=str(identifier)
                ))
            identifiers.add(identifier)
            continue
        expression = parts[2].strip()
        if not expression:
            raise ArtifactFilterParseError(
                "Unexpected format, empty version expression", line, line_number
            )
        if is_debug_enabled(logger):
            logger.debug("Ignoring artifact versions", extra=extra_context(
                event="decision", component="ignore_parser", action="parse",
                target=str(identifier), expression=expression
            ))
        identifier_versions.setdefault(identifier, []).append(compile_wildcard(expression))
    return IgnoreRulesArtifactFilter(identifiers, identifier_versions)


def parse_ignore_file(path: Union[str, Path]) -> IgnoreRulesArtifactFilter:
    """Parse an ignore file.

    Raises:
        ArtifactFilterParseError: on a malformed line, carrying the file path.
        OSError: when the file cannot be read.
    """
    path = Path(path)
    logger.info("Parsing ignore file %s", path)
    with open(path, "r", encoding="utf-8") as fh:
        try:
            return parse_ignore_lines(fh)
        except ArtifactFilterParseError as exc:
            raise exc.with_path(path) from None
