"""Picks the update version of an artifact from its available versions."""

from __future__ import annotations

import logging
from typing import Optional

from common.logging_utils import extra_context, is_debug_enabled
from filters.artifact import ACCEPT_ALL, ArtifactFilter
from filters.version import VersionFilter, is_snapshot
from .maven_version import ComparableVersion, version_sort_key
from .models import ArtifactAvailableVersions, ArtifactUpdateVersion

logger = logging.getLogger(__name__)


def select_update_version(
    artifact_available_versions: ArtifactAvailableVersions,
    version_filter: VersionFilter,
    artifact_filter: ArtifactFilter = ACCEPT_ALL,
) -> Optional[ArtifactUpdateVersion]:
    """Return the highest acceptable version newer than the declared one.

    ``version_filter`` must have been created from the artifact's declared
    version. Snapshot candidates are only considered for artifacts declared
    with a snapshot version. The chosen candidate is then submitted to
    ``artifact_filter.accept_update``; a rejection means no update.
    """
    artifact = artifact_available_versions.artifact
    declared = artifact.version
    if declared is None or not artifact_available_versions.available_versions:
        return None

    allow_snapshots = is_snapshot(declared)
    declared_rank = ComparableVersion(declared)
    candidates = [
        version
        for version in artifact_available_versions.available_versions
        if (allow_snapshots or not is_snapshot(version))
        and version_filter.accept(version)
        and ComparableVersion(version) > declared_rank
    ]
    if not candidates:
        return None

    update_version = max(candidates, key=version_sort_key)
    if not artifact_filter.accept_update(artifact, update_version):
        if is_debug_enabled(logger):
            logger.debug("Update rejected by artifact filter", extra=extra_context(
                event="decision", component="selector", action="select_update_version",
                outcome="filtered", target=str(artifact.identifier), update_version=update_version
            ))
        return None
    return ArtifactUpdateVersion(artifact, update_version)
