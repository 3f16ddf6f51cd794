"""Update check orchestration for a whole build.

Each artifact of a build is resolved independently on a bounded thread pool;
failures stay attached to their artifact and never abort sibling checks.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from artifacts.models import Artifact
from builds.models import Build, BuildFile
from common.logging_utils import extra_context, is_debug_enabled, Timer
from constants import Constants
from filters.artifact import ACCEPT_ALL, ArtifactFilter, CompositeArtifactFilter
from filters.ignore_parser import parse_ignore_file
from filters.version import VersionFilterFactory, create_version_filter_factory, is_snapshot
from versioning.models import ArtifactUpdateVersion
from versioning.resolver import (
    ArtifactAvailableVersionsResolveError,
    ArtifactAvailableVersionsResolver,
    ResolutionCancelledError,
)
from versioning.selector import select_update_version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactCheckResult:
    """Outcome of checking one artifact of a build.

    Exactly one of these holds: ``update`` is set, ``error`` is set,
    ``cancelled`` is True, or the artifact is up to date.
    """
    build: Build
    artifact: Artifact
    update: Optional[ArtifactUpdateVersion] = None
    error: Optional[str] = None
    cancelled: bool = False

    @property
    def up_to_date(self) -> bool:
        return self.update is None and self.error is None and not self.cancelled


def _ignore_file_filter(directory: Path) -> ArtifactFilter:
    ignore_file = directory / Constants.IGNORE_FILE_NAME
    if ignore_file.is_file():
        return parse_ignore_file(ignore_file)
    return ACCEPT_ALL


def create_user_artifact_filter(home: Optional[Union[str, Path]] = None) -> ArtifactFilter:
    """Filter from the ignore file of the user's home directory, if any."""
    return _ignore_file_filter(Path(home) if home is not None else Path.home())


def create_build_artifact_filter(build_file: BuildFile) -> ArtifactFilter:
    """Filter from the ignore file next to the build file, if any."""
    if not isinstance(build_file, BuildFile):
        raise ValueError(f"build_file must be a BuildFile, got {build_file!r}")
    return _ignore_file_filter(build_file.path.parent)


class UpdateCheckService:
    """Finds artifact updates of builds."""

    def __init__(
        self,
        resolver: ArtifactAvailableVersionsResolver,
        version_filter_factory: Optional[VersionFilterFactory] = None,
        user_artifact_filter: Optional[ArtifactFilter] = None,
    ):
        if resolver is None:
            raise ValueError("resolver must not be None")
        self._resolver = resolver
        self._version_filter_factory = (
            version_filter_factory
            if version_filter_factory is not None
            else create_version_filter_factory(Constants.INCLUDE_PRERELEASES)
        )
        self._user_artifact_filter = user_artifact_filter if user_artifact_filter is not None else ACCEPT_ALL

    @property
    def cancel_event(self) -> threading.Event:
        return self._resolver.cancel_event

    def cancel(self) -> None:
        """Stop scheduling new repository queries; finished results stay valid."""
        if not self.cancel_event.is_set():
            logger.warning("Cancellation requested, finishing in-flight queries")
        self.cancel_event.set()

    def _artifact_filter(self, build: Build, filters: Iterable[ArtifactFilter]) -> ArtifactFilter:
        parts = [self._user_artifact_filter, create_build_artifact_filter(build.file)]
        filters = tuple(filters)
        if filters:
            parts.append(CompositeArtifactFilter.any(*filters))
        return CompositeArtifactFilter.all(*parts)

    def select_artifacts(
        self,
        build: Build,
        artifact_filter: ArtifactFilter,
        ignore_snapshots: bool,
        ignore_inherited: bool,
    ) -> List[Artifact]:
        """Artifacts of ``build`` that are eligible for an update check."""
        selected = []
        for artifact in build.artifacts:
            if artifact.type.is_classpath or artifact.version is None:
                continue
            if ignore_inherited and artifact.version_inherited:
                continue
            if ignore_snapshots and is_snapshot(artifact.version):
                continue
            if not artifact_filter.accept(artifact):
                continue
            selected.append(artifact)
        return selected

    def check_artifact(self, build: Build, artifact: Artifact, artifact_filter: ArtifactFilter) -> ArtifactCheckResult:
        """Resolve and select the update of one artifact, capturing failures."""
        if self.cancel_event.is_set():
            return ArtifactCheckResult(build, artifact, cancelled=True)
        try:
            available = self._resolver.resolve(artifact, build.repositories)
        except ArtifactAvailableVersionsResolveError as exc:
            logger.error("%s", exc)
            return ArtifactCheckResult(build, artifact, error=str(exc))
        except ResolutionCancelledError:
            return ArtifactCheckResult(build, artifact, cancelled=True)
        except Exception as exc:  # one artifact's failure must not abort the build
            logger.error("Unexpected error checking %s: %s", artifact.identifier, exc)
            return ArtifactCheckResult(build, artifact, error=f"{type(exc).__name__}: {exc}")
        version_filter = self._version_filter_factory.create(artifact.version)
        update = select_update_version(available, version_filter, artifact_filter)
        return ArtifactCheckResult(build, artifact, update=update)

    def check_build(
        self,
        build: Build,
        *,
        filters: Iterable[ArtifactFilter] = (),
        ignore_snapshots: Optional[bool] = None,
        ignore_inherited: Optional[bool] = None,
        max_workers: Optional[int] = None,
    ) -> List[ArtifactCheckResult]:
        """Check every eligible artifact of ``build``.

        ``filters`` restrict the check to artifacts matched by at least one of
        them. Results keep the build's artifact order. On KeyboardInterrupt the
        run is cancelled and the results gathered so far are returned, with
        unfinished artifacts marked as cancelled.
        """
        if not isinstance(build, Build):
            raise ValueError(f"build must be a Build, got {build!r}")
        ignore_snapshots = Constants.IGNORE_SNAPSHOTS if ignore_snapshots is None else ignore_snapshots
        ignore_inherited = Constants.IGNORE_INHERITED if ignore_inherited is None else ignore_inherited
        artifact_filter = self._artifact_filter(build, filters)
        artifacts = self.select_artifacts(build, artifact_filter, ignore_snapshots, ignore_inherited)
        logger.info("Checking %d artifact(s) of %s", len(artifacts), build.file.path)
        if not artifacts:
            return []

        workers = max(1, min(max_workers or Constants.MAX_WORKERS, len(artifacts)))
        results: List[Optional[ArtifactCheckResult]] = [None] * len(artifacts)
        futures: List[Tuple[int, Future]] = []
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="depfresh-artifact")
        with Timer() as timer:
            try:
                for i, artifact in enumerate(artifacts):
                    futures.append((i, executor.submit(self.check_artifact, build, artifact, artifact_filter)))
                for i, future in futures:
                    results[i] = future.result()
            except KeyboardInterrupt:
                self.cancel()
                executor.shutdown(wait=True, cancel_futures=True)
                for i, future in futures:
                    if results[i] is None and future.done() and not future.cancelled():
                        results[i] = future.result()
            finally:
                executor.shutdown(wait=True)

        checked = [
            result if result is not None else ArtifactCheckResult(build, artifacts[i], cancelled=True)
            for i, result in enumerate(results)
        ]
        if is_debug_enabled(logger):
            logger.debug("Build checked", extra=extra_context(
                event="function_exit", component="service", action="check_build",
                target=str(build.file.path), count=len(checked),
                updates=sum(1 for r in checked if r.update is not None),
                errors=sum(1 for r in checked if r.error is not None),
                duration_ms=timer.duration_ms()
            ))
        return checked

    def find_artifact_update_versions(self, build: Build, **kwargs) -> List[ArtifactUpdateVersion]:
        """Only the updates found by ``check_build``."""
        return [r.update for r in self.check_build(build, **kwargs) if r.update is not None]
