"""Aggregates the versions published for an artifact across repositories."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

from artifacts.models import Artifact, ArtifactType, Repository, RepositoryType
from common.logging_utils import extra_context, is_debug_enabled, Timer
from constants import Constants
from registry.maven.metadata import MetadataFetchError, RepositoryMetadataService
from .maven_version import sort_versions
from .models import ArtifactAvailableVersions, RepositoryFailure

logger = logging.getLogger(__name__)


class ArtifactAvailableVersionsResolveError(Exception):
    """Raised when no eligible repository could list an artifact's versions."""

    def __init__(self, artifact: Artifact, failures: Sequence[RepositoryFailure]):
        self.artifact = artifact
        self.failures = tuple(failures)
        details = "; ".join(str(f) for f in self.failures) or "no repository answered"
        super().__init__(f"Unable to resolve available versions of {artifact.identifier}: {details}")


class ResolutionCancelledError(Exception):
    """Raised when the run was cancelled before an artifact could be resolved."""


def eligible_repositories(artifact_type: ArtifactType, repositories: Iterable[Repository]) -> List[Repository]:
    """Repositories an artifact of ``artifact_type`` may be resolved from.

    Normal repositories serve every artifact; plugin repositories only serve
    plugin artifacts. A repository listed twice under the same id and URL is
    queried once; distinct ids keep their own credentials.
    """
    plugin = artifact_type.repository_type == RepositoryType.PLUGIN
    selected: List[Repository] = []
    seen = set()
    for repository in repositories:
        if not (plugin or repository.type == RepositoryType.NORMAL):
            continue
        key = (repository.url.rstrip("/"), repository.id)
        if key in seen:
            continue
        seen.add(key)
        selected.append(repository)
    return selected


class ArtifactAvailableVersionsResolver:
    """Resolves ``ArtifactAvailableVersions`` through a metadata service.

    Repository queries for one artifact run concurrently; their results are
    merged, deduplicated and sorted in Maven order once all have completed.
    A failing repository is skipped unless ``fail_fast`` is set; the artifact
    only fails when no eligible repository answered.
    """

    def __init__(
        self,
        metadata_service: RepositoryMetadataService,
        *,
        max_workers: Optional[int] = None,
        fail_fast: Optional[bool] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        if metadata_service is None:
            raise ValueError("metadata_service must not be None")
        self._metadata_service = metadata_service
        self._max_workers = max(1, max_workers or Constants.MAX_REPOSITORY_WORKERS)
        self._fail_fast = Constants.FAIL_FAST if fail_fast is None else fail_fast
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()

    def resolve(self, artifact: Artifact, repositories: Iterable[Repository]) -> ArtifactAvailableVersions:
        """Resolve the versions of ``artifact`` published in ``repositories``.

        Raises:
            ValueError: invalid artifact or repository list.
            ArtifactAvailableVersionsResolveError: every eligible repository failed,
                or one failed while ``fail_fast`` is set.
            ResolutionCancelledError: the run was cancelled before every eligible
                repository answered.
        """
        if not isinstance(artifact, Artifact):
            raise ValueError(f"artifact must be an Artifact, got {artifact!r}")
        if repositories is None:
            raise ValueError("repositories must not be None")
        repositories = tuple(repositories)
        if any(not isinstance(r, Repository) for r in repositories):
            raise ValueError("repositories must only contain Repository values")

        logger.info("Resolving %s available versions", artifact.identifier)
        eligible = eligible_repositories(artifact.type, repositories)
        if not eligible:
            if is_debug_enabled(logger):
                logger.debug("No eligible repository", extra=extra_context(
                    event="decision", component="resolver", action="resolve",
                    outcome="no_repository", target=str(artifact.identifier),
                    artifact_type=str(artifact.type)
                ))
            return ArtifactAvailableVersions(artifact, [])
        if self.cancel_event.is_set():
            raise ResolutionCancelledError(f"Cancelled before resolving {artifact.identifier}")

        with Timer() as timer:
            answers, failures, cancelled = self._query(artifact, eligible)

        if failures and self._fail_fast:
            raise ArtifactAvailableVersionsResolveError(artifact, failures)
        if cancelled:
            raise ResolutionCancelledError(
                f"Cancelled while resolving {artifact.identifier} ({cancelled} queries skipped)"
            )
        if failures and not answers:
            raise ArtifactAvailableVersionsResolveError(artifact, failures)
        for failure in failures:
            logger.warning("Skipping repository for %s: %s", artifact.identifier, failure)

        merged = set()
        for versions in answers:
            merged.update(v for v in versions if isinstance(v, str) and v)
        available = sort_versions(merged)
        if is_debug_enabled(logger):
            logger.debug("Resolved available versions", extra=extra_context(
                event="function_exit", component="resolver", action="resolve",
                outcome="resolved", target=str(artifact.identifier), count=len(available),
                repositories=len(eligible), failures=len(failures), duration_ms=timer.duration_ms()
            ))
        return ArtifactAvailableVersions(artifact, available)

    def _query_one(self, artifact: Artifact, repository: Repository) -> List[str]:
        if self.cancel_event.is_set():
            raise ResolutionCancelledError(repository.id)
        return list(self._metadata_service.list_versions(artifact.identifier, repository))

    def _query(
        self, artifact: Artifact, eligible: List[Repository]
    ) -> Tuple[List[List[str]], List[RepositoryFailure], int]:
        answers: List[List[str]] = []
        failures: List[RepositoryFailure] = []
        cancelled = 0

        workers = min(self._max_workers, len(eligible))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="depfresh-repo") as executor:
            futures: List[Tuple[Repository, Future]] = [
                (repository, executor.submit(self._query_one, artifact, repository))
                for repository in eligible
            ]
            for index, (repository, future) in enumerate(futures):
                try:
                    answers.append(future.result())
                except ResolutionCancelledError:
                    cancelled += 1
                except Exception as exc:  # any listing error is confined to its repository
                    reason = str(exc) if isinstance(exc, MetadataFetchError) else f"{type(exc).__name__}: {exc}"
                    failures.append(RepositoryFailure(repository, reason, exc))
                    if self._fail_fast:
                        for _, pending in futures[index + 1:]:
                            pending.cancel()
                        break
        return answers, failures, cancelled
