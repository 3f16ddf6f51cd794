"""Version listing from ``maven-metadata.xml``.

``RepositoryMetadataService`` is the only network boundary of the resolver.
``MavenMetadataService`` implements it over a ``MavenSession``; tests swap in
any object with a compatible ``list_versions``.
"""
from __future__ import annotations

import logging
import threading
import xml.etree.ElementTree as ET
from typing import Dict, List, Protocol, Tuple

from artifacts.models import ArtifactIdentifier, Repository
from common.http_client import HttpRequestError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from constants import Constants
from .session import MavenSession

logger = logging.getLogger(__name__)


class MetadataFetchError(Exception):
    """Raised when a repository could not list the versions of an artifact."""

    def __init__(self, repository: Repository, identifier: ArtifactIdentifier, message: str):
        self.repository = repository
        self.identifier = identifier
        super().__init__(f"{identifier} on {repository.id}: {message}")


class RepositoryMetadataService(Protocol):
    """Lists the versions published for an artifact in one repository."""

    def list_versions(self, identifier: ArtifactIdentifier, repository: Repository) -> List[str]:
        ...


def parse_metadata_versions(text: str) -> List[str]:
    """Return versions listed in maven-metadata.xml in source order.

    Raises:
        ET.ParseError: the document is not well-formed XML.
    """
    root = ET.fromstring(text)
    versions_elem = root.find("versioning/versions")
    if versions_elem is None:
        return []
    versions = []
    for item in versions_elem.findall("version"):
        if isinstance(item.text, str) and item.text.strip():
            versions.append(item.text.strip())
    return versions


class MavenMetadataService:
    """``RepositoryMetadataService`` backed by HTTP GETs of maven-metadata.xml.

    Responses are cached per (repository URL, identifier) for the life of the
    service, so a plugin listed by both a normal and a plugin repository with
    the same URL is fetched once.
    """

    def __init__(self, session: MavenSession):
        self._session = session
        self._cache: Dict[Tuple[str, ArtifactIdentifier], List[str]] = {}
        self._cache_lock = threading.Lock()

    def list_versions(self, identifier: ArtifactIdentifier, repository: Repository) -> List[str]:
        """Fetch the versions of ``identifier`` published in ``repository``.

        A missing metadata file (404) means the repository does not host the
        artifact and yields an empty list.

        Raises:
            MetadataFetchError: transport failure, unexpected status or malformed XML.
        """
        cache_key = (repository.url.rstrip("/"), identifier)
        with self._cache_lock:
            cached = self._cache.get(cache_key)
        if cached is not None:
            if is_debug_enabled(logger):
                logger.debug("Metadata cache hit", extra=extra_context(
                    event="cache_hit", component="metadata", action="list_versions",
                    target=str(identifier), repository=repository.id
                ))
            return list(cached)

        url = repository.metadata_url(identifier, Constants.METADATA_FILE_NAME)
        with Timer() as timer:
            try:
                status_code, _, text = self._session.get(url, repository)
            except HttpRequestError as exc:
                logger.warning("Unable to reach %s for %s: %s", repository.id, identifier, exc)
                raise MetadataFetchError(repository, identifier, str(exc)) from exc

        if status_code == 404:
            versions: List[str] = []
        elif status_code == 200:
            try:
                versions = parse_metadata_versions(text)
            except ET.ParseError as exc:
                logger.warning(
                    "Malformed metadata",
                    extra=extra_context(
                        event="anomaly", component="metadata", action="parse",
                        outcome="parse_error", target=safe_url(url)
                    )
                )
                raise MetadataFetchError(repository, identifier, f"malformed metadata: {exc}") from exc
        else:
            logger.warning(
                "HTTP non-2xx handled",
                extra=extra_context(
                    event="http_response", outcome="handled_non_2xx", status_code=status_code,
                    duration_ms=timer.duration_ms(), target=safe_url(url)
                )
            )
            raise MetadataFetchError(repository, identifier, self._describe_status(status_code))

        if is_debug_enabled(logger):
            logger.debug("Listed versions", extra=extra_context(
                event="function_exit", component="metadata", action="list_versions",
                outcome="found" if versions else "empty", count=len(versions),
                duration_ms=timer.duration_ms(), target=str(identifier), repository=repository.id
            ))
        with self._cache_lock:
            self._cache[cache_key] = versions
        return list(versions)

    @staticmethod
    def _describe_status(status_code: int) -> str:
        if status_code in (401, 403):
            return f"authentication failed (HTTP {status_code})"
        return f"unexpected HTTP status {status_code}"

