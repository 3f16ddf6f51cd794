"""CLI configuration overrides for runtime tunables.

Extracted from depfresh.py to keep the entrypoint slim. CLI values take the
highest precedence: built-in defaults, then the configuration file, then flags.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from artifacts.models import Repository, RepositoryType
from constants import ConfigError, Constants

logger = logging.getLogger(__name__)


def parse_repository_option(value: str) -> Dict[str, str]:
    """Split an ``ID=URL`` option into an id/url mapping."""
    repo_id, sep, url = value.partition("=")
    if not sep or not repo_id.strip() or not url.strip():
        raise ConfigError(f"Repository must be given as ID=URL, got {value!r}")
    return {"id": repo_id.strip(), "url": url.strip()}


def apply_cli_overrides(args: Any) -> None:
    """Apply CLI flags on top of the loaded configuration.

    Raises:
        ConfigError: a flag value is malformed.
    """
    if getattr(args, "TIMEOUT", None) is not None:
        if args.TIMEOUT <= 0:
            raise ConfigError("--timeout must be positive")
        Constants.REQUEST_TIMEOUT = int(args.TIMEOUT)
    if getattr(args, "RETRIES", None) is not None:
        if args.RETRIES < 1:
            raise ConfigError("--retries must be at least 1")
        Constants.HTTP_RETRY_MAX = int(args.RETRIES)
    if getattr(args, "MAX_WORKERS", None) is not None:
        if args.MAX_WORKERS < 1:
            raise ConfigError("--max-workers must be at least 1")
        Constants.MAX_WORKERS = int(args.MAX_WORKERS)
    if getattr(args, "FAIL_FAST", False):
        Constants.FAIL_FAST = True
    if getattr(args, "INCLUDE_PRERELEASES", False):
        Constants.INCLUDE_PRERELEASES = True
    if getattr(args, "IGNORE_SNAPSHOTS", False):
        Constants.IGNORE_SNAPSHOTS = True
    if getattr(args, "IGNORE_INHERITED", False):
        Constants.IGNORE_INHERITED = True

    extra = []
    for value in getattr(args, "REPOSITORIES", None) or []:
        extra.append(dict(parse_repository_option(value), type=RepositoryType.NORMAL.value))
    for value in getattr(args, "PLUGIN_REPOSITORIES", None) or []:
        extra.append(dict(parse_repository_option(value), type=RepositoryType.PLUGIN.value))
    if extra:
        Constants.REPOSITORIES = list(Constants.REPOSITORIES) + extra
        logger.debug("Added %d repositories from the command line", len(extra))


def configured_repositories() -> List[Repository]:
    """``Constants.REPOSITORIES`` as ``Repository`` values.

    Raises:
        ConfigError: an entry lacks an id or url, or has an unknown type.
    """
    repositories = []
    for entry in Constants.REPOSITORIES:
        try:
            repositories.append(Repository(
                RepositoryType(str(entry.get("type", RepositoryType.NORMAL.value)).lower()),
                entry.get("id"),
                entry.get("url"),
            ))
        except ValueError as exc:
            raise ConfigError(f"Invalid repository {entry!r}: {exc}") from exc
    return repositories
