"""Repository session shared by all metadata queries of a run.

Wraps one pooled ``requests.Session`` configured from the settings mapping
supplied by the configuration layer::

    settings:
      servers:
        internal:
          username: deployer
          password: ${env.REPO_PASSWORD}
      proxies:
        https: http://proxy.example.com:3128
      headers:
        X-Trace: depfresh

Server credentials are keyed by repository id, as in Maven's settings.xml.
The session is read-only once built and is safe to share across threads.
"""
from __future__ import annotations

import logging
import os
import re
from typing import Any, Dict, Mapping, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter

from artifacts.models import Repository
from common.http_client import robust_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from constants import Constants

logger = logging.getLogger(__name__)

_ENV_REFERENCE = re.compile(r"\$\{env\.([A-Za-z_][A-Za-z0-9_]*)\}")


class MavenSessionError(Exception):
    """Raised when the repository session cannot be built; fatal for a run."""


def _interpolate(value: str, key: str) -> str:
    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name not in os.environ:
            raise MavenSessionError(f"Environment variable {name} referenced by {key} is not set")
        return os.environ[name]

    return _ENV_REFERENCE.sub(_replace, value)


def _string_mapping(value: Any, key: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MavenSessionError(f"settings.{key} must be a mapping")
    return {str(k): _interpolate(str(v), f"settings.{key}.{k}") for k, v in value.items()}


class MavenSession:
    """Pooled HTTP session plus per-repository credentials."""

    def __init__(
        self,
        settings: Optional[Mapping[str, Any]] = None,
        *,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        pool_size: Optional[int] = None,
    ):
        settings = Constants.SETTINGS if settings is None else settings
        if not isinstance(settings, Mapping):
            raise MavenSessionError("settings must be a mapping")
        self._credentials = self._load_servers(settings.get("servers"))
        proxies = _string_mapping(settings.get("proxies"), "proxies")
        headers = _string_mapping(settings.get("headers"), "headers")
        self.timeout = float(timeout if timeout is not None else Constants.REQUEST_TIMEOUT)
        self.max_attempts = int(max_attempts if max_attempts is not None else Constants.HTTP_RETRY_MAX)
        if self.timeout <= 0 or self.max_attempts < 1:
            raise MavenSessionError("timeout must be positive and max_attempts at least 1")
        size = pool_size or max(Constants.MAX_WORKERS * Constants.MAX_REPOSITORY_WORKERS, 10)

        try:
            http = requests.Session()
            adapter = HTTPAdapter(pool_connections=size, pool_maxsize=size)
            http.mount("https://", adapter)
            http.mount("http://", adapter)
            http.headers.update({"User-Agent": Constants.USER_AGENT, "Accept": "application/xml, text/xml, */*"})
            http.headers.update(headers)
            http.proxies.update(proxies)
        except (requests.RequestException, ValueError) as exc:
            raise MavenSessionError(f"Unable to create HTTP session: {exc}") from exc
        self._http: Optional[requests.Session] = http

        if is_debug_enabled(logger):
            logger.debug(
                "Repository session created",
                extra=extra_context(
                    event="session_created",
                    component="maven_session",
                    servers=sorted(self._credentials),
                    proxies={k: safe_url(v) for k, v in proxies.items()},
                    timeout=self.timeout,
                    max_attempts=self.max_attempts
                )
            )

    @staticmethod
    def _load_servers(servers: Any) -> Dict[str, Tuple[str, str]]:
        if servers is None:
            return {}
        if not isinstance(servers, Mapping):
            raise MavenSessionError("settings.servers must be a mapping of repository id to credentials")
        credentials = {}
        for server_id, entry in servers.items():
            if not isinstance(entry, Mapping) or "username" not in entry:
                raise MavenSessionError(f"settings.servers.{server_id} must define a username")
            username = _interpolate(str(entry["username"]), f"settings.servers.{server_id}.username")
            password = _interpolate(str(entry.get("password", "")), f"settings.servers.{server_id}.password")
            credentials[str(server_id)] = (username, password)
        return credentials

    @property
    def closed(self) -> bool:
        return self._http is None

    def auth_for(self, repository: Repository) -> Optional[Tuple[str, str]]:
        """Credentials configured for the repository id, if any."""
        return self._credentials.get(repository.id)

    def get(self, url: str, repository: Repository) -> Tuple[int, Dict[str, str], str]:
        """GET ``url`` on behalf of ``repository``.

        Raises:
            MavenSessionError: the session was closed.
            HttpRequestError: no response could be obtained.
        """
        if self._http is None:
            raise MavenSessionError("Session is closed")
        return robust_get(
            url,
            session=self._http,
            timeout=self.timeout,
            max_attempts=self.max_attempts,
            auth=self.auth_for(repository),
        )

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "MavenSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
