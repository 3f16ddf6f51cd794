"""Constants used in the project."""

import json
import logging
import os
from enum import Enum
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3
    INTERRUPTED = 130


class ConfigError(Exception):
    """Raised when a configuration file exists but cannot be read or parsed."""


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    NAME = "depfresh"
    VERSION = "1.0.0"
    USER_AGENT = f"{NAME}/{VERSION}"

    MAVEN_CENTRAL_ID = "central"
    MAVEN_CENTRAL_URL = "https://repo.maven.apache.org/maven2"
    METADATA_FILE_NAME = "maven-metadata.xml"
    IGNORE_FILE_NAME = ".depfresh-ignore"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "DEPFRESH_LOG_LEVEL"
    ENV_CONFIG = "DEPFRESH_CONFIG"
    ENV_HOME = "DEPFRESH_HOME"  # Overrides the home directory holding the user ignore file
    DEFAULT_CONFIG_LOCATIONS = (
        "depfresh.yml",
        "depfresh.yaml",
        os.path.join("~", ".config", "depfresh", "depfresh.yml"),
    )

    REQUEST_TIMEOUT = 30  # Timeout in seconds for each metadata request
    HTTP_RETRY_MAX = 1  # Attempts per request; 1 disables retries
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    MAX_WORKERS = 8  # Concurrent artifact resolutions
    MAX_REPOSITORY_WORKERS = 4  # Concurrent repository queries per artifact
    FAIL_FAST = False  # Abort an artifact on the first failing repository

    INCLUDE_PRERELEASES = False
    IGNORE_SNAPSHOTS = False
    IGNORE_INHERITED = False

    # Repository definitions as {"id": ..., "url": ..., "type": "normal"|"plugin"}
    REPOSITORIES = [
        {"id": MAVEN_CENTRAL_ID, "url": MAVEN_CENTRAL_URL, "type": "normal"},
        {"id": MAVEN_CENTRAL_ID, "url": MAVEN_CENTRAL_URL, "type": "plugin"},
    ]
    # Settings handed to the repository session (servers credentials, proxies)
    SETTINGS: Dict[str, Any] = {}


def _default_config_paths():
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path:
        yield env_path
    for candidate in Constants.DEFAULT_CONFIG_LOCATIONS:
        yield os.path.expanduser(candidate)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load a YAML or JSON configuration mapping.

    Explicit ``path`` must exist. Without it the first existing default
    location is used; no file at all yields an empty mapping.

    Raises:
        ConfigError: the file cannot be read, parsed or is not a mapping.
    """
    if path:
        candidates = [path]
    else:
        candidates = [p for p in _default_config_paths() if os.path.isfile(p)]
        if not candidates:
            return {}
    chosen = candidates[0]
    try:
        with open(chosen, "r", encoding="utf-8") as fh:
            if chosen.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to load configuration {chosen}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {chosen} must be a mapping")
    logger.debug("Loaded configuration from %s", chosen)
    return data


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


_CONFIG_KEYS = {
    "request_timeout": ("REQUEST_TIMEOUT", int),
    "retries": ("HTTP_RETRY_MAX", int),
    "max_workers": ("MAX_WORKERS", int),
    "max_repository_workers": ("MAX_REPOSITORY_WORKERS", int),
    "fail_fast": ("FAIL_FAST", _as_bool),
    "include_prereleases": ("INCLUDE_PRERELEASES", _as_bool),
    "ignore_snapshots": ("IGNORE_SNAPSHOTS", _as_bool),
    "ignore_inherited": ("IGNORE_INHERITED", _as_bool),
}


def apply_config(config: Dict[str, Any]) -> None:
    """Fold a loaded configuration mapping into ``Constants``.

    Recognized top-level keys mirror the tunables above, plus
    ``repositories`` (list of id/url/type mappings) and ``settings``
    (servers and proxies for the repository session).
    """
    for key, (attr, cast) in _CONFIG_KEYS.items():
        if key in config and config[key] is not None:
            try:
                setattr(Constants, attr, cast(config[key]))
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Invalid value for {key}: {config[key]!r}") from exc
    repositories = config.get("repositories")
    if repositories is not None:
        if not isinstance(repositories, list) or not all(isinstance(r, dict) for r in repositories):
            raise ConfigError("'repositories' must be a list of mappings")
        Constants.REPOSITORIES = [dict(r) for r in repositories]
    settings = config.get("settings")
    if settings is not None:
        if not isinstance(settings, dict):
            raise ConfigError("'settings' must be a mapping")
        Constants.SETTINGS = dict(settings)
