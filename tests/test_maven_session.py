"""Tests for the repository session."""

from unittest.mock import patch

import pytest

from artifacts.models import Repository, RepositoryType
from constants import Constants
from registry.maven.session import MavenSession, MavenSessionError

PRIVATE = Repository(RepositoryType.NORMAL, "internal", "https://nexus.example.com/repository/maven")


def test_credentials_are_keyed_by_repository_id(central, monkeypatch):
    monkeypatch.setenv("REPO_PASSWORD", "s3cret")
    settings = {"servers": {"internal": {"username": "deployer", "password": "${env.REPO_PASSWORD}"}}}

    with MavenSession(settings) as session:
        assert session.auth_for(PRIVATE) == ("deployer", "s3cret")
        assert session.auth_for(central) is None


def test_missing_environment_variable_is_fatal(monkeypatch):
    monkeypatch.delenv("REPO_PASSWORD", raising=False)
    settings = {"servers": {"internal": {"username": "deployer", "password": "${env.REPO_PASSWORD}"}}}

    with pytest.raises(MavenSessionError):
        MavenSession(settings)


@pytest.mark.parametrize("settings", [
    {"servers": ["internal"]},
    {"servers": {"internal": {"password": "x"}}},
    {"proxies": "http://proxy"},
    "not-a-mapping",
])
def test_invalid_settings(settings):
    with pytest.raises(MavenSessionError):
        MavenSession(settings)


def test_invalid_tunables():
    with pytest.raises(MavenSessionError):
        MavenSession({}, timeout=0)
    with pytest.raises(MavenSessionError):
        MavenSession({}, max_attempts=0)


def test_defaults_come_from_constants(monkeypatch):
    monkeypatch.setattr(Constants, "REQUEST_TIMEOUT", 7)
    monkeypatch.setattr(Constants, "HTTP_RETRY_MAX", 2)
    monkeypatch.setattr(Constants, "SETTINGS", {"headers": {"X-Trace": "test"}})

    with MavenSession() as session:
        assert session.timeout == 7.0
        assert session.max_attempts == 2


@patch("registry.maven.session.robust_get")
def test_get_passes_auth_and_tunables(mock_get):
    mock_get.return_value = (200, {}, "<metadata/>")
    session = MavenSession({"servers": {"internal": {"username": "u", "password": "p"}}}, timeout=3, max_attempts=2)

    result = session.get("https://nexus.example.com/x", PRIVATE)

    assert result == (200, {}, "<metadata/>")
    _, kwargs = mock_get.call_args
    assert kwargs["auth"] == ("u", "p")
    assert kwargs["timeout"] == 3.0
    assert kwargs["max_attempts"] == 2
    session.close()


def test_closed_session_rejects_requests(central):
    session = MavenSession({})
    session.close()
    assert session.closed
    with pytest.raises(MavenSessionError):
        session.get("https://repo.example.com/x", central)
