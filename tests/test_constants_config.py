"""Tests for configuration loading and CLI overrides."""

import json

import pytest

from args import parse_args
from artifacts.models import RepositoryType
from cli_config import apply_cli_overrides, configured_repositories, parse_repository_option
from constants import ConfigError, Constants, ExitCodes, apply_config, load_config


def test_exit_codes():
    assert ExitCodes.SUCCESS.value == 0
    assert ExitCodes.FILE_ERROR.value == 1
    assert ExitCodes.CONNECTION_ERROR.value == 2
    assert ExitCodes.EXIT_WARNINGS.value == 3
    assert ExitCodes.INTERRUPTED.value == 130


def test_load_yaml_and_json(tmp_path):
    yml = tmp_path / "depfresh.yml"
    yml.write_text("request_timeout: 5\nfail_fast: yes\n", encoding="utf-8")
    assert load_config(str(yml)) == {"request_timeout": 5, "fail_fast": True}

    js = tmp_path / "depfresh.json"
    js.write_text(json.dumps({"retries": 3}), encoding="utf-8")
    assert load_config(str(js)) == {"retries": 3}


def test_load_config_errors(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yml"))
    broken = tmp_path / "broken.yml"
    broken.write_text("a: [1, 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(broken))
    listing = tmp_path / "list.yml"
    listing.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(listing))


def test_default_locations(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv(Constants.ENV_CONFIG, raising=False)
    assert load_config() == {}

    env_config = tmp_path / "custom.yaml"
    env_config.write_text("max_workers: 2\n", encoding="utf-8")
    monkeypatch.setenv(Constants.ENV_CONFIG, str(env_config))
    assert load_config() == {"max_workers": 2}


def test_apply_config():
    apply_config({
        "request_timeout": "12",
        "retries": 3,
        "include_prereleases": "true",
        "ignore_snapshots": "no",
        "repositories": [{"id": "internal", "url": "https://nexus.example.com/maven"}],
        "settings": {"proxies": {"https": "http://proxy:3128"}},
    })
    assert Constants.REQUEST_TIMEOUT == 12
    assert Constants.HTTP_RETRY_MAX == 3
    assert Constants.INCLUDE_PRERELEASES is True
    assert Constants.IGNORE_SNAPSHOTS is False
    assert Constants.SETTINGS == {"proxies": {"https": "http://proxy:3128"}}
    assert [r.id for r in configured_repositories()] == ["internal"]


@pytest.mark.parametrize("config", [
    {"request_timeout": "soon"},
    {"repositories": "https://nexus.example.com"},
    {"settings": ["servers"]},
])
def test_apply_config_rejects_invalid_values(config):
    with pytest.raises(ConfigError):
        apply_config(config)


def test_configured_repositories_rejects_bad_entries():
    Constants.REPOSITORIES = [{"id": "x", "url": "https://x", "type": "mirror"}]
    with pytest.raises(ConfigError):
        configured_repositories()
    Constants.REPOSITORIES = [{"id": "x"}]
    with pytest.raises(ConfigError):
        configured_repositories()


def test_cli_overrides_win():
    apply_config({"request_timeout": 12, "max_workers": 2})
    apply_cli_overrides(parse_args([
        "--timeout", "4", "--max-workers", "16", "--fail-fast", "--ignore-inherited",
        "--repository", "internal=https://nexus.example.com/maven",
        "--plugin-repository", "plugins=https://plugins.example.com/maven",
    ]))
    assert Constants.REQUEST_TIMEOUT == 4
    assert Constants.MAX_WORKERS == 16
    assert Constants.FAIL_FAST is True
    assert Constants.IGNORE_INHERITED is True
    repositories = configured_repositories()
    assert [(r.id, r.type) for r in repositories][-2:] == [
        ("internal", RepositoryType.NORMAL), ("plugins", RepositoryType.PLUGIN),
    ]


@pytest.mark.parametrize("argv", [["--timeout", "0"], ["--retries", "0"], ["--repository", "no-url"]])
def test_invalid_cli_overrides(argv):
    with pytest.raises(ConfigError):
        apply_cli_overrides(parse_args(argv))


def test_parse_repository_option():
    assert parse_repository_option(" internal = https://x/maven ") == {"id": "internal", "url": "https://x/maven"}
    with pytest.raises(ConfigError):
        parse_repository_option("=https://x")
