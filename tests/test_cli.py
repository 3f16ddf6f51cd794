"""Tests for the depfresh command line."""

import csv
import json
from unittest.mock import patch

import pytest

from artifacts.models import MavenArtifactType
from constants import Constants, ExitCodes
from depfresh import build_artifact_list, load_artifacts_file, main, parse_artifact_token
from args import parse_args
from conftest import FakeMetadataService

LISTINGS = {
    ("central", "org.example:lib"): ["1.0", "1.1"],
    ("central", "org.example:current"): ["2.0"],
}


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv(Constants.ENV_HOME, str(tmp_path))
    monkeypatch.delenv(Constants.ENV_CONFIG, raising=False)
    with patch("depfresh.configure_logging"), \
            patch("depfresh.MavenMetadataService", return_value=FakeMetadataService(LISTINGS)):
        yield tmp_path


def _run(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


def test_parse_artifact_token():
    artifact = parse_artifact_token("org.example:lib:1.0", MavenArtifactType.BUILD_PLUGIN)
    assert str(artifact) == "org.example:lib:1.0"
    assert artifact.type is MavenArtifactType.BUILD_PLUGIN
    assert parse_artifact_token("org.example:lib").version is None
    with pytest.raises(ValueError):
        parse_artifact_token("org.example")


def test_load_artifacts_file(tmp_path):
    listing = tmp_path / "artifacts.txt"
    listing.write_text(
        "# build\norg.example:lib:1.0\n\norg.example:maven-x-plugin:2.0 build-plugin\n", encoding="utf-8"
    )
    artifacts = load_artifacts_file(str(listing))
    assert [(str(a), a.type) for a in artifacts] == [
        ("org.example:lib:1.0", MavenArtifactType.DEPENDENCY),
        ("org.example:maven-x-plugin:2.0", MavenArtifactType.BUILD_PLUGIN),
    ]


def test_load_artifacts_file_errors(tmp_path):
    bad = tmp_path / "bad.txt"
    bad.write_text("org.example:lib:1.0 no-such-type\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        load_artifacts_file(str(bad))
    assert exc_info.value.code == ExitCodes.FILE_ERROR.value
    with pytest.raises(SystemExit):
        load_artifacts_file(str(tmp_path / "missing.txt"))


def test_build_artifact_list_deduplicates():
    args = parse_args(["-p", "g:a:1.0", "-p", "g:a:1.0", "--plugin", "g:p:1.0"])
    assert [str(a) for a in build_artifact_list(args)] == ["g:a:1.0", "g:p:1.0"]


def test_main_exports_json(cli_env):
    output = cli_env / "out.json"
    code = _run(["-p", "org.example:lib:1.0", "-p", "org.example:current:2.0", "-o", str(output)])

    assert code == ExitCodes.SUCCESS.value
    data = json.loads(output.read_text(encoding="utf-8"))
    assert [(d["artifactId"], d["status"], d["updateVersion"]) for d in data] == [
        ("lib", "outdated", "1.1"), ("current", "up-to-date", None),
    ]


def test_main_exports_csv(cli_env):
    output = cli_env / "out.csv"
    assert _run(["-p", "org.example:lib:1.0", "-o", str(output)]) == ExitCodes.SUCCESS.value
    with open(output, newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))
    assert rows[0][:5] == ["groupId", "artifactId", "type", "version", "updateVersion"]
    assert rows[1][:5] == ["org.example", "lib", "dependency", "1.0", "1.1"]


def test_main_error_on_warnings(cli_env):
    assert _run(["-p", "org.example:lib:1.0", "--error-on-warnings"]) == ExitCodes.EXIT_WARNINGS.value
    assert _run(["-p", "org.example:current:2.0", "--error-on-warnings"]) == ExitCodes.SUCCESS.value


def test_main_without_artifacts(cli_env):
    assert _run([]) == ExitCodes.SUCCESS.value


def test_main_invalid_config(cli_env):
    config = cli_env / "depfresh.yml"
    config.write_text("retries: many\n", encoding="utf-8")
    assert _run(["-p", "org.example:lib:1.0", "-c", str(config)]) == ExitCodes.FILE_ERROR.value


def test_main_invalid_ignore_file(cli_env):
    (cli_env / Constants.IGNORE_FILE_NAME).write_text("broken\n", encoding="utf-8")
    assert _run(["-p", "org.example:lib:1.0"]) == ExitCodes.FILE_ERROR.value


def test_main_session_error(cli_env, monkeypatch):
    monkeypatch.delenv("MISSING_PASSWORD", raising=False)
    config = cli_env / "depfresh.yml"
    config.write_text(
        "settings:\n  servers:\n    central:\n      username: u\n      password: ${env.MISSING_PASSWORD}\n",
        encoding="utf-8",
    )
    assert _run(["-p", "org.example:lib:1.0", "-c", str(config)]) == ExitCodes.CONNECTION_ERROR.value
