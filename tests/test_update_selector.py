"""Tests for update version selection."""

import pytest

from filters.artifact import ACCEPT_ALL, REJECT_ALL, WildcardArtifactFilter
from filters.version import QualifierVersionFilterFactory, create_version_filter_factory
from versioning.models import ArtifactAvailableVersions, ArtifactUpdateVersion
from versioning.selector import select_update_version
from conftest import make_artifact


def _select(coordinates, versions, include_prereleases=False, artifact_filter=ACCEPT_ALL):
    artifact = make_artifact(coordinates)
    version_filter = create_version_filter_factory(include_prereleases).create(artifact.version)
    return select_update_version(ArtifactAvailableVersions(artifact, versions), version_filter, artifact_filter)


def test_picks_highest_stable_newer_version():
    update = _select("g:a:1.0.0", ["0.9", "1.0.0", "1.1.0", "1.2.0", "2.0.0-rc1"])
    assert update == ArtifactUpdateVersion(make_artifact("g:a:1.0.0"), "1.2.0")


def test_prereleases_offered_on_request():
    assert _select("g:a:1.0.0", ["1.1.0", "2.0.0-rc1"], include_prereleases=True).update_version == "2.0.0-rc1"


def test_no_update_when_current_is_latest():
    assert _select("g:a:2.0", ["1.0", "1.5", "2.0"]) is None


def test_no_update_for_empty_listing():
    assert _select("g:a:1.0", []) is None


def test_equal_rank_is_not_an_update():
    assert _select("g:a:1.0", ["1.0.0", "1.0-final"]) is None


def test_result_is_independent_of_listing_order():
    versions = ["1.3", "1.10", "1.2", "1.9"]
    assert _select("g:a:1.0", versions) == _select("g:a:1.0", list(reversed(versions)))
    assert _select("g:a:1.0", versions).update_version == "1.10"


def test_equal_rank_candidates_tie_break_on_text():
    assert _select("g:a:1.0", ["2", "2.0", "2.0.0"]).update_version == "2.0.0"


def test_snapshots_only_for_snapshot_declarations():
    versions = ["1.0", "1.1-SNAPSHOT", "1.1"]
    snapshot_allowed = create_version_filter_factory(include_prereleases=True)

    released = make_artifact("g:a:1.0")
    result = select_update_version(
        ArtifactAvailableVersions(released, versions + ["1.2-SNAPSHOT"]),
        snapshot_allowed.create("1.0"),
    )
    assert result.update_version == "1.1"

    snapshot = make_artifact("g:a:1.0-SNAPSHOT")
    result = select_update_version(
        ArtifactAvailableVersions(snapshot, versions + ["1.2-SNAPSHOT"]),
        QualifierVersionFilterFactory().create("1.0-SNAPSHOT"),
    )
    assert result.update_version == "1.2-SNAPSHOT"


def test_qualifier_family_is_kept():
    assert _select("com.google.guava:guava:31.1-jre", ["32.1.2-jre", "32.1.3-android"]).update_version == "32.1.2-jre"


def test_rejected_update_means_no_result():
    assert _select("g:a:1.0", ["1.1", "1.2"], artifact_filter=REJECT_ALL) is None
    pin = WildcardArtifactFilter.parse("g:a:1.1")
    assert _select("g:a:1.0", ["1.1"], artifact_filter=pin).update_version == "1.1"
    assert _select("g:a:1.0", ["1.1", "1.2"], artifact_filter=pin) is None


def test_unversioned_artifact_has_no_update():
    artifact = make_artifact("g:a")
    version_filter = create_version_filter_factory().create("1.0")
    assert select_update_version(ArtifactAvailableVersions(artifact, ["1.0"]), version_filter) is None


def test_invalid_listing_rejected():
    with pytest.raises(ValueError):
        ArtifactAvailableVersions(make_artifact("g:a:1.0"), ["1.0", ""])


def test_highest_stable_release_wins_over_prerelease():
    assert _select("g:a:1.2.0", ["1.2.1", "1.3.0-beta", "1.3.0"]).update_version == "1.3.0"


def test_available_versions_are_snapshotted():
    versions = ["1.0", "1.1"]
    available = ArtifactAvailableVersions(make_artifact("g:a:1.0"), versions)
    versions.append("2.0")
    versions[0] = "0.1"
    assert available.available_versions == ("1.0", "1.1")
