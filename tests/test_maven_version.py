"""Tests for Maven version ordering."""

import pytest

from versioning.maven_version import ComparableVersion, compare_versions, sort_versions


@pytest.mark.parametrize("lower,higher", [
    ("1.0", "1.1"),
    ("1.9", "1.10"),
    ("1.9.9", "2.0"),
    ("1.0-alpha-1", "1.0"),
    ("1.0-alpha1", "1.0-beta1"),
    ("1.0-beta1", "1.0-M1"),
    ("1.0-M1", "1.0-rc1"),
    ("1.0-rc1", "1.0-SNAPSHOT"),
    ("1.0-SNAPSHOT", "1.0"),
    ("1.0", "1.0-sp1"),
    ("1.0-sp1", "1.0-foo"),
    ("1.0", "1.0-1"),
    ("1.0-1", "1.0.1"),
])
def test_ordering(lower, higher):
    assert compare_versions(lower, higher) == -1
    assert compare_versions(higher, lower) == 1
    assert ComparableVersion(lower) < ComparableVersion(higher)


@pytest.mark.parametrize("left,right", [
    ("1", "1.0.0"),
    ("1.0", "1.0-final"),
    ("1.0", "1.0.GA"),
    ("1.0-rc1", "1.0-cr1"),
    ("1.0-RC1", "1.0-rc1"),
    ("1.0-a1", "1.0-alpha1"),
])
def test_equivalent_spellings(left, right):
    assert compare_versions(left, right) == 0
    assert ComparableVersion(left) == ComparableVersion(right)


def test_sort_versions_is_ascending_with_textual_tie_break():
    versions = ["2.0", "1.0.0", "1.0-SNAPSHOT", "1.10", "1.0", "1.2"]
    assert sort_versions(versions) == ["1.0-SNAPSHOT", "1.0", "1.0.0", "1.2", "1.10", "2.0"]


def test_empty_version_rejected():
    with pytest.raises(ValueError):
        ComparableVersion("")


def test_sort_versions_handles_qualified_listings():
    versions = ["1.0", "1.0-rc1", "1.0-alpha1", "1.0.1", "1.0-1", "1.0-sp1"]
    assert sort_versions(versions) == ["1.0-alpha1", "1.0-rc1", "1.0", "1.0-sp1", "1.0-1", "1.0.1"]
