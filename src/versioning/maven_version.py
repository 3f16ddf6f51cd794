"""Maven version ordering.

Ordering follows Maven's ComparableVersion as implemented by
``univers.versions.MavenVersion``::

    alpha < beta < milestone < rc == cr < snapshot < "" == ga == final < sp

Unknown qualifiers sort after ``sp``. ``1.0-1`` sorts after ``1.0`` but before
``1.0.1``, and trailing zeros are insignificant, hence ``1 == 1.0 == 1.0.0``.
"""

from __future__ import annotations

import functools
from typing import Iterable, List

from univers.versions import MavenVersion


@functools.total_ordering
class ComparableVersion:
    """A version string ordered with Maven semantics."""

    __slots__ = ("text", "_version")

    def __init__(self, text: str):
        if not isinstance(text, str) or not text:
            raise ValueError(f"version must be a non-empty string, got {text!r}")
        self.text = text
        # univers raises InvalidVersion, a ValueError subclass
        self._version = MavenVersion(text)

    def compare(self, other: "ComparableVersion") -> int:
        return (other._version < self._version) - (self._version < other._version)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComparableVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "ComparableVersion") -> bool:
        if not isinstance(other, ComparableVersion):
            return NotImplemented
        return self.compare(other) < 0

    __hash__ = None

    def __repr__(self) -> str:
        return f"ComparableVersion({self.text!r})"

    def __str__(self) -> str:
        return self.text


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 comparing two version strings."""
    return ComparableVersion(left).compare(ComparableVersion(right))


def version_sort_key(version: str):
    """Sort key ordering by Maven rank, then text for equally ranked spellings."""
    return (ComparableVersion(version), version)


def sort_versions(versions: Iterable[str]) -> List[str]:
    """Sort version strings ascending."""
    return sorted(versions, key=version_sort_key)
