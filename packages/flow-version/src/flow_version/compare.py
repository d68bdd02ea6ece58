# SPDX-License-Identifier: MIT
"""Version comparison and sorting over strings and SemanticVersion values.

Ordering: major, minor, bugfix numerically, then pre-release < release.
Pre-release labels compare by code point order, so "beta10" < "beta2".
"""

from __future__ import annotations

from typing import Iterable, Union

from .semver import SemanticVersion, parse_version

VersionLike = Union[str, SemanticVersion]


def _coerce(version: VersionLike) -> SemanticVersion:
    return version if isinstance(version, SemanticVersion) else parse_version(version)


def compare_versions(version1: VersionLike, version2: VersionLike) -> int:
    """Compare two versions by precedence.

    Args:
        version1: First version (string or SemanticVersion)
        version2: Second version (string or SemanticVersion)

    Returns:
        -1 if version1 < version2
        0 if version1 == version2
        1 if version1 > version2

    Raises:
        FormatError: If either version string is invalid

    Examples:
        >>> compare_versions("1.0.0", "2.0.0")
        -1
        >>> compare_versions("1.2.3.beta", "1.2.3-beta")
        0
        >>> compare_versions("1.2.3", "1.2.3-rc1")
        1
    """
    key1 = _coerce(version1).sort_key
    key2 = _coerce(version2).sort_key
    if key1 == key2:
        return 0
    return -1 if key1 < key2 else 1


def version_key(version: VersionLike) -> tuple:
    """Return a sort key for a version, suitable for sorting mixed inputs.

    Examples:
        >>> sorted(["1.0.0", "2.0.0", "1.0.0-alpha"], key=version_key)
        ['1.0.0-alpha', '1.0.0', '2.0.0']
    """
    return _coerce(version).sort_key


def sort_versions(
    versions: Iterable[VersionLike], reverse: bool = False
) -> list[SemanticVersion]:
    """Parse and sort versions, oldest first unless ``reverse`` is set."""
    return sorted((_coerce(v) for v in versions), reverse=reverse)


def latest_version(versions: Iterable[VersionLike]) -> SemanticVersion:
    """Return the highest-precedence version.

    Raises:
        ValueError: If ``versions`` is empty
        FormatError: If any version string is invalid
    """
    parsed = [_coerce(v) for v in versions]
    if not parsed:
        raise ValueError("No versions given")
    return max(parsed)
