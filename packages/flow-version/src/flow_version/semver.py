# SPDX-License-Identifier: MIT
"""Semantic version value type for host framework versions.

Supports MAJOR.MINOR.BUGFIX with an optional single pre-release label:
- Parsed from ``1.2.3``, ``1.2.3-beta1`` or ``1.2.3.beta1``
- Always rendered as ``1.2.3`` or ``1.2.3-beta1``
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional

# Whole-string grammar: digits "." digits "." digits [("-" | ".") remainder]
VERSION_PATTERN = re.compile(
    r"(?P<major>[0-9]+)"
    r"\.(?P<minor>[0-9]+)"
    r"\.(?P<bugfix>[0-9]+)"
    r"(?:[-.](?P<prerelease>.*))?",
    re.DOTALL,
)

EXPECTED_FORMAT = "major.minor.bugfix[-prerelease]"

# Prerelease ranks inside the sort key. A real prerelease is never empty, so
# (PRERELEASE_RANK, "") sorts before all of them and (RELEASE_RANK, "") after.
PRERELEASE_RANK = 0
RELEASE_RANK = 1


class VersionError(ValueError):
    """Base class for version construction and parsing errors."""


class ValidationError(VersionError):
    """Raised when a SemanticVersion is constructed from invalid fields."""

    def __init__(self, field: str, value: object, rule: str):
        self.field = field
        self.value = value
        self.rule = rule
        super().__init__(f"{field} {value!r} {rule}")


class FormatError(VersionError):
    """Raised when a version string does not match the version grammar."""

    def __init__(self, text: str, message: str = ""):
        self.text = text
        self.message = message or (
            f"The version must be in the form of {EXPECTED_FORMAT} but is {text!r}"
        )
        super().__init__(self.message)


@total_ordering
@dataclass(frozen=True, slots=True)
class SemanticVersion:
    """A parsed ``major.minor.bugfix[-prerelease]`` version.

    Attributes:
        major: Major version number
        minor: Minor version number
        bugfix: Bugfix version number
        prerelease: Optional pre-release label (e.g., "beta1", "rc.2")

    A release sorts after every pre-release sharing its numbers:

        >>> SemanticVersion(1, 2, 3, "beta") < SemanticVersion(1, 2, 3)
        True
    """

    major: int
    minor: int
    bugfix: int
    prerelease: Optional[str] = None

    def __post_init__(self) -> None:
        if self.prerelease is not None:
            if not isinstance(self.prerelease, str):
                raise ValidationError("prerelease", self.prerelease, "is not a string")
            if not self.prerelease.strip():
                raise ValidationError("prerelease", self.prerelease, "is blank")
            if self.prerelease.startswith("-"):
                raise ValidationError("prerelease", self.prerelease, "starts with a dash")

    def __str__(self) -> str:
        """Return the canonical ``major.minor.bugfix[-prerelease]`` form."""
        version = f"{self.major}.{self.minor}.{self.bugfix}"
        if self.prerelease is not None:
            version += f"-{self.prerelease}"
        return version

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.sort_key < other.sort_key

    @property
    def sort_key(self) -> tuple[int, int, int, tuple[int, str]]:
        """Key ordering versions by precedence."""
        if self.prerelease is None:
            prerelease_key = (RELEASE_RANK, "")
        else:
            prerelease_key = (PRERELEASE_RANK, self.prerelease)
        return (self.major, self.minor, self.bugfix, prerelease_key)

    @property
    def is_prerelease(self) -> bool:
        """Return True if this is a pre-release version."""
        return self.prerelease is not None

    @property
    def base_version(self) -> str:
        """Return the version without its pre-release label."""
        return f"{self.major}.{self.minor}.{self.bugfix}"

    def is_exactly(self, major: int, minor: Optional[int] = None) -> bool:
        """Return True if the major (and, when given, minor) numbers match."""
        if minor is None:
            return self.major == major
        return self.major == major and self.minor == minor

    def is_at_least(self, major: int, minor: Optional[int] = None) -> bool:
        """Return True if this version is at least ``major`` or ``major.minor``.

        Any pre-release of ``major.minor.0`` satisfies ``major.minor``, so
        ``2.5.0-alpha`` is at least 2.5 while ``2.4.99`` is not.
        """
        if minor is None:
            return self.major >= major
        return self.sort_key >= (major, minor, 0, (PRERELEASE_RANK, ""))

    @classmethod
    def from_parts(
        cls, major: int, minor: int, bugfix: int, label: Optional[str] = None
    ) -> SemanticVersion:
        """Build a version from a runtime's numeric version metadata.

        A blank build label means a final release, the same as a blank
        pre-release after the separator in :meth:`parse`.
        """
        if isinstance(label, str) and not label.strip():
            label = None
        return cls(major, minor, bugfix, label)

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse ``text``; see :func:`parse_version`."""
        return parse_version(text)


def parse_version(text: str) -> SemanticVersion:
    """Parse a version string into a SemanticVersion.

    Args:
        text: ``major.minor.bugfix`` optionally followed by ``-`` or ``.``
            and a pre-release label

    Returns:
        The parsed SemanticVersion. A blank label after the separator yields
        no pre-release.

    Raises:
        FormatError: If the text does not match the grammar

    Examples:
        >>> parse_version("1.2.3")
        SemanticVersion(major=1, minor=2, bugfix=3, prerelease=None)

        >>> parse_version("1.2.3.beta1")
        SemanticVersion(major=1, minor=2, bugfix=3, prerelease='beta1')

        >>> parse_version("1.2.3-")
        SemanticVersion(major=1, minor=2, bugfix=3, prerelease=None)
    """
    if not isinstance(text, str):
        raise FormatError(
            str(text),
            f"Version must be a {EXPECTED_FORMAT} string, "
            f"got {type(text).__name__} {text!r}",
        )

    match = VERSION_PATTERN.fullmatch(text)
    if not match:
        raise FormatError(text)

    try:
        major = int(match.group("major"))
        minor = int(match.group("minor"))
        bugfix = int(match.group("bugfix"))
    except ValueError as e:
        # int() refuses digit strings beyond the interpreter's conversion limit
        raise FormatError(
            text, f"Invalid number in version {text!r} ({EXPECTED_FORMAT}): {e}"
        ) from e

    prerelease = match.group("prerelease")
    if prerelease is not None and not prerelease.strip():
        prerelease = None

    try:
        return SemanticVersion(major, minor, bugfix, prerelease)
    except ValidationError as e:
        raise FormatError(
            text, f"Invalid pre-release in version {text!r} ({EXPECTED_FORMAT}): {e}"
        ) from e


def is_valid_version(text: str) -> bool:
    """Check if a string parses as a version.

    Examples:
        >>> is_valid_version("1.2.3.beta1")
        True
        >>> is_valid_version("1.2")
        False
    """
    try:
        parse_version(text)
    except FormatError:
        return False
    return True
