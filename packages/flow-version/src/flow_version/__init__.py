# SPDX-License-Identifier: MIT
"""Semantic versions for host framework version checks.

This package parses ``major.minor.bugfix[-prerelease]`` version strings into
ordered, immutable values and detects which framework version is installed.

Example:
    >>> from flow_version import SemanticVersion, parse_version
    >>>
    >>> version = parse_version("24.3.0.beta2")
    >>> str(version)
    '24.3.0-beta2'
    >>> version < SemanticVersion(24, 3, 0)
    True
    >>> version.is_at_least(24, 3)
    True
"""

__version__ = "0.1.0"

from .semver import (
    SemanticVersion,
    parse_version,
    is_valid_version,
    VersionError,
    ValidationError,
    FormatError,
    VERSION_PATTERN,
)
from .compare import (
    compare_versions,
    version_key,
    sort_versions,
    latest_version,
)
from .config import (
    DetectionConfig,
    ConfigError,
    load_config,
)
from .detect import (
    VersionDetector,
    DetectionError,
    configure,
    get_detector,
    framework_version,
)

__all__ = [
    # Version values
    "SemanticVersion",
    "parse_version",
    "is_valid_version",
    "VersionError",
    "ValidationError",
    "FormatError",
    "VERSION_PATTERN",
    # Comparison
    "compare_versions",
    "version_key",
    "sort_versions",
    "latest_version",
    # Detection
    "DetectionConfig",
    "ConfigError",
    "load_config",
    "VersionDetector",
    "DetectionError",
    "configure",
    "get_detector",
    "framework_version",
]
