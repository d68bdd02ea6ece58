# SPDX-License-Identifier: MIT
"""Detection of the host framework's version.

The version is taken, in order, from:

1. an explicit version string in the configuration
2. the first installed distribution listed in ``distributions``
3. the core distribution, once its major version is at least
   ``core_shares_version_since``

Each detector resolves its versions at most once and caches them. A
process-wide detector is available through :func:`get_detector`; install a
specific configuration with :func:`configure` before first use.
"""

from __future__ import annotations

import logging
import threading
from importlib import metadata
from typing import Callable, Optional

from .config import DetectionConfig
from .semver import FormatError, SemanticVersion, parse_version

logger = logging.getLogger(__name__)

MetadataLookup = Callable[[str], str]


class DetectionError(Exception):
    """Raised when the framework version cannot be determined."""

    pass


class VersionDetector:
    """Resolves and caches the platform and core versions of a framework."""

    def __init__(
        self,
        config: DetectionConfig,
        metadata_lookup: MetadataLookup = metadata.version,
    ) -> None:
        self.config = config
        self._lookup = metadata_lookup
        # Reentrant: the platform lookup may resolve the core under the same lock.
        self._lock = threading.RLock()
        self._core: Optional[SemanticVersion] = None
        self._version: Optional[SemanticVersion] = None

    @property
    def resolved(self) -> bool:
        """Return True once the platform version has been determined."""
        return self._version is not None

    @property
    def core(self) -> SemanticVersion:
        """Version of the framework's core distribution.

        Raises:
            DetectionError: If no core distribution is configured, installed
                or has a supported version
        """
        if self._core is None:
            with self._lock:
                if self._core is None:
                    self._core = self._detect_core()
        return self._core

    @property
    def version(self) -> SemanticVersion:
        """Version of the framework as a whole.

        Raises:
            DetectionError: If no configured source yields a version
        """
        if self._version is None:
            with self._lock:
                if self._version is None:
                    self._version = self._detect_version()
        return self._version

    def _installed_version(self, distribution: str) -> Optional[SemanticVersion]:
        try:
            raw = self._lookup(distribution)
        except metadata.PackageNotFoundError:
            logger.debug("Distribution %s is not installed", distribution)
            return None
        try:
            return parse_version(raw)
        except FormatError as e:
            raise DetectionError(
                f"Distribution {distribution} has unsupported version {raw!r}"
            ) from e

    def _detect_core(self) -> SemanticVersion:
        distribution = self.config.core_distribution
        if not distribution:
            raise DetectionError("No core distribution configured")
        core = self._installed_version(distribution)
        if core is None:
            raise DetectionError(f"Core distribution {distribution} is not installed")
        logger.debug("Core version %s from %s", core, distribution)
        return core

    def _core_if_shared(self) -> Optional[SemanticVersion]:
        shares_since = self.config.core_shares_version_since
        if shares_since is None or not self.config.core_distribution:
            return None
        try:
            core = self.core
        except DetectionError as e:
            logger.debug("Core version unavailable: %s", e)
            return None
        if not core.is_at_least(shares_since):
            logger.debug("Core version %s predates shared versioning (%s)", core, shares_since)
            return None
        return core

    def _detect_version(self) -> SemanticVersion:
        if self.config.version:
            try:
                version = parse_version(self.config.version)
            except FormatError as e:
                raise DetectionError(f"Configured version is invalid: {e}") from e
            logger.debug("Using configured framework version %s", version)
            return version

        for distribution in self.config.distributions:
            try:
                version = self._installed_version(distribution)
            except DetectionError as e:
                logger.debug("Skipping %s: %s", distribution, e)
                continue
            if version is not None:
                logger.debug("Framework version %s from %s", version, distribution)
                return version

        core = self._core_if_shared()
        if core is not None:
            logger.debug("Framework version %s taken from core", core)
            return core

        raise DetectionError(
            "Could not determine the framework version; set FLOW_VERSION or "
            "configure [tool.flow-version] in pyproject.toml"
        )


_default_detector: Optional[VersionDetector] = None
_default_lock = threading.Lock()


def configure(config: DetectionConfig) -> VersionDetector:
    """Install the process-wide detector for ``config``.

    Raises:
        DetectionError: If the current detector has already resolved a version
    """
    global _default_detector
    with _default_lock:
        if _default_detector is not None and _default_detector.resolved:
            raise DetectionError(
                f"Framework version already resolved as {_default_detector.version}"
            )
        _default_detector = VersionDetector(config)
        return _default_detector


def get_detector() -> VersionDetector:
    """Return the process-wide detector, configuring it from the environment."""
    global _default_detector
    with _default_lock:
        if _default_detector is None:
            _default_detector = VersionDetector(DetectionConfig.from_env())
        return _default_detector


def framework_version() -> SemanticVersion:
    """Return the process-wide framework version."""
    return get_detector().version
