# SPDX-License-Identifier: MIT
"""Tests for framework version detection."""

from __future__ import annotations

import threading
from importlib import metadata

import pytest

from flow_version import (
    DetectionConfig,
    DetectionError,
    SemanticVersion,
    VersionDetector,
    configure,
    framework_version,
    get_detector,
)


class TestVersionDetector:
    """Tests for VersionDetector resolution order."""

    def test_explicit_version(self, installed):
        """Test that an explicit version wins over installed metadata."""
        detector = VersionDetector(
            DetectionConfig(version="24.3.0.beta2", distributions=["platform"]),
            installed({"platform": "23.0.0"}),
        )
        assert detector.version == SemanticVersion(24, 3, 0, "beta2")

    def test_invalid_explicit_version(self, installed):
        """Test that an invalid explicit version is a detection error."""
        detector = VersionDetector(DetectionConfig(version="24.3"), installed({}))
        with pytest.raises(DetectionError, match="Configured version is invalid"):
            detector.version

    def test_first_installed_distribution(self, installed):
        """Test that distributions are tried in order."""
        detector = VersionDetector(
            DetectionConfig(distributions=["missing", "platform", "legacy"]),
            installed({"platform": "14.8.3", "legacy": "14.0.0"}),
        )
        assert detector.version == SemanticVersion(14, 8, 3)

    def test_unsupported_distribution_version_skipped(self, installed):
        """Test that an unparseable installed version moves on to the next one."""
        detector = VersionDetector(
            DetectionConfig(distributions=["platform", "legacy"]),
            installed({"platform": "24.3.0rc1", "legacy": "24.2.0"}),
        )
        assert detector.version == SemanticVersion(24, 2, 0)

    def test_unsupported_distribution_falls_back_to_core(self, installed):
        """Test that the core is used when no distribution version parses."""
        detector = VersionDetector(
            DetectionConfig(
                distributions=["platform"],
                core_distribution="core",
                core_shares_version_since=23,
            ),
            installed({"platform": "24.3.0rc1", "core": "24.3.0"}),
        )
        assert detector.version == SemanticVersion(24, 3, 0)

    def test_only_unsupported_versions(self, installed):
        """Test that nothing usable is reported as undetermined."""
        detector = VersionDetector(
            DetectionConfig(distributions=["platform"]),
            installed({"platform": "24.0"}),
        )
        with pytest.raises(DetectionError, match="Could not determine"):
            detector.version

    def test_unsupported_core_version(self, installed):
        """Test that an unparseable core version is reported by core."""
        detector = VersionDetector(
            DetectionConfig(core_distribution="core"),
            installed({"core": "24.3.0rc1"}),
        )
        with pytest.raises(DetectionError, match="unsupported version"):
            detector.core

    def test_core_not_read_when_distribution_found(self, installed):
        """Test that the core is only looked up after distributions fail."""
        calls: list[str] = []
        lookup = installed({"platform": "24.1.0", "core": "24.1.2"})

        def counting(name: str) -> str:
            calls.append(name)
            return lookup(name)

        detector = VersionDetector(
            DetectionConfig(
                distributions=["platform"],
                core_distribution="core",
                core_shares_version_since=23,
            ),
            counting,
        )
        assert detector.version == SemanticVersion(24, 1, 0)
        assert calls == ["platform"]

    def test_core_shares_version(self, installed):
        """Test that a new enough core version is the platform version."""
        detector = VersionDetector(
            DetectionConfig(core_distribution="core", core_shares_version_since=23),
            installed({"core": "23.2.1"}),
        )
        assert detector.version == SemanticVersion(23, 2, 1)
        assert detector.core == SemanticVersion(23, 2, 1)

    def test_old_core_not_shared(self, installed):
        """Test that an old core version is not the platform version."""
        detector = VersionDetector(
            DetectionConfig(core_distribution="core", core_shares_version_since=23),
            installed({"core": "2.8.0"}),
        )
        with pytest.raises(DetectionError, match="Could not determine"):
            detector.version
        assert detector.core == SemanticVersion(2, 8, 0)

    def test_distribution_before_core(self, installed):
        """Test that platform distributions are preferred over the core."""
        detector = VersionDetector(
            DetectionConfig(
                distributions=["platform"],
                core_distribution="core",
                core_shares_version_since=23,
            ),
            installed({"platform": "24.1.0", "core": "24.1.2"}),
        )
        assert detector.version == SemanticVersion(24, 1, 0)

    def test_nothing_configured(self, installed):
        """Test that an empty configuration cannot detect anything."""
        detector = VersionDetector(DetectionConfig(), installed({}))
        with pytest.raises(DetectionError):
            detector.version
        with pytest.raises(DetectionError, match="No core distribution"):
            detector.core

    def test_core_not_installed(self, installed):
        """Test that a missing core distribution is reported."""
        detector = VersionDetector(DetectionConfig(core_distribution="core"), installed({}))
        with pytest.raises(DetectionError, match="not installed"):
            detector.core

    def test_default_lookup_uses_metadata(self):
        """Test that the default lookup reads installed metadata."""
        detector = VersionDetector(DetectionConfig(distributions=["click"]))
        assert str(detector.version).startswith(metadata.version("click").split(".")[0])


class TestCaching:
    """Tests for at-most-once resolution."""

    def test_version_cached(self, installed):
        """Test that metadata is looked up once."""
        calls: list[str] = []
        lookup = installed({"platform": "24.0.0"})

        def counting(name: str) -> str:
            calls.append(name)
            return lookup(name)

        detector = VersionDetector(DetectionConfig(distributions=["platform"]), counting)
        assert detector.resolved is False
        assert detector.version is detector.version
        assert detector.resolved is True
        assert calls == ["platform"]

    def test_failure_not_cached(self):
        """Test that a failed lookup is retried on next access."""
        versions = {}

        def lookup(name: str) -> str:
            if name not in versions:
                raise metadata.PackageNotFoundError(name)
            return versions[name]

        detector = VersionDetector(DetectionConfig(distributions=["platform"]), lookup)
        with pytest.raises(DetectionError):
            detector.version
        versions["platform"] = "24.0.0"
        assert detector.version == SemanticVersion(24, 0, 0)

    def test_concurrent_access(self, installed):
        """Test that concurrent readers see a single resolved value."""
        calls: list[str] = []
        lookup = installed({"platform": "24.0.0"})
        barrier = threading.Barrier(8)

        def counting(name: str) -> str:
            calls.append(name)
            return lookup(name)

        detector = VersionDetector(DetectionConfig(distributions=["platform"]), counting)
        results: list[SemanticVersion] = []

        def read() -> None:
            barrier.wait()
            results.append(detector.version)

        threads = [threading.Thread(target=read) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(r is results[0] for r in results)
        assert calls == ["platform"]


class TestProcessDetector:
    """Tests for the process-wide detector."""

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch):
        """Test that the default detector reads the environment."""
        monkeypatch.setenv("FLOW_VERSION", "23.1.0")
        assert framework_version() == SemanticVersion(23, 1, 0)
        assert get_detector() is get_detector()

    def test_configure(self):
        """Test installing an explicit configuration."""
        detector = configure(DetectionConfig(version="14.8.0"))
        assert get_detector() is detector
        assert framework_version().is_exactly(14, 8)

    def test_configure_after_resolution(self):
        """Test that the resolved version cannot be replaced."""
        configure(DetectionConfig(version="14.8.0"))
        framework_version()
        with pytest.raises(DetectionError, match="already resolved"):
            configure(DetectionConfig(version="24.0.0"))

    def test_reconfigure_before_resolution(self):
        """Test that an unresolved detector can be replaced."""
        configure(DetectionConfig(version="14.8.0"))
        configure(DetectionConfig(version="24.0.0"))
        assert framework_version() == SemanticVersion(24, 0, 0)
