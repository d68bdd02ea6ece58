# SPDX-License-Identifier: MIT
"""Configuration telling the detector where a framework's version comes from.

Settings are read from the ``[tool.flow-version]`` table of pyproject.toml
and then overridden by ``FLOW_VERSION*`` environment variables:

    [tool.flow-version]
    version = "24.3.0"                          # explicit, wins over everything
    distributions = ["vaadin", "vaadin-core"]   # platform version metadata
    core-distribution = "flow-server"           # core runtime version metadata
    core-shares-version-since = 23              # core major that equals platform
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

TOOL_TABLE = "flow-version"

ENV_VERSION = "FLOW_VERSION"
ENV_DISTRIBUTIONS = "FLOW_VERSION_DISTRIBUTIONS"
ENV_CORE_DISTRIBUTION = "FLOW_VERSION_CORE_DISTRIBUTION"
ENV_CORE_SHARES_SINCE = "FLOW_VERSION_CORE_SHARES_SINCE"


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


@dataclass
class DetectionConfig:
    """Where to find the host framework's version.

    Attributes:
        version: Explicit version string supplied by the application
        distributions: Installed distributions carrying the platform version,
            tried in order
        core_distribution: Installed distribution carrying the core version
        core_shares_version_since: Core major version from which the core
            version is also the platform version
    """

    version: Optional[str] = None
    distributions: list[str] = field(default_factory=list)
    core_distribution: Optional[str] = None
    core_shares_version_since: Optional[int] = None

    @classmethod
    def from_dict(cls, table: Mapping[str, Any]) -> "DetectionConfig":
        """Create configuration from a ``[tool.flow-version]`` table.

        Raises:
            ConfigError: If a value has the wrong type
        """
        version = table.get("version")
        if version is not None and not isinstance(version, str):
            raise ConfigError(f"version must be a string, got {version!r}")

        distributions = table.get("distributions", [])
        if not isinstance(distributions, list) or not all(
            isinstance(d, str) for d in distributions
        ):
            raise ConfigError(f"distributions must be a list of strings, got {distributions!r}")

        core_distribution = table.get("core-distribution")
        if core_distribution is not None and not isinstance(core_distribution, str):
            raise ConfigError(f"core-distribution must be a string, got {core_distribution!r}")

        shares_since = table.get("core-shares-version-since")
        # bool is an int subclass
        if shares_since is not None and (
            isinstance(shares_since, bool) or not isinstance(shares_since, int)
        ):
            raise ConfigError(
                f"core-shares-version-since must be an integer, got {shares_since!r}"
            )

        return cls(
            version=version,
            distributions=list(distributions),
            core_distribution=core_distribution,
            core_shares_version_since=shares_since,
        )

    @classmethod
    def from_pyproject(cls, project_dir: str | Path) -> "DetectionConfig":
        """Load configuration from pyproject.toml in ``project_dir``.

        A missing file or missing table gives the default configuration.

        Raises:
            ConfigError: If the file is not valid TOML or has bad values
        """
        pyproject_path = Path(project_dir) / "pyproject.toml"
        if not pyproject_path.exists():
            return cls()

        try:
            with open(pyproject_path, "rb") as f:
                pyproject = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML syntax in {pyproject_path}: {e}") from e

        return cls.from_dict(pyproject.get("tool", {}).get(TOOL_TABLE, {}))

    @classmethod
    def from_env(cls) -> "DetectionConfig":
        """Create configuration from environment variables."""
        return cls().with_env()

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> "DetectionConfig":
        """Return a copy with environment variable overrides applied.

        Raises:
            ConfigError: If ``FLOW_VERSION_CORE_SHARES_SINCE`` is not an integer
        """
        env = os.environ if environ is None else environ
        config = DetectionConfig(
            version=self.version,
            distributions=list(self.distributions),
            core_distribution=self.core_distribution,
            core_shares_version_since=self.core_shares_version_since,
        )

        if version := env.get(ENV_VERSION, "").strip():
            config.version = version
        if distributions := env.get(ENV_DISTRIBUTIONS, "").strip():
            config.distributions = [d.strip() for d in distributions.split(",") if d.strip()]
        if core_distribution := env.get(ENV_CORE_DISTRIBUTION, "").strip():
            config.core_distribution = core_distribution
        if shares_since := env.get(ENV_CORE_SHARES_SINCE, "").strip():
            try:
                config.core_shares_version_since = int(shares_since)
            except ValueError as e:
                raise ConfigError(
                    f"{ENV_CORE_SHARES_SINCE} must be an integer, got {shares_since!r}"
                ) from e

        return config


def load_config(project_dir: Optional[str | Path] = None) -> DetectionConfig:
    """Load detection configuration for a project.

    Args:
        project_dir: Directory holding pyproject.toml (defaults to cwd)

    Returns:
        DetectionConfig from pyproject.toml with environment overrides applied

    Raises:
        ConfigError: If configuration cannot be loaded
    """
    project_path = Path(project_dir) if project_dir is not None else Path.cwd()
    return DetectionConfig.from_pyproject(project_path).with_env()
