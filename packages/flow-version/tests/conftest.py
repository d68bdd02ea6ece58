# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for flow-version tests."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner

from flow_version import config as config_module
from flow_version import detect as detect_module


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove FLOW_VERSION* variables and reset the process-wide detector."""
    for name in (
        config_module.ENV_VERSION,
        config_module.ENV_DISTRIBUTIONS,
        config_module.ENV_CORE_DISTRIBUTION,
        config_module.ENV_CORE_SHARES_SINCE,
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(detect_module, "_default_detector", None)


@pytest.fixture
def installed() -> Callable[[dict[str, str]], Callable[[str], str]]:
    """Build a metadata lookup that only knows the given distributions."""

    def factory(distributions: dict[str, str]) -> Callable[[str], str]:
        def lookup(name: str) -> str:
            try:
                return distributions[name]
            except KeyError:
                raise metadata.PackageNotFoundError(name) from None

        return lookup

    return factory


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """Create a project directory with a [tool.flow-version] table."""
    project_dir = tmp_path / "app"
    project_dir.mkdir()
    (project_dir / "pyproject.toml").write_text(
        """[project]
name = "app"
version = "1.0.0"

[tool.flow-version]
version = "24.3.0.beta2"
distributions = ["framework-platform"]
core-distribution = "framework-core"
core-shares-version-since = 23
"""
    )
    return project_dir
