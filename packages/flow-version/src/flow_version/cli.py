# SPDX-License-Identifier: MIT
"""CLI entry point for the flow-version command."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .compare import compare_versions, sort_versions
from .config import ConfigError, DetectionConfig, load_config
from .detect import DetectionError, VersionDetector
from .semver import VersionError, parse_version


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[DetectionConfig] = None
        self.verbose: bool = False
        self.project_dir: Optional[Path] = None

    def load_config(self) -> DetectionConfig:
        """Load configuration, caching the result."""
        if self.config is None:
            self.config = load_config(self.project_dir)
        return self.config


pass_context = click.make_pass_decorator(Context, ensure=True)


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def _parse_bound(value: str) -> tuple[int, Optional[int]]:
    """Parse a ``MAJOR`` or ``MAJOR.MINOR`` bound."""
    parts = value.split(".")
    if len(parts) > 2 or not all(p.isascii() and p.isdigit() for p in parts):
        raise click.BadParameter(f"expected MAJOR or MAJOR.MINOR, got {value!r}")
    major = int(parts[0])
    minor = int(parts[1]) if len(parts) == 2 else None
    return major, minor


@click.group()
@click.version_option(package_name="flow-version")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project directory holding pyproject.toml.",
)
@pass_context
def cli(ctx: Context, verbose: bool, directory: Optional[Path]) -> None:
    """Parse, compare and detect framework versions.

    \b
    Examples:
        flow-version parse 24.3.0.beta2
        flow-version compare 24.3.0-beta2 24.3.0
        flow-version check 23.1.0 --at-least 23
        flow-version detect
    """
    ctx.verbose = verbose
    ctx.project_dir = directory
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@cli.command()
@click.argument("text")
@click.option("--json", "as_json", is_flag=True, help="Print the fields as JSON.")
def parse(text: str, as_json: bool) -> None:
    """Parse TEXT and print its canonical form."""
    try:
        version = parse_version(text)
    except VersionError as e:
        echo_error(str(e))
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "major": version.major,
                    "minor": version.minor,
                    "bugfix": version.bugfix,
                    "prerelease": version.prerelease,
                }
            )
        )
    else:
        click.echo(str(version))


@cli.command()
@click.argument("first")
@click.argument("second")
def compare(first: str, second: str) -> None:
    """Print <, = or > for FIRST relative to SECOND."""
    try:
        result = compare_versions(first, second)
    except VersionError as e:
        echo_error(str(e))
        sys.exit(1)
    click.echo({-1: "<", 0: "=", 1: ">"}[result])


@cli.command("sort")
@click.argument("versions", nargs=-1, required=True)
@click.option("--reverse", is_flag=True, help="Newest first.")
def sort_command(versions: tuple[str, ...], reverse: bool) -> None:
    """Print VERSIONS in precedence order, one per line."""
    try:
        ordered = sort_versions(versions, reverse=reverse)
    except VersionError as e:
        echo_error(str(e))
        sys.exit(1)
    for version in ordered:
        click.echo(str(version))


@cli.command()
@click.argument("text")
@click.option("--at-least", "at_least", help="Require at least MAJOR or MAJOR.MINOR.")
@click.option("--exactly", help="Require exactly MAJOR or MAJOR.MINOR.")
def check(text: str, at_least: Optional[str], exactly: Optional[str]) -> None:
    """Exit with status 0 if TEXT satisfies the bound, 1 otherwise."""
    if (at_least is None) == (exactly is None):
        raise click.UsageError("Give exactly one of --at-least or --exactly.")

    try:
        version = parse_version(text)
    except VersionError as e:
        echo_error(str(e))
        sys.exit(1)

    if at_least is not None:
        satisfied = version.is_at_least(*_parse_bound(at_least))
        bound = f">= {at_least}"
    else:
        satisfied = version.is_exactly(*_parse_bound(exactly))
        bound = f"== {exactly}"

    click.echo(f"{version} {bound}: {'yes' if satisfied else 'no'}")
    if not satisfied:
        sys.exit(1)


@cli.command()
@click.option("--core", is_flag=True, help="Print the core runtime version instead.")
@pass_context
def detect(ctx: Context, core: bool) -> None:
    """Print the detected framework version."""
    try:
        detector = VersionDetector(ctx.load_config())
        version = detector.core if core else detector.version
    except (ConfigError, DetectionError) as e:
        echo_error(str(e))
        sys.exit(1)
    click.echo(str(version))


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except (VersionError, ConfigError, DetectionError) as e:
        echo_error(str(e))
        sys.exit(1)
    except Exception as e:
        echo_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
