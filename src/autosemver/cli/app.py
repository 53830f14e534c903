"""Typer application.

Usage::

    autosemver bump                   # next version from the commit history
    autosemver bump minor             # force a minor bump
    autosemver bump --pre-release rc  # next release candidate
    autosemver version
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

import typer
from rich.console import Console

from autosemver import __version__
from autosemver.cli.commands.bump import BumpOptions, run_bump
from autosemver.logging import configure_logging

app = typer.Typer(
    name="autosemver",
    help="Compute the next semantic version of a git repository from its commit history.",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


class StrategyArgument(StrEnum):
    AUTO = "auto"
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@app.command()
def bump(
    strategy: Annotated[
        StrategyArgument,
        typer.Argument(
            help="Bump to apply; auto derives it from commit messages.",
            case_sensitive=False,
        ),
    ] = StrategyArgument.AUTO,
    path: Annotated[
        str | None,
        typer.Option("--path", "-p", help="Path to the git working copy."),
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("--config", "-c", help="Configuration file (TOML)."),
    ] = None,
    major_pattern: Annotated[
        str | None,
        typer.Option("--major-pattern", help="Regex matching breaking change commit messages."),
    ] = None,
    minor_pattern: Annotated[
        str | None,
        typer.Option("--minor-pattern", help="Regex matching feature commit messages."),
    ] = None,
    pre_release: Annotated[
        str,
        typer.Option("--pre-release", help="Pre-release template, e.g. 'alpha'."),
    ] = "",
    pre_release_overwrite: Annotated[
        bool,
        typer.Option("--pre-release-overwrite", help="Use the pre-release as is, without index."),
    ] = False,
    build_metadata: Annotated[
        str,
        typer.Option("--build-metadata", help="Build metadata template, e.g. '{{ count }}'."),
    ] = "",
    branch_strategy: Annotated[
        list[str] | None,
        typer.Option(
            "--branch-strategy",
            help="Branch strategy as a JSON object. Repeatable, replaces configured strategies.",
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug output.")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only warnings and errors.")] = False,
    json_log: Annotated[bool, typer.Option("--json-log", help="Log JSON lines.")] = False,
) -> None:
    """Print the next version."""
    configure_logging(verbose=verbose, quiet=quiet, json_log=json_log)
    options = BumpOptions(
        strategy=strategy.value,
        major_pattern=major_pattern,
        minor_pattern=minor_pattern,
        pre_release=pre_release,
        pre_release_overwrite=pre_release_overwrite,
        build_metadata=build_metadata,
        branch_strategies=branch_strategy or [],
    )
    run_bump(path, config_file, options, console, err_console)


@app.command()
def version() -> None:
    """Print the autosemver version."""
    console.print(f"autosemver {__version__}", markup=False, highlight=False)


def main() -> None:
    app()
