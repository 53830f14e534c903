"""Implementation of the 'bump' command.

The bump command computes the next version from the git history and prints
it on stdout. Nothing is written to the repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError
from rich.markup import escape

from autosemver.config import load_config
from autosemver.config.models import AutoSemverConfig, BranchStrategyConfig
from autosemver.core.bump import BumpStrategy
from autosemver.core.strategy import StrategyKind
from autosemver.exceptions import (
    AutoSemverError,
    CollaboratorError,
    ConfigurationError,
    ConfigValidationError,
)
from autosemver.logging import get_logger
from autosemver.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from autosemver.core.version import Version

log = get_logger(__name__)


@dataclass
class BumpOptions:
    """Command line overrides of the configuration."""

    strategy: str = "auto"
    major_pattern: str | None = None
    minor_pattern: str | None = None
    pre_release: str = ""
    pre_release_overwrite: bool = False
    build_metadata: str = ""
    branch_strategies: list[str] = field(default_factory=list)

    @property
    def replaces_strategies(self) -> bool:
        """Whether the options alone define a single catch-all strategy."""
        return (
            StrategyKind.parse(self.strategy) is not StrategyKind.AUTO
            or bool(self.pre_release)
            or self.pre_release_overwrite
            or bool(self.build_metadata)
        )


def apply_overrides(config: AutoSemverConfig, options: BumpOptions) -> AutoSemverConfig:
    """Return ``config`` with the command line options applied.

    ``--branch-strategy`` values replace the configured strategies. A fixed
    strategy or any pre-release/build metadata option replaces them with one
    rule matching every branch.

    Raises:
        ConfigValidationError: If an override is invalid.
    """
    data = config.model_dump()

    if options.major_pattern is not None:
        data["major_pattern"] = options.major_pattern
    if options.minor_pattern is not None:
        data["minor_pattern"] = options.minor_pattern

    try:
        if options.replaces_strategies:
            data["bump_strategies"] = [
                BranchStrategyConfig(
                    branches_pattern=".*",
                    strategy=options.strategy,
                    pre_release_template=options.pre_release,
                    pre_release_overwrite=options.pre_release_overwrite,
                    build_metadata_template=options.build_metadata,
                ).model_dump()
            ]
        elif options.branch_strategies:
            data["bump_strategies"] = [
                BranchStrategyConfig.model_validate_json(raw).model_dump()
                for raw in options.branch_strategies
            ]
        return AutoSemverConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid command line option:\n{e}") from e


def run_bump(
    path: str | None,
    config_file: str | None,
    options: BumpOptions,
    console: Console,
    err_console: Console,
) -> Version:
    """Run the bump command.

    Args:
        path: Optional path to the git working copy
        config_file: Optional explicit configuration file
        options: Command line overrides
        console: Console for standard output
        err_console: Console for error output

    Returns:
        The computed version, also printed on ``console``.
    """
    project_path = Path(path) if path else Path.cwd()

    # Load configuration
    try:
        config = load_config(project_path, Path(config_file) if config_file else None)
        config = apply_overrides(config, options)
    except ConfigurationError as e:
        err_console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    repo = GitRepository(
        project_path,
        timeout=config.git.timeout,
        branch_env=config.git.branch_env,
    )

    try:
        strategy = BumpStrategy.from_config(config, repo)
    except ConfigurationError as e:
        err_console.print(f"[red]Invalid configuration:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    log.debug("bump_command", path=str(project_path), strategy=repr(strategy))

    try:
        version = strategy.bump()
    except CollaboratorError as e:
        stage = f" ({e.stage})" if e.stage else ""
        err_console.print(f"[red]Cannot bump version{stage}:[/] {escape(str(e))}")
        raise SystemExit(1) from e
    except AutoSemverError as e:
        err_console.print(f"[red]Cannot bump version:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    console.print(str(version), markup=False, highlight=False)
    return version
