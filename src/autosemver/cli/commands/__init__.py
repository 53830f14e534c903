"""CLI command implementations."""

from __future__ import annotations

from autosemver.cli.commands.bump import BumpOptions, run_bump

__all__ = ["BumpOptions", "run_bump"]
