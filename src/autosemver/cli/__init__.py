"""Command line interface for autosemver."""

from __future__ import annotations

from autosemver.cli.app import app, main

__all__ = ["app", "main"]
