"""Configuration management for autosemver."""

from __future__ import annotations

from autosemver.config.loader import load_config
from autosemver.config.models import (
    AutoSemverConfig,
    BranchStrategyConfig,
    GitConfig,
)

__all__ = [
    "AutoSemverConfig",
    "BranchStrategyConfig",
    "GitConfig",
    "load_config",
]
