"""Core business logic for autosemver.

This module contains the fundamental building blocks:
- Version parsing and manipulation (SemVer 2.0.0)
- Commit message classification
- Branch strategies and template context
- Next version computation
"""

from __future__ import annotations

from autosemver.core.bump import BumpStrategy
from autosemver.core.commits import (
    DEFAULT_MAJOR_PATTERN,
    DEFAULT_MINOR_PATTERN,
    calculate_bump,
    classify_commit,
    compile_pattern,
)
from autosemver.core.context import Context, VersionTemplate, compile_template
from autosemver.core.strategy import (
    DEFAULT_BUILD_METADATA_TEMPLATE,
    DEFAULT_RELEASE_BRANCHES_PATTERN,
    BranchStrategy,
    BuildMetadataBumper,
    Bumper,
    PreReleaseBumper,
    StrategyKind,
    default_branch_strategies,
    find_strategy,
    select_bumper,
)
from autosemver.core.version import ZERO_VERSION, BumpType, Version, parse_version

__all__ = [
    "DEFAULT_BUILD_METADATA_TEMPLATE",
    "DEFAULT_MAJOR_PATTERN",
    "DEFAULT_MINOR_PATTERN",
    "DEFAULT_RELEASE_BRANCHES_PATTERN",
    "ZERO_VERSION",
    # Strategies
    "BranchStrategy",
    "BuildMetadataBumper",
    # Bump
    "BumpStrategy",
    # Version
    "BumpType",
    "Bumper",
    # Context
    "Context",
    "PreReleaseBumper",
    "StrategyKind",
    "Version",
    "VersionTemplate",
    # Commits
    "calculate_bump",
    "classify_commit",
    "compile_pattern",
    "compile_template",
    "default_branch_strategies",
    "find_strategy",
    "parse_version",
    "select_bumper",
]
