"""autosemver: next semantic version from a git history.

Example::

    from autosemver import BumpStrategy, GitRepository

    version = BumpStrategy.conventional_commits(GitRepository(".")).bump()
"""

from __future__ import annotations

from autosemver.core.bump import BumpStrategy
from autosemver.core.strategy import BranchStrategy, StrategyKind
from autosemver.core.version import BumpType, Version
from autosemver.exceptions import AutoSemverError
from autosemver.vcs import GitRepository

__version__ = "0.3.0"

__all__ = [
    "AutoSemverError",
    "BranchStrategy",
    "BumpStrategy",
    "BumpType",
    "GitRepository",
    "StrategyKind",
    "Version",
    "__version__",
]
