"""Version control access."""

from __future__ import annotations

from autosemver.vcs.git import (
    Commit,
    CommitHash,
    GitRepo,
    GitRepository,
    Signature,
    Tag,
)

__all__ = [
    "Commit",
    "CommitHash",
    "GitRepo",
    "GitRepository",
    "Signature",
    "Tag",
]
