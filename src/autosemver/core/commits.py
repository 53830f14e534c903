"""Commit message classification.

Decides from the commit messages since the last tag whether the next version
is a major, minor or patch bump. Messages are matched against two regular
expressions, by default following `Conventional Commits
<https://www.conventionalcommits.org/>`_:

    feat!: / fix(scope)!: / BREAKING CHANGE:     →  major
    feat: / chore: / build: / ci: / refactor: / perf:  →  minor
    anything else                                →  patch
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

from autosemver.core.version import BumpType
from autosemver.exceptions import ConfigurationError
from autosemver.logging import get_logger

if TYPE_CHECKING:
    from autosemver.vcs.git import Commit

log = get_logger(__name__)

# A ``!`` before the colon of the subject line, or a BREAKING CHANGE footer.
# Only the subject is matched: ``.`` never crosses a newline.
DEFAULT_MAJOR_PATTERN = r"(?:^.+!:|(?m:^BREAKING CHANGE:.*$))"
DEFAULT_MINOR_PATTERN = r"^(?:feat|chore|build|ci|refactor|perf)(?:\(.+\))?:"


def compile_pattern(pattern: str | re.Pattern[str], *, name: str = "pattern") -> re.Pattern[str]:
    """Compile a regular expression from configuration.

    Raises:
        ConfigurationError: If the expression is invalid.
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"Invalid {name} {pattern!r}: {e}") from e


def classify_commit(
    commit: Commit,
    major_pattern: re.Pattern[str],
    minor_pattern: re.Pattern[str],
) -> BumpType:
    """Classify a single commit message."""
    if major_pattern.search(commit.message):
        return BumpType.MAJOR
    if minor_pattern.search(commit.message):
        return BumpType.MINOR
    return BumpType.PATCH


def calculate_bump(
    commits: Sequence[Commit],
    major_pattern: re.Pattern[str],
    minor_pattern: re.Pattern[str],
    *,
    unstable: bool = False,
) -> BumpType:
    """Calculate the bump implied by a list of commits.

    The first major change found wins. On an unstable version (``0.y.z``) a
    major change is downgraded to a minor bump: going to ``1.0.0`` has to be
    an explicit decision.

    Args:
        commits: Commits since the last release, newest first.
        major_pattern: Matches messages of breaking changes.
        minor_pattern: Matches messages of new features.
        unstable: Whether the last version is an initial development version.

    Returns:
        ``BumpType.NONE`` when there are no commits, otherwise the bump type.
    """
    if not commits:
        log.debug("no_commits", bump=str(BumpType.NONE))
        return BumpType.NONE

    bump = BumpType.PATCH
    for commit in commits:
        kind = classify_commit(commit, major_pattern, minor_pattern)
        if kind is BumpType.MAJOR:
            if unstable:
                log.debug("major_change_on_unstable_version", commit=commit.hash.short)
                return BumpType.MINOR
            log.debug("major_change", commit=commit.hash.short)
            return BumpType.MAJOR
        if kind is BumpType.MINOR:
            log.debug("minor_change", commit=commit.hash.short)
            bump = BumpType.MINOR

    log.debug("bump_calculated", bump=str(bump), commits=len(commits))
    return bump
