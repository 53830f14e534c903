"""Next version computation.

:class:`BumpStrategy` runs the whole computation against a git repository:

1. fetch tags,
2. find the last version tag reachable from HEAD (none means ``0.0.0``),
3. parse it,
4. resolve the current branch,
5. list the commits since that tag,
6. pick the branch strategy and apply its bumper.

Each step feeds the next, so they run strictly in sequence. Nothing is
retried: the first failure is raised with the name of the failing stage.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from autosemver.core.commits import (
    DEFAULT_MAJOR_PATTERN,
    DEFAULT_MINOR_PATTERN,
    compile_pattern,
)
from autosemver.core.context import Context
from autosemver.core.strategy import BranchStrategy, default_branch_strategies, select_bumper
from autosemver.core.version import Version
from autosemver.exceptions import CollaboratorError, TagNotFoundError
from autosemver.logging import get_logger
from autosemver.vcs.git import Tag

if TYPE_CHECKING:
    from autosemver.config.models import AutoSemverConfig
    from autosemver.vcs.git import GitRepo

log = get_logger(__name__)


class BumpStrategy:
    """Computes the next version of a repository.

    Patterns and strategies are compiled once and never modified, so one
    instance may be reused for several bumps.

    Args:
        repo: Git collaborator.
        major_pattern: Matches commit messages of breaking changes.
        minor_pattern: Matches commit messages of new features.
        strategies: Branch strategies, first match wins. Defaults to
            :func:`~autosemver.core.strategy.default_branch_strategies`.
        fetch_tags: Fetch tags from the remote before looking for the last one.

    Raises:
        ConfigurationError: If a pattern is invalid.
    """

    def __init__(
        self,
        repo: GitRepo,
        major_pattern: str | re.Pattern[str] = DEFAULT_MAJOR_PATTERN,
        minor_pattern: str | re.Pattern[str] = DEFAULT_MINOR_PATTERN,
        strategies: Iterable[BranchStrategy] | None = None,
        *,
        fetch_tags: bool = True,
    ) -> None:
        self.repo = repo
        self.major_pattern = compile_pattern(major_pattern, name="major pattern")
        self.minor_pattern = compile_pattern(minor_pattern, name="minor pattern")
        self.strategies: tuple[BranchStrategy, ...] = tuple(
            default_branch_strategies() if strategies is None else strategies
        )
        self.fetch_tags = fetch_tags

    @classmethod
    def conventional_commits(cls, repo: GitRepo) -> BumpStrategy:
        """Strategy following Conventional Commits with the default branches."""
        return cls(repo)

    @classmethod
    def from_config(cls, config: AutoSemverConfig, repo: GitRepo) -> BumpStrategy:
        """Build a strategy from a validated configuration."""
        return cls(
            repo,
            major_pattern=config.major_pattern,
            minor_pattern=config.minor_pattern,
            strategies=config.branch_strategies(),
            fetch_tags=config.git.fetch_tags,
        )

    def __repr__(self) -> str:
        return (
            f"BumpStrategy(major_pattern={self.major_pattern.pattern!r}, "
            f"minor_pattern={self.minor_pattern.pattern!r}, "
            f"strategies=[{', '.join(str(s) for s in self.strategies)}])"
        )

    def bump(self) -> Version:
        """Compute the next version.

        Returns:
            The next version. Without any commit since the last tag, the
            version of that tag.

        Raises:
            CollaboratorError: If fetching tags, resolving the branch or
                listing commits fails.
            NotSemverError: If the last tag is not a semver version.
            TemplateEvaluationError: If a strategy template fails to render.
        """
        log.debug("bump_started", strategy=repr(self))

        if self.fetch_tags:
            try:
                self.repo.fetch_tags()
            except CollaboratorError as e:
                raise CollaboratorError("Cannot fetch tags", stage="fetch tags") from e

        last_tag = self._last_tag()
        last_version = Version.parse(last_tag.name)

        try:
            branch = self.repo.get_current_branch()
        except CollaboratorError as e:
            raise CollaboratorError(
                "Cannot get current branch name", stage="get current branch"
            ) from e

        try:
            commits = self.repo.get_commits(last_tag.name, "HEAD")
        except CollaboratorError as e:
            raise CollaboratorError(
                f"Cannot list commits since '{last_tag.name or 'the first commit'}'",
                stage="list commits",
            ) from e

        log.debug(
            "bump_context",
            last_tag=last_tag.name,
            last_version=str(last_version),
            branch=branch,
            commits=len(commits),
        )

        if not commits:
            log.info("no_commits_since_last_tag", version=str(last_version))
            return last_version

        context = Context(
            branch=branch,
            last_version=last_version,
            last_tag=last_tag,
            commits=tuple(commits),
        )
        bumper = select_bumper(self.strategies, context, self.major_pattern, self.minor_pattern)
        next_version = bumper.apply(last_version)

        log.info(
            "version_computed",
            last_version=str(last_version),
            next_version=str(next_version),
            branch=branch,
        )
        return next_version

    def _last_tag(self) -> Tag:
        try:
            return self.repo.get_last_relative_tag("HEAD")
        except TagNotFoundError as e:
            log.warning("no_version_tag_found", reason=str(e))
            return Tag()
        except CollaboratorError as e:
            raise CollaboratorError("Cannot find last tag", stage="find last tag") from e
