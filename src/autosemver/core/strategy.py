"""Branch strategies: how the version is bumped on a given branch.

A list of :class:`BranchStrategy` rules is matched in order against the
current branch; the first match decides. The usual setup is::

    ^(main|master|release/.*)$   AUTO                      →  1.2.0
    .*                           AUTO + build metadata     →  1.1.0+3.1a2b3c4

Release branches get a clean bump, every other branch gets a pseudo version
that keeps the numbers of the last release and tells builds apart with build
metadata.

The outcome of matching is a *bumper*: an object with an
``apply(version) -> Version`` method. :class:`~autosemver.core.version.BumpType`
is the plain bumper; :class:`PreReleaseBumper` and :class:`BuildMetadataBumper`
decorate it.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from autosemver.core.commits import calculate_bump, compile_pattern
from autosemver.core.context import Context, VersionTemplate, compile_template
from autosemver.core.version import IDENTIFIERS_PATTERN, BumpType, Version
from autosemver.exceptions import TemplateEvaluationError
from autosemver.logging import get_logger

log = get_logger(__name__)

DEFAULT_RELEASE_BRANCHES_PATTERN = r"^(main|master|release/.*)$"
DEFAULT_BUILD_METADATA_TEMPLATE = "{{ count }}.{{ first_commit.hash.short }}"


def _render_identifiers(template: VersionTemplate, context: Context) -> str:
    # An empty result leaves the version undecorated.
    value = context.eval_template(template)
    if value and IDENTIFIERS_PATTERN.match(value) is None:
        raise TemplateEvaluationError(
            f"Template {template.source!r} rendered {value!r}, which is not a list of "
            "dot separated [0-9A-Za-z-] identifiers",
            template=template.source,
        )
    return value


class StrategyKind(StrEnum):
    """How the base bump is chosen."""

    PATCH = "PATCH"
    MINOR = "MINOR"
    MAJOR = "MAJOR"
    AUTO = "AUTO"

    @classmethod
    def parse(cls, value: str | StrategyKind) -> StrategyKind:
        """Parse a strategy name, case-insensitively. Unknown names mean AUTO."""
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.AUTO

    def to_bump_type(self) -> BumpType | None:
        """The fixed bump of this strategy, ``None`` for AUTO."""
        return {
            StrategyKind.MAJOR: BumpType.MAJOR,
            StrategyKind.MINOR: BumpType.MINOR,
            StrategyKind.PATCH: BumpType.PATCH,
        }.get(self)


class Bumper(Protocol):
    """Turns the last version into the next one."""

    def apply(self, version: Version) -> Version: ...


@dataclass(frozen=True)
class PreReleaseBumper:
    """Bump to a pre-release, ``base`` giving the release it leads to."""

    pre_release: str
    overwrite: bool = False
    base: BumpType = BumpType.MINOR

    def apply(self, version: Version) -> Version:
        return version.bump_pre_release(self.pre_release, self.overwrite, self.base)


@dataclass(frozen=True)
class BuildMetadataBumper:
    """Keep the version numbers and set the build metadata."""

    build_metadata: str

    def apply(self, version: Version) -> Version:
        return version.with_build_metadata(self.build_metadata)


@dataclass(frozen=True)
class BranchStrategy:
    """Bump rule for the branches matching ``branches_pattern``.

    Build metadata and pre-release are mutually exclusive; when both templates
    are set, build metadata wins.

    Attributes:
        branches_pattern: Searched in the current branch name.
        strategy: Fixed bump or AUTO (derived from commit messages).
        pre_release_template: Pre-release identifiers, e.g. ``alpha``.
        pre_release_overwrite: Do not append an index to the pre-release.
        build_metadata_template: Build metadata, e.g. ``{{ count }}``.
    """

    branches_pattern: re.Pattern[str]
    strategy: StrategyKind = StrategyKind.AUTO
    pre_release_template: VersionTemplate | None = None
    pre_release_overwrite: bool = False
    build_metadata_template: VersionTemplate | None = None

    @classmethod
    def create(
        cls,
        branches_pattern: str = ".*",
        strategy: str | StrategyKind = StrategyKind.AUTO,
        pre_release_template: str = "",
        pre_release_overwrite: bool = False,
        build_metadata_template: str = "",
    ) -> BranchStrategy:
        """Build a strategy from plain strings.

        Raises:
            ConfigurationError: If the pattern or a template is invalid.
        """
        return cls(
            branches_pattern=compile_pattern(branches_pattern, name="branches pattern"),
            strategy=StrategyKind.parse(strategy),
            pre_release_template=compile_template(pre_release_template),
            pre_release_overwrite=pre_release_overwrite,
            build_metadata_template=compile_template(build_metadata_template),
        )

    @classmethod
    def release(cls, pattern: str = DEFAULT_RELEASE_BRANCHES_PATTERN) -> BranchStrategy:
        """AUTO strategy without decoration, for release branches."""
        return cls.create(pattern)

    @classmethod
    def pre_release(cls, pattern: str, template: str, overwrite: bool = False) -> BranchStrategy:
        """AUTO strategy producing pre-releases."""
        return cls.create(pattern, pre_release_template=template, pre_release_overwrite=overwrite)

    @classmethod
    def build_metadata(
        cls,
        pattern: str = ".*",
        template: str = DEFAULT_BUILD_METADATA_TEMPLATE,
    ) -> BranchStrategy:
        """Strategy producing pseudo versions decorated with build metadata."""
        return cls.create(pattern, build_metadata_template=template)

    def matches(self, branch: str) -> bool:
        return self.branches_pattern.search(branch) is not None

    def base_bumper(
        self,
        context: Context,
        major_pattern: re.Pattern[str],
        minor_pattern: re.Pattern[str],
    ) -> BumpType:
        """The undecorated bump for ``context``."""
        fixed = self.strategy.to_bump_type()
        if fixed is not None:
            return fixed
        return calculate_bump(
            context.commits,
            major_pattern,
            minor_pattern,
            unstable=context.last_version.is_unstable,
        )

    def create_bumper(self, base: BumpType, context: Context) -> Bumper:
        """Decorate ``base`` with this strategy's pre-release or build metadata.

        Raises:
            TemplateEvaluationError: If a template fails to render or renders
                something that is not valid semver identifiers.
        """
        if self.build_metadata_template is not None:
            return BuildMetadataBumper(_render_identifiers(self.build_metadata_template, context))
        if self.pre_release_template is not None:
            return PreReleaseBumper(
                _render_identifiers(self.pre_release_template, context),
                self.pre_release_overwrite,
                base,
            )
        return base

    def __str__(self) -> str:
        parts = [f"branches_pattern={self.branches_pattern.pattern!r}", f"strategy={self.strategy}"]
        if self.pre_release_template is not None:
            parts.append(f"pre_release_template={self.pre_release_template.source!r}")
            parts.append(f"pre_release_overwrite={self.pre_release_overwrite}")
        if self.build_metadata_template is not None:
            parts.append(f"build_metadata_template={self.build_metadata_template.source!r}")
        return f"BranchStrategy({', '.join(parts)})"


def default_branch_strategies() -> list[BranchStrategy]:
    """Release branches get clean bumps, other branches build metadata."""
    return [
        BranchStrategy.release(),
        BranchStrategy.build_metadata(),
    ]


def find_strategy(strategies: Sequence[BranchStrategy], branch: str) -> BranchStrategy | None:
    """Return the first strategy matching ``branch``."""
    for strategy in strategies:
        if strategy.matches(branch):
            return strategy
    return None


def select_bumper(
    strategies: Sequence[BranchStrategy],
    context: Context,
    major_pattern: re.Pattern[str],
    minor_pattern: re.Pattern[str],
) -> Bumper:
    """Select the bumper for ``context.branch``.

    Returns:
        The decorated bumper of the first matching strategy, or
        ``BumpType.NONE`` when no strategy matches.
    """
    strategy = find_strategy(strategies, context.branch)
    if strategy is None:
        log.debug("no_matching_strategy", branch=context.branch)
        return BumpType.NONE

    base = strategy.base_bumper(context, major_pattern, minor_pattern)
    bumper = strategy.create_bumper(base, context)
    log.debug("bumper_selected", branch=context.branch, strategy=str(strategy), bumper=repr(bumper))
    return bumper
