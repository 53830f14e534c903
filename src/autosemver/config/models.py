"""Configuration models.

Configuration lives in ``[tool.autosemver]`` of ``pyproject.toml`` or in a
standalone ``.autosemver.toml``. Keys may be written in snake_case or in
camelCase::

    [tool.autosemver]
    majorPattern = '(?:^.+!:|(?m:^BREAKING CHANGE:.*$))'

    [[tool.autosemver.bumpStrategies]]
    branchesPattern = '^(main|master|release/.*)$'
    strategy = "AUTO"

    [[tool.autosemver.bumpStrategies]]
    branchesPattern = '^milestone-.*$'
    preReleaseTemplate = "alpha"

    [[tool.autosemver.bumpStrategies]]
    branchesPattern = '.*'
    buildMetadataTemplate = '{{ count }}.{{ first_commit.hash.short }}'
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from autosemver.core.commits import DEFAULT_MAJOR_PATTERN, DEFAULT_MINOR_PATTERN
from autosemver.core.context import compile_template
from autosemver.core.strategy import (
    DEFAULT_BUILD_METADATA_TEMPLATE,
    DEFAULT_RELEASE_BRANCHES_PATTERN,
    BranchStrategy,
    StrategyKind,
)
from autosemver.exceptions import ConfigurationError
from autosemver.vcs.git import DEFAULT_BRANCH_ENV, DEFAULT_TIMEOUT_SECONDS


def _check_regex(value: str) -> str:
    try:
        re.compile(value)
    except re.error as e:
        raise ValueError(f"invalid regular expression {value!r}: {e}") from e
    return value


def _check_template(value: str) -> str:
    try:
        compile_template(value)
    except ConfigurationError as e:
        raise ValueError(str(e)) from e
    return value


class BranchStrategyConfig(BaseModel):
    """One entry of ``bump_strategies``."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    branches_pattern: str = Field(default=".*", alias="branchesPattern")
    strategy: StrategyKind = StrategyKind.AUTO
    pre_release_template: str = Field(default="", alias="preReleaseTemplate")
    pre_release_overwrite: bool = Field(default=False, alias="preReleaseOverwrite")
    build_metadata_template: str = Field(default="", alias="buildMetadataTemplate")

    @field_validator("branches_pattern")
    @classmethod
    def validate_branches_pattern(cls, value: str) -> str:
        return _check_regex(value)

    @field_validator("strategy", mode="before")
    @classmethod
    def parse_strategy(cls, value: Any) -> StrategyKind:
        return StrategyKind.parse(str(value))

    @field_validator("pre_release_template", "build_metadata_template")
    @classmethod
    def validate_template(cls, value: str) -> str:
        return _check_template(value)

    def to_strategy(self) -> BranchStrategy:
        return BranchStrategy.create(
            branches_pattern=self.branches_pattern,
            strategy=self.strategy,
            pre_release_template=self.pre_release_template,
            pre_release_overwrite=self.pre_release_overwrite,
            build_metadata_template=self.build_metadata_template,
        )


def _default_bump_strategies() -> list[BranchStrategyConfig]:
    return [
        BranchStrategyConfig(branches_pattern=DEFAULT_RELEASE_BRANCHES_PATTERN),
        BranchStrategyConfig(
            branches_pattern=".*",
            build_metadata_template=DEFAULT_BUILD_METADATA_TEMPLATE,
        ),
    ]


class GitConfig(BaseModel):
    """Git access settings."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    branch_env: str = Field(default=DEFAULT_BRANCH_ENV, alias="branchEnv")
    fetch_tags: bool = Field(default=True, alias="fetchTags")


class AutoSemverConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    major_pattern: str = Field(default=DEFAULT_MAJOR_PATTERN, alias="majorPattern")
    minor_pattern: str = Field(default=DEFAULT_MINOR_PATTERN, alias="minorPattern")
    bump_strategies: list[BranchStrategyConfig] = Field(
        default_factory=_default_bump_strategies,
        alias="bumpStrategies",
    )
    git: GitConfig = Field(default_factory=GitConfig)

    @field_validator("major_pattern", "minor_pattern")
    @classmethod
    def validate_pattern(cls, value: str) -> str:
        return _check_regex(value)

    def branch_strategies(self) -> list[BranchStrategy]:
        """Compile ``bump_strategies`` in order."""
        return [s.to_strategy() for s in self.bump_strategies]
