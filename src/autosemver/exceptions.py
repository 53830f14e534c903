"""Exception hierarchy for autosemver.

All errors raised by the library derive from :class:`AutoSemverError`, so
callers can catch a single type. The tree mirrors when an error can happen:

- :class:`ConfigurationError` is raised while building strategies, patterns
  and templates, before any git command runs.
- :class:`NotSemverError` means the last tag is not a semantic version.
- :class:`TemplateEvaluationError` means a pre-release or build metadata
  template could not be rendered against the current context.
- :class:`CollaboratorError` wraps failures of the git layer and carries the
  name of the stage that failed.
"""

from __future__ import annotations


class AutoSemverError(Exception):
    """Base class for every autosemver error."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(AutoSemverError):
    """Invalid pattern, template or strategy configuration."""


class ConfigNotFoundError(ConfigurationError):
    """The configuration file could not be found."""


class ConfigValidationError(ConfigurationError):
    """The configuration file was found but is not valid."""


# =============================================================================
# Version computation
# =============================================================================


class NotSemverError(AutoSemverError):
    """A non-empty tag name is not a semver compatible version."""

    def __init__(self, value: str) -> None:
        super().__init__(f"'{value}' is not a semver compatible version")
        self.value = value


class TemplateEvaluationError(AutoSemverError):
    """A version template failed to render."""

    def __init__(self, message: str, *, template: str | None = None) -> None:
        super().__init__(message)
        self.template = template


# =============================================================================
# Git collaborator
# =============================================================================


class CollaboratorError(AutoSemverError):
    """A call to the version control collaborator failed.

    Attributes:
        stage: Name of the bump stage that failed (e.g. ``"fetch tags"``).
    """

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        self.stage = stage

    def __str__(self) -> str:
        message = super().__str__()
        cause = self.__cause__
        if cause is not None:
            return f"{message} caused by: '{cause}'"
        return message


class GitError(CollaboratorError):
    """A git command failed.

    Attributes:
        command: The git command line that was run.
        stderr: Captured standard error, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        stderr: str | None = None,
        stage: str | None = None,
    ) -> None:
        super().__init__(message, stage=stage)
        self.command = command or []
        self.stderr = stderr


class GitTimeoutError(GitError):
    """A git command did not finish within its timeout."""

    def __init__(self, message: str, *, command: list[str] | None = None, timeout: float) -> None:
        super().__init__(message, command=command)
        self.timeout = timeout


class TagNotFoundError(GitError):
    """No ancestor tag matches the version pattern."""
