"""Context of a bump and the templates evaluated against it.

Pre-release and build metadata values are usually computed from the
repository state, e.g. ``{{ count }}.{{ first_commit.hash.short }}`` gives
``3.1a2b3c4`` for three commits since the last tag. Templates are rendered
by a sandboxed Jinja2 environment that only sees the names below:

============================  ==============================================
Name                          Value
============================  ==============================================
``branch``                    Current branch name
``commits``                   Commits since the last tag, newest first
``count``                     Number of commits since the last tag
``first_commit``              Newest commit (``firstCommit`` alias)
``last_version``              Version of the last tag (``lastVersion`` alias)
``last_tag``                  Last tag (``lastTag`` alias)
============================  ==============================================

Each commit exposes ``hash`` (with ``hash.short``), ``message``, ``subject``,
``author`` and ``committer``. Besides Jinja's built-in filters, ``len`` is
available as an alias of ``length``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jinja2 import StrictUndefined, TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment

from autosemver.core.version import Version
from autosemver.exceptions import ConfigurationError, TemplateEvaluationError
from autosemver.vcs.git import Commit, Tag

_ENVIRONMENT = SandboxedEnvironment(
    undefined=StrictUndefined,
    autoescape=False,
    keep_trailing_newline=False,
)
_ENVIRONMENT.filters["len"] = len


@dataclass(frozen=True)
class Context:
    """Everything known about the repository when computing a version.

    Attributes:
        branch: Current branch name.
        last_version: Version parsed from the last tag.
        last_tag: Last version tag (empty name when there is none).
        commits: Commits since the last tag, newest first.
    """

    branch: str
    last_version: Version
    last_tag: Tag = field(default_factory=Tag)
    commits: tuple[Commit, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.commits, tuple):
            object.__setattr__(self, "commits", tuple(self.commits))

    @property
    def count(self) -> int:
        return len(self.commits)

    @property
    def first_commit(self) -> Commit | None:
        return self.commits[0] if self.commits else None

    def template_vars(self) -> dict[str, Any]:
        """Names exposed to templates."""
        namespace: dict[str, Any] = {
            "branch": self.branch,
            "commits": list(self.commits),
            "count": self.count,
            "last_version": self.last_version,
            "lastVersion": self.last_version,
            "last_tag": self.last_tag,
            "lastTag": self.last_tag,
        }
        # Left undefined without commits so that using it fails loudly.
        if self.first_commit is not None:
            namespace["first_commit"] = namespace["firstCommit"] = self.first_commit
        return namespace

    def eval_template(self, template: VersionTemplate | None) -> str:
        """Render ``template`` against this context ("" for no template)."""
        if template is None:
            return ""
        return template.render(self)


class VersionTemplate:
    """A compiled pre-release or build metadata template.

    Raises:
        ConfigurationError: If ``source`` is not a valid template.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        try:
            self._template = _ENVIRONMENT.from_string(source)
        except TemplateSyntaxError as e:
            raise ConfigurationError(f"Invalid template {source!r}: {e}") from e

    def __repr__(self) -> str:
        return f"VersionTemplate({self.source!r})"

    def __str__(self) -> str:
        return self.source

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionTemplate):
            return NotImplemented
        return self.source == other.source

    def __hash__(self) -> int:
        return hash(self.source)

    def render(self, context: Context) -> str:
        """Render against ``context``.

        Raises:
            TemplateEvaluationError: If rendering raises anything, from an
                undefined name to a division by zero.
        """
        try:
            return self._template.render(context.template_vars()).strip()
        except Exception as e:
            raise TemplateEvaluationError(
                f"Failed to evaluate template {self.source!r}: {e}",
                template=self.source,
            ) from e


def compile_template(source: str | None) -> VersionTemplate | None:
    """Compile ``source``, or return ``None`` for an empty template."""
    if not source:
        return None
    return VersionTemplate(source)
