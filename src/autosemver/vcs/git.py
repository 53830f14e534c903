"""Git access through the git command line.

:class:`GitRepository` implements the :class:`GitRepo` protocol consumed by
the bump orchestrator. Every git invocation goes through a single runner that
enforces a timeout and turns failures into :class:`~autosemver.exceptions.GitError`.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from autosemver.exceptions import GitError, GitTimeoutError, TagNotFoundError
from autosemver.logging import get_logger

log = get_logger(__name__)

# Default timeout for a single git call (3 minutes).
DEFAULT_TIMEOUT_SECONDS = 180.0

# Environment variable holding the branch name when HEAD is detached (CI builds).
DEFAULT_BRANCH_ENV = "GIT_BRANCH"

# Tags considered as versions by ``git describe``.
VERSION_TAG_GLOB = "*[0-9]*.[0-9]*.[0-9]*"

_SEPARATOR = "-->8--"
_DELIMITER = "$_$"
_LOG_FORMAT = _SEPARATOR + _DELIMITER.join(
    [
        "HASH:%H",
        "AUTHOR:%an\t%ae\t%at",
        "COMMITTER:%cn\t%ce\t%ct",
        "MESSAGE:%B",
    ]
)


class CommitHash(str):
    """Hexadecimal object name of a commit."""

    __slots__ = ()

    @property
    def short(self) -> str:
        """The abbreviated hash (first 7 characters)."""
        return self[:7]


@dataclass(frozen=True)
class Signature:
    """Who made a commit or tag, and when."""

    name: str
    email: str
    when: datetime | None = None

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class Commit:
    """A git commit as seen by the version computation.

    Attributes:
        hash: Full commit hash.
        message: Full commit message (subject and body).
        author: Original author of the change.
        committer: Who committed the change, may differ from the author.
    """

    hash: CommitHash
    message: str
    author: Signature
    committer: Signature

    def __post_init__(self) -> None:
        if not isinstance(self.hash, CommitHash):
            object.__setattr__(self, "hash", CommitHash(self.hash))

    @property
    def subject(self) -> str:
        """First line of the message."""
        return self.message.split("\n", 1)[0]


@dataclass(frozen=True)
class Tag:
    """A git tag. Only ``name`` is used to compute versions."""

    name: str = ""
    hash: CommitHash = field(default_factory=lambda: CommitHash(""))
    tagger: Signature | None = None
    message: str = ""


class GitRepo(Protocol):
    """Git operations needed to compute the next version."""

    def fetch_tags(self) -> None:
        """Fetch tags from the remote."""
        ...

    def get_commits(self, from_rev: str, to_rev: str) -> list[Commit]:
        """List commits in ``from_rev..to_rev``, newest first.

        An empty ``from_rev`` lists the whole history up to ``to_rev``.
        """
        ...

    def count_commits(self, from_rev: str, to_rev: str) -> int:
        """Count commits in ``from_rev..to_rev``."""
        ...

    def get_last_relative_tag(self, rev: str) -> Tag:
        """Nearest version tag reachable from ``rev`` along first parents.

        Raises:
            TagNotFoundError: If there is no such tag.
        """
        ...

    def get_current_branch(self) -> str:
        """Short name of the current branch."""
        ...


def rev_range(from_rev: str, to_rev: str) -> str:
    """Build a ``from..to`` revision range, ``to`` defaulting to ``HEAD``."""
    to_rev = to_rev or "HEAD"
    if not from_rev:
        return to_rev
    return f"{from_rev}..{to_rev}"


def parse_log(output: str) -> list[Commit]:
    """Parse ``git log`` output produced with the module log format."""
    commits: list[Commit] = []
    for chunk in output.split(_SEPARATOR)[1:]:
        fields: dict[str, str] = {}
        for token in chunk.split(_DELIMITER):
            name, _, value = token.partition(":")
            fields[name] = value.strip()
        commits.append(
            Commit(
                hash=CommitHash(fields.get("HASH", "")),
                message=fields.get("MESSAGE", ""),
                author=_parse_signature(fields.get("AUTHOR", "")),
                committer=_parse_signature(fields.get("COMMITTER", "")),
            )
        )
    return commits


def _parse_signature(value: str) -> Signature:
    name, email, timestamp = ([*value.split("\t"), "", "", ""])[:3]
    try:
        when: datetime | None = datetime.fromtimestamp(int(timestamp), UTC)
    except ValueError:
        when = None
    return Signature(name=name, email=email, when=when)


class GitRepository:
    """A git working copy driven through the ``git`` executable.

    Args:
        path: Directory of the working copy.
        timeout: Maximum seconds a single git call may take.
        branch_env: Environment variable read when HEAD is detached.
    """

    def __init__(
        self,
        path: Path | str = ".",
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        branch_env: str = DEFAULT_BRANCH_ENV,
    ) -> None:
        self.path = Path(path)
        self.timeout = timeout
        self.branch_env = branch_env

    def __repr__(self) -> str:
        return f"GitRepository(path={str(self.path)!r}, timeout={self.timeout})"

    def _run(self, *args: str) -> str:
        """Run a git command and return its stripped stdout.

        Raises:
            GitTimeoutError: If the command exceeds the timeout.
            GitError: If git is missing or exits with a non-zero code.
        """
        cmd = ["git", *args]
        log.debug("git_command", cmd=" ".join(cmd), cwd=str(self.path))
        try:
            result = subprocess.run(
                cmd,
                cwd=self.path,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitTimeoutError(
                f"Command '{' '.join(cmd)}' timed out after {self.timeout:.2f} seconds",
                command=cmd,
                timeout=self.timeout,
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise GitError(
                f"Failed to run '{' '.join(cmd)}' in '{self.path}', output: '{stderr}'",
                command=cmd,
                stderr=stderr,
            ) from e
        except FileNotFoundError as e:
            raise GitError("git executable not found", command=cmd) from e
        return result.stdout.strip()

    def fetch_tags(self) -> None:
        self._run("fetch", "--tags")

    def get_commits(self, from_rev: str, to_rev: str) -> list[Commit]:
        output = self._run(
            "log",
            rev_range(from_rev, to_rev),
            "--no-decorate",
            f"--pretty=format:{_LOG_FORMAT}",
        )
        return parse_log(output)

    def count_commits(self, from_rev: str, to_rev: str) -> int:
        output = self._run("rev-list", "--ancestry-path", "--count", rev_range(from_rev, to_rev))
        try:
            return int(output)
        except ValueError as e:
            raise GitError(f"Unexpected commit count: {output!r}") from e

    def get_last_relative_tag(self, rev: str) -> Tag:
        # Annotated tags win over lightweight ones pointing to the same commit.
        try:
            name = self._run(
                "describe",
                "--tags",
                "--abbrev=0",
                "--match",
                VERSION_TAG_GLOB,
                "--first-parent",
                rev,
            )
        except GitTimeoutError:
            raise
        except GitError as e:
            raise TagNotFoundError(
                f"No version tag found from '{rev}'",
                command=e.command,
                stderr=e.stderr,
            ) from e
        return Tag(name=name)

    def get_current_branch(self) -> str:
        try:
            return self._run("symbolic-ref", "--short", "HEAD")
        except GitError as e:
            # Detached HEAD, typically on a CI server.
            log.debug("detached_head", branch_env=self.branch_env)
            branch = os.environ.get(self.branch_env, "").strip()
            if not branch:
                raise GitError(
                    "Unable to retrieve branch name from `git symbolic-ref HEAD` "
                    f"nor {self.branch_env} environment variable"
                ) from e
            return branch
