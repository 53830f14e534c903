"""Shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
import structlog

from autosemver.vcs.git import Commit, CommitHash, GitRepository, Signature, Tag

DEFAULT_HASH = "1234567890abcdef1234567890abcdef12345678"


@pytest.fixture(autouse=True)
def _structlog_to_stdlib():
    """Route structlog through the standard library so pytest captures it."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_commit() -> Callable[..., Commit]:
    """Factory for commits with a fixed author."""

    def _make(message: str, hash: str = DEFAULT_HASH) -> Commit:
        signature = Signature("Test", "test@test.com", datetime(2024, 1, 1, tzinfo=UTC))
        return Commit(
            hash=CommitHash(hash),
            message=message,
            author=signature,
            committer=signature,
        )

    return _make


@pytest.fixture
def mock_repo() -> MagicMock:
    """Repository on master, last tag v1.1.0, no commits since."""
    repo = MagicMock(spec=GitRepository)
    repo.get_last_relative_tag.return_value = Tag(name="v1.1.0")
    repo.get_current_branch.return_value = "master"
    repo.get_commits.return_value = []
    return repo
