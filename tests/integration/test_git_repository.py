"""Tests against real git repositories."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from autosemver.core.bump import BumpStrategy
from autosemver.exceptions import GitError, TagNotFoundError
from autosemver.vcs.git import GitRepository

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed"),
]


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True, check=True)
    return result.stdout.strip()


def commit(cwd: Path, message: str) -> str:
    git(cwd, "commit", "--allow-empty", "-m", message)
    return git(cwd, "rev-parse", "HEAD")


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    """An empty repository on master with a fixed identity."""
    global_config = tmp_path / "gitconfig"
    global_config.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for prefix in ("GIT_AUTHOR", "GIT_COMMITTER"):
        monkeypatch.setenv(f"{prefix}_NAME", "Test")
        monkeypatch.setenv(f"{prefix}_EMAIL", "test@example.com")
    monkeypatch.delenv("GIT_BRANCH", raising=False)

    path = tmp_path / "repo"
    path.mkdir()
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", "refs/heads/master")
    return path


def next_version(path: Path) -> str:
    return str(BumpStrategy(GitRepository(path), fetch_tags=False).bump())


class TestGitRepositoryIntegration:
    """GitRepository against a real repository."""

    def test_current_branch(self, workdir: Path):
        """The branch name comes from symbolic-ref."""
        commit(workdir, "chore: init")
        git(workdir, "checkout", "-q", "-b", "feature/x")

        assert GitRepository(workdir).get_current_branch() == "feature/x"

    def test_detached_head(self, workdir: Path, monkeypatch):
        """A detached HEAD falls back to GIT_BRANCH."""
        commit(workdir, "chore: init")
        git(workdir, "checkout", "-q", "--detach")
        repo = GitRepository(workdir)

        with pytest.raises(GitError):
            repo.get_current_branch()

        monkeypatch.setenv("GIT_BRANCH", "master")
        assert repo.get_current_branch() == "master"

    def test_no_tag(self, workdir: Path):
        """A repository without version tag has no last tag."""
        commit(workdir, "chore: init")
        git(workdir, "tag", "not-a-version")

        with pytest.raises(TagNotFoundError):
            GitRepository(workdir).get_last_relative_tag("HEAD")

    def test_commits_and_count(self, workdir: Path):
        """Commits since a tag are listed newest first."""
        commit(workdir, "chore: init")
        git(workdir, "tag", "v1.0.0")
        first = commit(workdir, "fix: first")
        second = commit(workdir, "feat: second\n\nwith a body")
        repo = GitRepository(workdir)

        commits = repo.get_commits("v1.0.0", "HEAD")

        assert [c.hash for c in commits] == [second, first]
        assert commits[0].message == "feat: second\n\nwith a body"
        assert commits[0].author.name == "Test"
        assert commits[0].author.when is not None
        assert repo.count_commits("v1.0.0", "HEAD") == 2

    def test_annotated_tag(self, workdir: Path):
        """Annotated tags are found like lightweight ones."""
        commit(workdir, "chore: init")
        git(workdir, "tag", "-a", "v2.1.0", "-m", "release 2.1.0")

        assert GitRepository(workdir).get_last_relative_tag("HEAD").name == "v2.1.0"

    def test_tag_on_merged_branch_is_ignored(self, workdir: Path):
        """Only tags on the first-parent history count."""
        commit(workdir, "chore: init")
        git(workdir, "tag", "v1.0.0")
        git(workdir, "checkout", "-q", "-b", "feature/x")
        commit(workdir, "feat: on the side")
        git(workdir, "tag", "v5.0.0")
        git(workdir, "checkout", "-q", "master")
        git(workdir, "merge", "-q", "--no-ff", "-m", "Merge branch 'feature/x'", "feature/x")

        assert GitRepository(workdir).get_last_relative_tag("HEAD").name == "v1.0.0"
        assert next_version(workdir) == "1.1.0"


class TestBumpIntegration:
    """End to end version computation."""

    def test_first_version(self, workdir: Path):
        """Without tags the history starts at 0.0.0."""
        commit(workdir, "fix: a")
        commit(workdir, "feat: b")

        assert next_version(workdir) == "0.1.0"

    def test_feature_on_master(self, workdir: Path):
        """A feature on master bumps minor."""
        commit(workdir, "chore: init")
        git(workdir, "tag", "v1.0.0")
        commit(workdir, "feat: new thing")

        assert next_version(workdir) == "1.1.0"

    def test_no_commit_since_tag(self, workdir: Path):
        """HEAD on the tag keeps its version."""
        commit(workdir, "chore: init")
        git(workdir, "tag", "v1.0.0")

        assert next_version(workdir) == "1.0.0"

    def test_feature_branch_build_metadata(self, workdir: Path):
        """Feature branches get a pseudo version."""
        commit(workdir, "chore: init")
        git(workdir, "tag", "v1.0.0")
        git(workdir, "checkout", "-q", "-b", "feature/x")
        commit(workdir, "feat: a")
        head = commit(workdir, "fix: b")

        assert next_version(workdir) == f"1.0.0+2.{head[:7]}"

    def test_fetch_tags_unreachable_remote(self, workdir: Path, tmp_path: Path):
        """Fetching tags from a remote that does not exist fails."""
        commit(workdir, "chore: init")
        git(workdir, "remote", "add", "origin", str(tmp_path / "missing"))

        with pytest.raises(GitError):
            GitRepository(workdir).fetch_tags()
