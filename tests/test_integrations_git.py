"""Tests for the git CLI backend."""

import shutil
import subprocess

import pytest

from mkcd.errors import VersionControlError
from mkcd.integrations.git import GitCliBackend, validate_remote_url

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


class TestValidateRemoteUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/me/repo.git",
            "http://example.com/repo",
            "git://example.com/repo",
            "ssh://git@example.com/repo",
            "git@github.com:me/repo.git",
        ],
    )
    def test_accepted(self, url):
        validate_remote_url(url)

    @pytest.mark.parametrize("url", ["", "ftp://example.com/repo", "github.com/me/repo"])
    def test_rejected(self, url):
        with pytest.raises(VersionControlError):
            validate_remote_url(url)


class TestMissingExecutable:
    def test_missing_git_is_wrapped(self, tmp_path):
        backend = GitCliBackend(executable="definitely-not-git-xyz")
        with pytest.raises(VersionControlError, match="not found"):
            backend.init(tmp_path, "main")


@requires_git
class TestGitCliBackend:
    """Exercises the real git executable in a temp directory."""

    def test_init_sets_default_branch(self, tmp_path):
        backend = GitCliBackend()
        backend.init(tmp_path, "trunk")
        assert backend.is_repository(tmp_path)
        head = subprocess.run(
            ["git", "symbolic-ref", "HEAD"], cwd=tmp_path, capture_output=True, text=True, check=True
        )
        assert head.stdout.strip() == "refs/heads/trunk"

    def test_init_is_idempotent(self, tmp_path):
        backend = GitCliBackend()
        backend.init(tmp_path, "main")
        backend.init(tmp_path, "main")
        assert backend.is_repository(tmp_path)

    def test_remote(self, tmp_path):
        backend = GitCliBackend()
        backend.init(tmp_path, "main")
        url = "https://example.com/repo.git"
        backend.add_remote(tmp_path, "origin", url)
        backend.add_remote(tmp_path, "origin", url)
        assert backend.has_remote(tmp_path, "origin")
        assert not backend.has_remote(tmp_path, "upstream")

    def test_commit_all(self, tmp_path):
        backend = GitCliBackend(user_name="Test User", user_email="test@example.com")
        backend.init(tmp_path, "main")
        assert backend.commit_all(tmp_path, "Initial commit") is None

        (tmp_path / "README.md").write_text("# hi\n", encoding="utf-8")
        commit = backend.commit_all(tmp_path, "Initial commit")
        assert commit
        author = subprocess.run(
            ["git", "log", "-1", "--format=%an <%ae>"], cwd=tmp_path, capture_output=True, text=True, check=True
        )
        assert author.stdout.strip() == "Test User <test@example.com>"

    def test_failed_command_carries_output(self, tmp_path):
        backend = GitCliBackend()
        with pytest.raises(VersionControlError) as exc_info:
            backend.has_remote(tmp_path, "origin")
        assert exc_info.value.command[:2] == ["git", "remote"]
        assert exc_info.value.path == str(tmp_path)
