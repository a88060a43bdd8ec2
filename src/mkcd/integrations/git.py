"""Version-control backend.

VersionControlBackend is the contract the orchestrator depends on;
GitCliBackend implements it over the ``git`` executable. Tests and
alternative backends subclass the ABC.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from mkcd.errors import VersionControlError

logger = logging.getLogger(__name__)

VALID_REMOTE_PREFIXES: tuple[str, ...] = ("https://", "http://", "git://", "ssh://", "git@")

DEFAULT_AUTHOR_NAME = "mkcd user"
DEFAULT_AUTHOR_EMAIL = "user@example.com"


def validate_remote_url(url: str) -> None:
    """Check that url looks like a git remote.

    Raises:
        VersionControlError: If url is empty or has an unknown scheme.
    """
    if not url:
        raise VersionControlError("remote URL cannot be empty", url)
    if not url.startswith(VALID_REMOTE_PREFIXES):
        raise VersionControlError(
            f"invalid git remote URL format (expected one of {', '.join(VALID_REMOTE_PREFIXES)})",
            url,
        )


class VersionControlBackend(ABC):
    """Operations the orchestrator needs from a version-control system."""

    @abstractmethod
    def is_repository(self, path: Path) -> bool:
        """Return True if path is already a repository root."""

    @abstractmethod
    def init(self, path: Path, default_branch: str) -> None:
        """Create a repository at path with default_branch as its initial branch."""

    @abstractmethod
    def has_remote(self, path: Path, name: str) -> bool:
        """Return True if the repository at path has a remote called name."""

    @abstractmethod
    def add_remote(self, path: Path, name: str, url: str) -> None:
        """Register a remote."""

    @abstractmethod
    def commit_all(self, path: Path, message: str) -> str | None:
        """Stage everything and commit.

        Returns:
            The new commit id, or None if there was nothing to commit.
        """


class GitCliBackend(VersionControlBackend):
    """VersionControlBackend backed by the git command-line tool.

    Args:
        user_name: Commit author name; falls back to git config, then a
            built-in placeholder.
        user_email: Commit author email, with the same fallbacks.
        executable: git binary to run.
        timeout: Per-command timeout in seconds.
    """

    def __init__(
        self,
        user_name: str = "",
        user_email: str = "",
        executable: str = "git",
        timeout: float = 60.0,
    ) -> None:
        self.user_name = user_name
        self.user_email = user_email
        self.executable = executable
        self.timeout = timeout

    def _run(self, args: list[str], cwd: Path, check: bool = True) -> subprocess.CompletedProcess[str]:
        cmd = [self.executable, *args]
        if shutil.which(self.executable) is None:
            raise VersionControlError(f"git executable '{self.executable}' not found on PATH", str(cwd), cmd)
        logger.debug("Running %s in %s", " ".join(cmd), cwd)
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise VersionControlError(f"failed to run {' '.join(cmd)} ({e})", str(cwd), cmd) from e
        if check and result.returncode != 0:
            raise VersionControlError(
                f"{' '.join(cmd)} exited with status {result.returncode}",
                str(cwd),
                cmd,
                result.stderr or result.stdout,
            )
        return result

    def is_repository(self, path: Path) -> bool:
        return (path / ".git").is_dir()

    def init(self, path: Path, default_branch: str) -> None:
        if self.is_repository(path):
            logger.debug("Git repository already exists in %s", path)
            return
        self._run(["init", "--quiet"], cwd=path)
        if default_branch:
            # Works on every git version, unlike `init -b`
            self._run(["symbolic-ref", "HEAD", f"refs/heads/{default_branch}"], cwd=path)

    def has_remote(self, path: Path, name: str) -> bool:
        result = self._run(["remote"], cwd=path)
        return name in result.stdout.split()

    def add_remote(self, path: Path, name: str, url: str) -> None:
        validate_remote_url(url)
        if self.has_remote(path, name):
            logger.debug("Remote %s already exists in %s", name, path)
            return
        self._run(["remote", "add", name, url], cwd=path)

    def _identity(self, path: Path) -> tuple[str, str]:
        name = self.user_name or self._config_value(path, "user.name") or DEFAULT_AUTHOR_NAME
        email = self.user_email or self._config_value(path, "user.email") or DEFAULT_AUTHOR_EMAIL
        return name, email

    def _config_value(self, path: Path, key: str) -> str:
        result = self._run(["config", "--get", key], cwd=path, check=False)
        return result.stdout.strip() if result.returncode == 0 else ""

    def commit_all(self, path: Path, message: str) -> str | None:
        self._run(["add", "-A"], cwd=path)
        status = self._run(["status", "--porcelain"], cwd=path)
        if not status.stdout.strip():
            logger.debug("No changes to commit in %s", path)
            return None
        name, email = self._identity(path)
        self._run(
            ["-c", f"user.name={name}", "-c", f"user.email={email}", "commit", "--quiet", "-m", message],
            cwd=path,
        )
        head = self._run(["rev-parse", "--short=8", "HEAD"], cwd=path)
        return head.stdout.strip()
