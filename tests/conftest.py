"""Shared fixtures: an isolated configuration, a captured reporter and fake backends."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from mkcd.config import save_config
from mkcd.integrations.editor import EditorInfo
from mkcd.integrations.git import VersionControlBackend
from mkcd.models.config import Config, CoreConfig, SafetyConfig, TemplatesConfig
from mkcd.output import Reporter


class FakeVCS(VersionControlBackend):
    """Records calls instead of running git."""

    def __init__(self, commit_result: str | None = "abc12345") -> None:
        self.calls: list[tuple] = []
        self.repos: set[Path] = set()
        self.remotes: dict[Path, set[str]] = {}
        self.commit_result = commit_result

    def is_repository(self, path: Path) -> bool:
        return path in self.repos

    def init(self, path: Path, default_branch: str) -> None:
        self.calls.append(("init", path, default_branch))
        self.repos.add(path)

    def has_remote(self, path: Path, name: str) -> bool:
        return name in self.remotes.get(path, set())

    def add_remote(self, path: Path, name: str, url: str) -> None:
        self.calls.append(("remote", path, name, url))
        self.remotes.setdefault(path, set()).add(name)

    def commit_all(self, path: Path, message: str) -> str | None:
        self.calls.append(("commit", path, message))
        return self.commit_result


class FakeEditors:
    """Editor launcher stand-in that records launches."""

    def __init__(self, editor: EditorInfo | None = None, error: Exception | None = None) -> None:
        self.editor = editor or EditorInfo("Fake", "fake-editor")
        self.error = error
        self.launched: list[tuple[str, Path]] = []

    def resolve(self, name: str = "") -> EditorInfo:
        if self.error is not None:
            raise self.error
        return self.editor

    def launch(self, editor: EditorInfo, path: Path, timeout: float = 0) -> None:
        self.launched.append((editor.command, path))


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Defaults with a policy that allows the pytest temp tree."""
    return Config(
        core=CoreConfig(temp_dir=str(tmp_path / "tmpdir")),
        templates=TemplatesConfig(directory=str(tmp_path / "templates")),
        safety=SafetyConfig(forbidden_paths=["/", "/etc", "/usr"], max_depth=30),
    )


@pytest.fixture
def config_file(tmp_path: Path, config: Config) -> Path:
    """The isolated configuration saved to disk."""
    return save_config(config, tmp_path / "conf" / "mkcd.yaml")


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, no_color=True, soft_wrap=True)


@pytest.fixture
def reporter(console: Console) -> Reporter:
    return Reporter(console, interactive=False, icons=False)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def vcs() -> FakeVCS:
    return FakeVCS()


@pytest.fixture
def editors() -> FakeEditors:
    return FakeEditors()
