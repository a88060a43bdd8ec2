"""Tests for the mkcd / mkcd new command."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from mkcd import __version__
from mkcd.cli.main import app, route, run
from mkcd.cli.new_cmd import split_touch
from mkcd.config import save_config, set_profile
from mkcd.models.config import ProfileConfig

runner = CliRunner()


def _cd_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if line.startswith("cd ")]


@pytest.fixture(autouse=True)
def in_workdir(workdir, monkeypatch):
    monkeypatch.chdir(workdir)


class TestRouting:
    """The bare `mkcd <directory>` form maps onto `mkcd new`."""

    @pytest.mark.parametrize(
        "args,expected",
        [
            (["proj"], ["new", "proj"]),
            (["--git", "proj"], ["new", "--git", "proj"]),
            (["new", "proj"], ["new", "proj"]),
            (["config", "show"], ["config", "show"]),
            (["profile", "list"], ["profile", "list"]),
            (["--version"], ["--version"]),
            (["-h"], ["-h"]),
            ([], []),
        ],
    )
    def test_route(self, args, expected):
        assert route(args) == expected

    def test_run_with_bare_directory(self, workdir, config_file):
        with pytest.raises(SystemExit) as exc_info:
            run(["proj", "--config", str(config_file)])
        assert exc_info.value.code == 0
        assert (workdir / "proj").is_dir()

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"mkcd {__version__}" in result.output


class TestSplitTouch:
    def test_comma_separated_and_repeated(self):
        assert split_touch(["a.txt,b.txt", " c.txt "]) == ("a.txt", "b.txt", "c.txt")

    def test_not_given(self):
        assert split_touch(None) is None
        assert split_touch([" , "]) is None


class TestNewCommand:
    def test_creates_workspace_and_prints_cd(self, workdir, config_file):
        result = runner.invoke(
            app,
            ["new", "proj", "--config", str(config_file), "--readme", "--touch", "a.txt,b.txt", "--license", "mit"],
        )
        assert result.exit_code == 0, result.output
        project = workdir / "proj"
        assert (project / "README.md").exists()
        assert (project / "a.txt").exists()
        assert (project / "b.txt").exists()
        assert (project / "LICENSE").exists()
        assert _cd_lines(result.output) == [f"cd {project}"]

    def test_dry_run_changes_nothing(self, workdir, config_file):
        result = runner.invoke(app, ["new", "proj", "-c", str(config_file), "-n", "--readme", "--gitignore", "go"])
        assert result.exit_code == 0, result.output
        assert "[DRY RUN] Would create directory" in result.output
        assert "[DRY RUN] Would generate gitignore" in result.output
        assert not (workdir / "proj").exists()
        assert _cd_lines(result.output) == []

    def test_forbidden_path_exits_one(self, config_file):
        result = runner.invoke(app, ["new", "/etc/mkcd-cli-test", "-c", str(config_file)])
        assert result.exit_code == 1
        assert "forbidden" in result.output
        assert _cd_lines(result.output) == []

    def test_touch_failure_still_succeeds(self, workdir, config_file):
        result = runner.invoke(
            app, ["new", "proj", "-c", str(config_file), "--readme", "--touch", "../outside.txt"]
        )
        assert result.exit_code == 0, result.output
        assert "Completed with 1 warning(s)" in result.output
        assert (workdir / "proj" / "README.md").exists()

    def test_profile_layer_applied(self, workdir, config, tmp_path):
        cfg = set_profile(config, "docs", ProfileConfig(readme=True, touch=("notes.md",)))
        path = save_config(cfg, tmp_path / "docs.yaml")
        result = runner.invoke(app, ["new", "proj", "-c", str(path), "-p", "docs", "--gitignore", "general"])
        assert result.exit_code == 0, result.output
        project = workdir / "proj"
        assert (project / "README.md").exists()
        assert (project / "notes.md").exists()
        assert (project / ".gitignore").exists()

    def test_unknown_profile(self, config_file):
        result = runner.invoke(app, ["new", "proj", "-c", str(config_file), "-p", "rust"])
        assert result.exit_code == 1
        assert "profile 'rust' not found" in result.output

    def test_invalid_mode(self, workdir, config_file):
        result = runner.invoke(app, ["new", "proj", "-c", str(config_file), "--mode", "99"])
        assert result.exit_code == 1
        assert "invalid permission mode" in result.output
        assert not (workdir / "proj").exists()

    def test_symlink_with_temp_rejected(self, config_file):
        result = runner.invoke(app, ["new", "proj", "-c", str(config_file), "-s", "/srv", "--temp"])
        assert result.exit_code == 1
        assert "--symlink cannot be combined with --temp" in result.output

    def test_invalid_config_file(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("core:\n  histroy_limit: 3\n", encoding="utf-8")
        result = runner.invoke(app, ["new", "proj", "-c", str(path)])
        assert result.exit_code == 1
        assert "Did you mean 'history_limit'?" in result.output

    def test_verbose_shows_resolved_plan(self, workdir, config_file):
        result = runner.invoke(app, ["new", "proj", "-c", str(config_file), "-v", "--readme"])
        assert result.exit_code == 0, result.output
        assert "Resolved plan:" in result.output
        assert f"Target directory: {workdir / 'proj'}" in result.output

    def test_without_verbose_plan_is_hidden(self, config_file):
        result = runner.invoke(app, ["new", "proj", "-c", str(config_file)])
        assert "Resolved plan:" not in result.output

    def test_quiet_hides_progress(self, workdir, config_file):
        result = runner.invoke(app, ["new", "proj", "-c", str(config_file), "-q"])
        assert result.exit_code == 0
        assert "Created directory" not in result.output
        assert _cd_lines(result.output) == [f"cd {workdir / 'proj'}"]
