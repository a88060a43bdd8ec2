"""mkcd config: initialize, show, edit, validate and reset the configuration file."""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Optional

import typer

from mkcd.cli.common import (
    config_option,
    debug_option,
    fail,
    make_reporter,
    open_session,
    quiet_option,
    read_source,
    report_config_error,
    verbose_option,
)
from mkcd.config import inspect_config, load_config, resolve_config_path, save_config
from mkcd.config.formatter import IssueFormatter
from mkcd.errors import MkcdError
from mkcd.integrations.editor import TERMINAL_FD
from mkcd.models.config import Config
from mkcd.output import Reporter

config_app = typer.Typer(
    name="config",
    help="Manage the mkcd configuration file",
    no_args_is_help=True,
)


def editor_command() -> list[str]:
    """$EDITOR, else $VISUAL, else vi, split into argv."""
    for var in ("EDITOR", "VISUAL"):
        value = os.environ.get(var, "").strip()
        if value:
            return shlex.split(value)
    return ["vi"]


def edit_file(path: Path, reporter: Reporter) -> None:
    """Open path in the user's editor and wait for it to exit."""
    try:
        argv = [*editor_command(), str(path)]
    except ValueError as e:
        fail(reporter, f"Cannot parse editor command: {e}")
    reporter.info(f"Opening {path} in {argv[0]}...")
    try:
        subprocess.run(argv, stdout=TERMINAL_FD, check=True)
    except subprocess.CalledProcessError as e:
        fail(reporter, f"Editor exited with status {e.returncode}")
    except OSError as e:
        fail(reporter, f"Failed to start editor {argv[0]}: {e}")


def _write_defaults(path: Path, reporter: Reporter) -> None:
    try:
        save_config(Config(), path)
    except MkcdError as e:
        fail(reporter, e)


@config_app.command()
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Write a configuration file with the default settings."""
    reporter = make_reporter(quiet=quiet, verbose=verbose, debug=debug)
    path = resolve_config_path(config)
    if path.exists():
        if not force:
            fail(reporter, f"Configuration file already exists at {path} (use --force to overwrite)")
        reporter.warning("Overwriting existing configuration file")
    _write_defaults(path, reporter)
    reporter.success(f"Configuration initialized at {path}")
    reporter.info("You can now edit the configuration with: mkcd config edit")


@config_app.command()
def show(
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Show the effective configuration."""
    cfg, reporter = open_session(config, quiet=quiet, verbose=verbose, debug=debug)
    reporter.header("mkcd Configuration")

    sections = {
        "Core Settings": cfg.core,
        "Git Settings": cfg.git,
        "Template Settings": cfg.templates,
        "Safety Settings": cfg.safety,
        "Output Settings": cfg.output,
    }
    for title, section in sections.items():
        reporter.section(title)
        items = []
        for key, value in section.model_dump().items():
            label = key.replace("_", " ").title()
            if isinstance(value, list):
                value = ", ".join(value) or "-"
            elif isinstance(value, bool):
                value = str(value).lower()
            items.append(f"{label}: {value}")
        reporter.bullet_list(items)

    reporter.section("Profiles")
    if not cfg.profiles:
        reporter.info("No profiles configured")
    else:
        reporter.bullet_list(
            [f"{name} (default)" if name == cfg.core.default_profile else name for name in cfg.profiles]
        )
    reporter.info(f"Configuration file: {resolve_config_path(config)}")


@config_app.command()
def edit(
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Open the configuration file in $EDITOR, then validate it."""
    reporter = make_reporter(quiet=quiet, verbose=verbose, debug=debug)
    path = resolve_config_path(config)
    if not path.exists():
        reporter.warning("Configuration file does not exist, creating with defaults...")
        _write_defaults(path, reporter)

    edit_file(path, reporter)
    reporter.success("Configuration file edited")

    try:
        load_config(path)
    except MkcdError as e:
        report_config_error(reporter, e, path)
        reporter.info("Please fix the configuration file and try again")
        raise typer.Exit(code=1)
    reporter.success("Configuration is valid")


@config_app.command()
def validate(
    ci: bool = typer.Option(False, "--ci", help="CI-friendly concise output"),
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Check the configuration and report every problem found.

    Exits with code 1 if the file has errors. Missing template or temp
    directories are only warnings.
    """
    reporter = make_reporter(quiet=quiet, verbose=verbose, debug=debug)
    path = resolve_config_path(config)
    reporter.info(f"Validating configuration: {path}")

    result = inspect_config(path)
    if not result.exists:
        reporter.info("Configuration file does not exist, the defaults are in effect")

    if result.issues:
        source = read_source(path) if result.exists else ""
        reporter.error(f"Configuration has {len(result.issues)} error(s)")
        formatted = IssueFormatter(ci_mode=ci).format_all(result.issues, source, str(path))
        if ci:
            typer.echo(formatted)
        else:
            reporter.console.print(formatted, markup=False)
        raise typer.Exit(code=1)

    assert result.config is not None
    warnings = []
    templates_dir = Path(result.config.templates.directory).expanduser()
    if result.config.templates.directory and not templates_dir.exists():
        warnings.append(f"Template directory does not exist: {templates_dir}")
    temp_dir = Path(result.config.core.temp_dir).expanduser()
    if result.config.core.temp_dir and not temp_dir.exists():
        warnings.append(f"Temp directory does not exist: {temp_dir}")

    if warnings:
        reporter.warning("Configuration has warnings:")
        reporter.bullet_list(warnings)
    else:
        reporter.success("Configuration is valid")


@config_app.command()
def reset(
    force: bool = typer.Option(False, "--force", "-f", help="Reset without asking"),
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Overwrite the configuration file with the defaults."""
    reporter = make_reporter(quiet=quiet, verbose=verbose, debug=debug)
    path = resolve_config_path(config)
    if not force and not reporter.confirm(
        "Reset configuration to defaults? This will overwrite your current settings.", False
    ):
        reporter.info("Reset cancelled")
        return
    _write_defaults(path, reporter)
    reporter.success(f"Configuration reset to defaults: {path}")
