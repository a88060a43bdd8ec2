"""Helpers shared by every mkcd command: option declarations, session setup, error exit."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, NoReturn

import typer

from mkcd.config import load_config, resolve_config_path
from mkcd.config.formatter import IssueFormatter
from mkcd.errors import ConfigValidationError, MkcdError, ParseError
from mkcd.models.config import Config
from mkcd.output import Reporter, configure_logging, make_console


def config_option() -> Any:
    return typer.Option(None, "--config", "-c", help="Config file (default: ~/.config/mkcd/mkcd.yaml)")


def verbose_option() -> Any:
    return typer.Option(False, "--verbose", "-v", help="Detailed output")


def quiet_option() -> Any:
    return typer.Option(False, "--quiet", "-q", help="Suppress all output except errors")


def debug_option() -> Any:
    return typer.Option(False, "--debug", help="Debug output with trace information")


def make_reporter(
    config: Config | None = None,
    *,
    quiet: bool = False,
    verbose: bool = False,
    debug: bool = False,
    interactive: bool | None = None,
) -> Reporter:
    """Build a Reporter honouring the output section of config.

    Prompts only read input when stdin is a terminal unless interactive
    is given explicitly.
    """
    config = config or Config()
    console = make_console(config.output.colors)
    configure_logging(console, quiet=quiet, verbose=verbose, debug=debug)
    if interactive is None:
        interactive = sys.stdin.isatty()
    return Reporter(
        console,
        quiet=quiet,
        verbose=verbose,
        debug=debug,
        interactive=interactive,
        icons=config.output.icons,
    )


def fail(reporter: Reporter, error: MkcdError | str) -> NoReturn:
    """Report error and exit with status 1."""
    reporter.error(str(error))
    raise typer.Exit(code=1)


def read_source(path: Path) -> str:
    """Config file text for annotating issues, or "" if it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""


def report_config_error(reporter: Reporter, error: MkcdError, path: Path) -> None:
    """Print a load failure, annotating the offending lines when possible."""
    if isinstance(error, ConfigValidationError) and error.issues:
        source = read_source(path)
        reporter.error(f"Invalid configuration: {path}")
        reporter.console.print(IssueFormatter().format_all(error.issues, source, str(path)), markup=False)
    elif isinstance(error, ParseError):
        reporter.error(f"Invalid configuration: {error}")
    else:
        reporter.error(f"Failed to load configuration: {error}")


def open_session(
    config_path: str | None,
    *,
    quiet: bool = False,
    verbose: bool = False,
    debug: bool = False,
    interactive: bool | None = None,
) -> tuple[Config, Reporter]:
    """Load the configuration and build a reporter for it.

    Exits with status 1 if the configuration cannot be loaded.
    """
    path = resolve_config_path(config_path)
    try:
        config = load_config(path)
    except MkcdError as e:
        report_config_error(make_reporter(quiet=quiet, verbose=verbose, debug=debug), e, path)
        raise typer.Exit(code=1)
    reporter = make_reporter(config, quiet=quiet, verbose=verbose, debug=debug, interactive=interactive)
    reporter.debug(f"Using configuration {path}")
    return config, reporter
