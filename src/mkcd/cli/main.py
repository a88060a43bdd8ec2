"""mkcd CLI entry point."""

from __future__ import annotations

import sys
from typing import Optional

import typer

from mkcd import __version__
from mkcd.cli.config_cmd import config_app
from mkcd.cli.new_cmd import new
from mkcd.cli.profile_cmd import profile_app

app = typer.Typer(
    name="mkcd",
    help="Create a directory, set it up as a workspace, and cd into it",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

# Register subcommands
app.command()(new)
app.add_typer(config_app, name="config")
app.add_typer(profile_app, name="profile")

COMMANDS = frozenset({"new", "config", "profile"})
ROOT_OPTIONS = frozenset({"-h", "--help", "-V", "--version"})


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"mkcd {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Create a directory, set it up as a workspace, and cd into it."""


def route(args: list[str]) -> list[str]:
    """Send the bare ``mkcd <directory> ...`` form to the new command."""
    if not args or args[0] in COMMANDS or args[0] in ROOT_OPTIONS:
        return args
    return ["new", *args]


def run(argv: Optional[list[str]] = None) -> None:
    """Console-script entry point."""
    args = sys.argv[1:] if argv is None else argv
    app(args=route(list(args)), prog_name="mkcd")
