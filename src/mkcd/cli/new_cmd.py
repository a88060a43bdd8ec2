"""mkcd new: create a directory and initialize a workspace in it.

This is also the command behind the bare ``mkcd <directory>`` form.
On success the only thing written to stdout is a ``cd '<path>'`` line,
so a shell function can ``eval`` it to move into the new workspace.
"""

from __future__ import annotations

import shlex
from typing import Optional

import typer

from mkcd.cli.common import config_option, debug_option, fail, open_session, quiet_option, verbose_option
from mkcd.config import resolve_profile
from mkcd.errors import MkcdError
from mkcd.execution.merge import merge
from mkcd.execution.orchestrator import Orchestrator
from mkcd.models.plan import InvocationOptions, ResolvedPlan, RunOptions


def split_touch(values: Optional[list[str]]) -> Optional[tuple[str, ...]]:
    """Flatten repeated/comma-separated --touch values; None when not given."""
    if not values:
        return None
    names = [name.strip() for value in values for name in value.split(",")]
    return tuple(name for name in names if name) or None


def new(
    directory: str = typer.Argument(..., help="Directory to create"),
    git: bool = typer.Option(False, "--git", help="Initialize a git repository"),
    git_remote: Optional[str] = typer.Option(None, "--git-remote", help="Add remote origin URL (implies --git)"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Apply a local project template"),
    editor_name: Optional[str] = typer.Option(None, "--editor", "-e", help="Open in the named editor"),
    open_editor: bool = typer.Option(False, "--open-editor", help="Open in the auto-detected editor"),
    touch: Optional[list[str]] = typer.Option(None, "--touch", help="Create file(s), comma-separated or repeated"),
    readme: bool = typer.Option(False, "--readme", help="Generate README.md"),
    gitignore: Optional[str] = typer.Option(None, "--gitignore", help="Generate .gitignore (general, go, node, python)"),
    license: Optional[str] = typer.Option(None, "--license", help="Generate LICENSE (mit, apache-2.0)"),
    mode: Optional[str] = typer.Option(None, "--mode", help="Directory permissions, e.g. 755"),
    parent_mode: Optional[str] = typer.Option(None, "--parent-mode", help="Permissions for created parents"),
    symlink: Optional[str] = typer.Option(None, "--symlink", "-s", help="Create as a symlink to this target"),
    temp: bool = typer.Option(False, "--temp", help="Create under the temporary directory"),
    expire: Optional[str] = typer.Option(None, "--expire", help="Report an expiry after this duration (1h, 30m)"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Use a named profile"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Show what would be done without doing it"),
    force: bool = typer.Option(False, "--force", "-f", help="Override safety checks and overwrite documents"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Confirm before creating"),
    backup: bool = typer.Option(False, "--backup", help="Back up files before overwriting them"),
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Create DIRECTORY and set it up as a workspace.

    Options are layered over the selected profile (or the default
    profile); boolean features are enabled if either asks for them.
    """
    cfg, reporter = open_session(config, quiet=quiet, verbose=verbose, debug=debug)

    # False flags mean "not given": a profile-enabled feature stays on
    invocation = InvocationOptions(
        git=git or None,
        git_remote=git_remote,
        template=template,
        editor=open_editor or None,
        editor_name=editor_name,
        readme=readme or None,
        gitignore=gitignore,
        license=license,
        touch=split_touch(touch),
        mode=mode,
        parent_mode=parent_mode,
        symlink=symlink,
        temp=temp or None,
        expire=expire,
    )

    try:
        profile_layer = resolve_profile(cfg, profile or "")
        plan = merge(profile_layer, invocation, ResolvedPlan(git=cfg.git.auto_init))
        reporter.verbose(f"Resolved plan: {plan.model_dump(exclude_defaults=True)}")
        options = RunOptions(
            dry_run=dry_run,
            force=force,
            interactive=interactive and reporter.interactive,
            backup=backup,
        )
        report = Orchestrator(cfg, plan, options, reporter).run(directory)
    except MkcdError as e:
        fail(reporter, e)

    if report.cancelled:
        return
    if not report.succeeded:
        raise typer.Exit(code=1)

    if report.warnings:
        reporter.info(f"Completed with {len(report.warnings)} warning(s)")
    if report.dry_run:
        reporter.info("Dry run complete, nothing was changed")
        return
    typer.echo(f"cd {shlex.quote(str(report.target))}")
