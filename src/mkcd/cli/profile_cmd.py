"""mkcd profile: list, inspect and maintain the named option bundles."""

from __future__ import annotations

from typing import Optional

import typer

from mkcd.cli.common import (
    config_option,
    debug_option,
    fail,
    open_session,
    quiet_option,
    report_config_error,
    verbose_option,
)
from mkcd.cli.config_cmd import edit_file
from mkcd.cli.new_cmd import split_touch
from mkcd.config import (
    copy_profile,
    delete_profile,
    get_profile,
    load_config,
    resolve_config_path,
    save_config,
    set_default_profile,
    set_profile,
)
from mkcd.errors import MkcdError
from mkcd.models.config import Config, ProfileConfig
from mkcd.output import Reporter
from mkcd.scaffold.documents import GITIGNORE_FLAVORS, LICENSE_FLAVORS

profile_app = typer.Typer(
    name="profile",
    help="Manage configuration profiles",
    no_args_is_help=True,
)

TEMPLATE_CHOICES = ["none", "basic-dev", "nodejs", "python", "go", "web"]


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _choice(value: str) -> str:
    return "" if value == "none" else value


def _save(cfg: Config, config_path: Optional[str], reporter: Reporter) -> None:
    try:
        save_config(cfg, config_path)
    except MkcdError as e:
        fail(reporter, e)


@profile_app.command(name="list")
def list_profiles(
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """List all profiles."""
    cfg, reporter = open_session(config, quiet=quiet, verbose=verbose, debug=debug)
    if not cfg.profiles:
        reporter.info("No profiles found")
        return

    reporter.header("Available Profiles")
    rows = []
    for name in sorted(cfg.profiles):
        profile = cfg.profiles[name]
        display = f"{name} (default)" if name == cfg.core.default_profile else name
        rows.append([display, _yes_no(profile.git), _yes_no(profile.editor), profile.template or "-", profile.describe()])
    reporter.table(["Name", "Git", "Editor", "Template", "Description"], rows)


@profile_app.command()
def show(
    name: str = typer.Argument(..., help="Profile name"),
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Show one profile's settings."""
    cfg, reporter = open_session(config, quiet=quiet, verbose=verbose, debug=debug)
    try:
        profile = get_profile(cfg, name)
    except MkcdError as e:
        fail(reporter, e)

    reporter.header(f"Profile: {name}")
    details = [
        f"Git initialization: {str(profile.git).lower()}",
        f"Editor integration: {str(profile.editor).lower()}",
        f"Generate README: {str(profile.readme).lower()}",
    ]
    if profile.template:
        details.append(f"Template: {profile.template}")
    if profile.gitignore:
        details.append(f"Gitignore type: {profile.gitignore}")
    if profile.license:
        details.append(f"License: {profile.license}")
    if profile.touch:
        details.append(f"Touch files: {', '.join(profile.touch)}")
    reporter.bullet_list(details)
    if name == cfg.core.default_profile:
        reporter.info("This is the default profile")


@profile_app.command()
def create(
    name: str = typer.Argument(..., help="Profile name"),
    git: bool = typer.Option(False, "--git", help="Initialize git by default"),
    editor: bool = typer.Option(False, "--editor", help="Open in editor by default"),
    readme: bool = typer.Option(False, "--readme", help="Generate README.md by default"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Default template"),
    gitignore: Optional[str] = typer.Option(None, "--gitignore", help="Default .gitignore flavor"),
    license: Optional[str] = typer.Option(None, "--license", help="Default license"),
    touch: Optional[list[str]] = typer.Option(None, "--touch", help="Files to create by default"),
    make_default: bool = typer.Option(False, "--default", help="Make this the default profile"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing profile"),
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Create a profile, asking for anything not given as an option."""
    cfg, reporter = open_session(config, quiet=quiet, verbose=verbose, debug=debug)
    if name in cfg.profiles:
        if not force:
            fail(reporter, f"Profile '{name}' already exists (use --force to overwrite)")
        reporter.warning(f"Overwriting existing profile '{name}'")

    reporter.header(f"Creating Profile: {name}")
    git = git or reporter.confirm("Initialize Git repository by default?", False)
    editor = editor or reporter.confirm("Open in editor by default?", False)
    readme = readme or reporter.confirm("Generate README.md by default?", False)
    if template is None:
        template = _choice(reporter.select("Select default template", TEMPLATE_CHOICES))
    if gitignore is None:
        gitignore = _choice(reporter.select("Select default .gitignore type", ["none", *GITIGNORE_FLAVORS]))
    if license is None:
        license = _choice(reporter.select("Select default license", ["none", *LICENSE_FLAVORS]))
    touch_files = split_touch(touch)
    if touch_files is None:
        touch_files = split_touch([reporter.ask("Files to create by default (comma-separated, or empty)", "")])

    profile = ProfileConfig(
        git=git,
        editor=editor,
        readme=readme,
        template=template,
        gitignore=gitignore,
        license=license,
        touch=touch_files or (),
    )

    try:
        cfg = set_profile(cfg, name, profile)
        if make_default or (
            cfg.core.default_profile in ("", "default")
            and name != cfg.core.default_profile
            and reporter.confirm("Make this the default profile?", False)
        ):
            cfg = set_default_profile(cfg, name)
    except MkcdError as e:
        fail(reporter, e)

    _save(cfg, config, reporter)
    reporter.success(f"Profile '{name}' created successfully")


@profile_app.command()
def edit(
    name: str = typer.Argument(..., help="Profile name"),
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Open the configuration file in $EDITOR to change a profile."""
    cfg, reporter = open_session(config, quiet=quiet, verbose=verbose, debug=debug)
    try:
        get_profile(cfg, name)
    except MkcdError as e:
        fail(reporter, e)

    path = resolve_config_path(config)
    if not path.exists():
        _save(cfg, config, reporter)
    edit_file(path, reporter)

    try:
        load_config(path)
    except MkcdError as e:
        report_config_error(reporter, e, path)
        raise typer.Exit(code=1)
    reporter.success(f"Profile '{name}' edited")
    reporter.info("Changes will take effect on the next mkcd command")


@profile_app.command()
def delete(
    name: str = typer.Argument(..., help="Profile name"),
    force: bool = typer.Option(False, "--force", "-f", help="Delete without asking"),
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Delete a profile. The default profile cannot be deleted."""
    cfg, reporter = open_session(config, quiet=quiet, verbose=verbose, debug=debug)
    try:
        updated = delete_profile(cfg, name)
    except MkcdError as e:
        fail(reporter, e)

    if not force and not reporter.confirm(f"Delete profile '{name}'?", False):
        reporter.info("Delete cancelled")
        return
    _save(updated, config, reporter)
    reporter.success(f"Profile '{name}' deleted")


@profile_app.command()
def copy(
    source: str = typer.Argument(..., help="Profile to copy"),
    destination: str = typer.Argument(..., help="New profile name"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite the destination"),
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Copy a profile under a new name."""
    cfg, reporter = open_session(config, quiet=quiet, verbose=verbose, debug=debug)
    try:
        updated = copy_profile(cfg, source, destination, overwrite=force)
    except MkcdError as e:
        fail(reporter, e)
    _save(updated, config, reporter)
    reporter.success(f"Profile '{source}' copied to '{destination}'")


@profile_app.command(name="set-default")
def set_default(
    name: str = typer.Argument(..., help="Profile name"),
    config: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
    debug: bool = debug_option(),
) -> None:
    """Make NAME the default profile."""
    cfg, reporter = open_session(config, quiet=quiet, verbose=verbose, debug=debug)
    try:
        updated = set_default_profile(cfg, name)
    except MkcdError as e:
        fail(reporter, e)
    _save(updated, config, reporter)
    reporter.success(f"Default profile set to '{name}'")
