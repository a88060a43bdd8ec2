"""Persisted configuration models for mkcd.

Mirrors the sections of ~/.config/mkcd/mkcd.yaml with the same
defaults the tool ships with. Unknown keys are rejected so that typos
surface as validation errors instead of being silently ignored.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field


def _default_templates_dir() -> str:
    return str(Path("~/.config/mkcd/templates").expanduser())


class CoreConfig(BaseModel):
    """Core application settings."""

    model_config = {"extra": "forbid"}

    default_profile: str = "default"
    editor: str = ""
    shell_integration: bool = True
    history_limit: int = 100
    backup_enabled: bool = False
    temp_dir: str = "/tmp/mkcd"
    editor_timeout: int = 0


class GitConfig(BaseModel):
    """Version-control settings used when a plan enables git."""

    model_config = {"extra": "forbid"}

    auto_init: bool = False
    default_branch: str = "main"
    user_name: str = ""
    user_email: str = ""
    default_remote_name: str = "origin"


class TemplatesConfig(BaseModel):
    """Location of local project templates."""

    model_config = {"extra": "forbid"}

    directory: str = Field(default_factory=_default_templates_dir)
    auto_update: bool = False


class SafetyConfig(BaseModel):
    """Path-safety policy and confirmation settings."""

    model_config = {"extra": "forbid"}

    confirm_overwrites: bool = True
    confirm_deletes: bool = True
    max_depth: int = 10
    forbidden_paths: list[str] = Field(
        default_factory=lambda: ["/", "/usr", "/etc", "/var", "/bin", "/sbin"]
    )


class OutputConfig(BaseModel):
    """Terminal rendering settings."""

    model_config = {"extra": "forbid"}

    colors: bool = True
    icons: bool = True
    progress_bars: bool = True


class ProfileConfig(BaseModel):
    """A named, reusable bundle of workspace options.

    Profiles are settings layers: read-only once built, combined with
    invocation options by the merger.
    """

    model_config = {"extra": "forbid", "frozen": True}

    git: bool = False
    editor: bool = False
    readme: bool = False
    gitignore: str = ""
    template: str = ""
    touch: tuple[str, ...] = ()
    license: str = ""

    def describe(self) -> str:
        """Short feature summary used in profile listings."""
        features: list[str] = []
        if self.git:
            features.append("Git")
        if self.editor:
            features.append("Editor")
        if self.readme:
            features.append("README")
        if self.template:
            features.append(f"Template:{self.template}")
        return ", ".join(features) if features else "Basic profile"


def default_profiles() -> dict[str, ProfileConfig]:
    """The profiles every fresh configuration starts with."""
    return {
        "default": ProfileConfig(),
        "dev": ProfileConfig(
            git=True, editor=True, readme=True, gitignore="general", template="basic-dev"
        ),
        "nodejs": ProfileConfig(
            git=True,
            editor=True,
            template="nodejs",
            gitignore="node",
            touch=("package.json", "index.js"),
        ),
        "python": ProfileConfig(
            git=True,
            editor=True,
            template="python",
            gitignore="python",
            touch=("main.py", "requirements.txt"),
        ),
    }


class Config(BaseModel):
    """The whole mkcd configuration file."""

    model_config = {"extra": "forbid"}

    core: CoreConfig = Field(default_factory=CoreConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    safety: SafetyConfig = Field(default_factory=SafetyConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    profiles: dict[str, ProfileConfig] = Field(default_factory=default_profiles)


def default_config_path() -> Path:
    """Return the configuration file location.

    MKCD_CONFIG overrides the per-user default of
    ~/.config/mkcd/mkcd.yaml.
    """
    override = os.environ.get("MKCD_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path("~/.config/mkcd/mkcd.yaml").expanduser()
