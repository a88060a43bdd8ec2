"""Settings layers for a single mkcd invocation.

InvocationOptions holds what the user typed, with None meaning "not
given". ResolvedPlan is the single fully-merged layer the orchestrator
executes. Both are frozen: the merge step is the only producer of a
ResolvedPlan.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class InvocationOptions(BaseModel):
    """Explicit command-line overrides. None means the flag was not given."""

    model_config = {"extra": "forbid", "frozen": True}

    git: Optional[bool] = None
    git_remote: Optional[str] = None
    template: Optional[str] = None
    editor: Optional[bool] = None
    editor_name: Optional[str] = None
    readme: Optional[bool] = None
    gitignore: Optional[str] = None
    license: Optional[str] = None
    touch: Optional[tuple[str, ...]] = None
    mode: Optional[str] = None
    parent_mode: Optional[str] = None
    symlink: Optional[str] = None
    temp: Optional[bool] = None
    expire: Optional[str] = None


class ResolvedPlan(BaseModel):
    """The merged settings used for one invocation.

    Default values double as the built-in defaults layer.
    """

    model_config = {"extra": "forbid", "frozen": True}

    git: bool = False
    git_remote: str = ""
    template: str = ""
    editor: bool = False
    editor_name: str = ""
    readme: bool = False
    gitignore: str = ""
    license: str = ""
    touch: tuple[str, ...] = ()
    mode: str = ""
    parent_mode: str = ""
    symlink: str = ""
    temp: bool = False
    expire: str = ""


class RunOptions(BaseModel):
    """Invocation-wide behaviour switches that are not settings layers."""

    model_config = {"extra": "forbid", "frozen": True}

    dry_run: bool = False
    force: bool = False
    interactive: bool = False
    backup: bool = False
