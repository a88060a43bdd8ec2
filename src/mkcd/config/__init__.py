"""Configuration store: loading, validation, persistence and profiles."""

from mkcd.config.profiles import (
    copy_profile,
    delete_profile,
    get_profile,
    resolve_profile,
    set_default_profile,
    set_profile,
)
from mkcd.config.store import inspect_config, load_config, resolve_config_path, save_config
from mkcd.config.validator import ConfigIssue, validate_config

__all__ = [
    "ConfigIssue",
    "copy_profile",
    "delete_profile",
    "get_profile",
    "inspect_config",
    "load_config",
    "resolve_config_path",
    "resolve_profile",
    "save_config",
    "set_default_profile",
    "set_profile",
    "validate_config",
]
