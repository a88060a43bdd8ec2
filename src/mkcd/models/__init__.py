"""mkcd data models - re-exports all public model classes."""

from mkcd.models.config import (
    Config,
    CoreConfig,
    GitConfig,
    OutputConfig,
    ProfileConfig,
    SafetyConfig,
    TemplatesConfig,
)
from mkcd.models.plan import InvocationOptions, ResolvedPlan, RunOptions

__all__ = [
    "Config",
    "CoreConfig",
    "GitConfig",
    "InvocationOptions",
    "OutputConfig",
    "ProfileConfig",
    "ResolvedPlan",
    "RunOptions",
    "SafetyConfig",
    "TemplatesConfig",
]
