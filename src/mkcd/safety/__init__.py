"""Path-safety policy and validation."""

from mkcd.safety.paths import PathValidator, SafetyPolicy

__all__ = ["PathValidator", "SafetyPolicy"]
