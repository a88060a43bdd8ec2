"""Configuration validation: schema checks plus cross-field rules.

Two-stage validation: the parsed YAML is first checked against the
Config Pydantic model, then the semantic rules (history limit, depth
limit, default profile, absolute forbidden paths) run over the result.
Issues are enriched with source positions and typo suggestions.

Both stages can run in strict mode (stop and raise on the first
problem, used when loading) or collecting mode (return every problem,
used by ``mkcd config validate``).
"""

from __future__ import annotations

import difflib
import os
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from mkcd.config.yaml_parser import LineMap
from mkcd.errors import ConfigValidationError
from mkcd.models.config import (
    Config,
    CoreConfig,
    GitConfig,
    OutputConfig,
    ProfileConfig,
    SafetyConfig,
    TemplatesConfig,
)

# Field names per section, used for "did you mean" suggestions
_SECTION_MODELS: dict[str, type[BaseModel]] = {
    "": Config,
    "core": CoreConfig,
    "git": GitConfig,
    "templates": TemplatesConfig,
    "safety": SafetyConfig,
    "output": OutputConfig,
    "profiles.*": ProfileConfig,
}


@dataclass
class ConfigIssue:
    """A single configuration problem with source position and context.

    Attributes:
        field: Dotted path of the offending field.
        message: Human-readable description of the problem.
        type: Error type ('extra_forbidden', 'default_profile', ...).
        line: 1-indexed source line, or None if unknown.
        col: 1-indexed source column, or None if unknown.
        suggestion: 'Did you mean X?' hint for typos, or None.
    """

    field: str
    message: str
    type: str
    line: int | None = None
    col: int | None = None
    suggestion: str | None = None

    def describe(self) -> str:
        location = f" (line {self.line})" if self.line is not None else ""
        hint = f" {self.suggestion}" if self.suggestion else ""
        return f"{self.field}: {self.message}{location}{hint}"


def _loc_to_field_path(loc: tuple[str | int, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _find_line_for_field(field_path: str, line_map: LineMap) -> tuple[int | None, int | None]:
    """Look up a field's position, falling back to its closest parent."""
    parts = field_path.split(".")
    while parts:
        prefix = ".".join(parts)
        if prefix in line_map:
            return line_map[prefix]
        parts.pop()
    return None, None


def _section_key(parent: tuple[str | int, ...]) -> str:
    if len(parent) == 2 and parent[0] == "profiles":
        return "profiles.*"
    return _loc_to_field_path(parent)


def _get_suggestion(loc: tuple[str | int, ...]) -> str | None:
    """Suggest the closest valid key for an unknown field at loc."""
    model = _SECTION_MODELS.get(_section_key(loc[:-1]))
    if model is None or not loc:
        return None
    matches = difflib.get_close_matches(
        str(loc[-1]), list(model.model_fields.keys()), n=1, cutoff=0.6
    )
    if matches:
        return f"Did you mean '{matches[0]}'?"
    return None


def validate_schema(
    raw_data: dict[str, Any],
    line_map: LineMap | None = None,
) -> tuple[Config | None, list[ConfigIssue]]:
    """Validate parsed YAML against the Config model.

    Returns:
        (Config, []) on success, or (None, issues) on failure.
    """
    line_map = line_map or {}
    try:
        return Config.model_validate(raw_data), []
    except ValidationError as e:
        issues: list[ConfigIssue] = []
        for err in e.errors():
            loc = tuple(err.get("loc", ()))
            field_path = _loc_to_field_path(loc)
            error_type = err.get("type", "unknown")
            line, col = _find_line_for_field(field_path, line_map)
            suggestion = _get_suggestion(loc) if error_type == "extra_forbidden" else None
            issues.append(
                ConfigIssue(
                    field=field_path or "<root>",
                    message=err.get("msg", "Validation error"),
                    type=error_type,
                    line=line,
                    col=col,
                    suggestion=suggestion,
                )
            )
        return None, issues


def check_semantics(config: Config, line_map: LineMap | None = None) -> list[ConfigIssue]:
    """Run the cross-field rules and return every violation found."""
    line_map = line_map or {}
    issues: list[ConfigIssue] = []

    def add(field: str, message: str, error_type: str) -> None:
        line, col = _find_line_for_field(field, line_map)
        issues.append(ConfigIssue(field, message, error_type, line, col))

    if config.core.history_limit < 0:
        add("core.history_limit", "history_limit must be non-negative", "history_limit")

    if config.core.editor_timeout < 0:
        add("core.editor_timeout", "editor_timeout must be non-negative", "editor_timeout")

    if config.safety.max_depth < 1:
        add("safety.max_depth", "max_depth must be at least 1", "max_depth")

    default = config.core.default_profile
    if default and default not in config.profiles:
        add(
            "core.default_profile",
            f"default profile '{default}' does not exist",
            "default_profile",
        )

    for idx, path in enumerate(config.safety.forbidden_paths):
        if not os.path.isabs(path):
            add(
                f"safety.forbidden_paths.{idx}",
                f"forbidden path '{path}' must be absolute",
                "forbidden_path",
            )

    return issues


def validate_config(
    config: Config,
    *,
    strict: bool = True,
    line_map: LineMap | None = None,
    filename: str | None = None,
) -> list[ConfigIssue]:
    """Validate a Config.

    Args:
        config: The configuration to check.
        strict: Raise on the first violation instead of collecting.
        line_map: Optional source positions for issue enrichment.
        filename: Optional file name carried on the raised error.

    Returns:
        All issues found (always empty in strict mode).

    Raises:
        ConfigValidationError: In strict mode, if any rule is violated.
    """
    issues = check_semantics(config, line_map)
    if strict and issues:
        raise ConfigValidationError(issues[:1], filename=filename)
    return issues
