"""Load, validate and persist the mkcd configuration file.

A missing file is not an error: the built-in defaults are returned.
A file that exists is always parsed and fully validated before use,
and no partially valid configuration is ever handed to callers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from mkcd.config.validator import ConfigIssue, check_semantics, validate_config, validate_schema
from mkcd.config.yaml_parser import parse_yaml_file
from mkcd.errors import ConfigValidationError, FileSystemError, ParseError
from mkcd.models.config import Config, default_config_path

logger = logging.getLogger(__name__)


@dataclass
class ConfigReport:
    """Result of a collecting (non-raising) configuration check."""

    path: Path
    exists: bool
    config: Config | None
    issues: list[ConfigIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.config is not None and not self.issues


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Return the explicit path if given, else the per-user default."""
    if path is None or str(path) == "":
        return default_config_path()
    return Path(path).expanduser()


def load_config(path: str | Path | None = None) -> Config:
    """Load and strictly validate the configuration at path.

    Returns the built-in defaults when the file does not exist. An empty
    file is treated the same way.

    Raises:
        ParseError: If the file exists but is not valid YAML.
        ConfigValidationError: If the content violates the schema or
            any semantic rule.
    """
    config_path = resolve_config_path(path)
    if not config_path.exists():
        logger.debug("Config file not found at %s, using defaults", config_path)
        return Config()

    raw, line_map = parse_yaml_file(config_path)
    if raw is None:
        logger.debug("Config file %s is empty, using defaults", config_path)
        return Config()

    config, issues = validate_schema(raw, line_map)
    if issues:
        raise ConfigValidationError(issues, filename=str(config_path))
    assert config is not None

    validate_config(config, strict=True, line_map=line_map, filename=str(config_path))
    logger.debug("Loaded configuration from %s", config_path)
    return config


def inspect_config(path: str | Path | None = None) -> ConfigReport:
    """Check the configuration at path and collect every issue.

    Unlike load_config this never raises for content problems; a parse
    error becomes a single issue on the '<yaml>' pseudo-field.
    """
    config_path = resolve_config_path(path)
    if not config_path.exists():
        return ConfigReport(path=config_path, exists=False, config=Config())

    try:
        raw, line_map = parse_yaml_file(config_path)
    except ParseError as e:
        issue = ConfigIssue("<yaml>", e.message, "yaml_syntax_error", e.line, e.column)
        return ConfigReport(path=config_path, exists=True, config=None, issues=[issue])

    if raw is None:
        return ConfigReport(path=config_path, exists=True, config=Config())

    config, issues = validate_schema(raw, line_map)
    if config is not None:
        issues = check_semantics(config, line_map)
    return ConfigReport(path=config_path, exists=True, config=config, issues=issues)


def save_config(config: Config, path: str | Path | None = None) -> Path:
    """Serialize the full configuration to path, creating parent directories.

    Writes are atomic (write to .tmp, then rename) so an interrupted save
    never leaves a truncated configuration behind.

    Returns:
        The path written.

    Raises:
        FileSystemError: If the directory or file cannot be written.
    """
    config_path = resolve_config_path(path)
    data = config.model_dump(mode="json")
    content = yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)

    tmp_path = config_path.with_name(config_path.name + ".tmp")
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(content, encoding="utf-8")
        tmp_path.replace(config_path)
    except OSError as e:
        raise FileSystemError(f"failed to save configuration ({e.strerror or e})", str(config_path)) from e

    logger.debug("Saved configuration to %s", config_path)
    return config_path
