"""Exception hierarchy shared by every mkcd layer.

Library code raises these; only the CLI turns them into messages and
exit codes. Every error carries the offending path or name so that the
user sees which rule was violated, not just that something failed.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mkcd.config.validator import ConfigIssue


class MkcdError(Exception):
    """Base class for all mkcd errors."""


class ParseError(MkcdError):
    """Raised when a persisted configuration cannot be parsed.

    Attributes:
        message: Human-readable description of the syntax error.
        filename: File being parsed, or '<string>'.
        line: 1-indexed line of the problem, if known.
        column: 1-indexed column of the problem, if known.
    """

    def __init__(
        self,
        message: str,
        filename: str = "<string>",
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.message = message
        self.filename = filename
        self.line = line
        self.column = column
        location = filename
        if line is not None:
            location += f":{line}:{column or 1}"
        super().__init__(f"failed to parse {location}: {message}")


class ConfigValidationError(MkcdError):
    """Raised when a configuration is semantically invalid.

    Carries every issue found so callers can print all of them.
    """

    def __init__(self, issues: list[ConfigIssue], filename: str | None = None) -> None:
        self.issues = issues
        self.filename = filename
        first = issues[0].describe() if issues else "invalid configuration"
        extra = f" (and {len(issues) - 1} more)" if len(issues) > 1 else ""
        prefix = f"{filename}: " if filename else ""
        super().__init__(f"{prefix}{first}{extra}")


class PlanError(MkcdError):
    """Raised when a resolved plan is self-contradictory or malformed."""


class SafetyRule(str, Enum):
    """Which path-safety rule rejected a path."""

    EMPTY = "empty"
    TRAVERSAL = "traversal"
    DEPTH = "depth"
    FORBIDDEN = "forbidden"
    CHARACTERS = "characters"


class SafetyError(MkcdError):
    """Raised when a target path is rejected by the safety policy.

    Attributes:
        kind: The rule that was violated.
        path: The offending path as validated.
        detail: Rule-specific explanation (limit, prefix, glyph, ...).
    """

    def __init__(self, kind: SafetyRule, path: str, detail: str) -> None:
        self.kind = kind
        self.path = path
        self.detail = detail
        super().__init__(f"{kind.value}: {detail}: {path!r}")


class ConflictError(MkcdError):
    """Raised when an operation would break a profile-registry invariant."""


class FileSystemError(MkcdError):
    """Raised when a filesystem operation fails.

    Attributes:
        path: The path the operation was acting on.
    """

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(f"{message}: {path}")


class NotFoundError(MkcdError):
    """Raised when a named profile, editor, document flavor or template is absent.

    Attributes:
        kind: What was looked up ("profile", "editor", ...).
        name: The name that was not found.
    """

    def __init__(self, kind: str, name: str, available: list[str] | None = None) -> None:
        self.kind = kind
        self.name = name
        self.available = available or []
        message = f"{kind} '{name}' not found"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class VersionControlError(MkcdError):
    """Raised when a git operation fails.

    Attributes:
        path: Repository path the command ran in.
        command: The git command line that failed.
        output: Combined stdout/stderr of the failed command.
    """

    def __init__(self, message: str, path: str, command: list[str] | None = None, output: str = "") -> None:
        self.path = path
        self.command = command or []
        self.output = output.strip()
        detail = f"{message}: {path}"
        if self.output:
            detail += f"\n{self.output}"
        super().__init__(detail)
