"""Path-safety validation gate.

Every target path passes through PathValidator before anything is
created. Rules run in a fixed order (normalization, depth, forbidden
prefixes, characters); strict callers stop at the first violation,
report callers collect all of them.
"""

from __future__ import annotations

import os
import re
from pathlib import PurePosixPath

from pydantic import BaseModel, Field

from mkcd.errors import SafetyError, SafetyRule
from mkcd.models.config import SafetyConfig

# (compiled pattern, description) checked against every path segment
_CHARACTER_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\x00"), "null byte"),
    (re.compile(r'[<>:"|?*]'), "reserved filename character"),
    (re.compile(r"^\s|\s$"), "leading or trailing whitespace"),
    (re.compile(r"\.{3,}"), "excessive dots"),
]


class SafetyPolicy(BaseModel):
    """Rules gating which paths may be mutated."""

    model_config = {"frozen": True}

    forbidden_prefixes: tuple[str, ...] = ()
    max_depth: int = Field(default=10, ge=1)

    @classmethod
    def from_config(cls, safety: SafetyConfig) -> SafetyPolicy:
        return cls(forbidden_prefixes=tuple(safety.forbidden_paths), max_depth=safety.max_depth)


def _segments(path: str) -> list[str]:
    return [part for part in path.split(os.sep) if part]


class PathValidator:
    """Validates candidate paths against a SafetyPolicy.

    Args:
        policy: The rules to enforce.
        cwd: Base directory for relative paths (defaults to os.getcwd()).
    """

    def __init__(self, policy: SafetyPolicy, cwd: str | None = None) -> None:
        self.policy = policy
        self.cwd = cwd

    def validate(self, raw_path: str) -> str:
        """Validate raw_path strictly.

        Returns:
            The normalized absolute path.

        Raises:
            SafetyError: For the first rule the path violates.
        """
        normalized, errors = self._run(raw_path, collect=False)
        if errors:
            raise errors[0]
        assert normalized is not None
        return normalized

    def check(self, raw_path: str) -> list[SafetyError]:
        """Return every rule violation for raw_path (empty if safe)."""
        _, errors = self._run(raw_path, collect=True)
        return errors

    def _run(self, raw_path: str, collect: bool) -> tuple[str | None, list[SafetyError]]:
        errors: list[SafetyError] = []

        def fail(error: SafetyError) -> bool:
            errors.append(error)
            return not collect

        expanded = os.path.expanduser(raw_path)
        if not expanded.strip():
            errors.append(SafetyError(SafetyRule.EMPTY, raw_path, "path is empty"))
            return None, errors

        if ".." in _segments(expanded):
            if fail(SafetyError(SafetyRule.TRAVERSAL, raw_path, "path contains '..' components")):
                return None, errors

        base = self.cwd if self.cwd is not None else os.getcwd()
        normalized = os.path.normpath(os.path.join(base, expanded))

        depth = len(_segments(normalized))
        if depth > self.policy.max_depth:
            detail = f"path depth {depth} exceeds maximum allowed depth {self.policy.max_depth}"
            if fail(SafetyError(SafetyRule.DEPTH, normalized, detail)):
                return normalized, errors

        forbidden = self._forbidden_prefix(normalized)
        if forbidden is not None:
            if normalized == forbidden:
                detail = "path is forbidden"
            else:
                detail = f"path is under forbidden directory {forbidden}"
            if fail(SafetyError(SafetyRule.FORBIDDEN, normalized, detail)):
                return normalized, errors

        for segment in _segments(expanded):
            problem = self._character_problem(segment)
            if problem is not None:
                fail(SafetyError(SafetyRule.CHARACTERS, raw_path, f"path contains {problem}"))
                break

        return normalized, errors

    def _forbidden_prefix(self, path: str) -> str | None:
        """Return the forbidden prefix path equals or is nested under, if any.

        The filesystem root only forbids itself; otherwise every path
        would be nested under it.
        """
        candidate = PurePosixPath(path)
        for prefix in self.policy.forbidden_prefixes:
            forbidden = PurePosixPath(os.path.normpath(prefix))
            if candidate == forbidden:
                return str(forbidden)
            if str(forbidden) == forbidden.anchor:
                continue
            if forbidden in candidate.parents:
                return str(forbidden)
        return None

    @staticmethod
    def _character_problem(segment: str) -> str | None:
        for pattern, description in _CHARACTER_RULES:
            if pattern.search(segment):
                return description
        return None
