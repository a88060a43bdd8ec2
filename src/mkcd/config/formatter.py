"""Render configuration issues for humans or for CI logs.

Human mode annotates the offending line of the config file with an
underline under the key; CI mode emits one ``file:line:col -- field:
message`` line per issue.
"""

from __future__ import annotations

import os

from mkcd.config.validator import ConfigIssue

# Issue type -> error code; pydantic types are matched by substring
ISSUE_CODES: dict[str, str] = {
    "extra_forbidden": "C001",
    "missing": "C002",
    "type": "C003",
    "parsing": "C003",
    "yaml_syntax_error": "C004",
    "default_profile": "C005",
    "forbidden_path": "C006",
    "history_limit": "C007",
    "editor_timeout": "C007",
    "max_depth": "C007",
}

ISSUE_DESCRIPTIONS: dict[str, str] = {
    "C001": "unknown key",
    "C002": "required key missing",
    "C003": "type mismatch",
    "C004": "YAML syntax error",
    "C005": "dangling default profile",
    "C006": "relative forbidden path",
    "C007": "value out of range",
}


def issue_code(issue_type: str) -> str:
    if issue_type in ISSUE_CODES:
        return ISSUE_CODES[issue_type]
    for key, code in ISSUE_CODES.items():
        if key in issue_type:
            return code
    return "C999"


class IssueFormatter:
    """Formats ConfigIssues.

    Args:
        ci_mode: Concise single-line output. None auto-detects from the
            CI environment variable.
    """

    def __init__(self, ci_mode: bool | None = None) -> None:
        if ci_mode is None:
            ci_mode = os.environ.get("CI", "").lower() in ("true", "1", "yes")
        self.ci_mode = ci_mode

    def format_issue(self, issue: ConfigIssue, source_lines: list[str], filename: str) -> str:
        if self.ci_mode:
            hint = f" ({issue.suggestion})" if issue.suggestion else ""
            return f"{filename}:{issue.line or 0}:{issue.col or 0} -- {issue.field}: {issue.message}{hint}"

        code = issue_code(issue.type)
        lines = [f"error[{code}]: {ISSUE_DESCRIPTIONS.get(code, 'invalid configuration')}"]
        if issue.line is None:
            lines += [f"  --> {filename}", "   |", f"   | {issue.field}: {issue.message}", "   |"]
        else:
            lines += [f"  --> {filename}:{issue.line}:{issue.col or 1}", "   |"]
            idx = issue.line - 1
            if 0 <= idx < len(source_lines):
                src = source_lines[idx].rstrip()
                number = str(issue.line)
                gutter = " " * len(number)
                lines.append(f" {number} | {src}")
                key = issue.field.split(".")[-1]
                start = src.find(key)
                if start >= 0 and key:
                    lines.append(f" {gutter} | {' ' * start}{'^' * len(key)} {issue.message}")
                else:
                    lines.append(f" {gutter} | {issue.message}")
            else:
                lines.append(f"   | {issue.message}")
            lines.append("   |")
        if issue.suggestion:
            lines.append(f"   = help: {issue.suggestion}")
        return "\n".join(lines)

    def format_all(self, issues: list[ConfigIssue], source: str, filename: str) -> str:
        """All issues, separated by blank lines (single lines in CI mode)."""
        source_lines = source.splitlines()
        separator = "\n" if self.ci_mode else "\n\n"
        return separator.join(self.format_issue(i, source_lines, filename) for i in issues)
