"""Tests for configuration issue formatting."""

from mkcd.config.formatter import IssueFormatter, issue_code
from mkcd.config.validator import ConfigIssue

SOURCE = "core:\n  histroy_limit: 3\n"


def _typo_issue() -> ConfigIssue:
    return ConfigIssue(
        field="core.histroy_limit",
        message="Extra inputs are not permitted",
        type="extra_forbidden",
        line=2,
        col=3,
        suggestion="Did you mean 'history_limit'?",
    )


class TestIssueCode:
    def test_exact_and_partial_matches(self):
        assert issue_code("extra_forbidden") == "C001"
        assert issue_code("int_parsing") == "C003"
        assert issue_code("default_profile") == "C005"
        assert issue_code("something_else") == "C999"


class TestIssueFormatter:
    """Human and CI rendering."""

    def test_rich_format_points_at_key(self):
        """Human mode shows the source line with the key underlined."""
        text = IssueFormatter(ci_mode=False).format_issue(_typo_issue(), SOURCE.splitlines(), "mkcd.yaml")
        assert "error[C001]: unknown key" in text
        assert "--> mkcd.yaml:2:3" in text
        assert "  histroy_limit: 3" in text
        assert "^" * len("histroy_limit") in text
        assert "= help: Did you mean 'history_limit'?" in text

    def test_ci_format_is_one_line(self):
        text = IssueFormatter(ci_mode=True).format_issue(_typo_issue(), [], "mkcd.yaml")
        assert text == (
            "mkcd.yaml:2:3 -- core.histroy_limit: Extra inputs are not permitted "
            "(Did you mean 'history_limit'?)"
        )

    def test_issue_without_line(self):
        issue = ConfigIssue("core.default_profile", "default profile 'x' does not exist", "default_profile")
        text = IssueFormatter(ci_mode=False).format_issue(issue, [], "mkcd.yaml")
        assert "--> mkcd.yaml" in text
        assert "core.default_profile: default profile 'x' does not exist" in text

    def test_ci_mode_from_environment(self, monkeypatch):
        monkeypatch.setenv("CI", "true")
        assert IssueFormatter().ci_mode is True
        monkeypatch.setenv("CI", "")
        assert IssueFormatter().ci_mode is False

    def test_format_all_separates_issues(self):
        issues = [_typo_issue(), _typo_issue()]
        assert IssueFormatter(ci_mode=True).format_all(issues, SOURCE, "f").count("\n") == 1
