"""Tests for the step driver loop."""

from pathlib import Path

from mkcd.errors import FileSystemError
from mkcd.execution.steps import ExecutionStep, FailurePolicy, RunReport, StepStatus, run_steps


def _failing() -> str:
    raise FileSystemError("boom", "/some/path")


class TestRunSteps:
    """Policy handling in run_steps."""

    def test_runs_effects_in_order(self, reporter):
        order = []
        steps = [
            ExecutionStep("a", "do a", lambda: order.append("a") or "did a"),
            ExecutionStep("b", "do b", lambda: order.append("b") or "did b"),
        ]
        report = RunReport(target=Path("/x"))
        assert run_steps(steps, reporter, report) is True
        assert order == ["a", "b"]
        assert [o.status for o in report.outcomes] == [StepStatus.DONE, StepStatus.DONE]
        assert "did b" in reporter.console.file.getvalue()

    def test_soft_failure_warns_and_continues(self, reporter):
        steps = [
            ExecutionStep("soft", "make soft thing", _failing, policy=FailurePolicy.SOFT),
            ExecutionStep("after", "do after", lambda: "after done"),
        ]
        report = RunReport(target=Path("/x"))
        assert run_steps(steps, reporter, report) is True
        assert report.succeeded
        assert len(report.warnings) == 1
        assert report.warnings[0].message == "Failed to make soft thing: boom: /some/path"
        assert "boom: /some/path" in reporter.console.file.getvalue()

    def test_hard_failure_stops(self, reporter):
        ran = []
        steps = [
            ExecutionStep("hard", "make hard thing", _failing),
            ExecutionStep("never", "never", lambda: ran.append(1) or ""),
        ]
        report = RunReport(target=Path("/x"))
        assert run_steps(steps, reporter, report) is False
        assert ran == []
        assert report.failed is not None
        assert report.failed.name == "hard"
        assert not report.succeeded

    def test_satisfied_precondition_skips(self, reporter):
        ran = []
        step = ExecutionStep("s", "s", lambda: ran.append(1) or "", precondition=lambda: "already there")
        report = RunReport(target=Path("/x"))
        run_steps([step], reporter, report)
        assert ran == []
        assert report.outcomes[0].status is StepStatus.SKIPPED

    def test_failing_precondition_follows_policy(self, reporter):
        step = ExecutionStep("p", "check p", lambda: "", policy=FailurePolicy.SOFT, precondition=_failing)
        report = RunReport(target=Path("/x"))
        run_steps([step], reporter, report)
        assert report.outcomes[0].status is StepStatus.WARNED

    def test_os_error_becomes_filesystem_failure(self, reporter):
        def check() -> str | None:
            raise OSError(36, "File name too long", "/x/long")

        step = ExecutionStep("long", "create long thing", lambda: "", precondition=check)
        report = RunReport(target=Path("/x"))
        assert run_steps([step], reporter, report) is False
        assert report.failed.message == "Failed to create long thing: File name too long: /x/long"

    def test_os_error_in_soft_effect_warns(self, reporter):
        def effect() -> str:
            raise PermissionError(13, "Permission denied")

        step = ExecutionStep("perm", "write thing", effect, policy=FailurePolicy.SOFT)
        report = RunReport(target=Path("/x"))
        assert run_steps([step], reporter, report) is True
        assert report.warnings[0].message == "Failed to write thing: Permission denied: perm"


class TestDryRun:
    """Mutating steps only describe themselves under dry-run."""

    def test_mutating_step_is_planned(self, reporter):
        ran = []
        step = ExecutionStep("m", "create thing", lambda: ran.append(1) or "")
        report = RunReport(target=Path("/x"), dry_run=True)
        run_steps([step], reporter, report)
        assert ran == []
        assert report.outcomes[0].status is StepStatus.PLANNED
        assert report.outcomes[0].message == "[DRY RUN] Would create thing"

    def test_preconditions_still_evaluated(self, reporter):
        step = ExecutionStep("m", "create thing", lambda: "", precondition=lambda: "exists already")
        report = RunReport(target=Path("/x"), dry_run=True)
        run_steps([step], reporter, report)
        assert report.outcomes[0].status is StepStatus.SKIPPED

    def test_non_mutating_step_runs(self, reporter):
        ran = []
        step = ExecutionStep("v", "validate", lambda: ran.append(1) or "", mutating=False)
        report = RunReport(target=Path("/x"), dry_run=True)
        run_steps([step], reporter, report)
        assert ran == [1]
        assert report.outcomes[0].status is StepStatus.DONE
