"""Execution steps and the driver loop that runs them.

Each step is tagged with a failure policy. The driver evaluates every
step's precondition (also under dry-run, so reports reflect reality),
then either performs the effect or only describes it. Soft failures
become warnings; the first hard failure stops the sequence.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from mkcd.errors import FileSystemError, MkcdError
from mkcd.output import Reporter

logger = logging.getLogger(__name__)


class FailurePolicy(str, Enum):
    """Whether a failing step aborts the run (hard) or only warns (soft)."""

    HARD = "hard"
    SOFT = "soft"


class StepStatus(str, Enum):
    """What happened to a step."""

    DONE = "done"
    PLANNED = "planned"
    SKIPPED = "skipped"
    WARNED = "warned"
    FAILED = "failed"


@dataclass
class ExecutionStep:
    """One unit of the orchestrated sequence.

    Attributes:
        name: Short identifier ("create-directory", "touch:main.py").
        description: Imperative phrase used for dry-run output.
        effect: Performs the step and returns a success message.
        policy: Failure policy.
        precondition: Raises MkcdError (or OSError, reported as a
            FileSystemError) if the step cannot succeed, or returns a
            message if its outcome already holds (skip).
        mutating: Non-mutating steps also run their effect under dry-run.
    """

    name: str
    description: str
    effect: Callable[[], str]
    policy: FailurePolicy = FailurePolicy.HARD
    precondition: Callable[[], str | None] | None = None
    mutating: bool = True


@dataclass
class StepOutcome:
    """Result of running one step."""

    name: str
    status: StepStatus
    message: str


@dataclass
class RunReport:
    """Everything a run did, for the CLI to summarize."""

    target: Path
    dry_run: bool = False
    outcomes: list[StepOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def failed(self) -> StepOutcome | None:
        for outcome in self.outcomes:
            if outcome.status is StepStatus.FAILED:
                return outcome
        return None

    @property
    def succeeded(self) -> bool:
        return self.failed is None and not self.cancelled

    @property
    def warnings(self) -> list[StepOutcome]:
        return [o for o in self.outcomes if o.status is StepStatus.WARNED]


def run_steps(
    steps: Sequence[ExecutionStep],
    reporter: Reporter,
    report: RunReport,
) -> bool:
    """Run steps in order, appending outcomes to report.

    Returns:
        False if a hard failure stopped the sequence, else True.
    """
    for step in steps:
        outcome = _run_one(step, reporter, report.dry_run)
        report.outcomes.append(outcome)
        if outcome.status is StepStatus.FAILED:
            return False
    return True


def _run_one(step: ExecutionStep, reporter: Reporter, dry_run: bool) -> StepOutcome:
    try:
        if step.precondition is not None:
            satisfied = step.precondition()
            if satisfied:
                reporter.info(satisfied)
                return StepOutcome(step.name, StepStatus.SKIPPED, satisfied)

        if dry_run and step.mutating:
            message = f"[DRY RUN] Would {step.description}"
            reporter.info(message)
            return StepOutcome(step.name, StepStatus.PLANNED, message)

        message = step.effect()
        if message:
            reporter.success(message)
        return StepOutcome(step.name, StepStatus.DONE, message)
    except MkcdError as e:
        return _failed(step, reporter, e)
    except OSError as e:
        # exists() and is_dir() can raise for over-long or unreadable names
        return _failed(step, reporter, FileSystemError(e.strerror or str(e), str(e.filename or step.name)))


def _failed(step: ExecutionStep, reporter: Reporter, error: MkcdError) -> StepOutcome:
    logger.debug("Step %s failed", step.name, exc_info=True)
    message = f"Failed to {step.description}: {error}"
    if step.policy is FailurePolicy.SOFT:
        reporter.warning(message)
        return StepOutcome(step.name, StepStatus.WARNED, message)
    reporter.error(message)
    return StepOutcome(step.name, StepStatus.FAILED, message)
