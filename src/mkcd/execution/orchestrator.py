"""Workspace orchestration: turn a ResolvedPlan into ordered steps and run them.

Order is fixed: validate path, (confirm), create directory or symlink,
apply template, touch files, generate documents, set up git, launch
editor. Later steps depend on the filesystem state left by earlier
ones, so everything runs sequentially.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

from mkcd.errors import FileSystemError, PlanError
from mkcd.execution.steps import ExecutionStep, FailurePolicy, RunReport, run_steps
from mkcd.integrations import fs
from mkcd.integrations.editor import EditorInfo, EditorLauncher
from mkcd.integrations.git import GitCliBackend, VersionControlBackend, validate_remote_url
from mkcd.models.config import Config
from mkcd.models.plan import ResolvedPlan, RunOptions
from mkcd.output import Reporter
from mkcd.safety.paths import PathValidator, SafetyPolicy
from mkcd.scaffold.documents import Document, DocumentGenerator, GenerationContext
from mkcd.scaffold.local_templates import apply_template, find_template, template_files

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"(\d+)([smhd])")
_DURATION_UNITS: dict[str, str] = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}

INITIAL_COMMIT_MESSAGE = "Initial commit"


def parse_duration(value: str) -> timedelta:
    """Parse durations like '30m', '1h', '1h30m' or '2d'.

    Raises:
        PlanError: If value is not a sequence of <number><s|m|h|d> parts.
    """
    text = value.strip().lower()
    if not text or _DURATION_RE.sub("", text):
        raise PlanError(f"invalid expiry duration '{value}' (expected e.g. 30m, 1h, 1h30m, 2d)")
    total = timedelta()
    for amount, unit in _DURATION_RE.findall(text):
        total += timedelta(**{_DURATION_UNITS[unit]: int(amount)})
    if total <= timedelta():
        raise PlanError(f"expiry duration '{value}' must be positive")
    return total


def check_plan(plan: ResolvedPlan) -> None:
    """Reject self-contradictory or malformed plans before any mutation.

    Raises:
        PlanError: On mutually exclusive options or malformed values.
    """
    if plan.symlink:
        conflicts = []
        if plan.temp:
            conflicts.append("--temp")
        if plan.git_remote:
            conflicts.append("--git-remote")
        if plan.mode or plan.parent_mode:
            conflicts.append("--mode/--parent-mode")
        if conflicts:
            raise PlanError(f"--symlink cannot be combined with {', '.join(conflicts)}")
    fs.parse_mode(plan.mode)
    fs.parse_mode(plan.parent_mode)
    if plan.expire:
        parse_duration(plan.expire)


class Orchestrator:
    """Executes a ResolvedPlan against a target directory.

    Args:
        config: Loaded configuration (safety policy, git and core settings).
        plan: The merged plan for this invocation.
        options: Dry-run / force / interactive / backup switches.
        reporter: Output and prompts.
        vcs: Version-control backend (git CLI by default).
        editors: Editor launcher (configured from core.editor by default).
        documents: Document generator.
        cwd: Base directory for relative targets (process cwd by default).
    """

    def __init__(
        self,
        config: Config,
        plan: ResolvedPlan,
        options: RunOptions,
        reporter: Reporter,
        *,
        vcs: VersionControlBackend | None = None,
        editors: EditorLauncher | None = None,
        documents: DocumentGenerator | None = None,
        cwd: str | Path | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config
        self.plan = plan
        self.options = options
        self.reporter = reporter
        self.vcs = vcs or GitCliBackend(config.git.user_name, config.git.user_email)
        self.editors = editors or EditorLauncher(preferred=config.core.editor)
        self.documents = documents or DocumentGenerator()
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.now = now
        self.backup = options.backup or config.core.backup_enabled

    def base_directory(self) -> Path:
        """Where relative targets live: the temp dir with --temp, else cwd."""
        if self.plan.temp:
            return Path(self.config.core.temp_dir or tempfile.gettempdir()).expanduser()
        return self.cwd

    def resolve_target(self, directory: str) -> Path:
        """Absolute, normalized target for directory."""
        expanded = os.path.expanduser(directory)
        return Path(os.path.normpath(self.base_directory() / expanded))

    def run(self, directory: str) -> RunReport:
        """Validate, confirm and execute the plan for directory.

        Raises:
            PlanError: If the plan itself is invalid.
        """
        check_plan(self.plan)
        target = self.resolve_target(directory)
        report = RunReport(target=target, dry_run=self.options.dry_run)
        logger.debug("Resolved target %s from %r", target, directory)
        self.reporter.verbose(f"Target directory: {target}")

        if not run_steps([self._validate_step(directory, target)], self.reporter, report):
            return report

        if self.options.interactive and not self.options.dry_run:
            if not self.reporter.confirm(f"Create directory {target}?", True):
                self.reporter.info("Operation cancelled by user")
                report.cancelled = True
                return report

        if run_steps(self.build_steps(target), self.reporter, report) and self.plan.expire:
            expires = self.now() + parse_duration(self.plan.expire)
            self.reporter.info(f"Workspace {target} expires at {expires:%Y-%m-%d %H:%M}")
        return report

    def _validate_step(self, directory: str, target: Path) -> ExecutionStep:
        policy = SafetyPolicy.from_config(self.config.safety)
        validator = PathValidator(policy, cwd=str(self.base_directory()))

        def effect() -> str:
            validator.validate(directory)
            self.reporter.debug(f"Path {target} passed safety checks")
            return ""

        return ExecutionStep(
            name="validate-path",
            description=f"validate path {directory}",
            effect=effect,
            policy=FailurePolicy.SOFT if self.options.force else FailurePolicy.HARD,
            mutating=False,
        )

    def build_steps(self, target: Path) -> list[ExecutionStep]:
        """Construct the mutating steps for target, in execution order."""
        plan = self.plan
        steps = [self._symlink_step(target) if plan.symlink else self._directory_step(target)]
        if plan.template:
            steps.append(self._template_step(target))
        steps.extend(self._touch_step(target, name) for name in plan.touch)

        ctx = GenerationContext(
            project_path=target,
            author=self.config.git.user_name,
            email=self.config.git.user_email,
            today=self.now().date(),
        )
        if plan.readme:
            steps.append(self._document_step(target, "readme", lambda: self.documents.readme(ctx)))
        if plan.gitignore:
            steps.append(
                self._document_step(target, "gitignore", lambda: self.documents.gitignore(plan.gitignore))
            )
        if plan.license:
            steps.append(
                self._document_step(target, "license", lambda: self.documents.license(plan.license, ctx))
            )

        if plan.git or plan.git_remote:
            steps.append(self._git_init_step(target))
            if plan.git_remote:
                steps.append(self._git_remote_step(target))
            steps.append(self._git_commit_step(target))

        if plan.editor:
            steps.append(self._editor_step(target))
        return steps

    def _directory_step(self, target: Path) -> ExecutionStep:
        mode = fs.parse_mode(self.plan.mode)
        parent_mode = fs.parse_mode(self.plan.parent_mode)

        def precondition() -> str | None:
            if target.is_dir():
                return f"Directory already exists: {target}"
            if target.exists() or target.is_symlink():
                raise FileSystemError("path exists but is not a directory", str(target))
            return None

        def effect() -> str:
            fs.create_directory(target, mode=mode, parent_mode=parent_mode)
            return f"Created directory: {target}"

        suffix = f" (mode {self.plan.mode})" if self.plan.mode else ""
        return ExecutionStep("create-directory", f"create directory {target}{suffix}", effect, precondition=precondition)

    def _symlink_step(self, target: Path) -> ExecutionStep:
        link_target = Path(os.path.expanduser(self.plan.symlink))
        if not link_target.is_absolute():
            link_target = self.cwd / link_target

        def precondition() -> str | None:
            if not link_target.exists():
                raise FileSystemError("symlink target does not exist", str(link_target))
            if target.is_symlink() and Path(os.readlink(target)) == link_target:
                return f"Symlink already exists: {target} -> {link_target}"
            if target.exists() or target.is_symlink():
                raise FileSystemError("path already exists", str(target))
            return None

        def effect() -> str:
            fs.create_symlink(link_target, target)
            return f"Created symlink: {target} -> {link_target}"

        return ExecutionStep(
            "create-symlink", f"create symlink {target} -> {link_target}", effect, precondition=precondition
        )

    def _template_step(self, target: Path) -> ExecutionStep:
        name = self.plan.template
        found: list[Path] = []

        def precondition() -> str | None:
            template = find_template(self.config.templates.directory, name)
            found.append(template)
            if target.is_dir() and all((target / rel).exists() for rel in template_files(template)):
                return f"Template '{name}' already applied"
            return None

        def effect() -> str:
            copied = apply_template(found[-1], target)
            return f"Applied template '{name}' ({len(copied)} file(s))"

        return ExecutionStep(
            f"template:{name}",
            f"apply template '{name}'",
            effect,
            policy=FailurePolicy.SOFT,
            precondition=precondition,
        )

    def _touch_step(self, target: Path, name: str) -> ExecutionStep:
        path = target / name

        def precondition() -> str | None:
            parts = Path(name).parts
            if not name.strip() or Path(name).is_absolute() or ".." in parts:
                raise FileSystemError("file name must be a relative path inside the workspace", name)
            if "\x00" in name:
                raise FileSystemError("file name contains a null byte", repr(name))
            if path.exists():
                return f"File already exists: {path}"
            return None

        def effect() -> str:
            fs.touch_file(path)
            return f"Created file: {path}"

        return ExecutionStep(
            f"touch:{name}", f"create file {path}", effect, policy=FailurePolicy.SOFT, precondition=precondition
        )

    def _document_step(self, target: Path, kind: str, render: Callable[[], Document]) -> ExecutionStep:
        rendered: list[Document] = []

        def precondition() -> str | None:
            document = render()
            rendered.append(document)
            path = target / document.filename
            if path.exists() and not self.options.force:
                return f"{document.filename} already exists, keeping it (use --force to overwrite)"
            return None

        def effect() -> str:
            document = rendered[-1]
            path = target / document.filename
            backup = fs.write_file(path, document.content, backup=self.backup)
            if backup is not None:
                self.reporter.info(f"Created backup: {backup}")
            return f"Generated {document.filename}"

        return ExecutionStep(f"generate:{kind}", f"generate {kind} in {target}", effect, precondition=precondition)

    def _git_init_step(self, target: Path) -> ExecutionStep:
        branch = self.config.git.default_branch

        def precondition() -> str | None:
            if target.is_dir() and self.vcs.is_repository(target):
                return f"Git repository already exists in: {target}"
            return None

        def effect() -> str:
            self.vcs.init(target, branch)
            return f"Initialized Git repository in: {target}"

        return ExecutionStep("git-init", f"initialize git repository in {target}", effect, precondition=precondition)

    def _git_remote_step(self, target: Path) -> ExecutionStep:
        name = self.config.git.default_remote_name
        url = self.plan.git_remote

        def precondition() -> str | None:
            validate_remote_url(url)
            if target.is_dir() and self.vcs.is_repository(target) and self.vcs.has_remote(target, name):
                return f"Remote {name} already exists"
            return None

        def effect() -> str:
            self.vcs.add_remote(target, name, url)
            return f"Added remote {name}: {url}"

        return ExecutionStep("git-remote", f"add remote {name}: {url}", effect, precondition=precondition)

    def _git_commit_step(self, target: Path) -> ExecutionStep:
        def effect() -> str:
            commit = self.vcs.commit_all(target, INITIAL_COMMIT_MESSAGE)
            if commit is None:
                return "No changes to commit"
            return f"Created initial commit: {commit}"

        return ExecutionStep("git-commit", "create initial commit", effect, policy=FailurePolicy.SOFT)

    def _editor_step(self, target: Path) -> ExecutionStep:
        chosen: list[EditorInfo] = []

        def precondition() -> str | None:
            chosen.append(self.editors.resolve(self.plan.editor_name))
            return None

        def effect() -> str:
            editor = chosen[-1]
            self.editors.launch(editor, target, timeout=self.config.core.editor_timeout)
            return f"Opened {target} in {editor.name}"

        label = self.plan.editor_name or "the default editor"
        return ExecutionStep(
            "launch-editor", f"open {target} in {label}", effect, policy=FailurePolicy.SOFT, precondition=precondition
        )
