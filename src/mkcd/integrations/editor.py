"""Editor detection and launching.

Known editors live in a fixed registry ordered by priority. Resolution
by name never silently falls back to a different editor: an unknown
name that is also not an executable on PATH is a NotFoundError.
GUI editors are started in the background; terminal editors run in the
foreground until they exit (or until an optional timeout).
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from mkcd.errors import FileSystemError, MkcdError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditorInfo:
    """A launchable editor."""

    name: str
    command: str
    args: tuple[str, ...] = ()
    priority: int = 0
    gui: bool = False

    def argv(self, path: Path) -> list[str]:
        return [self.command, *self.args, str(path)]


KNOWN_EDITORS: tuple[EditorInfo, ...] = (
    EditorInfo("Visual Studio Code", "code", priority=100, gui=True),
    EditorInfo("VSCode Insiders", "code-insiders", priority=95, gui=True),
    EditorInfo("Cursor", "cursor", priority=90, gui=True),
    EditorInfo("Sublime Text", "subl", priority=85, gui=True),
    EditorInfo("Atom", "atom", priority=80, gui=True),
    EditorInfo("WebStorm", "webstorm", priority=75, gui=True),
    EditorInfo("IntelliJ IDEA", "idea", priority=75, gui=True),
    EditorInfo("GoLand", "goland", priority=75, gui=True),
    EditorInfo("PyCharm", "pycharm", priority=75, gui=True),
    EditorInfo("Neovim", "nvim", priority=60),
    EditorInfo("Vim", "vim", priority=55),
    EditorInfo("Emacs", "emacs", priority=50),
    EditorInfo("Nano", "nano", priority=30),
    EditorInfo("TextEdit", "open", args=("-a", "TextEdit"), priority=20, gui=True),
    EditorInfo("Notepad", "notepad", priority=10, gui=True),
)

_GUI_COMMANDS = frozenset(e.command for e in KNOWN_EDITORS if e.gui)

# Editors that only make sense on one platform
_PLATFORM_ONLY: dict[str, str] = {"open": "darwin", "notepad": "win32"}

# Terminal editors draw on stderr; stdout may be captured by the shell wrapper
TERMINAL_FD = 2


class EditorLaunchError(MkcdError):
    """Raised when an editor process cannot be started or fails."""


def _split_command(command_line: str) -> list[str]:
    try:
        return shlex.split(command_line)
    except ValueError as e:
        raise EditorLaunchError(f"cannot parse editor command '{command_line}': {e}") from e


def _editor_from_command(command_line: str, name: str) -> EditorInfo:
    parts = _split_command(command_line)
    command = parts[0]
    return EditorInfo(
        name=name,
        command=command,
        args=tuple(parts[1:]),
        priority=1000,
        gui=os.path.basename(command) in _GUI_COMMANDS,
    )


class EditorLauncher:
    """Finds and starts editors.

    Args:
        preferred: Configured editor (core.editor), used for auto-detection
            after $EDITOR and $VISUAL.
        environ: Environment to read EDITOR/VISUAL from.
        which: Executable lookup, shutil.which by default.
        platform: sys.platform value used to filter platform-only editors.
    """

    def __init__(
        self,
        preferred: str = "",
        environ: Mapping[str, str] | None = None,
        which: Callable[[str], str | None] = shutil.which,
        platform: str = sys.platform,
    ) -> None:
        self.preferred = preferred
        self.environ = os.environ if environ is None else environ
        self.which = which
        self.platform = platform

    def _is_available(self, editor: EditorInfo) -> bool:
        only_on = _PLATFORM_ONLY.get(editor.command)
        if only_on is not None and not self.platform.startswith(only_on):
            return False
        return self.which(editor.command) is not None

    def available_editors(self) -> list[EditorInfo]:
        """Known editors present on this system, best first."""
        found = [e for e in KNOWN_EDITORS if self._is_available(e)]
        return sorted(found, key=lambda e: e.priority, reverse=True)

    def detect(self) -> EditorInfo:
        """Pick an editor automatically.

        Order: $EDITOR, $VISUAL, the configured editor, then the
        highest-priority known editor on PATH.

        Raises:
            NotFoundError: If nothing usable is found.
            EditorLaunchError: If $EDITOR or $VISUAL cannot be parsed.
        """
        for var in ("EDITOR", "VISUAL"):
            value = self.environ.get(var, "").strip()
            if value:
                logger.debug("Using editor from $%s: %s", var, value)
                return _editor_from_command(value, f"${var}")
        if self.preferred:
            return self.find(self.preferred)
        editors = self.available_editors()
        if not editors:
            raise NotFoundError("editor", "<auto-detect>")
        logger.debug("Auto-detected editor %s (%s)", editors[0].name, editors[0].command)
        return editors[0]

    def find(self, name: str) -> EditorInfo:
        """Look an editor up by display name or command.

        Raises:
            NotFoundError: If name is neither a known editor nor an
                executable on PATH.
            EditorLaunchError: If name is not a parseable command line.
        """
        wanted = name.strip().lower()
        for editor in self.available_editors():
            if wanted in (editor.name.lower(), editor.command.lower()):
                return editor
        command = _split_command(name)[0] if name.strip() else ""
        if command and self.which(command) is not None:
            return _editor_from_command(name, f"Custom ({command})")
        raise NotFoundError("editor", name, [e.command for e in self.available_editors()])

    def resolve(self, name: str = "") -> EditorInfo:
        """find(name) when a name is given, else detect()."""
        return self.find(name) if name else self.detect()

    def launch(self, editor: EditorInfo, path: Path, timeout: float = 0) -> None:
        """Open path in editor.

        GUI editors are started and left running. Terminal editors take
        over the terminal and are waited for; a positive timeout bounds
        the wait.

        Raises:
            FileSystemError: If path does not exist.
            EditorLaunchError: If the editor cannot start, fails, or times out.
        """
        if not path.exists():
            raise FileSystemError("cannot open missing path in editor", str(path))
        argv = editor.argv(path)
        logger.debug("Launching %s", " ".join(argv))
        try:
            if editor.gui:
                subprocess.Popen(
                    argv,
                    cwd=str(path),
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    start_new_session=True,
                )
                return
            subprocess.run(argv, cwd=str(path), stdout=TERMINAL_FD, check=True, timeout=timeout or None)
        except subprocess.TimeoutExpired as e:
            raise EditorLaunchError(f"{editor.name} timed out after {timeout}s on {path}") from e
        except subprocess.CalledProcessError as e:
            raise EditorLaunchError(f"{editor.name} exited with status {e.returncode} on {path}") from e
        except OSError as e:
            raise EditorLaunchError(f"failed to start {editor.name} ({editor.command}): {e}") from e
