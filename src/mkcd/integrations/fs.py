"""Filesystem primitives used by the orchestrator.

Each operation either performs its effect or raises FileSystemError
naming the path; none of them know about dry-run, which the
orchestrator handles by not calling them at all.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
from datetime import datetime
from pathlib import Path

from mkcd.errors import FileSystemError, PlanError

logger = logging.getLogger(__name__)

_MODE_RE = re.compile(r"^[0-7]{3,4}$")


def parse_mode(mode: str) -> int | None:
    """Parse an octal permission string such as '755' or '0700'.

    Returns None for an empty string.

    Raises:
        PlanError: If mode is not 3-4 octal digits.
    """
    if not mode:
        return None
    if not _MODE_RE.match(mode):
        raise PlanError(f"invalid permission mode '{mode}' (expected 3-4 octal digits, e.g. 755)")
    return int(mode, 8)


def _error(message: str, path: Path, exc: OSError) -> FileSystemError:
    return FileSystemError(f"{message} ({exc.strerror or exc})", str(path))


def create_directory(path: Path, mode: int | None = None, parent_mode: int | None = None) -> bool:
    """Create path and any missing parents.

    Returns:
        True if the directory was created, False if it already existed.

    Raises:
        FileSystemError: If path exists but is not a directory, or
            creation fails.
    """
    if path.is_dir():
        logger.debug("Directory already exists: %s", path)
        return False
    if path.exists() or path.is_symlink():
        raise FileSystemError("path exists but is not a directory", str(path))

    missing_parents = []
    parent = path.parent
    while not parent.exists() and parent != parent.parent:
        missing_parents.append(parent)
        parent = parent.parent

    try:
        for missing in reversed(missing_parents):
            missing.mkdir()
            if parent_mode is not None:
                missing.chmod(parent_mode)
        path.mkdir()
        if mode is not None:
            path.chmod(mode)
    except OSError as e:
        raise _error("failed to create directory", path, e) from e

    logger.debug("Created directory %s", path)
    return True


def backup_file(path: Path) -> Path:
    """Copy path to a timestamped sibling and return the backup location."""
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    backup = path.with_name(f"{path.name}.backup-{timestamp}")
    try:
        shutil.copy2(path, backup)
    except OSError as e:
        raise _error("failed to create backup", backup, e) from e
    logger.debug("Backed up %s to %s", path, backup)
    return backup


def write_file(path: Path, content: str, backup: bool = False) -> Path | None:
    """Write content to path, creating parents as needed.

    An existing file is replaced; when backup is set it is first copied
    aside.

    Returns:
        The backup path if one was made, else None.
    """
    backup_path = None
    if backup and path.is_file():
        backup_path = backup_file(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise _error("failed to write file", path, e) from e
    return backup_path


def touch_file(path: Path) -> bool:
    """Create an empty file unless it exists; never truncates.

    Returns:
        True if the file was created.
    """
    if path.exists():
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
    except (OSError, ValueError) as e:
        message = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
        raise FileSystemError(f"failed to create file ({message})", str(path)) from e
    return True


def create_symlink(target: Path, link: Path) -> bool:
    """Make link point at target.

    A link that already points at target is left alone. Anything else
    already at link is an error; nothing is removed.

    Returns:
        True if the link was created.
    """
    if not target.exists():
        raise FileSystemError("symlink target does not exist", str(target))
    if link.is_symlink():
        if Path(os.readlink(link)) == target:
            return False
        raise FileSystemError("a different symlink already exists", str(link))
    if link.exists():
        raise FileSystemError("path already exists and is not a symlink", str(link))
    try:
        link.parent.mkdir(parents=True, exist_ok=True)
        link.symlink_to(target, target_is_directory=target.is_dir())
    except OSError as e:
        raise _error("failed to create symlink", link, e) from e
    return True
