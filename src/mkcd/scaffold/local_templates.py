"""Local project templates.

A template is a directory under the configured templates directory;
applying it copies its tree into the workspace without overwriting
anything that already exists there.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from mkcd.errors import FileSystemError, NotFoundError

logger = logging.getLogger(__name__)


def find_template(templates_dir: str | Path, name: str) -> Path:
    """Return the directory for template name.

    Raises:
        NotFoundError: If no such template directory exists.
    """
    root = Path(templates_dir).expanduser()
    candidate = root / name
    if not name or candidate.resolve().parent != root.resolve() or not candidate.is_dir():
        available = sorted(p.name for p in root.iterdir() if p.is_dir()) if root.is_dir() else []
        raise NotFoundError("template", name, available)
    return candidate


def template_files(template: Path) -> list[Path]:
    """List template files relative to the template root, sorted."""
    return sorted(p.relative_to(template) for p in template.rglob("*") if p.is_file())


def apply_template(template: Path, target: Path) -> list[str]:
    """Copy template files into target, skipping files that already exist.

    Returns:
        Relative paths of the files copied.

    Raises:
        FileSystemError: If a file cannot be copied.
    """
    copied: list[str] = []
    for relative in template_files(template):
        destination = target / relative
        if destination.exists():
            logger.debug("Template file %s already exists, keeping it", destination)
            continue
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(template / relative, destination)
        except OSError as e:
            raise FileSystemError(f"failed to copy template file ({e.strerror or e})", str(destination)) from e
        copied.append(str(relative))
    return copied
