"""Persistence of the task collection as a todo.txt file."""

from __future__ import annotations

import logging
import stat
from pathlib import Path

from todolist.errors import PersistenceFailure
from todolist.fileio import read_text, write_text_atomic

logger = logging.getLogger(__name__)

NEW_FILE_MODE = 0o644


def load_collection(path: Path) -> str:
    """Read the raw record stream; a missing file is an empty collection."""
    try:
        return read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceFailure(f"Cannot read {path}: {e}") from e


def _write_target(path: Path) -> tuple[Path, int]:
    """The real file behind *path* and the permissions it should keep."""
    target = path.resolve() if path.is_symlink() else path
    try:
        mode = stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        mode = NEW_FILE_MODE
    return target, mode


def save_collection(path: Path, text: str) -> None:
    """Replace the file's contents atomically.

    A symlinked todo.txt stays a symlink (its target is rewritten) and an
    existing file keeps its permission bits.
    """
    try:
        target, mode = _write_target(path)
        write_text_atomic(target, text, mode=mode)
    except OSError as e:
        raise PersistenceFailure(f"Cannot write {path}: {e}") from e
    logger.debug("Wrote %d bytes to %s", len(text), target)
