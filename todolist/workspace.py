"""Workspace root, settings, timezone and path helpers for todolist."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from todolist.fileio import read_yaml
from todolist.models import Settings

logger = logging.getLogger(__name__)

ROOT_ENV = "TODOLIST_ROOT"


def workspace_root() -> Path:
    """Directory holding todo.txt, config.yaml and the log file."""
    return Path(
        os.environ.get(ROOT_ENV, str(Path.home() / ".config" / "todo-list"))
    ).expanduser().resolve()


def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "config.yaml"


def load_settings(root: Path | None = None) -> Settings:
    """Load config.yaml into Settings; a broken file falls back to defaults."""
    path = config_path(root)
    try:
        data = read_yaml(path)
    except yaml.YAMLError as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        data = {}
    return Settings.from_dict(data)


def todo_path(root: Path | None = None, settings: Settings | None = None) -> Path:
    if root is None:
        root = workspace_root()
    if settings is None:
        settings = load_settings(root)
    path = Path(settings.todo_file).expanduser()
    return path if path.is_absolute() else root / path


def get_user_timezone(settings: Settings) -> ZoneInfo:
    try:
        return ZoneInfo(settings.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using UTC", settings.timezone)
        return ZoneInfo("UTC")


def today(settings: Settings) -> date:
    """Today's date in the user's timezone."""
    return datetime.now(get_user_timezone(settings)).date()
