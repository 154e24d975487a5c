"""Startup: settings, local load, remote merge, controller wiring."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import requests

from todolist.controller import TaskListController
from todolist.errors import ImportFailure
from todolist.fileio import write_yaml_atomic
from todolist.importer import import_remote_tasks
from todolist.models import Settings, Task
from todolist.storage import load_collection, save_collection
from todolist.todotxt import parse_collection, serialize_task
from todolist.workspace import config_path, load_settings, today, todo_path, workspace_root

logger = logging.getLogger(__name__)


def ensure_workspace(root: Path) -> None:
    """Create the workspace directory and a default config.yaml if missing."""
    root.mkdir(parents=True, exist_ok=True)
    path = config_path(root)
    if not path.exists():
        write_yaml_atomic(path, Settings().to_dict())
        logger.info("Created default config at %s", path)


def merge_remote(tasks: list[Task], remote: list[Task]) -> int:
    """Append remote tasks whose line isn't already in the collection.

    Returns the number of tasks added.
    """
    seen = {serialize_task(t) for t in tasks}
    added = 0
    for task in remote:
        line = serialize_task(task)
        if line in seen:
            continue
        seen.add(line)
        tasks.append(task)
        added += 1
    return added


def build_controller(
    root: Path | None = None,
    settings: Settings | None = None,
    session: Optional[requests.Session] = None,
) -> TaskListController:
    """Load the collection, merge remote tasks and return a ready controller.

    A failing remote import is logged and skipped; a failing local read
    raises PersistenceFailure.
    """
    if root is None:
        root = workspace_root()
    if settings is None:
        settings = load_settings(root)

    path = todo_path(root, settings)
    raw = load_collection(path)
    tasks = parse_collection(raw)
    logger.info("Loaded %d task(s) from %s", len(tasks), path)

    try:
        remote = import_remote_tasks(settings.remote_import, session=session)
    except ImportFailure as e:
        logger.warning("Remote import failed, continuing with local tasks: %s", e)
    else:
        merged = merge_remote(tasks, remote)
        if merged:
            logger.info("Merged %d remote task(s)", merged)

    return TaskListController(
        tasks,
        save=lambda text: save_collection(path, text),
        today=lambda: today(settings),
        sort_enabled=settings.sort_completed_last,
        last_written=raw,
    )
