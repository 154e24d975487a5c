"""Tag index: distinct project and context tags across a task collection."""

from __future__ import annotations

from collections.abc import Iterable

from todolist.models import Task


def projects(tasks: Iterable[Task]) -> list[str]:
    """Sorted, deduplicated project tags (``+label``) of all tasks."""
    return sorted({p for t in tasks for p in t.projects})


def contexts(tasks: Iterable[Task]) -> list[str]:
    """Sorted, deduplicated context tags (``@label``) of all tasks."""
    return sorted({c for t in tasks for c in t.contexts})
