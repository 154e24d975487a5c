"""Filter and sort the task collection into the rows of the Tasks pane."""

from __future__ import annotations

from todolist.models import Task


def matches(task: Task, project: str | None = None, context: str | None = None) -> bool:
    if project is not None and project not in task.projects:
        return False
    if context is not None and context not in task.contexts:
        return False
    return True


def resolve_indices(
    tasks: list[Task],
    project: str | None = None,
    context: str | None = None,
    sort_enabled: bool = False,
) -> list[int]:
    """Positions of the tasks passing both filters, in display order.

    With sorting enabled, open tasks come before finished ones; the sort is
    stable so collection order is kept inside each group.
    """
    indices = [i for i, t in enumerate(tasks) if matches(t, project, context)]
    if sort_enabled:
        indices.sort(key=lambda i: tasks[i].finished)
    return indices


def resolve(
    tasks: list[Task],
    project: str | None = None,
    context: str | None = None,
    sort_enabled: bool = False,
) -> list[Task]:
    """Live Task objects (not copies) for the resolved view."""
    return [tasks[i] for i in resolve_indices(tasks, project, context, sort_enabled)]
