"""Task list session: selection-driven mutations, persistence and dispatch.

The controller owns the collection and the session state (focus, pane
selections, sort flag, add/edit buffer). Every pane's rows are recomputed
from the collection on demand; nothing derived is cached across commands.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from todolist import tags, view
from todolist.errors import EmptyPane, NoSelection, ParseFailure, PersistenceFailure
from todolist.models import Command, Focus, Snapshot, Task, TaskRow
from todolist.navigation import FOCUS_ORDER, Navigator
from todolist.todotxt import parse_task, serialize_collection, serialize_task

logger = logging.getLogger(__name__)

PANE_TITLES = {
    Focus.PROJECTS: "Projects",
    Focus.TASKS: "Tasks",
    Focus.CONTEXTS: "Contexts",
}


class TaskListController:
    def __init__(
        self,
        tasks: list[Task],
        save: Callable[[str], None],
        today: Callable[[], date] = date.today,
        sort_enabled: bool = False,
        last_written: str | None = None,
    ) -> None:
        self.tasks = tasks
        self.navigator = Navigator()
        self.sort_enabled = sort_enabled
        self.adding = False
        self.buffer = ""
        self.editing_index: int | None = None
        self.status = ""
        self.error = ""
        self._save = save
        self._today = today
        self._last_written = last_written

    # ── Derived rows ───────────────────────────────────────────

    def project_rows(self) -> list[str]:
        return tags.projects(self.tasks)

    def context_rows(self) -> list[str]:
        return tags.contexts(self.tasks)

    def selected_project(self) -> str | None:
        return self.navigator.selected_row(Focus.PROJECTS, self.project_rows())

    def selected_context(self) -> str | None:
        return self.navigator.selected_row(Focus.CONTEXTS, self.context_rows())

    def visible_indices(self) -> list[int]:
        return view.resolve_indices(
            self.tasks,
            self.selected_project(),
            self.selected_context(),
            self.sort_enabled,
        )

    def visible_tasks(self) -> list[Task]:
        return [self.tasks[i] for i in self.visible_indices()]

    def row_count(self, pane: Focus) -> int:
        if pane is Focus.PROJECTS:
            return len(self.project_rows())
        if pane is Focus.CONTEXTS:
            return len(self.context_rows())
        return len(self.visible_indices())

    def selected_index(self) -> int:
        """Collection position of the highlighted task.

        Raises NoSelection when the Tasks pane has nothing highlighted.
        """
        selected = self.navigator.selected(Focus.TASKS)
        if selected is None:
            raise NoSelection()
        indices = self.visible_indices()
        if selected >= len(indices):
            raise NoSelection()
        return indices[selected]

    def selected_task(self) -> Task:
        return self.tasks[self.selected_index()]

    def _clamp_selections(self) -> None:
        # Filters come first: the Tasks row count depends on them.
        for pane in (Focus.PROJECTS, Focus.CONTEXTS, Focus.TASKS):
            self.navigator.clamp(pane, self.row_count(pane))

    # ── Navigation ─────────────────────────────────────────────

    def next(self) -> int:
        index = self.navigator.next(self.row_count(self.navigator.focus))
        self._clamp_selections()
        return index

    def previous(self) -> int:
        index = self.navigator.previous(self.row_count(self.navigator.focus))
        self._clamp_selections()
        return index

    def focus_next(self) -> Focus:
        return self.navigator.focus_next()

    def focus_previous(self) -> Focus:
        return self.navigator.focus_previous()

    def clear(self) -> None:
        self.navigator.clear()

    def toggle_sort(self) -> bool:
        self.sort_enabled = not self.sort_enabled
        return self.sort_enabled

    # ── Mutations ──────────────────────────────────────────────

    def start_add(self) -> None:
        self.adding = True
        self.buffer = ""
        self.editing_index = None

    def start_edit(self) -> None:
        """Open the selected task's text for editing without removing it."""
        index = self.selected_index()
        self.adding = True
        self.editing_index = index
        self.buffer = serialize_task(self.tasks[index])

    def add(self, raw_text: str) -> Task:
        """Parse raw_text and append it as a new task."""
        task = parse_task(raw_text)
        if task.creation_date is None:
            task.creation_date = self._today()
        self._stamp_completion(task)
        self.tasks.append(task)
        self._finish_add()
        self.persist()
        return task

    def commit_add(self, raw_text: str) -> Task:
        """Commit the add/edit buffer.

        On ParseFailure the session stays in adding mode with the text kept
        in the buffer.
        """
        self.buffer = raw_text
        if self.editing_index is None:
            return self.add(raw_text)
        task = parse_task(raw_text)
        self._stamp_completion(task)
        self.tasks[self.editing_index] = task
        self._finish_add()
        self.persist()
        return task

    def _stamp_completion(self, task: Task) -> None:
        # Text typed as finished ("x ...") still needs a completion date.
        if task.finished and task.completion_date is None:
            task.completion_date = self._today()

    def cancel_add(self) -> None:
        self._finish_add()

    def _finish_add(self) -> None:
        self.adding = False
        self.buffer = ""
        self.editing_index = None
        self._clamp_selections()

    def delete_selected(self) -> Task:
        index = self.selected_index()
        task = self.tasks.pop(index)
        self._clamp_selections()
        self.persist()
        return task

    def toggle_complete(self) -> Task:
        task = self.selected_task()
        task.toggle_complete(self._today())
        self.persist()
        return task

    # ── Persistence ────────────────────────────────────────────

    def persist(self) -> bool:
        """Write the collection if it changed since the last successful write.

        A failed write is recorded in ``error`` and retried on the next
        mutation; the in-memory collection is left as is.
        """
        text = serialize_collection(self.tasks)
        if text == self._last_written:
            return False
        try:
            self._save(text)
        except PersistenceFailure as e:
            logger.error("Saving tasks failed: %s", e)
            self.error = str(e)
            return False
        self._last_written = text
        self.error = ""
        return True

    # ── Command dispatch ───────────────────────────────────────

    def dispatch(self, command: Command, text: str | None = None) -> bool:
        """Run one command to completion. Returns False once the session should end."""
        self.status = ""
        if command is Command.QUIT:
            return False
        if self.adding and command not in (Command.COMMIT_ADD, Command.CANCEL_ADD):
            logger.debug("Ignoring %s while editing", command.value)
            return True

        handlers: dict[Command, Callable[[], object]] = {
            Command.NEXT: self.next,
            Command.PREVIOUS: self.previous,
            Command.FOCUS_NEXT: self.focus_next,
            Command.FOCUS_PREVIOUS: self.focus_previous,
            Command.CLEAR_SELECTION: self.clear,
            Command.TOGGLE_SORT: self.toggle_sort,
            Command.START_ADD: self.start_add,
            Command.COMMIT_ADD: lambda: self.commit_add(self.buffer if text is None else text),
            Command.CANCEL_ADD: self.cancel_add,
            Command.START_EDIT: self.start_edit,
            Command.DELETE: self.delete_selected,
            Command.TOGGLE_COMPLETE: self.toggle_complete,
        }
        try:
            handlers[command]()
        except (NoSelection, EmptyPane) as e:
            logger.debug("%s rejected: %s", command.value, e)
            self.status = str(e)
        except ParseFailure as e:
            logger.debug("%s rejected: %s", command.value, e)
            self.status = f"Cannot add task: {e}"
        return True

    # ── Rendering ──────────────────────────────────────────────

    def tasks_title(self) -> str:
        parts = [PANE_TITLES[Focus.TASKS]]
        project = self.selected_project()
        context = self.selected_context()
        if project is not None:
            parts.append(f"+{project}")
        if context is not None:
            parts.append(f"@{context}")
        if self.sort_enabled:
            parts.append("(open first)")
        return " ".join(parts)

    def snapshot(self) -> Snapshot:
        rows = [
            TaskRow(
                finished=t.finished,
                subject=t.subject,
                due=t.due_date.isoformat() if t.due_date else "",
                priority=t.priority or "",
            )
            for t in self.visible_tasks()
        ]
        titles = dict(PANE_TITLES)
        titles[Focus.TASKS] = self.tasks_title()
        return Snapshot(
            projects=self.project_rows(),
            contexts=self.context_rows(),
            tasks=rows,
            selected={pane: self.navigator.selected(pane) for pane in FOCUS_ORDER},
            titles=titles,
            focus=self.navigator.focus,
            sort_enabled=self.sort_enabled,
            adding=self.adding,
            editing=self.editing_index is not None,
            buffer=self.buffer,
            status=self.status,
            error=self.error,
        )
