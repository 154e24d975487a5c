#!/usr/bin/env python3
"""todolist TUI — three-pane todo.txt manager powered by Textual."""

from __future__ import annotations

import sys

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import DataTable, Footer, Header, Input

from todolist.bootstrap import build_controller, ensure_workspace
from todolist.controller import TaskListController
from todolist.errors import PersistenceFailure
from todolist.logging_setup import setup_logging
from todolist.models import Command, Focus, Snapshot
from todolist.workspace import load_settings, workspace_root


CSS = """
Screen {
    layout: vertical;
}

#main-layout {
    height: 1fr;
}

.pane {
    border: round $primary-background-darken-2;
    height: 1fr;
}

.pane.pane-focused {
    border: round $accent;
}

#projects-pane, #contexts-pane {
    width: 20%;
}

#tasks-pane {
    width: 1fr;
}

#task-input {
    display: none;
    margin: 0 1;
}

#task-input.adding {
    display: block;
}
"""

PANE_IDS = {
    Focus.PROJECTS: "#projects-pane",
    Focus.TASKS: "#tasks-pane",
    Focus.CONTEXTS: "#contexts-pane",
}


class TodoListApp(App):
    """Projects | Tasks | Contexts, driven entirely by the controller."""

    TITLE = "todo-list"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("j,down", "command('next')", "Next", show=False),
        Binding("k,up", "command('previous')", "Previous", show=False),
        Binding("tab", "command('focus_next')", "Pane", priority=True),
        Binding("shift+tab", "command('focus_previous')", "Pane back", show=False, priority=True),
        Binding("a", "command('start_add')", "Add"),
        Binding("e", "command('start_edit')", "Edit"),
        Binding("d", "command('delete')", "Delete"),
        Binding("c", "command('toggle_complete')", "Done"),
        Binding("s", "command('toggle_sort')", "Sort"),
        Binding("escape", "escape", "Clear", priority=True),
        Binding("q", "command('quit')", "Quit"),
    ]

    def __init__(self, controller: TaskListController) -> None:
        super().__init__()
        self.controller = controller
        self._was_adding = False
        self._shown_error = ""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            DataTable(id="projects-pane", classes="pane", show_header=False, cursor_type="row"),
            DataTable(id="tasks-pane", classes="pane", cursor_type="row"),
            DataTable(id="contexts-pane", classes="pane", show_header=False, cursor_type="row"),
            id="main-layout",
        )
        yield Input(placeholder="(A) 2024-01-01 task text +project @context due:2024-01-31", id="task-input")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#projects-pane", DataTable).add_column("Project")
        self.query_one("#contexts-pane", DataTable).add_column("Context")
        self.query_one("#tasks-pane", DataTable).add_columns("Status", "Task", "Due")
        for table in self.query(DataTable):
            table.can_focus = False
        self._refresh_view()

    # ── Commands ───────────────────────────────────────────────

    def action_command(self, name: str) -> None:
        if not self.controller.dispatch(Command(name)):
            self.exit()
            return
        self._refresh_view()

    def action_escape(self) -> None:
        if self.controller.adding:
            self.action_command("cancel_add")
        else:
            self.action_command("clear_selection")

    @on(Input.Submitted, "#task-input")
    def _on_submit(self, event: Input.Submitted) -> None:
        self.controller.dispatch(Command.COMMIT_ADD, event.value)
        self._refresh_view()

    # ── Rendering ──────────────────────────────────────────────

    def _refresh_view(self) -> None:
        snap = self.controller.snapshot()
        self._fill_tags(Focus.PROJECTS, snap.projects, snap)
        self._fill_tags(Focus.CONTEXTS, snap.contexts, snap)
        self._fill_tasks(snap)
        self._update_input(snap)
        self.sub_title = "sorted: open first" if snap.sort_enabled else ""
        for message, title, severity in self.alerts(snap):
            self.notify(message, title=title, severity=severity)

    def alerts(self, snap: Snapshot) -> list[tuple[str, str, str]]:
        """Toasts for this refresh; a save error is shown once until it changes."""
        out = []
        if snap.status:
            out.append((snap.status, "", "warning"))
        if snap.error and snap.error != self._shown_error:
            out.append((snap.error, "Save failed", "error"))
        self._shown_error = snap.error
        return out

    def _decorate(self, table: DataTable, pane: Focus, snap: Snapshot) -> None:
        table.border_title = snap.titles[pane]
        table.set_class(snap.focus is pane, "pane-focused")
        selected = snap.selected[pane]
        table.show_cursor = selected is not None
        if selected is not None:
            table.move_cursor(row=selected)

    def _fill_tags(self, pane: Focus, rows: list[str], snap: Snapshot) -> None:
        table = self.query_one(PANE_IDS[pane], DataTable)
        table.clear()
        for tag in rows:
            table.add_row(tag)
        self._decorate(table, pane, snap)

    def _fill_tasks(self, snap: Snapshot) -> None:
        table = self.query_one(PANE_IDS[Focus.TASKS], DataTable)
        table.clear()
        for row in snap.tasks:
            status = "[x]" if row.finished else "[ ]"
            subject = f"({row.priority}) {row.subject}" if row.priority and not row.finished else row.subject
            table.add_row(status, subject, row.due)
        self._decorate(table, Focus.TASKS, snap)

    def _update_input(self, snap: Snapshot) -> None:
        box = self.query_one("#task-input", Input)
        box.set_class(snap.adding, "adding")
        if snap.adding and not self._was_adding:
            box.value = snap.buffer
            box.border_title = "Edit task" if snap.editing else "New task"
            box.focus()
        elif not snap.adding and self._was_adding:
            box.value = ""
            self.set_focus(None)
        self._was_adding = snap.adding


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    ensure_workspace(root)
    settings = load_settings(root)
    setup_logging(root, settings.log_level)

    try:
        controller = build_controller(root, settings)
    except PersistenceFailure as e:
        print(f"Cannot load tasks: {e}")
        sys.exit(1)

    app = TodoListApp(controller)
    app.run()


if __name__ == "__main__":
    main()
