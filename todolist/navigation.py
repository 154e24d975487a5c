"""Pane focus and per-pane row selection.

Each pane keeps its own selected index into the rows it currently displays.
Row counts are never stored here: callers pass the count they just computed,
so a selection can't outlive a change to the collection unnoticed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from todolist.errors import EmptyPane
from todolist.models import Focus, PaneState

FOCUS_ORDER = (Focus.PROJECTS, Focus.TASKS, Focus.CONTEXTS)


def next_index(selected: int | None, row_count: int) -> int:
    if selected is None or selected >= row_count - 1:
        return 0
    return selected + 1


def previous_index(selected: int | None, row_count: int) -> int:
    if selected is None:
        return 0
    if selected == 0 or selected > row_count - 1:
        return row_count - 1
    return selected - 1


def _default_panes() -> dict[Focus, PaneState]:
    return {pane: PaneState() for pane in FOCUS_ORDER}


@dataclass
class Navigator:
    focus: Focus = Focus.TASKS
    panes: dict[Focus, PaneState] = field(default_factory=_default_panes)

    def selected(self, pane: Focus | None = None) -> int | None:
        return self.panes[pane or self.focus].selected

    def select(self, pane: Focus, index: int | None) -> None:
        self.panes[pane].selected = index

    def selected_row(self, pane: Focus, rows: list[str]) -> str | None:
        """The row the pane points at, or None when unset or out of range."""
        index = self.panes[pane].selected
        if index is None or index >= len(rows):
            return None
        return rows[index]

    def next(self, row_count: int) -> int:
        """Move the focused pane's selection down, wrapping to the top."""
        return self._move(next_index, row_count)

    def previous(self, row_count: int) -> int:
        """Move the focused pane's selection up, wrapping to the bottom."""
        return self._move(previous_index, row_count)

    def _move(self, step, row_count: int) -> int:
        state = self.panes[self.focus]
        if row_count <= 0:
            state.selected = None
            raise EmptyPane(self.focus.value)
        state.selected = step(state.selected, row_count)
        return state.selected

    def focus_next(self) -> Focus:
        i = FOCUS_ORDER.index(self.focus)
        self.focus = FOCUS_ORDER[(i + 1) % len(FOCUS_ORDER)]
        return self.focus

    def focus_previous(self) -> Focus:
        i = FOCUS_ORDER.index(self.focus)
        self.focus = FOCUS_ORDER[(i - 1) % len(FOCUS_ORDER)]
        return self.focus

    def clear(self) -> None:
        for state in self.panes.values():
            state.selected = None
        self.focus = Focus.TASKS

    def clamp(self, pane: Focus, row_count: int) -> None:
        """Pull a stale selection back inside the pane's current rows."""
        state = self.panes[pane]
        if state.selected is None:
            return
        if row_count <= 0:
            state.selected = None
        elif state.selected >= row_count:
            state.selected = row_count - 1
