"""Error taxonomy for the todolist engine and its adapters."""

from __future__ import annotations


class TodoListError(Exception):
    """Base class for all todolist errors."""


class NoSelection(TodoListError):
    """A command that needs a target task ran with no task selected."""

    def __init__(self, message: str = "No task selected") -> None:
        super().__init__(message)


class EmptyPane(TodoListError):
    """Navigation was attempted on a pane with no rows."""

    def __init__(self, pane: str) -> None:
        super().__init__(f"Nothing to select in {pane}")
        self.pane = pane


class ParseFailure(TodoListError, ValueError):
    """Raw text could not be turned into a task."""


class PersistenceFailure(TodoListError):
    """Reading or writing the task file failed."""


class ImportFailure(TodoListError):
    """Fetching tasks from the remote provider failed."""
