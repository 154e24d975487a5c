"""Typed dataclasses for the todolist data model.

Task records are parsed from and serialized to todo.txt lines by
``todolist.todotxt``; the remaining types describe session-local UI state
and the read-only snapshot handed to renderers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


# ── Tasks ─────────────────────────────────────────────────────


@dataclass
class Task:
    subject: str = ""
    finished: bool = False
    completion_date: date | None = None
    creation_date: date | None = None
    due_date: date | None = None
    priority: str | None = None  # single letter A-Z
    projects: set[str] = field(default_factory=set)
    contexts: set[str] = field(default_factory=set)

    def complete(self, today: date) -> None:
        self.finished = True
        self.completion_date = today

    def uncomplete(self) -> None:
        self.finished = False
        self.completion_date = None

    def toggle_complete(self, today: date) -> None:
        """Flip completion; the completion date follows the flag."""
        if self.finished:
            self.uncomplete()
        else:
            self.complete(today)


# ── Session state ─────────────────────────────────────────────


class Focus(Enum):
    PROJECTS = "projects"
    TASKS = "tasks"
    CONTEXTS = "contexts"


class Command(Enum):
    NEXT = "next"
    PREVIOUS = "previous"
    FOCUS_NEXT = "focus_next"
    FOCUS_PREVIOUS = "focus_previous"
    CLEAR_SELECTION = "clear_selection"
    TOGGLE_SORT = "toggle_sort"
    START_ADD = "start_add"
    COMMIT_ADD = "commit_add"
    CANCEL_ADD = "cancel_add"
    START_EDIT = "start_edit"
    DELETE = "delete"
    TOGGLE_COMPLETE = "toggle_complete"
    QUIT = "quit"


@dataclass
class PaneState:
    """Selected row of one pane; an index into its displayed rows."""

    selected: int | None = None


# ── Snapshot ──────────────────────────────────────────────────


@dataclass
class TaskRow:
    finished: bool
    subject: str
    due: str = ""
    priority: str = ""


@dataclass
class Snapshot:
    projects: list[str] = field(default_factory=list)
    contexts: list[str] = field(default_factory=list)
    tasks: list[TaskRow] = field(default_factory=list)
    selected: dict[Focus, int | None] = field(default_factory=dict)
    titles: dict[Focus, str] = field(default_factory=dict)
    focus: Focus = Focus.TASKS
    sort_enabled: bool = False
    adding: bool = False
    editing: bool = False
    buffer: str = ""
    status: str = ""
    error: str = ""


# ── Settings ──────────────────────────────────────────────────

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off", ""}


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in _TRUE:
            return True
        if s in _FALSE:
            return False
    return default


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass
class RemoteImportSettings:
    url: str = ""
    token_env: str = "TODOLIST_REMOTE_TOKEN"
    timeout: float = 10.0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> RemoteImportSettings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            url=str(d.get("url", "") or ""),
            token_env=str(d.get("token_env", "TODOLIST_REMOTE_TOKEN")),
            timeout=_as_float(d.get("timeout", 10.0), 10.0),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.url.strip())


@dataclass
class Settings:
    timezone: str = "UTC"
    todo_file: str = "todo.txt"
    sort_completed_last: bool = False
    log_level: str = "INFO"
    remote_import: RemoteImportSettings = field(default_factory=RemoteImportSettings)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            timezone=str(d.get("timezone", "UTC")),
            todo_file=str(d.get("todo_file", "todo.txt")),
            sort_completed_last=_as_bool(d.get("sort_completed_last", False), False),
            log_level=str(d.get("log_level", "INFO")).upper(),
            remote_import=RemoteImportSettings.from_dict(d.get("remote_import") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "timezone": self.timezone,
            "todo_file": self.todo_file,
            "sort_completed_last": self.sort_completed_last,
            "log_level": self.log_level,
        }
        if self.remote_import.enabled:
            d["remote_import"] = {
                "url": self.remote_import.url,
                "token_env": self.remote_import.token_env,
                "timeout": self.remote_import.timeout,
            }
        return d
