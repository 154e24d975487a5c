"""Shared test fixtures for todolist tests."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

import pytest
import yaml

from todolist.controller import TaskListController
from todolist.todotxt import parse_collection

TODAY = date(2024, 6, 1)

SAMPLE_TODO = """(A) 2024-05-01 buy milk +errands @store
call mom @phone
x 2024-01-01 file taxes +errands
2024-05-20 write report +work @laptop due:2024-06-10

x 2024-05-30 2024-05-02 book flights +travel @laptop
"""


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a todo.txt and config.yaml."""
    root = tmp_path / "todo-list"
    root.mkdir(parents=True)

    config = {
        "timezone": "UTC",
        "todo_file": "todo.txt",
        "sort_completed_last": False,
        "log_level": "DEBUG",
    }
    (root / "config.yaml").write_text(
        yaml.dump(config, default_flow_style=False), encoding="utf-8"
    )
    (root / "todo.txt").write_text(SAMPLE_TODO, encoding="utf-8")

    os.environ["TODOLIST_ROOT"] = str(root)
    yield root
    if "TODOLIST_ROOT" in os.environ:
        del os.environ["TODOLIST_ROOT"]


class RecordingSaver:
    """Stands in for the persistence adapter and keeps every write."""

    def __init__(self) -> None:
        self.writes: list[str] = []

    def __call__(self, text: str) -> None:
        self.writes.append(text)

    @property
    def last(self) -> str:
        return self.writes[-1]


@pytest.fixture
def saver() -> RecordingSaver:
    return RecordingSaver()


@pytest.fixture
def make_controller(saver):
    """Build a controller over todo.txt text with a fixed clock."""

    def _make(text: str, sort_enabled: bool = False) -> TaskListController:
        return TaskListController(
            parse_collection(text),
            save=saver,
            today=lambda: TODAY,
            sort_enabled=sort_enabled,
            last_written=text,
        )

    return _make
