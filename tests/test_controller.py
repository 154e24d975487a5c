"""Tests for todolist/controller.py — mutations, persistence, dispatch."""

from datetime import date

import pytest

from todolist.errors import NoSelection, ParseFailure, PersistenceFailure
from todolist.models import Command, Focus
from todolist.todotxt import parse_collection

from .conftest import TODAY

SCENARIO = "buy milk +errands\ncall mom @phone\nx 2024-01-01 file taxes +errands\n"


def test_scenario_filter_navigate_complete(make_controller, saver):
    ctl = make_controller(SCENARIO, sort_enabled=True)
    ctl.dispatch(Command.FOCUS_PREVIOUS)
    assert ctl.navigator.focus is Focus.PROJECTS
    ctl.dispatch(Command.NEXT)
    assert ctl.selected_project() == "errands"
    assert [t.subject for t in ctl.visible_tasks()] == [
        "buy milk +errands",
        "file taxes +errands",
    ]

    ctl.dispatch(Command.FOCUS_NEXT)
    ctl.dispatch(Command.NEXT)
    ctl.dispatch(Command.TOGGLE_COMPLETE)

    assert ctl.tasks[0].finished is True
    assert ctl.tasks[0].completion_date == TODAY
    assert saver.writes == [
        "x 2024-06-01 buy milk +errands\n"
        "call mom @phone\n"
        "x 2024-01-01 file taxes +errands\n"
    ]


def test_empty_collection_navigation_is_safe(make_controller, saver):
    ctl = make_controller("")
    assert ctl.project_rows() == []
    assert ctl.context_rows() == []
    assert ctl.visible_tasks() == []
    for _ in range(3):
        assert ctl.dispatch(Command.NEXT) is True
        assert ctl.dispatch(Command.PREVIOUS) is True
        assert ctl.status
        ctl.dispatch(Command.FOCUS_NEXT)
    assert all(ctl.navigator.selected(p) is None for p in Focus)
    assert saver.writes == []


@pytest.mark.parametrize("method", ["delete_selected", "toggle_complete", "start_edit"])
def test_no_selection_raises_and_changes_nothing(make_controller, saver, method):
    ctl = make_controller(SCENARIO)
    before = [t.subject for t in ctl.tasks]
    with pytest.raises(NoSelection):
        getattr(ctl, method)()
    assert [t.subject for t in ctl.tasks] == before
    assert ctl.adding is False
    assert saver.writes == []


def test_dispatch_reports_no_selection(make_controller, saver):
    ctl = make_controller(SCENARIO)
    assert ctl.dispatch(Command.DELETE) is True
    assert ctl.status == "No task selected"
    assert len(ctl.tasks) == 3
    assert saver.writes == []


def test_toggle_complete_twice_restores_task(make_controller):
    ctl = make_controller("(B) 2024-05-01 water plants @home\n")
    original = ctl.tasks[0]
    snapshot = (original.finished, original.completion_date, original.priority)
    ctl.next()
    ctl.toggle_complete()
    assert original.finished and original.completion_date == TODAY
    ctl.toggle_complete()
    assert (original.finished, original.completion_date, original.priority) == snapshot


def test_add_stamps_creation_date(make_controller, saver):
    ctl = make_controller(SCENARIO)
    ctl.dispatch(Command.START_ADD)
    assert ctl.adding is True
    ctl.dispatch(Command.COMMIT_ADD, "paint fence +house")
    assert ctl.adding is False
    assert ctl.tasks[-1].creation_date == TODAY
    assert saver.last.endswith("2024-06-01 paint fence +house\n")
    assert "house" in ctl.project_rows()


def test_add_keeps_existing_creation_date(make_controller):
    ctl = make_controller("")
    task = ctl.add("2023-12-24 wrap gifts")
    assert task.creation_date == date(2023, 12, 24)


def test_parse_failure_keeps_buffer(make_controller, saver):
    ctl = make_controller(SCENARIO)
    ctl.start_add()
    with pytest.raises(ParseFailure):
        ctl.commit_add("   ")
    assert ctl.adding is True
    assert ctl.buffer == "   "

    ctl.dispatch(Command.COMMIT_ADD, "two\nlines")
    assert ctl.adding is True
    assert ctl.buffer == "two\nlines"
    assert ctl.status.startswith("Cannot add task")
    assert len(ctl.tasks) == 3
    assert saver.writes == []


def test_cancel_add_drops_buffer(make_controller, saver):
    ctl = make_controller(SCENARIO)
    ctl.dispatch(Command.START_ADD)
    ctl.dispatch(Command.CANCEL_ADD)
    assert ctl.adding is False
    assert ctl.buffer == ""
    assert saver.writes == []


def test_edit_prefills_and_replaces_in_place(make_controller, saver):
    ctl = make_controller(SCENARIO)
    ctl.dispatch(Command.NEXT)
    ctl.dispatch(Command.NEXT)
    ctl.dispatch(Command.START_EDIT)
    assert ctl.adding is True
    assert ctl.buffer == "call mom @phone"
    assert len(ctl.tasks) == 3

    ctl.dispatch(Command.COMMIT_ADD, "call dad @phone")
    assert [t.subject for t in ctl.tasks] == [
        "buy milk +errands",
        "call dad @phone",
        "file taxes +errands",
    ]
    assert ctl.tasks[1].creation_date is None
    assert saver.last.splitlines()[1] == "call dad @phone"


def test_cancel_edit_keeps_task(make_controller, saver):
    ctl = make_controller(SCENARIO)
    ctl.next()
    ctl.start_edit()
    ctl.cancel_add()
    assert len(ctl.tasks) == 3
    assert ctl.tasks[0].subject == "buy milk +errands"
    assert saver.writes == []


def test_commands_ignored_while_adding(make_controller, saver):
    ctl = make_controller(SCENARIO)
    ctl.next()
    ctl.dispatch(Command.START_ADD)
    ctl.dispatch(Command.DELETE)
    ctl.dispatch(Command.NEXT)
    assert len(ctl.tasks) == 3
    assert ctl.navigator.selected(Focus.TASKS) == 0


def test_delete_removes_selected_duplicate_by_position(make_controller, saver):
    ctl = make_controller("dup +a\nother\ndup +a\n", sort_enabled=False)
    ctl.tasks[2].priority = "A"  # tell the duplicates apart
    ctl.navigator.select(Focus.TASKS, 2)
    removed = ctl.delete_selected()
    assert removed.priority == "A"
    assert ctl.tasks[0].priority is None
    assert saver.last == "dup +a\nother\n"


def test_delete_clamps_selection(make_controller):
    ctl = make_controller(SCENARIO)
    ctl.navigator.select(Focus.TASKS, 2)
    ctl.delete_selected()
    assert ctl.navigator.selected(Focus.TASKS) == 1
    ctl.delete_selected()
    ctl.delete_selected()
    assert ctl.tasks == []
    assert ctl.navigator.selected(Focus.TASKS) is None


def test_deleting_last_project_task_clears_project_filter(make_controller):
    ctl = make_controller("only +solo\nplain\n")
    ctl.focus_previous()
    ctl.next()
    assert ctl.selected_project() == "solo"
    ctl.focus_next()
    ctl.next()
    ctl.delete_selected()
    assert ctl.project_rows() == []
    assert ctl.navigator.selected(Focus.PROJECTS) is None
    assert [t.subject for t in ctl.visible_tasks()] == ["plain"]


def test_toggle_sort_does_not_persist(make_controller, saver):
    ctl = make_controller("x 2024-01-01 done\nopen\n")
    ctl.dispatch(Command.TOGGLE_SORT)
    assert ctl.sort_enabled is True
    assert [t.subject for t in ctl.visible_tasks()] == ["open", "done"]
    assert saver.writes == []


def test_clear_selection_resets_focus(make_controller):
    ctl = make_controller(SCENARIO)
    ctl.focus_previous()
    ctl.next()
    ctl.dispatch(Command.CLEAR_SELECTION)
    assert ctl.navigator.focus is Focus.TASKS
    assert ctl.selected_project() is None


def test_persist_skips_unchanged_text(make_controller, saver):
    ctl = make_controller(SCENARIO)
    assert ctl.persist() is False
    ctl.tasks[1].subject = "call mom later @phone"
    assert ctl.persist() is True
    assert ctl.persist() is False
    assert len(saver.writes) == 1


def test_persistence_failure_is_retried(make_controller):
    calls = []

    def flaky_save(text):
        calls.append(text)
        if len(calls) == 1:
            raise PersistenceFailure("disk full")

    ctl = make_controller(SCENARIO)
    ctl._save = flaky_save
    ctl.next()
    ctl.dispatch(Command.TOGGLE_COMPLETE)
    assert ctl.error == "disk full"
    assert ctl.tasks[0].finished is True

    ctl.dispatch(Command.TOGGLE_SORT)
    assert len(calls) == 1

    ctl.add("new thing")
    assert len(calls) == 2
    assert ctl.error == ""
    assert calls[1].startswith("x 2024-06-01 buy milk +errands\n")


def test_quit_stops_session(make_controller):
    ctl = make_controller(SCENARIO)
    assert ctl.dispatch(Command.QUIT) is False


def test_snapshot(make_controller):
    ctl = make_controller(
        "(A) buy milk +errands @store due:2024-06-03\nx 2024-01-01 file taxes +errands\n",
        sort_enabled=True,
    )
    ctl.focus_previous()
    ctl.next()
    snap = ctl.snapshot()
    assert snap.projects == ["errands"]
    assert snap.contexts == ["store"]
    assert snap.focus is Focus.PROJECTS
    assert snap.selected[Focus.PROJECTS] == 0
    assert snap.selected[Focus.TASKS] is None
    assert snap.titles[Focus.TASKS] == "Tasks +errands (open first)"
    assert snap.tasks[0].priority == "A"
    assert snap.tasks[0].due == "2024-06-03"
    assert snap.tasks[1].finished is True


def test_add_finished_line_gets_completion_date(make_controller, saver):
    ctl = make_controller("")
    task = ctl.add("x pay rent")
    assert task.finished is True
    assert task.completion_date == TODAY
    assert task.creation_date == TODAY
    assert saver.last == "x 2024-06-01 2024-06-01 pay rent\n"

    reloaded = parse_collection(saver.last)[0]
    assert reloaded.completion_date == TODAY
    assert reloaded.creation_date == TODAY
    assert reloaded.subject == "pay rent"


def test_edit_to_finished_line_gets_completion_date(make_controller, saver):
    ctl = make_controller(SCENARIO)
    ctl.next()
    ctl.start_edit()
    ctl.commit_add("x buy milk +errands")
    assert ctl.tasks[0].completion_date == TODAY
    assert saver.last.splitlines()[0] == "x 2024-06-01 buy milk +errands"
