"""todo.txt line parsing and formatting.

Line grammar:
    x <completion-date> [<creation-date>] <subject>      (finished)
    [(A) ][<creation-date> ]<subject>                    (open)

Tags stay inside the subject verbatim; ``projects``, ``contexts`` and
``due_date`` are derived from it, so formatting a parsed line gives the
same line back.
"""

from __future__ import annotations

import logging
import re
from datetime import date

from todolist.errors import ParseFailure
from todolist.models import Task

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})(?: |$)")
_PRIORITY_RE = re.compile(r"\(([A-Z])\)(?: |$)")
_PRI_TAG_RE = re.compile(r"(?:^| )pri:([A-Z])$")
_DUE_RE = re.compile(r"^due:(\d{4}-\d{2}-\d{2})$")


def _take_date(rest: str) -> tuple[date | None, str]:
    m = _DATE_RE.match(rest)
    if not m:
        return None, rest
    try:
        d = date.fromisoformat(m.group(1))
    except ValueError:
        return None, rest
    return d, rest[m.end():]


def _tags(subject: str, marker: str) -> set[str]:
    return {tok[1:] for tok in subject.split() if tok.startswith(marker) and len(tok) > 1}


def _due(subject: str) -> date | None:
    for tok in subject.split():
        m = _DUE_RE.match(tok)
        if not m:
            continue
        try:
            return date.fromisoformat(m.group(1))
        except ValueError:
            continue
    return None


def parse_task(text: str) -> Task:
    """Parse one todo.txt line into a Task.

    Raises ParseFailure for blank text or text spanning several lines.
    """
    if "\n" in text or "\r" in text:
        raise ParseFailure("A task must fit on a single line")
    line = text.strip()
    if not line:
        raise ParseFailure("Task text is empty")

    task = Task()
    rest = line
    if rest.startswith("x "):
        task.finished = True
        task.completion_date, rest = _take_date(rest[2:])
    else:
        m = _PRIORITY_RE.match(rest)
        if m:
            task.priority = m.group(1)
            rest = rest[m.end():]
    task.creation_date, rest = _take_date(rest)

    if task.finished:
        m = _PRI_TAG_RE.search(rest)
        if m:
            task.priority = m.group(1)
            rest = rest[: m.start()]

    task.subject = rest
    task.projects = _tags(rest, "+")
    task.contexts = _tags(rest, "@")
    task.due_date = _due(rest)
    return task


def serialize_task(task: Task) -> str:
    """Format a Task as its canonical todo.txt line."""
    parts: list[str] = []
    if task.finished:
        parts.append("x")
        if task.completion_date:
            parts.append(task.completion_date.isoformat())
    elif task.priority:
        parts.append(f"({task.priority})")
    # A lone date after "x" reads back as the completion date.
    if task.creation_date and (task.completion_date or not task.finished):
        parts.append(task.creation_date.isoformat())
    if task.subject:
        parts.append(task.subject)
    if task.finished and task.priority:
        parts.append(f"pri:{task.priority}")
    return " ".join(parts)


def parse_collection(text: str) -> list[Task]:
    """Parse a newline-delimited record stream, skipping blank lines."""
    tasks = []
    skipped = 0
    for line in text.splitlines():
        if not line.strip():
            skipped += 1
            continue
        tasks.append(parse_task(line))
    if skipped:
        logger.debug("Skipped %d blank line(s) in task stream", skipped)
    return tasks


def serialize_collection(tasks: list[Task]) -> str:
    """Join every task's line with newlines, ending with a trailing newline."""
    if not tasks:
        return ""
    return "\n".join(serialize_task(t) for t in tasks) + "\n"
