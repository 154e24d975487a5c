"""One-shot import of tasks from a remote provider over HTTP."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Optional

import requests

from todolist.errors import ImportFailure, ParseFailure
from todolist.models import RemoteImportSettings, Task
from todolist.todotxt import parse_task

logger = logging.getLogger(__name__)


class RemoteImporter:
    def __init__(
        self,
        url: str,
        token_provider: Callable[[], Optional[str]],
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = url
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_lines(self) -> list[str]:
        """Fetch the provider's task list as raw todo.txt lines.

        Accepts a JSON list of strings, a JSON object with a ``tasks`` list,
        or plain text with one task per line.
        """
        headers = {"Accept": "application/json, text/plain"}
        token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            resp = self.session.get(self.url, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ImportFailure(f"Network unavailable: {exc}") from exc
        if not 200 <= resp.status_code < 300:
            raise ImportFailure(f"Remote replied {resp.status_code}: {resp.text[:120]}")

        content_type = resp.headers.get("Content-Type", "")
        if "json" not in content_type:
            return resp.text.splitlines()
        try:
            payload: Any = resp.json()
        except ValueError as exc:
            raise ImportFailure(f"Malformed JSON from remote: {exc}") from exc
        if isinstance(payload, dict):
            payload = payload.get("tasks")
        if not isinstance(payload, list) or not all(isinstance(x, str) for x in payload):
            raise ImportFailure("Remote payload is not a list of task lines")
        return payload

    def import_tasks(self) -> list[Task]:
        tasks = []
        for line in self.fetch_lines():
            if not line.strip():
                continue
            try:
                tasks.append(parse_task(line))
            except ParseFailure as e:
                logger.warning("Skipping remote task %r: %s", line, e)
        return tasks


def import_remote_tasks(
    settings: RemoteImportSettings,
    session: Optional[requests.Session] = None,
) -> list[Task]:
    """Import tasks from the configured provider; empty when not configured."""
    if not settings.enabled:
        return []
    importer = RemoteImporter(
        settings.url,
        lambda: os.environ.get(settings.token_env),
        session=session,
        timeout=settings.timeout,
    )
    return importer.import_tasks()
