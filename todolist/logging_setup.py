"""Logging configuration for the terminal UI.

The UI owns the terminal, so records only go to a log file in the
workspace root.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FILE = "todolist.log"


class _ThirdPartyNoiseFilter(logging.Filter):
    """Keep todolist logs; let other libraries through at WARNING+ only."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "todolist" or record.name.startswith("todolist."):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(log_dir: str | Path, level: int | str = logging.INFO) -> Path:
    """Configure the root logger with a single file handler.

    Call this once at startup, before the first record is emitted.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(fmt)
    fh.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
