"""Logging for the applier: console output plus one log file per day.

Modules just call ``get_logger(__name__)``; the first call installs the
handlers with settings from the environment. The entry point may call
``setup_logging`` again to change the level, which swaps the handlers.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"

_installed: list[logging.Handler] = []


def log_dir() -> Path:
    override = os.environ.get("APPLIER_LOG_DIR", "").strip()
    return Path(override).expanduser() if override else LOG_DIR


def log_file_path(day: date | None = None) -> Path:
    return log_dir() / f"applier_{(day or date.today()):%Y-%m-%d}.log"


def _level(name: str | None) -> int:
    level = logging.getLevelName((name or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: str | None = None, *, to_file: bool | None = None) -> Path | None:
    """(Re)install the root handlers. Returns the log file path, if any.

    The console shows ``level`` (default ``LOG_LEVEL``, else INFO); the file
    also keeps DEBUG lines. ``APPLIER_NO_LOG_FILE`` turns the file off.
    """
    console_level = _level(level or os.environ.get("LOG_LEVEL"))
    if to_file is None:
        to_file = not os.environ.get("APPLIER_NO_LOG_FILE")

    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    _installed.append(console)

    path = None
    if to_file:
        path = log_file_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(path, encoding="utf-8")
        except OSError as exc:
            print(f"Logging to console only, cannot open {path}: {exc}", file=sys.stderr)
            path = None
        else:
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(formatter)
            _installed.append(fh)

    root.setLevel(logging.DEBUG if path else console_level)
    for handler in _installed:
        root.addHandler(handler)
    return path


def get_logger(name: str) -> logging.Logger:
    if not _installed:
        setup_logging()
    return logging.getLogger(name)
