"""Crash-safe file writes for the JSON data files."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path

from applier.errors import PersistenceWriteFailure


def write_atomic(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` in one step.

    The text goes to a temp file beside the target first, so a crash
    mid-write leaves the previous file intact.
    """
    tmp_name = ""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
        tmp_name = tmp.name
        with tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name:
            Path(tmp_name).unlink(missing_ok=True)
        raise PersistenceWriteFailure(f"{path}: {exc}") from exc
