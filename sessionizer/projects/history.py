"""Visited-directory history used to expand short directory names.

The history lives in ``directory_history.json`` under the platform user data
directory. Loading is defensive: a missing or malformed file reads as an
empty history.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import asdict, dataclass
from pathlib import Path

from platformdirs import user_data_dir

from ..config import APP_NAME

logger = logging.getLogger(__name__)

HISTORY_FILENAME = "directory_history.json"
HISTORY_PATH = Path(user_data_dir(APP_NAME, appauthor=False)) / HISTORY_FILENAME
MAX_HISTORY_ENTRIES = 100


@dataclass
class VisitedDir:
    dir: str
    last_accessed_timestamp: int
    times: int


def _coerce_entry(raw: object) -> VisitedDir | None:
    if not isinstance(raw, dict):
        return None
    directory = raw.get("dir")
    timestamp = raw.get("last_accessed_timestamp", 0)
    times = raw.get("times", 0)
    if not isinstance(directory, str) or not directory:
        return None
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        timestamp = 0
    if isinstance(times, bool) or not isinstance(times, int):
        times = 0
    return VisitedDir(dir=directory, last_accessed_timestamp=max(0, timestamp), times=max(0, times))


def load_history() -> list[VisitedDir]:
    """Load visited directories, dropping malformed entries."""
    try:
        data = json.loads(HISTORY_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return []
    if not isinstance(data, dict) or not isinstance(data.get("visited_dirs"), list):
        return []
    entries = (_coerce_entry(raw) for raw in data["visited_dirs"])
    return [entry for entry in entries if entry is not None]


def save_history(entries: list[VisitedDir]) -> None:
    HISTORY_PATH.parent.mkdir(parents=True, exist_ok=True)
    payload = {"visited_dirs": [asdict(entry) for entry in entries]}
    HISTORY_PATH.write_text(json.dumps(payload) + "\n", encoding="utf-8")


def record_visit(new_dir: str, cwd: Path | None = None, now: int | None = None) -> bool:
    """Count a visit to ``new_dir`` (relative to ``cwd``).

    Returns ``False`` without touching the file when the directory does not
    exist. Only the ``MAX_HISTORY_ENTRIES`` most visited entries are kept.
    """
    base = cwd if cwd is not None else Path.cwd()
    full_path = base / new_dir
    if not full_path.exists():
        return False

    full = os.path.abspath(str(full_path))
    timestamp = int(time.time()) if now is None else now
    entries = load_history()
    for entry in entries:
        if entry.dir == full:
            entry.last_accessed_timestamp = timestamp
            entry.times += 1
            break
    else:
        entries.append(VisitedDir(dir=full, last_accessed_timestamp=timestamp, times=1))

    if len(entries) > MAX_HISTORY_ENTRIES:
        entries.sort(key=lambda entry: entry.times, reverse=True)
        del entries[MAX_HISTORY_ENTRIES:]

    save_history(entries)
    logger.debug("recorded visit to %s", full)
    return True


def find_expanded_folder(fragment: str) -> str | None:
    """Return the most visited directory matching ``fragment``.

    A match on the last path component wins over a match anywhere in the
    path, so ``Cloud`` prefers ``C:/CloudRepos`` over ``C:/CloudRepos/Hehe``.
    """
    entries = sorted(load_history(), key=lambda entry: entry.times, reverse=True)
    for entry in entries:
        if fragment in Path(entry.dir).name:
            return entry.dir
    for entry in entries:
        if fragment in entry.dir:
            return entry.dir
    return None


def expand_directory(fragment: str, cwd: Path | None = None) -> str:
    """Resolve what ``cd <fragment>`` should target.

    An existing path relative to ``cwd`` is kept as typed; otherwise the
    history is consulted, falling back to the fragment itself.
    """
    base = cwd if cwd is not None else Path.cwd()
    if (base / fragment).exists():
        return fragment
    expanded = find_expanded_folder(fragment)
    return expanded if expanded is not None else fragment


__all__ = [
    "HISTORY_PATH",
    "MAX_HISTORY_ENTRIES",
    "VisitedDir",
    "expand_directory",
    "find_expanded_folder",
    "load_history",
    "record_visit",
    "save_history",
]
