"""Background project discovery feeding the picker.

Walks a directory tree depth-first and reports every project directory it
finds through a :class:`MessageSender`. A directory counts as a project when
it holds a ``.git`` directory or a Visual Studio solution/project file;
projects are reported once and not descended into.
"""

from __future__ import annotations

import logging
import os
import stat
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from ..picker.messages import Finish, ItemsFound, MessageChannel, MessageSender, ProgressUpdate

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL_SECONDS = 0.2
PROJECT_MARKER_SUFFIXES = (".sln", ".csproj")
_BANNED_FILE_ATTRIBUTES = getattr(stat, "FILE_ATTRIBUTE_SYSTEM", 0x4) | getattr(
    stat, "FILE_ATTRIBUTE_REPARSE_POINT", 0x400
)

KIND_TAGS = {
    "csharp": "[csharp]",
    "js": "[js]",
    "go": "[go]",
    "rust": "[rust]",
    "lua": "[lua]",
    "python": "[python]",
}


@dataclass(frozen=True, eq=False)
class ProjectInfo:
    """A discovered project; identity is the absolute path."""

    path: str
    kinds: tuple[str, ...] = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProjectInfo):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __str__(self) -> str:
        if not self.kinds:
            return self.path
        return f"{self.path} {KIND_TAGS[self.kinds[0]]}"


def _kind_for_name(name: str) -> str | None:
    if name.endswith(PROJECT_MARKER_SUFFIXES):
        return "csharp"
    if name == "package.json":
        return "js"
    if name == "go.mod":
        return "go"
    if name == "Cargo.toml":
        return "rust"
    if name.endswith(".lua") or name == "lua":
        return "lua"
    if name in {"pyproject.toml", "setup.py"}:
        return "python"
    return None


def detect_kinds(names: Iterable[str]) -> tuple[str, ...]:
    """Return project kinds in the order their marker files appear."""
    kinds: list[str] = []
    for name in names:
        kind = _kind_for_name(name)
        if kind is not None and kind not in kinds:
            kinds.append(kind)
    return tuple(kinds)


def to_full_path(path: Path) -> str:
    return os.path.abspath(os.path.expanduser(str(path)))


def _is_traversable(entry: os.DirEntry) -> bool:
    try:
        if entry.is_symlink():
            return False
        info = entry.stat(follow_symlinks=False)
    except OSError:
        return False
    if getattr(info, "st_file_attributes", 0) & _BANNED_FILE_ATTRIBUTES:
        return False
    return stat.S_ISDIR(info.st_mode)


def _is_project(entries: list[os.DirEntry]) -> bool:
    for entry in entries:
        if entry.name == ".git" and _is_traversable(entry):
            return True
    return any(entry.name.endswith(PROJECT_MARKER_SUFFIXES) for entry in entries)


class ProgressThrottle:
    """Send ``ProgressUpdate`` messages at most once per interval."""

    def __init__(
        self,
        sender: MessageSender,
        interval: float = PROGRESS_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.sender = sender
        self.interval = interval
        self.clock = clock
        self._last_sent: float | None = None

    def update(self, folder: Path) -> None:
        now = self.clock()
        if self._last_sent is not None and now - self._last_sent < self.interval:
            return
        self.sender.send(ProgressUpdate(f"Last found directory:{folder}"))
        self._last_sent = now


def scan_projects(
    root: Path,
    sender: MessageSender,
    skip_dirs: Iterable[str] = ("node_modules",),
    progress: ProgressThrottle | None = None,
) -> list[ProjectInfo]:
    """Walk ``root`` and report each project as an ``ItemsFound`` message.

    Unreadable directories are skipped. Children are visited in name order.
    """
    skipped = set(skip_dirs) | {".git"}
    progress = progress if progress is not None else ProgressThrottle(sender)
    found: list[ProjectInfo] = []
    traverse_stack = [Path(root)]

    while traverse_stack:
        current = traverse_stack.pop()
        progress.update(current)
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            logger.debug("skipping unreadable directory %s: %s", current, exc)
            continue

        if _is_project(entries):
            project = ProjectInfo(
                path=to_full_path(current),
                kinds=detect_kinds(entry.name for entry in entries),
            )
            logger.debug("found project %s", project)
            sender.send(ItemsFound([project]))
            found.append(project)
            continue

        children = [
            Path(entry.path)
            for entry in entries
            if entry.name not in skipped and _is_traversable(entry)
        ]
        traverse_stack.extend(reversed(children))

    return found


def start_project_scan(
    root: Path,
    channel: MessageChannel,
    skip_dirs: Iterable[str] = ("node_modules",),
) -> threading.Thread:
    """Run :func:`scan_projects` on a daemon thread.

    The thread always sends ``Finish`` and closes its sender, even when the
    walk fails.
    """
    sender = channel.sender()
    skip = tuple(skip_dirs)

    def _worker() -> None:
        with sender:
            try:
                scan_projects(root, sender, skip)
            except Exception:
                logger.exception("project scan of %s failed", root)
            finally:
                sender.send(Finish())

    worker = threading.Thread(target=_worker, name="sessionizer-project-scan", daemon=True)
    worker.start()
    return worker


__all__ = [
    "PROGRESS_INTERVAL_SECONDS",
    "ProgressThrottle",
    "ProjectInfo",
    "detect_kinds",
    "scan_projects",
    "start_project_scan",
    "to_full_path",
]
