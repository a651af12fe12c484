"""Directory scanning into immutable entry snapshots.

Listings are rebuilt wholesale on every refresh. Directories sort before
files and each group is ordered by ordinal (case-sensitive) name.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

EXECUTABLE_EXTENSIONS = frozenset({".sh", ".exe"})


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class DirectoryEntry:
    """One filesystem child observed during a listing."""

    name: str
    full_path: str
    kind: EntryKind
    size_bytes: int | None = None
    last_modified: datetime | None = None
    executable: bool = False

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def extension(self) -> str:
        """Lower-cased final suffix including the dot, ``""`` when absent."""
        if self.is_dir:
            return ""
        return Path(self.name).suffix.lower()

    @property
    def path(self) -> Path:
        return Path(self.full_path)


def entry_sort_key(entry: DirectoryEntry) -> tuple[bool, str]:
    return (not entry.is_dir, entry.name)


def entry_from_dir_entry(child: os.DirEntry) -> DirectoryEntry:
    """Build a snapshot from an ``os.scandir`` item; stat failures leave blanks."""
    try:
        is_dir = child.is_dir()
    except OSError:
        is_dir = False

    size_bytes: int | None = None
    last_modified: datetime | None = None
    executable = False
    try:
        st = child.stat()
        last_modified = datetime.fromtimestamp(st.st_mtime)
        if not is_dir:
            size_bytes = int(st.st_size)
            executable = stat.S_ISREG(st.st_mode) and bool(
                st.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            )
    except OSError:
        pass

    name = child.name
    if not is_dir and Path(name).suffix.lower() in EXECUTABLE_EXTENSIONS:
        executable = True

    return DirectoryEntry(
        name=name,
        full_path=os.path.abspath(child.path),
        kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
        size_bytes=size_bytes,
        last_modified=last_modified,
        executable=executable,
    )


def entry_for_path(path: Path) -> DirectoryEntry:
    """Build a snapshot for an arbitrary path (CLI preview, finder results)."""
    is_dir = path.is_dir()
    size_bytes: int | None = None
    last_modified: datetime | None = None
    try:
        st = path.stat()
        last_modified = datetime.fromtimestamp(st.st_mtime)
        if not is_dir:
            size_bytes = int(st.st_size)
    except OSError:
        pass
    return DirectoryEntry(
        name=path.name or str(path),
        full_path=os.path.abspath(path),
        kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
        size_bytes=size_bytes,
        last_modified=last_modified,
    )


def list_directory(directory: Path, show_hidden: bool) -> list[DirectoryEntry]:
    """Return sorted children of ``directory``.

    Raises ``OSError`` (``PermissionError`` for access denied) when the
    directory itself cannot be scanned; callers decide how to recover.
    """
    entries: list[DirectoryEntry] = []
    with os.scandir(directory) as it:
        for child in it:
            if not show_hidden and child.name.startswith("."):
                continue
            entries.append(entry_from_dir_entry(child))
    entries.sort(key=entry_sort_key)
    return entries


def format_size(size_bytes: int) -> str:
    """Format bytes with 1024-based units and one decimal (``1.5K``)."""
    suffixes = ("B", "K", "M", "G", "T")
    number = float(size_bytes)
    counter = 0
    while round(number / 1024) >= 1 and counter < len(suffixes) - 1:
        number /= 1024
        counter += 1
    return f"{number:,.1f}{suffixes[counter]}"


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime("%b %d %H:%M")


__all__ = [
    "EntryKind",
    "DirectoryEntry",
    "entry_sort_key",
    "entry_from_dir_entry",
    "entry_for_path",
    "list_directory",
    "format_size",
    "format_timestamp",
]
