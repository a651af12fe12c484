from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .entries import DirectoryEntry


class ClipboardMode(Enum):
    COPY = "copy"
    CUT = "cut"


@dataclass(frozen=True)
class Clipboard:
    """Paths captured by the last yank/cut, replaced wholesale each time."""

    paths: tuple[str, ...]
    mode: ClipboardMode


@dataclass
class NavigationState:
    current_path: Path
    entries: list[DirectoryEntry] = field(default_factory=list)
    selected_index: int = 0
    scroll_offset: int = 0

    def selected_entry(self) -> DirectoryEntry | None:
        if 0 <= self.selected_index < len(self.entries):
            return self.entries[self.selected_index]
        return None

    def reset_cursor(self) -> None:
        self.selected_index = 0
        self.scroll_offset = 0


SelectionSet = set[str]
