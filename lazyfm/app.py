"""Navigation controller: the single owner of browser state.

``NavigationController`` holds the directory listing, cursor, scroll window,
multi-selection and clipboard. Each key token maps to exactly one action;
actions that need the user block on the footer prompts and actions that hand
the terminal to a child program run inside ``suspend``.
"""

from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Iterable
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Callable, Protocol

from .archiver import ArchiveError, archive_stem, compress, extract, is_archive
from .config import Config, load_config, save_config
from .editor import launch_editor, open_with_system
from .entries import DirectoryEntry, list_directory
from .fileops import create_path, delete_paths, paste_paths, rename_path
from .finder import finder_installed, run_finder
from .keys import KeyBinding, KeyRegistry
from .navigation import clamp_state, jump_to_end, jump_to_start, move_cursor, select_path
from .preview import EMPTY_PREVIEW, PreviewContent, resolve_preview
from .render import FrameView, Renderer
from .state import Clipboard, ClipboardMode, NavigationState, SelectionSet
from .theme import Theme, load_theme

logger = logging.getLogger(__name__)

OPEN_WITH_SYSTEM_EXTENSIONS = frozenset(
    {".exe", ".dll", ".bin", ".iso", ".zip", ".tar", ".gz", ".7z", ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".pdf"}
)
DEFAULT_VIEWPORT_HEIGHT = 20
DEFAULT_PREVIEW_WIDTH = 80


class Prompts(Protocol):
    def read_input(self, prompt: str) -> str | None: ...

    def get_confirmation(self, message: str) -> bool: ...

    def display_error(self, message: str) -> None: ...


def _absolute(path: Path) -> Path:
    return Path(os.path.abspath(path))


class NavigationController:
    def __init__(
        self,
        start_path: Path,
        *,
        config_path: Path | None = None,
        theme_script: Path | None = None,
        no_color: bool = False,
        supports_inline_images: bool = False,
    ) -> None:
        self.start_path = _absolute(start_path)
        self.config_path = config_path
        self.theme_script = theme_script
        self.no_color = no_color
        self.supports_inline_images = supports_inline_images

        self.config = Config()
        self.theme = Theme(no_color=no_color)
        self.state = NavigationState(self.start_path)
        self.selection: SelectionSet = set()
        self.clipboard: Clipboard | None = None
        self.running = True

        self.prompts: Prompts | None = None
        self.renderer: Renderer | None = None
        self.suspend: Callable[[], AbstractContextManager] = contextlib.nullcontext
        self.fixed_viewport_height: int | None = None

        self.keys = KeyRegistry().register(
            KeyBinding(("UP", "k"), lambda: self.move_cursor(-1)),
            KeyBinding(("DOWN", "j"), lambda: self.move_cursor(1)),
            KeyBinding((" ",), self.toggle_selection),
            KeyBinding(("ENTER", "RIGHT", "l"), self.open_selected),
            KeyBinding(("BACKSPACE", "LEFT", "h"), self.navigate_up),
            KeyBinding((".",), self.toggle_hidden_files),
            KeyBinding(("r",), self.rename),
            KeyBinding(("d",), self.delete),
            KeyBinding(("a",), self.create),
            KeyBinding(("y",), self.yank),
            KeyBinding(("x",), self.cut),
            KeyBinding(("p",), self.paste),
            KeyBinding(("e",), self.extract),
            KeyBinding(("c",), self.compress),
            KeyBinding(("z",), self.fuzzy_find),
            KeyBinding(("q", "ESC"), self.quit),
            KeyBinding(("HOME", "g"), self.jump_to_start),
            KeyBinding(("END", "G"), self.jump_to_end),
        )

    # Lifecycle

    def initialize(self) -> None:
        """Load config and theme snapshots and reset navigation state.

        Both loaders degrade to defaults; this never fails.
        """
        self.config = load_config(self.config_path)
        self.theme = load_theme(self.theme_script, no_color=self.no_color)
        self.state = NavigationState(self.start_path)
        self.selection.clear()
        self.clipboard = None
        self.running = True

    def attach(self, prompts: Prompts, renderer: Renderer | None, suspend: Callable[[], AbstractContextManager]) -> None:
        self.prompts = prompts
        self.renderer = renderer
        self.suspend = suspend

    def viewport_height(self) -> int:
        if self.fixed_viewport_height is not None:
            return self.fixed_viewport_height
        if self.renderer is not None:
            return self.renderer.viewport_height()
        return DEFAULT_VIEWPORT_HEIGHT

    def preview_width(self) -> int:
        if self.renderer is not None:
            return self.renderer.preview_width()
        return DEFAULT_PREVIEW_WIDTH

    def report_error(self, message: str) -> None:
        if self.prompts is None:
            logger.warning("%s", message)
            return
        self.prompts.display_error(message)

    def report_errors(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.report_error(message)

    def selected_entry(self) -> DirectoryEntry | None:
        return self.state.selected_entry()

    def _targets(self) -> list[str]:
        """Selection when non-empty, else the highlighted entry."""
        if self.selection:
            return sorted(self.selection)
        entry = self.selected_entry()
        return [entry.full_path] if entry is not None else []

    def select(self, path: Path | str) -> bool:
        """Highlight ``path`` when it is in the current listing."""
        return select_path(self.state, str(path), self.viewport_height())

    # Listing

    def _scan(self, directory: Path) -> list[DirectoryEntry] | None:
        try:
            return list_directory(directory, self.config.show_hidden)
        except PermissionError:
            self.report_error(f"Access denied: {directory}")
        except OSError as exc:
            self.report_error(f"Cannot read {directory}: {exc.strerror or exc}")
        return None

    def refresh_listing(self) -> None:
        """Re-read the current directory, climbing to a readable ancestor."""
        while True:
            entries = self._scan(self.state.current_path)
            if entries is not None:
                self.state.entries = entries
                break
            parent = self.state.current_path.parent
            if parent == self.state.current_path:
                self.state.entries = []
                break
            self.state.current_path = parent
            self.state.reset_cursor()
            self.selection.clear()
        clamp_state(self.state, self.viewport_height())

    def _enter_directory(self, directory: Path) -> bool:
        entries = self._scan(directory)
        if entries is None:
            return False
        self.state.current_path = directory
        self.state.entries = entries
        self.state.reset_cursor()
        self.selection.clear()
        return True

    def _refresh_keeping(self, path: Path | str | None) -> None:
        self.refresh_listing()
        if path is not None:
            self.select(path)

    # Cursor

    def move_cursor(self, delta: int) -> None:
        move_cursor(self.state, delta, self.viewport_height())

    def jump_to_start(self) -> None:
        jump_to_start(self.state)

    def jump_to_end(self) -> None:
        jump_to_end(self.state, self.viewport_height())

    def toggle_selection(self) -> None:
        entry = self.selected_entry()
        if entry is None:
            return
        if entry.full_path in self.selection:
            self.selection.discard(entry.full_path)
        else:
            self.selection.add(entry.full_path)
        self.move_cursor(1)

    # Navigation

    def open_selected(self) -> None:
        entry = self.selected_entry()
        if entry is None:
            return
        if entry.is_dir:
            self._enter_directory(entry.path)
            return

        if entry.extension in OPEN_WITH_SYSTEM_EXTENSIONS:
            error = open_with_system(entry.path)
        else:
            error = launch_editor(entry.path, self.suspend)
        if error:
            self.report_error(error)
        self._refresh_keeping(entry.full_path)

    def navigate_up(self) -> None:
        current = self.state.current_path
        parent = current.parent
        if parent == current:
            return
        self._enter_directory(parent)

    def quit(self) -> None:
        self.running = False

    # File operations

    def rename(self) -> None:
        entry = self.selected_entry()
        if entry is None:
            return
        new_name = self._ask(f"Rename '{entry.name}' to: ")
        if new_name is None:
            return
        new_path, error = rename_path(entry.path, new_name)
        if error:
            self.report_error(error)
            return
        if new_path != entry.path:
            self.selection.discard(entry.full_path)
        self._refresh_keeping(new_path)

    def delete(self) -> None:
        targets = [path for path in self._targets() if os.path.lexists(path)]
        if not targets:
            self.selection.clear()
            return
        if len(targets) == 1:
            question = f"Delete '{Path(targets[0]).name}'?"
        else:
            question = f"Delete {len(targets)} items?"
        if self.prompts is None or not self.prompts.get_confirmation(question):
            return
        errors = delete_paths(Path(path) for path in targets)
        self.selection.clear()
        self.refresh_listing()
        self.report_errors(errors)

    def create(self) -> None:
        name = self._ask("New file (end with / for a directory): ")
        if name is None:
            return
        created, error = create_path(self.state.current_path, name)
        if error:
            self.report_error(error)
            return
        self._refresh_keeping(self.state.current_path / Path(name).parts[0])

    def _ask(self, prompt: str) -> str | None:
        """Prompt for a name; blank answers count as cancel."""
        if self.prompts is None:
            return None
        answer = self.prompts.read_input(prompt)
        if answer is None or not answer.strip():
            return None
        return answer

    # Clipboard

    def _capture(self, mode: ClipboardMode) -> None:
        targets = self._targets()
        if not targets:
            return
        self.clipboard = Clipboard(tuple(targets), mode)
        self.selection.clear()

    def yank(self) -> None:
        self._capture(ClipboardMode.COPY)

    def cut(self) -> None:
        self._capture(ClipboardMode.CUT)

    def paste(self) -> None:
        clipboard = self.clipboard
        if clipboard is None:
            return
        errors = paste_paths(clipboard.paths, self.state.current_path, clipboard.mode)
        if clipboard.mode is ClipboardMode.CUT:
            self.clipboard = None
        entry = self.selected_entry()
        self._refresh_keeping(entry.full_path if entry else None)
        self.report_errors(errors)

    # Settings

    def toggle_hidden_files(self) -> None:
        self.config = self.config.with_show_hidden(not self.config.show_hidden)
        save_config(self.config, self.config_path)
        entry = self.selected_entry()
        self._refresh_keeping(entry.full_path if entry else None)

    # Archives

    def extract(self) -> None:
        entry = self.selected_entry()
        if entry is None:
            return
        if entry.is_dir or not is_archive(entry.name):
            self.report_error(f"Not an archive: {entry.name}")
            return
        destination = self.state.current_path / archive_stem(entry.name)
        try:
            with self.suspend():
                extract(entry.path, destination)
        except ArchiveError as exc:
            self.report_error(f"Extract failed: {exc}")
        self._refresh_keeping(destination)

    def compress(self) -> None:
        targets = self._targets()
        if not targets:
            return
        name = self._ask("Archive name: ")
        if name is None:
            return
        destination = self.state.current_path / name
        if os.path.lexists(destination):
            self.report_error(f"'{name}' already exists")
            return
        try:
            with self.suspend():
                compress([Path(path) for path in targets], destination)
        except ArchiveError as exc:
            self.report_error(f"Compress failed: {exc}")
        self.selection.clear()
        self._refresh_keeping(destination)

    # Finder

    def fuzzy_find(self) -> None:
        if not finder_installed():
            self.report_error("fzf is not installed")
            return
        root = self.state.current_path
        choice = run_finder(root, self.suspend)
        if choice is None:
            self.refresh_listing()
            return
        if choice.is_dir():
            if not self._enter_directory(choice):
                self.refresh_listing()
            return
        if choice.parent == root or self._enter_directory(choice.parent):
            self._refresh_keeping(choice)
        else:
            self.refresh_listing()

    # Frame

    def current_preview(self) -> PreviewContent:
        entry = self.selected_entry()
        if entry is None:
            return EMPTY_PREVIEW
        return resolve_preview(
            entry,
            self.viewport_height(),
            self.supports_inline_images,
            self.config.show_hidden,
            width=self.preview_width(),
            image_backend=self.config.chafa_backend,
            use_color=not self.theme.no_color,
        )

    def frame_view(self) -> FrameView:
        return FrameView(
            current_path=self.state.current_path,
            entries=self.state.entries,
            selected_index=self.state.selected_index,
            scroll_offset=self.state.scroll_offset,
            selection=frozenset(self.selection),
            preview=self.current_preview(),
        )

    def draw(self) -> None:
        if self.renderer is None:
            return
        clamp_state(self.state, self.viewport_height())
        self.renderer.draw(self.frame_view())

    def handle_key(self, key: str) -> bool:
        """Dispatch one key token; return whether the browser keeps running."""
        self.keys.dispatch(key)
        return self.running


__all__ = [
    "OPEN_WITH_SYSTEM_EXTENSIONS",
    "Prompts",
    "NavigationController",
]
