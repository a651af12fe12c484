"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle, alternate-screen switching, title and cursor state.
Also wraps Kitty graphics protocol calls used for inline image previews.
"""

from __future__ import annotations

import base64
import contextlib
import os
import shutil
from pathlib import Path
import termios
import tty

APP_TITLE = "lazyfm"

# Delete all images and placements from the current screen.
KITTY_CLEAR_IMAGES = b"\x1b_Ga=d,d=A,q=2;\x1b\\"


def supports_kitty_graphics(environ: dict[str, str] | None = None) -> bool:
    """Return whether environment appears to support kitty graphics protocol."""
    env = os.environ if environ is None else environ
    if "kitty" in env.get("TERM", ""):
        return True
    if env.get("KITTY_WINDOW_ID"):
        return True
    term_program = env.get("TERM_PROGRAM", "")
    if "WezTerm" in term_program or "ghostty" in term_program:
        return True
    return bool(env.get("KONSOLE_VERSION"))


def kitty_image_sequence(image_path: Path, col: int, row: int, width_cells: int, height_cells: int) -> bytes:
    """Build a save-cursor / place-image / restore-cursor payload.

    ``col`` and ``row`` are 1-based terminal cell coordinates.
    """
    encoded_path = base64.b64encode(str(image_path).encode("utf-8")).decode("ascii")
    payload = (
        f"\x1b7\x1b[{max(1, row)};{max(1, col)}H"
        f"\x1b_Ga=T,t=f,f=100,q=2,C=1,c={max(1, width_cells)},r={max(1, height_cells)};{encoded_path}\x1b\\"
        "\x1b8"
    )
    return payload.encode("ascii")


class TerminalController:
    """Manage terminal mode transitions and optional kitty image rendering."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def write(self, data: str | bytes) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8", errors="replace")
        os.write(self.stdout_fd, data)

    def size(self) -> tuple[int, int]:
        """Return ``(columns, lines)`` with an 80x24 fallback."""
        term = shutil.get_terminal_size((80, 24))
        return term.columns, term.lines

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with hidden cursor and app title."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, f"\x1b[?1049h\x1b[?25l\x1b]0;{APP_TITLE}\x07\x1b[2J".encode("ascii"))

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state and the main screen buffer."""
        os.write(self.stdout_fd, KITTY_CLEAR_IMAGES + b"\x1b[0m\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def show_cursor(self, visible: bool) -> None:
        os.write(self.stdout_fd, b"\x1b[?25h" if visible else b"\x1b[?25l")

    def kitty_clear_images(self) -> None:
        """Clear all kitty inline images from current screen."""
        os.write(self.stdout_fd, KITTY_CLEAR_IMAGES)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

    @contextlib.contextmanager
    def suspended(self):
        """Hand the terminal to a child program, then fully restore TUI state."""
        self.disable_tui_mode()
        try:
            yield
        finally:
            self.enable_tui_mode()


__all__ = [
    "APP_TITLE",
    "KITTY_CLEAR_IMAGES",
    "supports_kitty_graphics",
    "kitty_image_sequence",
    "TerminalController",
]
