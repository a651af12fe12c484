"""Blocking footer prompts.

Each prompt takes over the footer row until it returns; the next full frame
redraws the footer normally.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..ansi import fit_ansi_cell
from ..highlight import sanitize_terminal_text
from ..input import read_key, read_line
from ..terminal import TerminalController
from ..theme import Theme
from .layout import Layout, compute_layout

logger = logging.getLogger(__name__)

CONFIRM_KEYS = frozenset({"y", "Y"})


class FooterPrompts:
    """Line input, yes/no confirmation and error display on the footer row."""

    def __init__(
        self,
        terminal: TerminalController,
        theme: Theme,
        key_reader: Callable[..., str] = read_key,
    ) -> None:
        self.terminal = terminal
        self.theme = theme
        self.key_reader = key_reader

    def _layout(self) -> Layout:
        columns, lines = self.terminal.size()
        return compute_layout(columns, lines)

    def _write_footer(self, text: str) -> None:
        layout = self._layout()
        self.terminal.write(f"\033[{layout.footer_row + 1};1H\033[2K" + text)

    def read_input(self, prompt: str) -> str | None:
        """Read one line; ``None`` when the user cancels."""
        self._write_footer(f" {prompt}")
        self.terminal.show_cursor(True)
        try:
            return read_line(self.terminal.stdin_fd, self.terminal.write, self.key_reader)
        finally:
            self.terminal.show_cursor(False)

    def get_confirmation(self, message: str) -> bool:
        theme = self.theme
        self._write_footer(f"{theme.fg('Confirmation')} {message} (y/N) {theme.reset}")
        return self.key_reader(self.terminal.stdin_fd) in CONFIRM_KEYS

    def display_error(self, message: str) -> None:
        """Show ``message`` in the error colors and wait for any key."""
        logger.warning("%s", message)
        theme = self.theme
        style = theme.reverse + theme.bg("ErrorBg") + theme.fg("ErrorFg")
        text = f" Error: {sanitize_terminal_text(message)}"
        self._write_footer(style + fit_ansi_cell(text, self._layout().width - 1) + "\033[0m")
        self.key_reader(self.terminal.stdin_fd)


__all__ = ["CONFIRM_KEYS", "FooterPrompts"]
