"""Rendering engine for the two-pane list/preview terminal view.

Defines the per-frame view data and writes fully composed ANSI frames.
Frame composition is pure (``build_frame``); ``Renderer.draw`` only handles
terminal I/O and graphics overlays.
"""

from __future__ import annotations

from collections.abc import Sequence, Set
from dataclasses import dataclass
from pathlib import Path

from ..ansi import fit_ansi_cell, sanitize_cell_text, visible_width
from ..entries import DirectoryEntry, format_size, format_timestamp
from ..highlight import sanitize_terminal_text
from ..preview import ImagePath, PreviewContent, PreviewLines, RawGraphics
from ..terminal import TerminalController, kitty_image_sequence
from ..theme import Theme
from .layout import Layout, border_row, compute_layout

TIMESTAMP_WIDTH = 12
KEY_LEGEND = "[r]ename [d]elete [a]dd [y]ank [x]cut [p]aste [q]uit"


@dataclass(frozen=True)
class FrameView:
    current_path: Path
    entries: Sequence[DirectoryEntry]
    selected_index: int
    scroll_offset: int
    selection: Set[str]
    preview: PreviewContent


def _move_to(row: int, col: int = 0) -> str:
    return f"\033[{row + 1};{col + 1}H"


def format_list_text(entry: DirectoryEntry) -> str:
    stamp = format_timestamp(entry.last_modified)
    name = sanitize_cell_text(sanitize_terminal_text(entry.name))
    return f" {stamp:<{TIMESTAMP_WIDTH}}  {name}"


def list_row_style(entry: DirectoryEntry, highlighted: bool, multi_selected: bool, theme: Theme) -> str:
    """Return the SGR prefix for one list row."""
    if theme.no_color:
        style = theme.reverse if highlighted else ""
        return style + theme.underline if multi_selected else style
    if highlighted:
        fg_role = "ListMultiSelectedFg" if multi_selected else "ListSelectedFg"
        return theme.bg("ListSelectedBg") + theme.fg(fg_role)
    if multi_selected:
        return theme.fg("ListMultiSelectedFg")
    if entry.is_dir:
        return theme.fg("ListDirectory")
    if entry.executable:
        return theme.fg("ListExecutable")
    return theme.fg("ListDefault")


def render_list_cell(view: FrameView, index: int, width: int, theme: Theme) -> str:
    if index >= len(view.entries):
        return " " * width
    entry = view.entries[index]
    style = list_row_style(
        entry,
        highlighted=index == view.selected_index,
        multi_selected=entry.full_path in view.selection,
        theme=theme,
    )
    body = fit_ansi_cell(format_list_text(entry), width)
    if not style:
        return body
    return style + body + "\033[0m"


def render_preview_cell(preview: PreviewContent, row: int, width: int) -> str:
    if isinstance(preview, PreviewLines) and row < len(preview.lines):
        return fit_ansi_cell(sanitize_cell_text(preview.lines[row]), width)
    return " " * width


def footer_status(view: FrameView) -> str:
    entry = None
    if 0 <= view.selected_index < len(view.entries):
        entry = view.entries[view.selected_index]
    if entry is None:
        return " 0/0"
    size_info = ""
    if not entry.is_dir and entry.size_bytes is not None:
        size_info = f" {format_size(entry.size_bytes)}"
    name = sanitize_cell_text(sanitize_terminal_text(entry.name))
    return f" {view.selected_index + 1}/{len(view.entries)} : {name}{size_info}"


def build_footer(view: FrameView, width: int, theme: Theme) -> str:
    """Status on the left, key legend right-aligned, clipped to ``width - 1``."""
    usable = max(1, width - 1)
    status = footer_status(view)
    legend = f" {KEY_LEGEND} "
    pad = usable - visible_width(status) - len(legend)
    text = status + (" " * pad if pad > 0 else "") + theme.fg("Footer") + legend + theme.reset
    return fit_ansi_cell(text, usable)


def build_frame(view: FrameView, layout: Layout, theme: Theme) -> str:
    """Compose one complete frame as cursor-addressed rows."""
    border = theme.fg("Border")
    reset = theme.reset
    vbar = f"{border}│{reset}"
    out: list[str] = ["\033[0m"]

    header = theme.fg("HeaderPath") + " " + sanitize_terminal_text(str(view.current_path)) + reset
    out.append(_move_to(0) + fit_ansi_cell(header, layout.width))
    out.append(_move_to(1) + border + border_row(layout, "┌", "┬", "┐") + reset)

    title = theme.fg("HeaderTitle") + f" {'Date':<{TIMESTAMP_WIDTH}}  Name" + reset
    out.append(
        _move_to(2)
        + vbar
        + fit_ansi_cell(title, layout.list_width)
        + vbar
        + " " * layout.preview_width
        + vbar
    )
    out.append(_move_to(3) + border + border_row(layout, "├", "┼", "┤") + reset)

    for row in range(layout.viewport_height):
        out.append(
            _move_to(layout.first_list_row + row)
            + vbar
            + render_list_cell(view, view.scroll_offset + row, layout.list_width, theme)
            + vbar
            + render_preview_cell(view.preview, row, layout.preview_width)
            + vbar
        )

    out.append(_move_to(layout.bottom_border_row) + border + border_row(layout, "└", "┴", "┘") + reset)
    out.append(_move_to(layout.footer_row) + "\033[2K" + build_footer(view, layout.width, theme))
    return "".join(out)


def graphics_overlay(preview: PreviewContent, layout: Layout) -> bytes | None:
    """Return the escape payload that places image previews, if any."""
    if isinstance(preview, ImagePath):
        return kitty_image_sequence(
            preview.path,
            col=layout.preview_col + 1,
            row=layout.first_list_row + 1,
            width_cells=layout.preview_width,
            height_cells=layout.viewport_height,
        )
    if isinstance(preview, RawGraphics):
        chunks = preview.payload.split(b"\n")
        if chunks and chunks[-1] == b"":
            chunks.pop()
        out: list[bytes] = []
        for offset, chunk in enumerate(chunks[: layout.viewport_height]):
            out.append(_move_to(layout.first_list_row + offset, layout.preview_col).encode("ascii"))
            out.append(chunk)
        out.append(b"\x1b[0m")
        return b"".join(out)
    return None


class Renderer:
    """Draw frames for a terminal, clearing stale image overlays each time."""

    def __init__(self, terminal: TerminalController, theme: Theme) -> None:
        self.terminal = terminal
        self.theme = theme

    def layout(self) -> Layout:
        columns, lines = self.terminal.size()
        return compute_layout(columns, lines)

    def viewport_height(self) -> int:
        return self.layout().viewport_height

    def preview_width(self) -> int:
        return self.layout().preview_width

    def draw(self, view: FrameView) -> None:
        layout = self.layout()
        self.terminal.kitty_clear_images()
        self.terminal.write(build_frame(view, layout, self.theme))
        overlay = graphics_overlay(view.preview, layout)
        if overlay is not None:
            self.terminal.write(overlay)


__all__ = [
    "TIMESTAMP_WIDTH",
    "KEY_LEGEND",
    "FrameView",
    "format_list_text",
    "list_row_style",
    "render_list_cell",
    "render_preview_cell",
    "footer_status",
    "build_footer",
    "build_frame",
    "graphics_overlay",
    "Renderer",
]
