"""ANSI-aware text measurement and fixed-width cell shaping.

Every string that lands in a fixed-width cell goes through ``fit_ansi_cell``:
escape sequences never count toward width and are never split.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
RESET = "\033[0m"
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def visible_width(text: str) -> int:
    """Return display columns of ``text`` ignoring escape sequences."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
            # Lone ESC: never emit a partial sequence.
            i += 1
            continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def fit_ansi_cell(text: str, width: int) -> str:
    """Return ``text`` shaped to exactly ``width`` visible columns.

    Longer text is clipped and followed by a reset so styling cannot bleed
    into the next cell. Shorter text is padded with spaces.
    """
    if width <= 0:
        return ""
    clipped = clip_ansi_line(text, width)
    used = visible_width(clipped)
    if "\x1b" in clipped or visible_width(text) > width:
        clipped += RESET
    if used < width:
        clipped += " " * (width - used)
    return clipped


def sanitize_cell_text(text: str) -> str:
    """Replace newline/carriage-return characters so a cell stays on one row."""
    return text.replace("\r", "").replace("\n", " ")


__all__ = [
    "ANSI_ESCAPE_RE",
    "RESET",
    "char_display_width",
    "strip_ansi",
    "visible_width",
    "clip_ansi_line",
    "fit_ansi_cell",
    "sanitize_cell_text",
]
