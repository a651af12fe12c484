"""Text loading, sanitization, and syntax highlighting for file previews.

Highlighting prefers an installed ``bat`` (probed once per process), then
Pygments, and finally returns the raw lines. Terminal control bytes are
escaped before anything reaches the screen.
"""

from __future__ import annotations

import logging
import re
from itertools import islice
from pathlib import Path

from .external import run_command

logger = logging.getLogger(__name__)

BAT_CANDIDATES = ("bat", "batcat")
BINARY_SNIFF_BYTES = 4_096

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_SGR_RE = re.compile(r"(\x1b\[[0-9;:]*m)")

_BAT_PROBED = False
_BAT_COMMAND: str | None = None

_PYGMENTS_READY = False
_PYGMENTS_AVAILABLE = False
_PYGMENTS_HIGHLIGHT = None
_PYGMENTS_GET_LEXER_FOR_FILENAME = None
_PYGMENTS_TEXT_LEXER = None
_PYGMENTS_FORMATTER = None


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def sanitize_colored_text(source: str) -> str:
    """Like :func:`sanitize_terminal_text` but keeps SGR color runs intact."""
    parts = _SGR_RE.split(source)
    return "".join(part if idx % 2 else sanitize_terminal_text(part) for idx, part in enumerate(parts))


def looks_binary(path: Path) -> bool:
    """Return whether the leading bytes of ``path`` contain a NUL."""
    with path.open("rb") as handle:
        sample = handle.read(BINARY_SNIFF_BYTES)
    return b"\x00" in sample


def read_head_lines(path: Path, max_lines: int) -> list[str]:
    """Read the first ``max_lines`` lines with tolerant decoding.

    Attempts UTF-8, UTF-8 with BOM, then latin-1.
    """
    if max_lines <= 0:
        return []
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            with path.open("r", encoding=encoding, newline=None) as handle:
                return [line.rstrip("\n") for line in islice(handle, max_lines)]
        except UnicodeDecodeError:
            continue
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        return [line.rstrip("\n") for line in islice(handle, max_lines)]


def bat_command() -> str | None:
    """Return the usable ``bat`` executable name, probing only once."""
    global _BAT_PROBED
    global _BAT_COMMAND

    if _BAT_PROBED:
        return _BAT_COMMAND
    _BAT_PROBED = True
    for candidate in BAT_CANDIDATES:
        output = run_command([candidate, "--version"])
        if output:
            _BAT_COMMAND = candidate
            break
    logger.debug("syntax highlighter probe: %s", _BAT_COMMAND or "none")
    return _BAT_COMMAND


def reset_probe_cache() -> None:
    global _BAT_PROBED
    global _BAT_COMMAND
    _BAT_PROBED = False
    _BAT_COMMAND = None


def bat_highlight(path: Path, max_lines: int) -> list[str] | None:
    command = bat_command()
    if command is None:
        return None
    output = run_command(
        [
            command,
            "--color=always",
            "--style=plain",
            "--paging=never",
            f"--line-range=:{max_lines}",
            str(path),
        ]
    )
    if output is None:
        return None
    return [sanitize_colored_text(line) for line in output[:max_lines]]


def _ensure_pygments_loaded() -> bool:
    """Lazily import and cache Pygments callables.

    Returns whether Pygments is available in the runtime environment.
    """
    global _PYGMENTS_READY
    global _PYGMENTS_AVAILABLE
    global _PYGMENTS_HIGHLIGHT
    global _PYGMENTS_GET_LEXER_FOR_FILENAME
    global _PYGMENTS_TEXT_LEXER
    global _PYGMENTS_FORMATTER

    if _PYGMENTS_READY:
        return _PYGMENTS_AVAILABLE

    _PYGMENTS_READY = True
    try:
        from pygments import highlight as pygments_highlight
        from pygments.formatters import TerminalFormatter
        from pygments.lexers import TextLexer, get_lexer_for_filename
    except ImportError:
        _PYGMENTS_AVAILABLE = False
        return False

    _PYGMENTS_HIGHLIGHT = pygments_highlight
    _PYGMENTS_GET_LEXER_FOR_FILENAME = get_lexer_for_filename
    _PYGMENTS_TEXT_LEXER = TextLexer
    _PYGMENTS_FORMATTER = TerminalFormatter()
    _PYGMENTS_AVAILABLE = True
    return True


def pygments_highlight(lines: list[str], path: Path) -> list[str] | None:
    """Colorize already-sanitized ``lines``; ``None`` when nothing was colored."""
    if not lines or not _ensure_pygments_loaded():
        return None

    source = "\n".join(lines) + "\n"
    try:
        assert _PYGMENTS_GET_LEXER_FOR_FILENAME is not None
        lexer = _PYGMENTS_GET_LEXER_FOR_FILENAME(path.name, source)
    except Exception:
        assert _PYGMENTS_TEXT_LEXER is not None
        lexer = _PYGMENTS_TEXT_LEXER()

    try:
        assert _PYGMENTS_HIGHLIGHT is not None
        rendered = _PYGMENTS_HIGHLIGHT(source, lexer, _PYGMENTS_FORMATTER)
    except Exception:
        logger.debug("pygments failed for %s", path, exc_info=True)
        return None
    if "\x1b[" not in rendered:
        return None
    return rendered.splitlines()[: len(lines)]


def highlighted_head(path: Path, max_lines: int, use_color: bool = True) -> list[str]:
    """Return up to ``max_lines`` preview lines for a text file."""
    if use_color:
        colored = bat_highlight(path, max_lines)
        if colored is not None:
            return colored

    raw = [sanitize_terminal_text(line) for line in read_head_lines(path, max_lines)]
    if use_color:
        colored = pygments_highlight(raw, path)
        if colored is not None:
            return colored
    return raw


__all__ = [
    "sanitize_terminal_text",
    "sanitize_colored_text",
    "looks_binary",
    "read_head_lines",
    "bat_command",
    "reset_probe_cache",
    "bat_highlight",
    "pygments_highlight",
    "highlighted_head",
]
