"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens
(``"UP"``, ``"ENTER"``, ``"HOME"``, printable characters, ...). Also provides
the blocking line editor used by footer prompts.
"""

from __future__ import annotations

import os
import select
from collections.abc import Callable

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CSI_FINAL_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}
_CSI_TILDE_KEYS = {
    b"1": "HOME",
    b"7": "HOME",
    b"4": "END",
    b"8": "END",
    b"3": "DELETE",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _decode_csi(fd: int) -> str:
    """Decode the remainder of an ``ESC [`` sequence."""
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq in _CSI_FINAL_KEYS:
        return _CSI_FINAL_KEYS[seq]
    if not seq.isdigit():
        return "ESC"

    params = [seq]
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part == b"~":
            return _CSI_TILDE_KEYS.get(params[0], "ESC") if len(params) == 1 else "ESC"
        if part in _CSI_FINAL_KEYS:
            # Modified arrows/home/end (``ESC [ 1 ; 2 H``): keep the base key.
            return _CSI_FINAL_KEYS[part]
        params.append(part)
        if len(params) > 16:
            return "ESC"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Block for one key press and return its token (``""`` on timeout/EOF)."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch in {b"\r", b"\n"}:
        return "ENTER"
    if ch in {b"\x08", b"\x7f"}:
        return "BACKSPACE"
    if ch == b"\t":
        return "TAB"
    if ch == b"\x03":
        return "CTRL_C"

    if ch != b"\x1b":
        lead = ch[0]
        extra = _utf8_length(lead) - 1
        data = ch
        for _ in range(extra):
            more = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
            if more is None:
                break
            data += more
        return data.decode("utf-8", errors="replace")

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _decode_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is not None and final in _CSI_FINAL_KEYS:
            return _CSI_FINAL_KEYS[final]
        return "ESC"
    _PENDING_BYTES.append(seq)
    return "ESC"


def read_line(
    fd: int,
    echo: Callable[[str], None],
    key_reader: Callable[[int], str] = read_key,
) -> str | None:
    """Collect one line of input in raw mode.

    Printable keys are echoed through ``echo``; BACKSPACE erases one
    character. Returns the text on ENTER or ``None`` when ESC/Ctrl-C cancels.
    """
    buffer: list[str] = []
    while True:
        key = key_reader(fd)
        if key == "":
            return None
        if key == "ENTER":
            return "".join(buffer)
        if key in {"ESC", "CTRL_C"}:
            return None
        if key == "BACKSPACE":
            if buffer:
                buffer.pop()
                echo("\b \b")
            continue
        if len(key) == 1 and key.isprintable():
            buffer.append(key)
            echo(key)


__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "read_key",
    "read_line",
]
