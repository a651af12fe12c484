"""Launch helpers for handing files to external programs.

``launch_editor`` runs ``$EDITOR`` while temporarily leaving TUI mode.
``open_with_system`` hands a file to the desktop opener without waiting.
Both return an error message string instead of raising for UI-friendly handling.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Callable

DEFAULT_EDITOR = "nano"


def editor_command() -> list[str]:
    editor_env = os.environ.get("EDITOR", "").strip() or DEFAULT_EDITOR
    return shlex.split(editor_env)


def launch_editor(target: Path, suspend: Callable[[], AbstractContextManager]) -> str | None:
    """Run the editor on ``target`` and wait for it to exit."""
    cmd = editor_command()
    if not cmd:
        return "Cannot edit: $EDITOR is empty."

    with suspend():
        try:
            subprocess.run([*cmd, str(target)], check=False)
        except OSError as exc:
            return f"Could not open editor: {exc}"
    return None


def system_opener() -> list[str]:
    if sys.platform == "darwin":
        return ["open"]
    return ["xdg-open"]


def open_with_system(target: Path) -> str | None:
    """Open ``target`` with the OS default application, detached."""
    try:
        subprocess.Popen(
            [*system_opener(), str(target)],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        return f"Could not open file: {exc}"
    return None


__all__ = [
    "DEFAULT_EDITOR",
    "editor_command",
    "launch_editor",
    "system_opener",
    "open_with_system",
]
