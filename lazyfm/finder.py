"""fzf integration: availability check and interactive path picking."""

from __future__ import annotations

import logging
import os
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Callable

from .external import exit_status, run_interactive

logger = logging.getLogger(__name__)

FINDER_COMMAND = "fzf"


def finder_installed() -> bool:
    """Return whether ``which fzf`` succeeds."""
    return exit_status(["which", FINDER_COMMAND]) == 0


def run_finder(root: Path, suspend: Callable[[], AbstractContextManager]) -> Path | None:
    """Let the user pick a path below ``root``; ``None`` when nothing was chosen."""
    with suspend():
        try:
            _code, output = run_interactive([FINDER_COMMAND], cwd=root, capture_stdout=True)
        except OSError as exc:
            logger.warning("cannot launch %s: %s", FINDER_COMMAND, exc)
            return None
    choice = output.strip()
    if not choice:
        return None
    return Path(os.path.abspath(root / choice))


__all__ = ["FINDER_COMMAND", "finder_installed", "run_finder"]
