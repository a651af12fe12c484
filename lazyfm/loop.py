"""Frame loop: draw, block for one key, dispatch, repeat."""

from __future__ import annotations

import logging
from typing import Callable

from .app import NavigationController
from .input import read_key

logger = logging.getLogger(__name__)


def run_frame(controller: NavigationController, key_reader: Callable[[int], str], stdin_fd: int) -> bool:
    """Run one frame; return whether the loop should continue.

    End of input stops the loop. Unexpected errors are logged and shown
    without ending the session.
    """
    try:
        controller.draw()
        try:
            key = key_reader(stdin_fd)
        except KeyboardInterrupt:
            return True
        if key == "":
            return False
        if key == "CTRL_C":
            return True
        return controller.handle_key(key)
    except Exception as exc:
        logger.exception("unhandled error in frame")
        controller.report_error(f"Unexpected error: {exc}")
        return controller.running


def run_main_loop(
    controller: NavigationController,
    stdin_fd: int,
    key_reader: Callable[[int], str] = read_key,
) -> None:
    while run_frame(controller, key_reader, stdin_fd):
        pass


__all__ = ["run_frame", "run_main_loop"]
