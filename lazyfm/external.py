"""Synchronous external-process helpers shared by every collaborator.

``run_command`` is the single "capture stdout, bounded wait" primitive used
for preview tools. Output is drained to end-of-stream first (or until the
line cap), then the child gets a short wait. A child still running after the
wait is abandoned, not killed.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

OUTPUT_LINE_LIMIT = 200
EXIT_WAIT_SECONDS = 0.1


def _bounded_wait(proc: subprocess.Popen, wait_seconds: float) -> None:
    try:
        proc.wait(timeout=wait_seconds)
    except subprocess.TimeoutExpired:
        logger.debug("abandoning %r after %.2fs", proc.args, wait_seconds)


def run_command(
    args: Sequence[str],
    *,
    max_lines: int = OUTPUT_LINE_LIMIT,
    wait_seconds: float = EXIT_WAIT_SECONDS,
    cwd: Path | None = None,
) -> list[str] | None:
    """Run ``args`` and return up to ``max_lines`` stdout lines.

    Returns ``None`` when the program cannot be launched (missing binary,
    permission denied). Exit status is not inspected.
    """
    try:
        proc = subprocess.Popen(
            list(args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            cwd=cwd,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as exc:
        logger.debug("cannot launch %s: %s", args[0], exc)
        return None

    lines: list[str] = []
    assert proc.stdout is not None
    with proc.stdout:
        for line in proc.stdout:
            lines.append(line.rstrip("\r\n"))
            if len(lines) >= max_lines:
                break
    _bounded_wait(proc, wait_seconds)
    return lines


def run_command_bytes(
    args: Sequence[str],
    *,
    wait_seconds: float = EXIT_WAIT_SECONDS,
    cwd: Path | None = None,
) -> bytes | None:
    """Like :func:`run_command` but returns the raw stdout payload."""
    try:
        proc = subprocess.Popen(
            list(args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            cwd=cwd,
        )
    except OSError as exc:
        logger.debug("cannot launch %s: %s", args[0], exc)
        return None

    assert proc.stdout is not None
    with proc.stdout:
        payload = proc.stdout.read()
    _bounded_wait(proc, wait_seconds)
    return payload


def exit_status(args: Sequence[str]) -> int | None:
    """Run ``args`` silently to completion and return its exit code."""
    try:
        completed = subprocess.run(
            list(args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as exc:
        logger.debug("cannot launch %s: %s", args[0], exc)
        return None
    return completed.returncode


def run_interactive(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    capture_stdout: bool = False,
) -> tuple[int, str]:
    """Run a program that owns the terminal until it exits.

    Raises ``OSError`` when the program cannot be launched. Returns the exit
    code plus captured stdout (empty unless ``capture_stdout``).
    """
    completed = subprocess.run(
        list(args),
        cwd=cwd,
        stdout=subprocess.PIPE if capture_stdout else None,
        text=True,
        check=False,
    )
    return completed.returncode, completed.stdout or ""


__all__ = [
    "OUTPUT_LINE_LIMIT",
    "EXIT_WAIT_SECONDS",
    "run_command",
    "run_command_bytes",
    "exit_status",
    "run_interactive",
]
