"""Filesystem mutations behind rename, delete, create, and paste.

Each primitive returns error message strings instead of raising so the
controller can surface every failure to the user and keep going.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from .state import ClipboardMode

logger = logging.getLogger(__name__)


def _describe(exc: OSError) -> str:
    return exc.strerror or str(exc)


def rename_path(source: Path, new_name: str) -> tuple[Path | None, str | None]:
    """Rename ``source`` inside its directory. Returns ``(new_path, error)``."""
    target = source.parent / new_name
    if target == source:
        return source, None
    if os.path.lexists(target):
        return None, f"'{new_name}' already exists"
    try:
        source.rename(target)
    except OSError as exc:
        return None, f"Rename failed: {_describe(exc)}"
    return target, None


def delete_path(path: Path) -> str | None:
    """Remove a file, symlink, or directory tree. Returns an error or ``None``."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        return f"Delete failed: '{path.name}' no longer exists"
    except OSError as exc:
        return f"Delete failed for '{path.name}': {_describe(exc)}"
    return None


def delete_paths(paths: Iterable[Path]) -> list[str]:
    """Delete every path, collecting one error per failing item."""
    errors: list[str] = []
    for path in paths:
        error = delete_path(path)
        if error is not None:
            errors.append(error)
    return errors


def create_path(directory: Path, name: str) -> tuple[Path | None, str | None]:
    """Create a file, or a directory when ``name`` ends with a separator.

    Missing parent directories are created. Existing targets are refused.
    """
    if os.path.isabs(name):
        return None, f"'{name}' must be a relative name"
    is_directory = name.endswith("/") or name.endswith(os.sep)
    target = directory / name.rstrip("/" + os.sep)
    if os.path.lexists(target):
        return None, f"'{name}' already exists"
    try:
        if is_directory:
            target.mkdir(parents=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.touch(exist_ok=False)
    except OSError as exc:
        return None, f"Create failed: {_describe(exc)}"
    return target, None


def copy_tree(source: Path, destination: Path) -> None:
    """Recreate ``source`` under ``destination`` by walking it top-down."""
    destination.mkdir()
    for root, dirs, files in os.walk(source):
        relative = Path(root).relative_to(source)
        target_root = destination / relative
        for name in dirs:
            source_dir = Path(root) / name
            if source_dir.is_symlink():
                os.symlink(os.readlink(source_dir), target_root / name)
            else:
                (target_root / name).mkdir(exist_ok=True)
        for name in files:
            shutil.copy2(Path(root) / name, target_root / name, follow_symlinks=False)
    shutil.copystat(source, destination)


def _is_within(path: Path, ancestor: Path) -> bool:
    try:
        path.resolve().relative_to(ancestor.resolve())
    except ValueError:
        return False
    return True


def paste_path(source: Path, destination_dir: Path, mode: ClipboardMode) -> str | None:
    """Copy or move one clipboard item into ``destination_dir``.

    Never overwrites or merges: a same-named destination is reported and the
    item is skipped.
    """
    if not os.path.lexists(source):
        return f"Source no longer exists: {source}"
    target = destination_dir / source.name
    if os.path.lexists(target):
        return f"'{source.name}' already exists in {destination_dir}"
    if source.is_dir() and not source.is_symlink() and _is_within(destination_dir, source):
        return f"Cannot paste '{source.name}' into itself"

    try:
        if mode is ClipboardMode.CUT:
            shutil.move(str(source), str(target))
        elif source.is_dir() and not source.is_symlink():
            copy_tree(source, target)
        else:
            shutil.copy2(source, target, follow_symlinks=False)
    except OSError as exc:
        logger.debug("paste of %s into %s failed", source, destination_dir, exc_info=True)
        return f"Paste failed for '{source.name}': {_describe(exc)}"
    return None


def paste_paths(paths: Iterable[str], destination_dir: Path, mode: ClipboardMode) -> list[str]:
    """Paste every clipboard path, continuing past per-item failures."""
    errors: list[str] = []
    for raw_path in paths:
        error = paste_path(Path(raw_path), destination_dir, mode)
        if error is not None:
            errors.append(error)
    return errors


__all__ = [
    "rename_path",
    "delete_path",
    "delete_paths",
    "create_path",
    "copy_tree",
    "paste_path",
    "paste_paths",
]
