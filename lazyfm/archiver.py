"""Archive extraction and creation through external tools.

Tool choice follows the archive suffix. Both entry points block until the
tool exits and raise ``ArchiveError`` for a missing tool or non-zero exit.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from .external import run_interactive

logger = logging.getLogger(__name__)

TAR_SUFFIXES = (".tar.gz", ".tgz", ".tar.xz", ".txz", ".tar.bz2", ".tbz2", ".tar")
ARCHIVE_SUFFIXES = (*TAR_SUFFIXES, ".zip", ".7z", ".rar", ".gz")


class ArchiveError(Exception):
    """Raised when an archive tool is missing or reports failure."""


def _lower(path: Path | str) -> str:
    return str(path).lower()


def is_archive(path: Path | str) -> bool:
    return _lower(path).endswith(ARCHIVE_SUFFIXES)


def archive_stem(name: str) -> str:
    """Strip the archive suffix (``photos.tar.gz`` -> ``photos``)."""
    lowered = name.lower()
    for suffix in ARCHIVE_SUFFIXES:
        if lowered.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return Path(name).stem or name


def extract_command(archive: Path, destination: Path) -> list[str]:
    name = _lower(archive)
    if name.endswith(".zip"):
        return ["unzip", str(archive), "-d", str(destination)]
    if name.endswith((".7z", ".rar")):
        return ["7z", "x", str(archive), f"-o{destination}"]
    if name.endswith(TAR_SUFFIXES):
        return ["tar", "-xf", str(archive), "-C", str(destination)]
    return ["7z", "x", str(archive), f"-o{destination}"]


def compress_command(sources: Sequence[str], destination: Path) -> list[str]:
    name = _lower(destination)
    if name.endswith((".tar.gz", ".tgz")):
        return ["tar", "-czf", str(destination), *sources]
    if name.endswith((".tar.xz", ".txz")):
        return ["tar", "-cJf", str(destination), *sources]
    if name.endswith(".tar"):
        return ["tar", "-cf", str(destination), *sources]
    if name.endswith((".7z", ".rar")):
        return ["7z", "a", str(destination), *sources]
    return ["zip", "-r", str(destination), *sources]


def _run(args: list[str], cwd: Path | None = None) -> None:
    logger.debug("running archive tool: %s", args)
    try:
        code, _output = run_interactive(args, cwd=cwd)
    except OSError as exc:
        raise ArchiveError(f"'{args[0]}' is not available: {exc.strerror or exc}") from exc
    if code != 0:
        raise ArchiveError(f"{args[0]} exited with status {code}")


def extract(archive: Path, destination: Path) -> None:
    """Unpack ``archive`` into ``destination`` (created when missing)."""
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ArchiveError(f"Cannot create {destination}: {exc.strerror or exc}") from exc
    _run(extract_command(archive, destination))


def _relative_sources(paths: Sequence[Path], base: Path) -> list[str]:
    out: list[str] = []
    for path in paths:
        try:
            out.append(os.path.relpath(path, base))
        except ValueError:
            out.append(str(path))
    return out


def compress(paths: Sequence[Path], destination: Path) -> None:
    """Create ``destination`` from ``paths``, stored relative to its directory."""
    if not paths:
        raise ArchiveError("Nothing to compress")
    base = destination.parent
    _run(compress_command(_relative_sources(paths, base), destination), cwd=base)


__all__ = [
    "ARCHIVE_SUFFIXES",
    "ArchiveError",
    "is_archive",
    "archive_stem",
    "extract_command",
    "compress_command",
    "extract",
    "compress",
]
