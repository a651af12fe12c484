"""Preview content resolution for the highlighted entry.

A preview request is matched against an ordered list of strategies; the
first strategy whose predicate matches and whose producer returns content
wins. A producer may return ``None`` to fall through to later strategies.
Nothing here raises: failures become a single descriptive line.
"""

from __future__ import annotations

import logging
import os
import shutil
import zipfile
from collections.abc import Callable
from dataclasses import dataclass
from itertools import islice
from pathlib import Path

from .entries import DirectoryEntry, list_directory
from .external import run_command, run_command_bytes
from .highlight import highlighted_head, looks_binary

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".avif", ".jxl",
        ".ico", ".tiff", ".tif", ".svg", ".heic", ".heif", ".pbm", ".pgm",
        ".ppm", ".tga", ".cur", ".ani", ".pam", ".pcx",
    }
)
MEDIA_EXTENSIONS = frozenset(
    {".mp4", ".mkv", ".avi", ".mov", ".webm", ".mp3", ".wav", ".flac", ".ogg", ".m4a", ".wma", ".aac"}
)
ZIP_EXTENSIONS = frozenset({".zip"})
TAR_EXTENSIONS = frozenset({".tar", ".gz", ".tgz"})
SEVEN_ZIP_EXTENSIONS = frozenset({".7z", ".rar"})
BINARY_EXTENSIONS = frozenset({".exe", ".dll", ".bin", ".iso", ".pdf"})

MAX_PREVIEW_BYTES = 5 * 1024 * 1024
CHAFA_COMMAND = "chafa"
CHAFA_AUTO_FORMAT = "symbols"

ACCESS_DENIED = "Access Denied"
IMAGE_PLACEHOLDER = "Image file (No preview)"
BINARY_PLACEHOLDER = "Binary file"
TOO_LARGE_PLACEHOLDER = "File too large to preview"


@dataclass(frozen=True)
class PreviewLines:
    lines: tuple[str, ...]


@dataclass(frozen=True)
class RawGraphics:
    """Pre-rendered terminal graphics written verbatim at the pane origin."""

    payload: bytes


@dataclass(frozen=True)
class ImagePath:
    """Image the renderer should place with the native graphics protocol."""

    path: Path


PreviewContent = PreviewLines | RawGraphics | ImagePath

EMPTY_PREVIEW = PreviewLines(())


def lines_preview(*lines: str) -> PreviewLines:
    return PreviewLines(tuple(lines))


@dataclass(frozen=True)
class PreviewRequest:
    entry: DirectoryEntry
    max_lines: int
    supports_inline_images: bool
    show_hidden: bool
    width: int = 80
    image_backend: str = "auto"
    use_color: bool = True


@dataclass(frozen=True)
class PreviewStrategy:
    name: str
    matches: Callable[[PreviewRequest], bool]
    produce: Callable[[PreviewRequest], PreviewContent | None]


def _capped(lines: list[str], max_lines: int) -> PreviewLines:
    return PreviewLines(tuple(lines[: max(0, max_lines)]))


def _is_file_with(extensions: frozenset[str]) -> Callable[[PreviewRequest], bool]:
    def matches(request: PreviewRequest) -> bool:
        return not request.entry.is_dir and request.entry.extension in extensions

    return matches


def directory_preview(request: PreviewRequest) -> PreviewContent:
    """List immediate children; directories carry a trailing separator."""
    try:
        children = list_directory(request.entry.path, request.show_hidden)
    except PermissionError:
        return lines_preview(ACCESS_DENIED)
    return PreviewLines(
        tuple(
            f"{child.name}{os.sep}" if child.is_dir else child.name
            for child in islice(children, max(0, request.max_lines))
        )
    )


def _chafa_format(request: PreviewRequest) -> str | None:
    backend = request.image_backend
    if backend == "none":
        return None
    if backend == "auto":
        return CHAFA_AUTO_FORMAT if shutil.which(CHAFA_COMMAND) else None
    return backend


def image_preview(request: PreviewRequest) -> PreviewContent:
    if request.supports_inline_images and request.image_backend == "auto":
        return ImagePath(request.entry.path)
    chafa_format = _chafa_format(request)
    if chafa_format is not None:
        payload = run_command_bytes(
            [
                CHAFA_COMMAND,
                "-f",
                chafa_format,
                "-s",
                f"{max(1, request.width)}x{max(1, request.max_lines)}",
                str(request.entry.path),
            ]
        )
        if payload:
            return RawGraphics(payload)
    return lines_preview(IMAGE_PLACEHOLDER)


def media_preview(request: PreviewRequest) -> PreviewContent | None:
    output = run_command(["mediainfo", str(request.entry.path)])
    if not output:
        return None
    return _capped(output, request.max_lines)


def zip_preview(request: PreviewRequest) -> PreviewContent:
    try:
        with zipfile.ZipFile(request.entry.path) as archive:
            names = [info.filename for info in islice(archive.infolist(), max(0, request.max_lines))]
    except (OSError, zipfile.BadZipFile) as exc:
        return lines_preview(f"Zip Error: {exc}")
    return PreviewLines(tuple(names))


def _tool_listing(args: list[str], request: PreviewRequest) -> PreviewContent:
    output = run_command(args)
    if output is None:
        return lines_preview(f"Archive Error: '{args[0]}' is not available")
    if not output:
        return lines_preview(f"Archive Error: {args[0]} listed no entries")
    return _capped(output, request.max_lines)


def tar_preview(request: PreviewRequest) -> PreviewContent:
    return _tool_listing(["tar", "-tf", str(request.entry.path)], request)


def seven_zip_preview(request: PreviewRequest) -> PreviewContent:
    return _tool_listing(["7z", "l", str(request.entry.path)], request)


def _is_oversized(request: PreviewRequest) -> bool:
    if request.entry.is_dir:
        return False
    size = request.entry.size_bytes
    if size is None:
        size = request.entry.path.stat().st_size
    return size > MAX_PREVIEW_BYTES


def text_preview(request: PreviewRequest) -> PreviewContent:
    path = request.entry.path
    if looks_binary(path):
        return lines_preview(BINARY_PLACEHOLDER)
    return PreviewLines(tuple(highlighted_head(path, request.max_lines, use_color=request.use_color)))


PREVIEW_STRATEGIES: tuple[PreviewStrategy, ...] = (
    PreviewStrategy("directory", lambda request: request.entry.is_dir, directory_preview),
    PreviewStrategy("image", _is_file_with(IMAGE_EXTENSIONS), image_preview),
    PreviewStrategy("media", _is_file_with(MEDIA_EXTENSIONS), media_preview),
    PreviewStrategy("zip", _is_file_with(ZIP_EXTENSIONS), zip_preview),
    PreviewStrategy("tar", _is_file_with(TAR_EXTENSIONS), tar_preview),
    PreviewStrategy("7z", _is_file_with(SEVEN_ZIP_EXTENSIONS), seven_zip_preview),
    PreviewStrategy("binary", _is_file_with(BINARY_EXTENSIONS), lambda request: lines_preview(BINARY_PLACEHOLDER)),
    PreviewStrategy("oversized", _is_oversized, lambda request: lines_preview(TOO_LARGE_PLACEHOLDER)),
    PreviewStrategy("text", lambda request: True, text_preview),
)


def resolve_request(
    request: PreviewRequest,
    strategies: tuple[PreviewStrategy, ...] = PREVIEW_STRATEGIES,
) -> PreviewContent:
    """Return the first produced preview for ``request`` in strategy order."""
    try:
        for strategy in strategies:
            if not strategy.matches(request):
                continue
            content = strategy.produce(request)
            if content is not None:
                return content
    except Exception as exc:
        logger.debug("preview failed for %s", request.entry.full_path, exc_info=True)
        return lines_preview(f"Error reading preview: {exc}")
    return EMPTY_PREVIEW


def resolve_preview(
    entry: DirectoryEntry,
    max_lines: int,
    supports_inline_images: bool,
    show_hidden: bool,
    *,
    width: int = 80,
    image_backend: str = "auto",
    use_color: bool = True,
) -> PreviewContent:
    """Resolve preview content for ``entry`` constrained to ``max_lines`` rows."""
    return resolve_request(
        PreviewRequest(
            entry=entry,
            max_lines=max_lines,
            supports_inline_images=supports_inline_images,
            show_hidden=show_hidden,
            width=width,
            image_backend=image_backend,
            use_color=use_color,
        )
    )


__all__ = [
    "IMAGE_EXTENSIONS",
    "MEDIA_EXTENSIONS",
    "BINARY_EXTENSIONS",
    "MAX_PREVIEW_BYTES",
    "PreviewLines",
    "RawGraphics",
    "ImagePath",
    "PreviewContent",
    "EMPTY_PREVIEW",
    "PreviewRequest",
    "PreviewStrategy",
    "PREVIEW_STRATEGIES",
    "resolve_request",
    "resolve_preview",
]
