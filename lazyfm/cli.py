"""Command-line front door for lazyfm.

Parses CLI options, resolves the starting directory, and either prints a
single preview (``--preview``) or runs the interactive browser.
"""

from __future__ import annotations

import argparse
import os
import shutil
import sys
from pathlib import Path

from .ansi import RESET, clip_ansi_line
from .app import NavigationController
from .config import CONFIG_PATH, THEME_SCRIPT_PATH, load_config
from .entries import entry_for_path
from .logs import configure_logging
from .loop import run_main_loop
from .preview import ImagePath, PreviewContent, RawGraphics, resolve_preview
from .render import Renderer
from .render.prompts import FooterPrompts
from .terminal import TerminalController, supports_kitty_graphics

DEFAULT_PREVIEW_LINES = 40


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def format_preview(content: PreviewContent, max_cols: int) -> str:
    """Render resolved preview content as plain stdout text."""
    if isinstance(content, ImagePath):
        return f"[image: {content.path}]\n"
    if isinstance(content, RawGraphics):
        return f"[graphics payload: {len(content.payload)} bytes]\n"
    out: list[str] = []
    for line in content.lines:
        row = clip_ansi_line(line, max_cols)
        out.append(row)
        if "\033" in row:
            out.append(RESET)
        out.append("\n")
    return "".join(out)


def render_preview(
    path: Path,
    max_lines: int,
    max_cols: int,
    no_color: bool = False,
    config_path: Path | None = None,
) -> str:
    config = load_config(config_path)
    content = resolve_preview(
        entry_for_path(path),
        max_lines,
        supports_inline_images=False,
        show_hidden=config.show_hidden,
        width=max_cols,
        image_backend=config.chafa_backend,
        use_color=not no_color,
    )
    return format_preview(content, max_cols)


def resolve_start(path: Path) -> tuple[Path, Path | None]:
    """Return ``(directory, highlight)``; a file starts in its parent."""
    path = Path(os.path.abspath(path))
    if path.is_dir():
        return path, None
    return path.parent, path


def run_browser(
    start: Path,
    highlight: Path | None,
    *,
    config_path: Path | None,
    theme_script: Path | None,
    no_color: bool,
) -> None:
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    controller = NavigationController(
        start,
        config_path=config_path,
        theme_script=theme_script,
        no_color=no_color,
        supports_inline_images=supports_kitty_graphics(),
    )
    controller.initialize()

    terminal = TerminalController(stdin_fd, stdout_fd)
    controller.attach(
        FooterPrompts(terminal, controller.theme),
        Renderer(terminal, controller.theme),
        terminal.suspended,
    )
    with terminal.raw_mode():
        controller.refresh_listing()
        if highlight is not None:
            controller.select(highlight)
        run_main_loop(controller, stdin_fd)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch lazyfm on a directory."""
    parser = argparse.ArgumentParser(description="Browse and manage files in a two-pane terminal view.")
    parser.add_argument("path", nargs="?", default=None, help="Starting directory. Defaults to current directory.")
    parser.add_argument("--config", type=Path, default=None, help=f"Config file (default: {CONFIG_PATH}).")
    parser.add_argument(
        "--theme-script",
        type=Path,
        default=None,
        help=f"Theme script with a Colors table (default: {THEME_SCRIPT_PATH}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colors.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file.")
    parser.add_argument("--debug", action="store_true", help="Log debug records.")
    parser.add_argument("--preview", metavar="PATH", help="Print the preview for PATH and exit.")
    parser.add_argument(
        "--max-lines",
        type=_positive_int,
        default=DEFAULT_PREVIEW_LINES,
        help="Line limit for --preview output.",
    )
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --preview output (default: terminal width).",
    )
    args = parser.parse_args(argv)

    configure_logging(args.log_file, args.debug)

    if args.preview is not None:
        if args.path is not None:
            raise SystemExit("Cannot combine positional path with --preview.")
        preview_path = Path(args.preview)
        if not preview_path.exists():
            raise SystemExit(f"Path not found: {preview_path}")
        max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
        sys.stdout.write(render_preview(preview_path, args.max_lines, max_cols, args.no_color, args.config))
        return

    path = Path(args.path) if args.path else Path.cwd()
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    start, highlight = resolve_start(path)
    run_browser(
        start,
        highlight,
        config_path=args.config,
        theme_script=args.theme_script or THEME_SCRIPT_PATH,
        no_color=args.no_color,
    )


if __name__ == "__main__":
    main()
