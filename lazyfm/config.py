"""Persistent preferences stored as ``key = value`` lines.

File layout::

    show_hidden_files = true

    [chafa]
    backend = symbols

Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "lazyfm"
CONFIG_FILENAME = "config.toml"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))
CONFIG_PATH = CONFIG_DIR / CONFIG_FILENAME
THEME_SCRIPT_PATH = CONFIG_DIR / "scripts" / "colors.lua"

CHAFA_SECTION = "chafa"
DEFAULT_CHAFA_BACKEND = "auto"


@dataclass(frozen=True)
class Config:
    """Read-only snapshot consumed by the controller and preview resolver."""

    show_hidden: bool = False
    chafa_backend: str = DEFAULT_CHAFA_BACKEND

    def with_show_hidden(self, show_hidden: bool) -> Config:
        return replace(self, show_hidden=show_hidden)


def _strip_value(raw: str) -> str:
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        value = value[1:-1]
    return value.strip()


def _parse_bool(raw: str) -> bool | None:
    value = _strip_value(raw).lower()
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def parse_config(text: str) -> Config:
    """Parse config text; unknown or malformed lines are skipped."""
    show_hidden = False
    chafa_backend = DEFAULT_CHAFA_BACKEND
    section = ""
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("[") and stripped.endswith("]"):
            section = stripped[1:-1].strip().lower()
            continue
        key, sep, value = stripped.partition("=")
        if not sep:
            continue
        key = key.strip()
        if section == "" and key == "show_hidden_files":
            parsed = _parse_bool(value)
            if parsed is not None:
                show_hidden = parsed
        elif section == CHAFA_SECTION and key == "backend":
            backend = _strip_value(value).lower()
            if backend:
                chafa_backend = backend
    return Config(show_hidden=show_hidden, chafa_backend=chafa_backend)


def format_config(config: Config) -> str:
    return (
        f"show_hidden_files = {'true' if config.show_hidden else 'false'}\n"
        "\n"
        f"[{CHAFA_SECTION}]\n"
        f'backend = "{config.chafa_backend}"\n'
    )


def load_config(path: Path | None = None) -> Config:
    """Load the config snapshot, returning defaults on any failure."""
    config_path = path or CONFIG_PATH
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Config()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return Config()
    return parse_config(text)


def save_config(config: Config, path: Path | None = None) -> None:
    """Persist ``config``; write errors are logged and otherwise ignored."""
    config_path = path or CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(format_config(config), encoding="utf-8")
    except OSError as exc:
        logger.warning("cannot save config %s: %s", config_path, exc)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "THEME_SCRIPT_PATH",
    "DEFAULT_CHAFA_BACKEND",
    "Config",
    "parse_config",
    "format_config",
    "load_config",
    "save_config",
]
