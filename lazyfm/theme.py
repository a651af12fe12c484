"""UI theme roles, colors, and the ``Colors`` table loader.

Every drawing color is resolved through a role name. Defaults are built in;
a user script may override individual roles with ``#RRGGBB`` strings or
standard terminal color names.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Standard 16-color palette: name -> SGR foreground code.
STANDARD_COLORS: dict[str, int] = {
    "black": 30,
    "darkred": 31,
    "darkgreen": 32,
    "darkyellow": 33,
    "darkblue": 34,
    "darkmagenta": 35,
    "darkcyan": 36,
    "gray": 37,
    "darkgray": 90,
    "red": 91,
    "green": 92,
    "yellow": 93,
    "blue": 94,
    "magenta": 95,
    "cyan": 96,
    "white": 97,
}

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")
_COLORS_TABLE_RE = re.compile(r"\bColors\s*=\s*\{(?P<body>.*?)\}", re.DOTALL)
_TABLE_ITEM_RE = re.compile(
    r"""(?:\[\s*(?P<qkey>"[^"]*"|'[^']*')\s*\]|(?P<key>[A-Za-z_][A-Za-z0-9_]*))\s*=\s*(?P<value>"[^"]*"|'[^']*')"""
)
_LUA_COMMENT_RE = re.compile(r"--[^\n]*")


def _normalize_color_name(name: str) -> str:
    return name.strip().lower().replace("_", "").replace("-", "").replace(" ", "")


@dataclass(frozen=True)
class Color:
    """A standard palette color or a 24-bit RGB triple."""

    name: str | None = None
    rgb: tuple[int, int, int] | None = None

    @classmethod
    def standard(cls, name: str) -> Color:
        key = _normalize_color_name(name)
        if key not in STANDARD_COLORS:
            raise ValueError(f"unknown color name: {name!r}")
        return cls(name=key)

    @classmethod
    def from_hex(cls, value: str) -> Color:
        match = _HEX_RE.match(value.strip())
        if match is None:
            raise ValueError(f"invalid hex color: {value!r}")
        rgb = int(match.group(1), 16)
        return cls(rgb=((rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF))

    @classmethod
    def parse(cls, value: str) -> Color:
        """Parse ``#RRGGBB`` or a standard color name; raise ``ValueError``."""
        if value.strip().startswith("#"):
            return cls.from_hex(value)
        return cls.standard(value)

    def fg(self) -> str:
        if self.rgb is not None:
            r, g, b = self.rgb
            return f"\033[38;2;{r};{g};{b}m"
        return f"\033[{STANDARD_COLORS.get(self.name or '', 97)}m"

    def bg(self) -> str:
        if self.rgb is not None:
            r, g, b = self.rgb
            return f"\033[48;2;{r};{g};{b}m"
        return f"\033[{STANDARD_COLORS.get(self.name or '', 97) + 10}m"


FALLBACK_COLOR = Color(name="white")

DEFAULT_COLORS: dict[str, Color] = {
    "HeaderPath": Color(name="magenta"),
    "HeaderTitle": Color(name="darkgray"),
    "Border": Color(name="white"),
    "ListSelectedBg": Color(name="darkgray"),
    "ListSelectedFg": Color(name="white"),
    "ListMultiSelectedFg": Color(name="yellow"),
    "ListDirectory": Color(name="blue"),
    "ListExecutable": Color(name="green"),
    "ListDefault": Color(name="gray"),
    "Footer": Color(name="darkgray"),
    "ErrorBg": Color(name="red"),
    "ErrorFg": Color(name="white"),
    "Confirmation": Color(name="yellow"),
}


class Theme:
    """Read-only role -> color lookup with per-role built-in defaults."""

    def __init__(self, overrides: dict[str, Color] | None = None, *, no_color: bool = False) -> None:
        self._colors = dict(DEFAULT_COLORS)
        if overrides:
            for role, color in overrides.items():
                if role in self._colors:
                    self._colors[role] = color
        self.no_color = no_color

    def get_color(self, role: str) -> Color:
        return self._colors.get(role, FALLBACK_COLOR)

    def fg(self, role: str) -> str:
        """Foreground SGR sequence for ``role`` (empty in no-color mode)."""
        if self.no_color:
            return ""
        return self.get_color(role).fg()

    def bg(self, role: str) -> str:
        if self.no_color:
            return ""
        return self.get_color(role).bg()

    @property
    def reset(self) -> str:
        return "" if self.no_color else "\033[0m"

    @property
    def reverse(self) -> str:
        return "\033[7m" if self.no_color else ""

    @property
    def underline(self) -> str:
        return "\033[4m" if self.no_color else ""


def _unquote(token: str) -> str:
    return token[1:-1]


def parse_colors_table(script: str) -> dict[str, Color]:
    """Extract role overrides from the ``Colors`` table of a theme script.

    Unknown roles are dropped and values that do not parse leave the role
    at its default.
    """
    match = _COLORS_TABLE_RE.search(_LUA_COMMENT_RE.sub("", script))
    if match is None:
        return {}

    overrides: dict[str, Color] = {}
    for item in _TABLE_ITEM_RE.finditer(match.group("body")):
        role = _unquote(item.group("qkey")) if item.group("qkey") else item.group("key")
        if role not in DEFAULT_COLORS:
            continue
        try:
            overrides[role] = Color.parse(_unquote(item.group("value")))
        except ValueError:
            logger.debug("theme role %s: unparseable value %s", role, item.group("value"))
    return overrides


def load_theme(script_path: Path | None, *, no_color: bool = False) -> Theme:
    """Load a theme script, degrading silently to defaults on any failure."""
    if no_color:
        return Theme(no_color=True)
    if script_path is None:
        return Theme()
    try:
        script = script_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Theme()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("cannot read theme script %s: %s", script_path, exc)
        return Theme()
    return Theme(parse_colors_table(script))


__all__ = [
    "STANDARD_COLORS",
    "Color",
    "FALLBACK_COLOR",
    "DEFAULT_COLORS",
    "Theme",
    "parse_colors_table",
    "load_theme",
]
