"""Fixed two-pane screen geometry.

Rows, top to bottom: path header, top border, column titles, title
separator, ``viewport_height`` list/preview rows, bottom border, footer.
Columns: left border, list cell, divider at ``mid_x``, preview cell, right
border.
"""

from __future__ import annotations

from dataclasses import dataclass

HEADER_ROWS = 4
FOOTER_ROWS = 2


@dataclass(frozen=True)
class Layout:
    width: int
    height: int

    @property
    def mid_x(self) -> int:
        return self.width // 2

    @property
    def viewport_height(self) -> int:
        return max(1, self.height - HEADER_ROWS - FOOTER_ROWS)

    @property
    def list_width(self) -> int:
        return max(0, self.mid_x - 1)

    @property
    def preview_col(self) -> int:
        """0-based column of the first preview cell."""
        return self.mid_x + 1

    @property
    def preview_width(self) -> int:
        return max(0, self.width - self.mid_x - 2)

    @property
    def first_list_row(self) -> int:
        return HEADER_ROWS

    @property
    def bottom_border_row(self) -> int:
        return HEADER_ROWS + self.viewport_height

    @property
    def footer_row(self) -> int:
        return self.bottom_border_row + 1


def compute_layout(width: int, height: int) -> Layout:
    return Layout(width=max(4, width), height=max(HEADER_ROWS + FOOTER_ROWS + 1, height))


def border_row(layout: Layout, left: str, junction: str, right: str) -> str:
    return (
        left
        + "─" * layout.list_width
        + junction
        + "─" * layout.preview_width
        + right
    )


__all__ = [
    "HEADER_ROWS",
    "FOOTER_ROWS",
    "Layout",
    "compute_layout",
    "border_row",
]
