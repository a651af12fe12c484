"""Cursor and scroll-window arithmetic for the list pane.

Pure helpers over ``(selected_index, scroll_offset, count, viewport_height)``.
After each helper the scroll window satisfies::

    scroll_offset <= selected_index < scroll_offset + viewport_height
    0 <= scroll_offset <= max(0, count - viewport_height)
"""

from __future__ import annotations

from .state import NavigationState


def max_scroll_offset(count: int, viewport_height: int) -> int:
    return max(0, count - max(1, viewport_height))


def clamp_index(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


def scroll_to_show(selected_index: int, scroll_offset: int, count: int, viewport_height: int) -> int:
    """Return the offset nearest ``scroll_offset`` that keeps the cursor visible."""
    height = max(1, viewport_height)
    if selected_index < scroll_offset:
        scroll_offset = selected_index
    elif selected_index >= scroll_offset + height:
        scroll_offset = selected_index - height + 1
    return max(0, min(scroll_offset, max_scroll_offset(count, height)))


def clamp_state(state: NavigationState, viewport_height: int) -> None:
    """Re-establish index and window bounds after the entry list changed."""
    count = len(state.entries)
    state.selected_index = clamp_index(state.selected_index, count)
    state.scroll_offset = scroll_to_show(state.selected_index, state.scroll_offset, count, viewport_height)


def move_cursor(state: NavigationState, delta: int, viewport_height: int) -> bool:
    """Move the cursor by ``delta`` rows, stopping at list edges.

    Returns whether the selected index changed.
    """
    previous = state.selected_index
    state.selected_index = clamp_index(state.selected_index + delta, len(state.entries))
    state.scroll_offset = scroll_to_show(
        state.selected_index,
        state.scroll_offset,
        len(state.entries),
        viewport_height,
    )
    return state.selected_index != previous


def jump_to_start(state: NavigationState) -> None:
    state.selected_index = 0
    state.scroll_offset = 0


def jump_to_end(state: NavigationState, viewport_height: int) -> None:
    count = len(state.entries)
    state.selected_index = clamp_index(count - 1, count)
    state.scroll_offset = max_scroll_offset(count, viewport_height)


def select_path(state: NavigationState, full_path: str, viewport_height: int) -> bool:
    """Highlight the entry with ``full_path`` when present in the listing."""
    for idx, entry in enumerate(state.entries):
        if entry.full_path == full_path:
            state.selected_index = idx
            state.scroll_offset = scroll_to_show(idx, state.scroll_offset, len(state.entries), viewport_height)
            return True
    return False


__all__ = [
    "max_scroll_offset",
    "clamp_index",
    "scroll_to_show",
    "clamp_state",
    "move_cursor",
    "jump_to_start",
    "jump_to_end",
    "select_path",
]
