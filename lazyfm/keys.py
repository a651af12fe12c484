"""Key-token dispatch table."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyBinding:
    """One action reachable from one or more key tokens."""

    keys: tuple[str, ...]
    handler: Callable[[], None]


class KeyRegistry:
    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], None]] = {}

    def register(self, *bindings: KeyBinding) -> KeyRegistry:
        """Register bindings; later bindings win for shared keys."""
        for binding in bindings:
            for key in binding.keys:
                self._handlers[key] = binding.handler
        return self

    def dispatch(self, key: str) -> bool:
        """Run the handler bound to ``key``; return whether one existed."""
        handler = self._handlers.get(key)
        if handler is None:
            return False
        handler()
        return True


__all__ = ["KeyBinding", "KeyRegistry"]
