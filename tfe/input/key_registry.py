"""Key-token tables, one per input layer of the dispatcher."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

KeyHandler = Callable[[], Any]


@dataclass(frozen=True)
class KeyComboBinding:
    """Key tokens that all trigger ``handler``."""

    combos: tuple[str, ...]
    handler: KeyHandler


class KeyComboRegistry:
    """Token to handler table; later bindings override earlier ones."""

    def __init__(self) -> None:
        self._handlers: dict[str, KeyHandler] = {}

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            for combo in binding.combos:
                self._handlers[combo] = binding.handler
        return self

    def lookup(self, key: str) -> KeyHandler | None:
        return self._handlers.get(key)
