"""Mouse token parsing and double-click detection."""

from __future__ import annotations

import time
from dataclasses import dataclass

DOUBLE_CLICK_SECONDS = 0.5


@dataclass(frozen=True)
class MouseEvent:
    """Decoded mouse token with 0-based cell coordinates."""

    kind: str
    x: int
    y: int

    @property
    def is_wheel(self) -> bool:
        return self.kind.startswith("WHEEL_")


def _parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


def parse_mouse(key: str) -> MouseEvent | None:
    """Decode ``MOUSE_<KIND>:col:row``; terminal coordinates are 1-based."""
    if not key.startswith("MOUSE_"):
        return None
    col, row = _parse_mouse_col_row(key)
    if col is None or row is None:
        return None
    kind = key.split(":", 1)[0][len("MOUSE_") :]
    return MouseEvent(kind, col - 1, row - 1)


@dataclass
class ClickTracker:
    """Remembers the last left release to recognise double clicks on one item."""

    threshold: float = DOUBLE_CLICK_SECONDS
    last_index: int | None = None
    last_time: float = 0.0

    def register(self, index: int, now: float | None = None) -> bool:
        """Record a click on ``index``; ``True`` when it completes a double click."""
        now = time.monotonic() if now is None else now
        double = self.last_index == index and (now - self.last_time) < self.threshold
        if double:
            self.reset()
        else:
            self.last_index = index
            self.last_time = now
        return double

    def reset(self) -> None:
        self.last_index = None
        self.last_time = 0.0
