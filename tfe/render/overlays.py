"""Boxed popups drawn onto a ``CellGrid``."""

from __future__ import annotations

from ..ansi import pad_to_width
from .cells import CellGrid


def draw_box(
    grid: CellGrid,
    x: int,
    y: int,
    width: int,
    lines: list[tuple[str, str]],
    *,
    border_style: str,
    title: str = "",
    title_style: str = "",
) -> None:
    """Draw a rounded box whose body rows are ``(text, style)`` pairs."""
    width = max(4, width)
    inner = width - 2
    top = "╭" + "─" * inner + "╮"
    grid.put_text(x, y, top, border_style)
    if title:
        label = f" {title} "
        grid.put_text(x + 2, y, label, title_style or border_style, max_width=inner - 2)
    for offset, (text, style) in enumerate(lines, start=1):
        grid.put_text(x, y + offset, "│", border_style)
        grid.put_text(x + 1, y + offset, pad_to_width(text, inner), style)
        grid.put_text(x + width - 1, y + offset, "│", border_style)
    grid.put_text(x, y + len(lines) + 1, "╰" + "─" * inner + "╯", border_style)
