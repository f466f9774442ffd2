"""Dropdown menus, context menus, and dialogs drawn over the frame."""

from __future__ import annotations

from ..dialogs import Dialog, dialog_body, dialog_origin, dialog_width
from ..menus import MenuItem, format_item
from ..ui_theme import UITheme
from .cells import CellGrid
from .overlays import draw_box


def _item_rows(items: list[MenuItem] | tuple[MenuItem, ...], selected: int, inner: int, theme: UITheme) -> list[tuple[str, str]]:
    rows: list[tuple[str, str]] = []
    for index, item in enumerate(items):
        if item.disabled:
            style = theme.menu_disabled
        elif index == selected and item.selectable:
            style = theme.menu_selected
        else:
            style = theme.menu_item
        rows.append((format_item(item, inner), style))
    return rows


def render_item_box(
    grid: CellGrid,
    origin: tuple[int, int],
    inner: int,
    items: list[MenuItem] | tuple[MenuItem, ...],
    selected: int,
    theme: UITheme,
) -> None:
    """Bordered item list whose rows line up with ``menus.box_item_at``."""
    x, y = origin
    draw_box(grid, x, y, inner + 2, _item_rows(items, selected, inner, theme), border_style=theme.border_focused)


def render_dialog(grid: CellGrid, dialog: Dialog, theme: UITheme) -> None:
    width = dialog_width(dialog, grid.width)
    body = dialog_body(dialog, width - 2)
    x, y = dialog_origin(width, len(body) + 2, grid.width, grid.height)
    style = theme.message_error if dialog.is_error else ""
    draw_box(
        grid,
        x,
        y,
        width,
        [(row, style) for row in body],
        border_style=theme.dialog_border,
        title=dialog.title,
        title_style=theme.dialog_title,
    )
