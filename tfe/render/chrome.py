"""Menu bar, toolbar, command line, and the status/message rows."""

from __future__ import annotations

from pathlib import Path

from .. import layout
from ..ansi import pad_to_width, truncate_to_width, visual_width
from ..file_model.format import file_type_label, format_relative_time, format_size
from ..menus import Menu, title_spans
from ..ui_theme import UITheme
from .cells import CellGrid

TOOLBAR_ICONS = {
    "home": "🏠",
    "favorites": "⭐",
    "display": "🔳",
    "pane": "📑",
    "command": "💻",
    "fuzzy": "🔍",
    "prompts": "📝",
    "trash": "🚮",
}
STATUS_HINT = "F1 help │ F9 menu │ F10 quit"


def display_path(path: Path, home: Path | None) -> str:
    """``path`` with the home directory shortened to ``~``."""
    if home is not None:
        try:
            relative = path.relative_to(home)
        except ValueError:
            return str(path)
        return "~" if str(relative) == "." else f"~/{relative}"
    return str(path)


def build_status_line(left_text: str, width: int, right_text: str = "") -> str:
    """``left_text`` and ``right_text`` pushed to opposite edges of ``width`` cells."""
    right_width = visual_width(right_text)
    if width <= right_width:
        return truncate_to_width(right_text, width)
    left = truncate_to_width(left_text, max(0, width - right_width - 1))
    gap = " " * max(0, width - visual_width(left) - right_width)
    return f"{left}{gap}{right_text}"


def render_menu_bar(grid: CellGrid, menus: dict[str, Menu], theme: UITheme, *, focused: bool, active: str) -> None:
    grid.fill(0, layout.MENU_ROW, grid.width, 1, " ", theme.menu_bar)
    for key, start, width in title_spans(menus):
        style = theme.menu_active if focused and key == active else theme.menu_bar
        grid.put_text(start, layout.MENU_ROW, pad_to_width(f" {menus[key].title}", width), style, max_width=width)


def render_toolbar(grid: CellGrid, theme: UITheme, *, toggled: set[str], title: str) -> None:
    x = 0
    for name in layout.TOOLBAR_BUTTONS:
        style = theme.reverse if name in toggled else theme.toolbar
        cell = pad_to_width(f" {TOOLBAR_ICONS[name]}", layout.TOOLBAR_BUTTON_WIDTH)
        grid.put_text(x, layout.TOOLBAR_ROW, cell, style, max_width=layout.TOOLBAR_BUTTON_WIDTH)
        x += layout.TOOLBAR_BUTTON_WIDTH
    grid.put_text(x + 1, layout.TOOLBAR_ROW, title, theme.title, max_width=max(0, grid.width - x - 1))


def render_command_line(grid: CellGrid, theme: UITheme, *, location: str, buffer: str, cursor: int, focused: bool) -> None:
    y = layout.COMMAND_ROW
    prompt = f"{location} $ "
    used = grid.put_text(0, y, truncate_to_width(prompt, max(1, grid.width // 2)), theme.command_prompt)
    available = max(1, grid.width - used - 1)
    start = max(0, cursor - available + 1)
    visible = buffer[start : start + available]
    grid.put_text(used, y, visible, "", max_width=available)
    if focused:
        col = used + visual_width(buffer[start:cursor])
        under = buffer[cursor] if cursor < len(buffer) else " "
        grid.put_text(col, y, under, theme.reverse, max_width=1)


def selection_summary(entry, listing_error: str | None) -> str:
    if listing_error:
        return listing_error
    if entry is None:
        return ""
    if entry.is_parent:
        return ".. (parent directory)"
    parts = [entry.name, file_type_label(entry)]
    if not entry.is_dir:
        parts.append(format_size(entry.size))
    if entry.modified:
        parts.append(format_relative_time(entry.modified))
    if entry.is_symlink and entry.symlink_target:
        parts.append(f"→ {entry.symlink_target}")
    if entry.trashed_path is not None:
        parts.append(f"from {entry.path.parent}")
    return " · ".join(parts)


def render_status(grid: CellGrid, screen: layout.ScreenLayout, theme: UITheme, *, summary: str, flags: str, detail: str, detail_is_error: bool) -> None:
    first, second = screen.status_rows
    grid.fill(0, first, grid.width, 2, " ", theme.status)
    grid.put_text(0, first, build_status_line(f" {summary}", grid.width, flags + " "), theme.status)
    style = theme.message_error if detail_is_error else theme.status_hint
    grid.put_text(0, second, build_status_line(f" {detail}", grid.width, STATUS_HINT + " "), style)


def render_message(grid: CellGrid, row: int, theme: UITheme, text: str, is_error: bool) -> None:
    if not text:
        return
    style = theme.message_error if is_error else theme.message_info
    grid.put_text(0, row, pad_to_width(truncate_to_width(f" {text}", grid.width), grid.width), style)
