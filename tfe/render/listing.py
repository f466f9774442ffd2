"""Draw the file listing pane in list, detail, tree, and grid modes."""

from __future__ import annotations

from pathlib import Path

from .. import layout
from ..ansi import pad_to_width, truncate_to_width
from ..file_model.format import file_icon, file_type_label, format_relative_time, format_size
from ..file_model.predicates import is_claude_context
from ..file_model.tree import tree_prefix
from ..file_model.types import FileEntry
from ..ui_theme import UITheme
from .cells import CellGrid

FAVORITE_MARK = "★"
SORT_ARROWS = {True: "↑", False: "↓"}


def entry_style(entry: FileEntry, theme: UITheme) -> str:
    if entry.is_broken_link:
        return theme.broken_link
    if entry.is_symlink:
        return theme.symlink
    if is_claude_context(entry.name):
        return theme.claude_context
    if entry.is_dir:
        return theme.directory
    return theme.file


def entry_label(entry: FileEntry, home: Path | None, favorite: bool) -> str:
    """Icon, name, link target, and favorite star for one row."""
    text = f"{file_icon(entry, home)} {entry.name}"
    if entry.is_dir and not entry.is_parent:
        text += "/"
    if entry.is_symlink and entry.symlink_target:
        text += f" → {entry.symlink_target}"
    if favorite:
        text += f" {FAVORITE_MARK}"
    return text


def _row_style(entry: FileEntry, theme: UITheme, selected: bool) -> str:
    style = entry_style(entry, theme)
    return theme.reverse + style if selected else style


def _put_row(grid: CellGrid, x: int, y: int, width: int, text: str, style: str) -> None:
    grid.put_text(x, y, pad_to_width(truncate_to_width(text, width), width), style, max_width=width)


def _detail_header(grid: CellGrid, rect: layout.Rect, sort_key: str, ascending: bool, theme: UITheme) -> None:
    grid.fill(rect.x, rect.y, rect.width, 1, " ", theme.header)
    for column in layout.detail_columns(rect.width):
        label = column.label
        if column.key == sort_key:
            label += " " + SORT_ARROWS[ascending]
        grid.put_text(rect.x + column.start, rect.y, truncate_to_width(label, column.width), theme.header, max_width=column.width)


def _detail_cells(entry: FileEntry, name: str) -> dict[str, str]:
    if entry.is_parent:
        return {"name": name, "size": "", "modified": "", "type": ""}
    return {
        "name": name,
        "size": "-" if entry.is_dir else format_size(entry.size),
        "modified": format_relative_time(entry.modified) if entry.modified else "",
        "type": file_type_label(entry),
    }


def render_listing(
    grid: CellGrid,
    rect: layout.Rect,
    *,
    items: list[FileEntry],
    cursor: int,
    display_mode: str,
    theme: UITheme,
    home: Path | None = None,
    favorites: set[Path] | frozenset[Path] = frozenset(),
    tree_nodes=None,
    expanded: set[Path] | None = None,
    sort_key: str = "name",
    sort_ascending: bool = True,
    empty_message: str = "(empty)",
) -> layout.ListGeometry:
    """Paint the listing into ``rect`` and return the geometry used for it."""
    geometry = layout.ListGeometry(rect, display_mode, len(items), cursor)
    if display_mode == "detail":
        _detail_header(grid, rect, sort_key, sort_ascending, theme)
    if not items:
        grid.put_text(rect.x + 2, rect.y + geometry.header_rows, empty_message, theme.dim, max_width=rect.width - 2)
        return geometry

    columns = layout.detail_columns(rect.width) if display_mode == "detail" else []
    for index in range(geometry.start, geometry.end):
        position = geometry.item_position(index)
        if position is None:
            continue
        x, y = position
        entry = items[index]
        selected = index == cursor
        style = _row_style(entry, theme, selected)
        label = entry_label(entry, home, entry.path in favorites and not entry.is_parent)

        if display_mode == "grid":
            _put_row(grid, x, y, geometry.cell_width - 1, label, style)
        elif display_mode == "detail":
            cells = _detail_cells(entry, label)
            grid.fill(rect.x, y, rect.width, 1, " ", style)
            for column in columns:
                text = cells[column.key]
                if column.key == "size":
                    text = text.rjust(column.width)
                grid.put_text(rect.x + column.start, y, truncate_to_width(text, column.width), style, max_width=column.width)
        elif display_mode == "tree" and tree_nodes and index < len(tree_nodes):
            node = tree_nodes[index]
            marker = ""
            if entry.is_dir and not entry.is_parent:
                marker = "▾ " if expanded is not None and entry.path in expanded else "▸ "
            prefix = tree_prefix(node)
            grid.put_text(x, y, prefix, theme.dim, max_width=rect.width)
            used = len(prefix)
            _put_row(grid, x + used, y, max(0, rect.width - used), marker + label, style)
        else:
            _put_row(grid, x, y, rect.width, " " + label, style)
    return geometry
