"""Frame composition.

``render_frame`` reads ``AppState`` and paints every region onto one
``CellGrid``; nothing here mutates state except preview wrap caches.
"""

from __future__ import annotations

from pathlib import Path

from .. import layout
from ..menus import dropdown_origin, dropdown_width
from ..ui_theme import UITheme
from .cells import CellGrid
from .chrome import (
    display_path,
    render_command_line,
    render_menu_bar,
    render_message,
    render_status,
    render_toolbar,
    selection_summary,
)
from .listing import SORT_ARROWS, render_listing
from .popups import render_dialog, render_item_box
from .preview_pane import preview_title, render_preview

FULL_PREVIEW_HINT = "Esc back │ / search │ n/N next/prev │ m select text │ F4 edit │ F5 copy"

__all__ = ["CellGrid", "render_frame"]


def _flags(state) -> str:
    parts = [state.display_mode, f"{state.sort_key}{SORT_ARROWS[state.sort_ascending]}"]
    if state.view_mode == "dual":
        parts.append("focus: preview" if state.focused_pane == "right" else "focus: list")
    if state.show_hidden:
        parts.append("hidden")
    if state.favorites_only:
        parts.append("★ favorites")
    if state.prompts_only:
        parts.append("📝 prompts")
    if state.trash_only:
        parts.append("🚮 trash")
    if state.search_query and not state.search_active:
        parts.append(f"/{state.search_query}")
    return " │ ".join(parts)


def _summary(state) -> str:
    dirs = sum(1 for entry in state.items if entry.is_dir and not entry.is_parent)
    files = sum(1 for entry in state.items if not entry.is_dir)
    where = "Trash" if state.trash_only else display_path(state.current_dir, state.home)
    return f"{where}  {dirs} folders, {files} files"


def _empty_message(state) -> str:
    if state.listing_error:
        return state.listing_error
    if state.trash_only:
        return "Trash is empty"
    if state.search_query:
        return f"No matches for '{state.search_query}'"
    return "(empty)"


def _toolbar_toggles(state) -> set[str]:
    toggled = set()
    if state.favorites_only:
        toggled.add("favorites")
    if state.view_mode == "dual":
        toggled.add("pane")
    if state.command.focused:
        toggled.add("command")
    if state.prompts_only:
        toggled.add("prompts")
    if state.trash_only:
        toggled.add("trash")
    return toggled


def _render_full_preview(grid: CellGrid, state, theme: UITheme, screen: layout.ScreenLayout) -> None:
    rect = screen.preview_rect
    render_preview(grid, rect, state.preview, theme, state.prompt_edit)
    grid.put_text(0, 0, preview_title(state.preview, rect.height, grid.width, state.prompt_edit), theme.menu_bar)
    row = screen.message_row
    if state.preview_search_editing:
        grid.put_text(0, row, f"/{state.preview_search_buffer}█", theme.command_prompt)
    elif state.status is not None:
        render_message(grid, row, theme, state.status.text, state.status.is_error)
    else:
        hint = FULL_PREVIEW_HINT
        if state.preview.kind == "prompt":
            hint += " │ Tab edit prompt"
        grid.put_text(0, row, f" {hint}", theme.status_hint)


def render_frame(state, theme: UITheme, favorites: set[Path] | frozenset[Path] = frozenset()) -> str:
    """Compose the whole screen for ``state`` and return it as one ANSI string."""
    screen = layout.compute_layout(state.width, state.height, state.view_mode, state.focused_pane, state.display_mode)
    grid = CellGrid(screen.width, screen.height)
    if state.view_mode == "full":
        _render_full_preview(grid, state, theme, screen)
        return grid.serialize()

    menus = state.menus()
    render_menu_bar(grid, menus, theme, focused=state.menu.focused, active=state.menu.active)
    render_toolbar(grid, theme, toggled=_toolbar_toggles(state), title=str(state.current_dir))
    render_command_line(
        grid,
        theme,
        location=display_path(state.current_dir, state.home),
        buffer=state.command.buffer,
        cursor=state.command.cursor,
        focused=state.command.focused,
    )

    if screen.list_rect is not None:
        render_listing(
            grid,
            screen.list_rect,
            items=state.items,
            cursor=state.cursor,
            display_mode=state.display_mode,
            theme=theme,
            home=state.home,
            favorites=favorites,
            tree_nodes=state.tree_nodes,
            expanded=state.expanded,
            sort_key=state.sort_key,
            sort_ascending=state.sort_ascending,
            empty_message=_empty_message(state),
        )
    if screen.separator is not None:
        sep = screen.separator
        glyph = "│" if screen.orientation == "horizontal" else "─"
        grid.fill(sep.x, sep.y, sep.width, sep.height, glyph, theme.divider)
    if screen.preview_rect is not None:
        render_preview(grid, screen.preview_rect, state.preview, theme, state.prompt_edit)

    if state.search_active:
        detail, is_error = f"Search: {state.search_query}█", False
    else:
        detail, is_error = selection_summary(state.selected, state.listing_error), bool(state.listing_error)
    render_status(grid, screen, theme, summary=_summary(state), flags=_flags(state), detail=detail, detail_is_error=is_error)
    if state.status is not None:
        render_message(grid, screen.message_row, theme, state.status.text, state.status.is_error)

    if state.menu.open:
        items = menus[state.menu.active].items
        render_item_box(grid, dropdown_origin(menus, state.menu.active), dropdown_width(items), items, state.menu.selected, theme)
    if state.context_menu is not None:
        context = state.context_menu
        render_item_box(grid, (context.x, context.y), dropdown_width(context.items), context.items, context.selected, theme)
    if state.dialog is not None:
        render_dialog(grid, state.dialog, theme)
    return grid.serialize()
