"""Menu bar, dropdowns, and right-click context menus.

Menus are rebuilt from a small ``MenuContext`` snapshot each time they are
drawn or hit-tested, so check marks and disabled items always reflect the
current view. Geometry helpers here are the single source for both the
renderer and mouse handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .ansi import visual_width
from .file_model.predicates import is_browser_file, is_executable_script, is_image_file
from .file_model.types import FileEntry

MENU_ORDER = ("file", "edit", "view", "tools", "help")
MENU_BAR_ROW = 0
DROPDOWN_MIN_WIDTH = 20
CHECK_MARK = "✓ "


@dataclass(frozen=True)
class MenuItem:
    label: str = ""
    action: str = ""
    shortcut: str = ""
    checkable: bool = False
    checked: bool = False
    separator: bool = False
    disabled: bool = False

    @property
    def selectable(self) -> bool:
        return not self.separator and not self.disabled


SEPARATOR = MenuItem(separator=True)


@dataclass(frozen=True)
class Menu:
    key: str
    title: str
    items: tuple[MenuItem, ...]


@dataclass(frozen=True)
class MenuContext:
    """View flags the menus reflect."""

    display_mode: str = "list"
    sort_key: str = "name"
    dual_pane: bool = False
    show_hidden: bool = False
    prompts_only: bool = False
    favorites_only: bool = False
    trash_only: bool = False
    command_focused: bool = False
    in_git_repo: bool = False


def build_menus(ctx: MenuContext) -> dict[str, Menu]:
    no_git = not ctx.in_git_repo
    return {
        "file": Menu(
            "file",
            "File",
            (
                MenuItem("📁 New Folder...", "new-folder", "F7"),
                MenuItem("📄 New File...", "new-file"),
                SEPARATOR,
                MenuItem("📂 Open", "open", "Enter"),
                MenuItem("✏  Edit", "edit", "F4"),
                MenuItem("📋 Copy Path", "copy-path", "F5"),
                SEPARATOR,
                MenuItem("🚪 Exit", "quit", "F10"),
            ),
        ),
        "edit": Menu(
            "edit",
            "Edit",
            (
                MenuItem("✏️  Rename...", "rename", "F2"),
                MenuItem("📋 Copy to...", "copy"),
                MenuItem("🗑️  Delete", "delete", "F8"),
                SEPARATOR,
                MenuItem("⭐ Toggle Favorite", "toggle-favorite", "s"),
            ),
        ),
        "view": Menu(
            "view",
            "View",
            (
                MenuItem("📄 List", "display-list", "1", True, ctx.display_mode == "list"),
                MenuItem("📋 Details", "display-detail", "2", True, ctx.display_mode == "detail"),
                MenuItem("🌳 Tree", "display-tree", "3", True, ctx.display_mode == "tree"),
                MenuItem("🔲 Grid", "display-grid", "4", True, ctx.display_mode == "grid"),
                SEPARATOR,
                MenuItem("Sort by Name", "sort-name", "", True, ctx.sort_key == "name"),
                MenuItem("Sort by Size", "sort-size", "", True, ctx.sort_key == "size"),
                MenuItem("Sort by Modified", "sort-modified", "", True, ctx.sort_key == "modified"),
                MenuItem("Sort by Type", "sort-type", "", True, ctx.sort_key == "type"),
                SEPARATOR,
                MenuItem("⬌ Preview Pane", "toggle-dual-pane", "Tab/Space", True, ctx.dual_pane),
                MenuItem("👁  Full Preview", "full-preview", "F3"),
                MenuItem("👁️  Show Hidden Files", "toggle-hidden", ".", True, ctx.show_hidden),
                SEPARATOR,
                MenuItem("📝 Prompts Library", "toggle-prompts", "F11", True, ctx.prompts_only),
                MenuItem("⭐ Favorites", "toggle-favorites", "F6", True, ctx.favorites_only),
                MenuItem("🗑️  Trash", "toggle-trash", "F12", True, ctx.trash_only),
                SEPARATOR,
                MenuItem("🔄 Refresh", "refresh"),
            ),
        ),
        "tools": Menu(
            "tools",
            "Tools",
            (
                MenuItem(">_ Command Prompt", "toggle-command", ":", True, ctx.command_focused),
                MenuItem("🔍 Search in Folder", "search", "/"),
                MenuItem("🎯 Fuzzy Search", "fuzzy-search", "Ctrl+P"),
                SEPARATOR,
                MenuItem("⬇ Git Pull", "git-pull", disabled=no_git),
                MenuItem("⬆ Git Push", "git-push", disabled=no_git),
                MenuItem("🔄 Git Sync", "git-sync", disabled=no_git),
                MenuItem("📡 Git Fetch", "git-fetch", disabled=no_git),
            ),
        ),
        "help": Menu(
            "help",
            "Help",
            (
                MenuItem("⌨️  Keyboard Shortcuts", "show-hotkeys", "F1"),
                MenuItem("ℹ️  About TFE", "show-about"),
            ),
        ),
    }


def neighbour_menu(current: str, step: int) -> str:
    """Menu key left (``-1``) or right (``+1``) of ``current`` with wrap-around."""
    if current not in MENU_ORDER:
        return MENU_ORDER[0]
    return MENU_ORDER[(MENU_ORDER.index(current) + step) % len(MENU_ORDER)]


def first_selectable(items: tuple[MenuItem, ...] | list[MenuItem]) -> int:
    for index, item in enumerate(items):
        if item.selectable:
            return index
    return 0


def step_selection(items: tuple[MenuItem, ...] | list[MenuItem], index: int, step: int) -> int:
    """Move ``index`` by ``step`` skipping separators and disabled items."""
    if not items:
        return 0
    candidate = index
    for _ in range(len(items)):
        candidate = (candidate + step) % len(items)
        if items[candidate].selectable:
            return candidate
    return index


# Menu bar geometry ------------------------------------------------------------


def title_spans(menus: dict[str, Menu]) -> list[tuple[str, int, int]]:
    """``(key, start, width)`` for each title; titles are padded by one space."""
    spans: list[tuple[str, int, int]] = []
    x = 0
    for key in MENU_ORDER:
        width = visual_width(menus[key].title) + 2
        spans.append((key, x, width))
        x += width + 1
    return spans


def menu_key_at(menus: dict[str, Menu], x: int) -> str | None:
    for key, start, width in title_spans(menus):
        if start <= x < start + width:
            return key
    return None


def item_width(item: MenuItem) -> int:
    if item.separator:
        return 0
    width = visual_width(item.label)
    if item.checkable:
        width += visual_width(CHECK_MARK)
    if item.shortcut:
        width += visual_width(item.shortcut) + 3
    return width


def dropdown_width(items: tuple[MenuItem, ...] | list[MenuItem]) -> int:
    """Inner width of a dropdown: longest item plus two cells of padding each side."""
    longest = max((item_width(item) for item in items), default=0)
    return max(DROPDOWN_MIN_WIDTH, longest + 4)


def dropdown_origin(menus: dict[str, Menu], key: str) -> tuple[int, int]:
    """Top-left cell of the dropdown box under title ``key``."""
    for span_key, start, _width in title_spans(menus):
        if span_key == key:
            return start, MENU_BAR_ROW + 1
    return 0, MENU_BAR_ROW + 1


def box_item_at(origin: tuple[int, int], inner_width: int, count: int, x: int, y: int) -> int | None:
    """Index of the item row under ``(x, y)`` inside a bordered popup."""
    ox, oy = origin
    if not (ox < x < ox + inner_width + 1):
        return None
    row = y - oy - 1
    if 0 <= row < count:
        return row
    return None


def format_item(item: MenuItem, inner_width: int) -> str:
    """One dropdown row: check column, label, right-aligned shortcut."""
    if item.separator:
        return "─" * inner_width
    label = item.label
    if item.checkable:
        label = (CHECK_MARK if item.checked else "  ") + label
    text = "  " + label
    if item.shortcut:
        gap = inner_width - visual_width(text) - visual_width(item.shortcut) - 2
        text = text + " " * max(1, gap) + item.shortcut
    return text


# Context menus ----------------------------------------------------------------


def context_menu_items(entry: FileEntry, *, trash_view: bool, is_favorite: bool) -> list[MenuItem]:
    if trash_view:
        return [
            MenuItem("♻️  Restore", "restore"),
            MenuItem("🗑️  Delete Permanently", "permanent-delete"),
            SEPARATOR,
            MenuItem("🧹 Empty Trash", "empty-trash"),
        ]
    favorite = MenuItem("⭐ Unfavorite", "toggle-favorite") if is_favorite else MenuItem("☆ Add Favorite", "toggle-favorite")
    if entry.is_dir:
        return [
            MenuItem("📂 Open", "open"),
            MenuItem("📂 Quick CD", "quick-cd"),
            MenuItem("📁 New Folder...", "new-folder"),
            MenuItem("📄 New File...", "new-file"),
            MenuItem("📋 Copy Path", "copy-path"),
            SEPARATOR,
            MenuItem("📋 Copy to...", "copy"),
            MenuItem("✏️  Rename...", "rename"),
            MenuItem("🗑️  Delete", "delete"),
            favorite,
        ]
    items = [MenuItem("👁  Preview", "preview")]
    path = Path(entry.path)
    if is_image_file(path) or is_browser_file(path):
        items.append(MenuItem("🌐 Open in Browser", "browser"))
    items.append(MenuItem("✏  Edit", "edit"))
    if is_executable_script(entry):
        items.append(MenuItem("▶️  Run Script", "run-script"))
    items.extend(
        [
            MenuItem("📋 Copy Path", "copy-path"),
            MenuItem("📋 Copy to...", "copy"),
            MenuItem("✏️  Rename...", "rename"),
            MenuItem("🗑️  Delete", "delete"),
            favorite,
        ]
    )
    return items


def context_menu_origin(
    x: int,
    y: int,
    inner_width: int,
    item_count: int,
    screen_width: int,
    screen_height: int,
) -> tuple[int, int]:
    """Place the popup at the click, shifted so the whole box stays on screen."""
    box_width = inner_width + 2
    box_height = item_count + 2
    ox = min(max(2, x), max(0, screen_width - box_width))
    oy = min(max(1, y), max(0, screen_height - box_height))
    return ox, oy


@dataclass
class MenuBarState:
    """Keyboard focus and open dropdown of the menu bar."""

    focused: bool = False
    active: str = MENU_ORDER[0]
    open: bool = False
    selected: int = 0

    def close(self) -> None:
        self.focused = False
        self.open = False
        self.selected = 0


@dataclass
class ContextMenuState:
    entry: FileEntry
    items: list[MenuItem]
    x: int
    y: int
    selected: int = 0
