"""Mutable application state shared by input handlers and the renderer."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

from ..dialogs import Dialog
from ..file_model.types import FileEntry, TreeNode
from ..input.command_line import CommandLine
from ..input.mouse import ClickTracker
from ..menus import ContextMenuState, Menu, MenuBarState, MenuContext, build_menus
from ..preview.model import Preview
from ..prompts.render import PromptEditSession

VIEW_MODES = ("single", "dual", "full")
STATUS_MESSAGE_SECONDS = 3.0


@dataclass
class StatusMessage:
    text: str
    is_error: bool = False
    created: float = field(default_factory=time.monotonic)

    def expired(self, now: float, sticky: bool = False) -> bool:
        return not sticky and now - self.created >= STATUS_MESSAGE_SECONDS


@dataclass
class AppState:
    current_dir: Path
    home: Path
    width: int = 80
    height: int = 24
    entries: list[FileEntry] = field(default_factory=list)
    items: list[FileEntry] = field(default_factory=list)
    tree_nodes: list[TreeNode] = field(default_factory=list)
    cursor: int = 0
    listing_error: str | None = None
    view_mode: str = "single"
    focused_pane: str = "left"
    display_mode: str = "list"
    sort_key: str = "name"
    sort_ascending: bool = True
    show_hidden: bool = False
    favorites_only: bool = False
    prompts_only: bool = False
    trash_only: bool = False
    expanded: set[Path] = field(default_factory=set)
    preview: Preview = field(default_factory=Preview.empty)
    prompt_edit: PromptEditSession | None = None
    preview_search_editing: bool = False
    preview_search_buffer: str = ""
    text_selection_mode: bool = False
    previous_view_mode: str = "single"
    search_active: bool = False
    search_query: str = ""
    menu: MenuBarState = field(default_factory=MenuBarState)
    context_menu: ContextMenuState | None = None
    dialog: Dialog | None = None
    command: CommandLine = field(default_factory=CommandLine)
    clicks: ClickTracker = field(default_factory=ClickTracker)
    status: StatusMessage | None = None
    in_git_repo: bool = False
    dirty: bool = True
    quit_requested: bool = False

    @property
    def selected(self) -> FileEntry | None:
        if 0 <= self.cursor < len(self.items):
            return self.items[self.cursor]
        return None

    def set_status(self, text: str, is_error: bool = False) -> None:
        self.status = StatusMessage(text, is_error)
        self.dirty = True

    def clamp_cursor(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.items) - 1)) if self.items else 0

    def index_of(self, path: Path) -> int | None:
        for index, entry in enumerate(self.items):
            if entry.path == path and not entry.is_parent:
                return index
        return None

    def menu_context(self) -> MenuContext:
        return MenuContext(
            display_mode=self.display_mode,
            sort_key=self.sort_key,
            dual_pane=self.view_mode == "dual",
            show_hidden=self.show_hidden,
            prompts_only=self.prompts_only,
            favorites_only=self.favorites_only,
            trash_only=self.trash_only,
            command_focused=self.command.focused,
            in_git_repo=self.in_git_repo,
        )

    def menus(self) -> dict[str, Menu]:
        return build_menus(self.menu_context())
