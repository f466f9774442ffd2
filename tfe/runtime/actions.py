"""Explorer operations invoked by key, mouse, menu, and dialog handlers.

Every user-visible operation lives here as a method on ``ExplorerActions``.
Methods mutate ``AppState`` synchronously and return an ``Effect`` when the
operation needs the terminal (editor, shell, fuzzy finder...). Recoverable
errors from the model, services, and stores are turned into status messages;
the loop keeps running.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .. import layout
from ..dialogs import Dialog, confirm_dialog, input_dialog, message_dialog
from ..errors import ClipboardUnavailable, ConfigWriteError, ReadDirError, TrashIoError
from ..file_model.format import format_size
from ..file_model.listing import (
    filter_entries,
    is_root,
    load_directory,
    search_filter,
    sort_entries,
    with_global_prompts,
)
from ..file_model.predicates import PromptDirectoryCache, is_executable_script
from ..file_model.tree import collapse, expand, flatten_tree
from ..file_model.types import SORT_KEYS, FileEntry
from ..menus import ContextMenuState, context_menu_items, context_menu_origin, dropdown_width
from ..preview.model import Preview
from ..prompts.parser import context_variables, lookup_value, render_template
from ..prompts.render import PromptEditSession
from ..services.clipboard import copy_to_clipboard
from ..services.git import find_git_root
from ..storage import config, paths
from ..storage.favorites import FavoritesStore
from ..storage.history import HistoryStore
from ..storage.trash import TrashStore
from . import effects
from .effects import Effect, EffectResult
from .state import AppState

log = logging.getLogger(__name__)

HELP_TEXT = """Navigation: arrows / j k, PgUp PgDn, Home End, Enter open
Left/h parent or collapse, Right/l enter or expand
Space dual pane, Tab switch pane, Esc back out
1 list  2 detail  3 tree  4 grid  . hidden files
/ search listing, : command line, Ctrl+P fuzzy find
s favorite, Ctrl+W collapse tree, right-click menu
F1 help   F2 rename   F3 preview   F4 edit
F5 copy path/prompt   F6 favorites   F7 new folder
F8 delete   F9 menu   F10 quit   F11 prompts   F12 trash
Preview: / search, n N next/prev, m select text, Tab edit prompt"""

ABOUT_TEXT = "TFE - Terminal File Explorer\nBrowse files, preview text, markdown and prompt templates."


class ExplorerActions:
    """Operations bound to one ``AppState`` and its persistent stores."""

    def __init__(
        self,
        state: AppState,
        *,
        theme,
        favorites: FavoritesStore,
        trash: TrashStore,
        history_store: HistoryStore | None = None,
        prompt_dirs: PromptDirectoryCache | None = None,
        persist_preferences: bool = True,
    ) -> None:
        self.state = state
        self.theme = theme
        self.favorites = favorites
        self.trash = trash
        self.history_store = history_store
        self.prompt_dirs = prompt_dirs if prompt_dirs is not None else PromptDirectoryCache(home=state.home)
        self.persist_preferences = persist_preferences

    # Geometry ------------------------------------------------------------

    def screen_layout(self) -> layout.ScreenLayout:
        state = self.state
        return layout.compute_layout(state.width, state.height, state.view_mode, state.focused_pane, state.display_mode)

    def list_geometry(self) -> layout.ListGeometry | None:
        rect = self.screen_layout().list_rect
        if rect is None:
            return None
        return layout.ListGeometry(rect, self.state.display_mode, len(self.state.items), self.state.cursor)

    def preview_viewport(self) -> int:
        rect = self.screen_layout().preview_rect
        return max(1, rect.height) if rect is not None else 1

    def preview_width(self) -> int:
        rect = self.screen_layout().preview_rect
        if rect is None:
            return 1
        return layout.preview_text_width(rect.width, self.state.preview.shows_line_numbers)

    def refresh_preview_lines(self) -> None:
        """Re-wrap the preview for the current pane width and clamp scroll."""
        preview = self.state.preview
        if preview.path is None or self.screen_layout().preview_rect is None:
            return
        preview.wrapped_lines(self.preview_width(), self.theme, self.state.prompt_edit)
        preview.clamp_scroll(self.preview_viewport())

    # Listing -------------------------------------------------------------

    def _load_children(self, directory: Path) -> list[FileEntry]:
        try:
            listing = load_directory(directory, self.state.show_hidden)
        except ReadDirError as exc:
            log.debug("tree child load failed: %s", exc)
            return []
        rows = [entry for entry in listing.entries if not entry.is_parent]
        rows = filter_entries(
            rows,
            prompts_only=self.state.prompts_only,
            prompt_dirs=self.prompt_dirs,
            home=self.state.home,
        )
        return sort_entries(rows, self.state.sort_key, self.state.sort_ascending)

    def _listing_entries(self, directory: Path) -> list[FileEntry]:
        """Filtered, sorted rows for ``directory``; raises ``ReadDirError``."""
        state = self.state
        if state.trash_only:
            state.listing_error = None
            return self.trash.entries()
        listing = load_directory(directory, state.show_hidden)
        state.listing_error = listing.error
        rows = filter_entries(
            listing.entries,
            favorites=self.favorites.favorites,
            favorites_only=state.favorites_only,
            prompts_only=state.prompts_only,
            prompt_dirs=self.prompt_dirs,
            home=state.home,
        )
        rows = sort_entries(rows, state.sort_key, state.sort_ascending)
        if state.prompts_only:
            rows = with_global_prompts(rows, directory, state.home)
        return rows

    def reload(self, preferred: Path | None = None) -> None:
        """Re-read the current directory, keeping the cursor on ``preferred`` or the selection."""
        state = self.state
        if preferred is None and state.selected is not None and not state.selected.is_parent:
            preferred = state.selected.path
        try:
            state.entries = self._listing_entries(state.current_dir)
        except ReadDirError as exc:
            state.entries = []
            state.listing_error = str(exc)
            state.set_status(str(exc), is_error=True)
        self.rebuild_items(preferred)

    def rebuild_items(self, preferred: Path | None = None) -> None:
        state = self.state
        if state.display_mode == "tree" and not state.trash_only:
            nodes = flatten_tree(state.entries, state.expanded, self._load_children)
            if state.search_query:
                keep = {id(entry) for entry in search_filter([node.entry for node in nodes], state.search_query)}
                nodes = [node for node in nodes if id(node.entry) in keep]
            items = [node.entry for node in nodes]
        else:
            nodes = []
            items = search_filter(state.entries, state.search_query)
        state.tree_nodes = nodes
        state.items = items
        index = state.index_of(preferred) if preferred is not None else None
        if index is not None:
            state.cursor = index
        state.clamp_cursor()
        state.dirty = True
        self.sync_preview()

    def change_directory(self, directory: Path, preferred: Path | None = None) -> bool:
        state = self.state
        directory = directory.absolute()
        try:
            entries = self._listing_entries(directory)
        except ReadDirError as exc:
            state.set_status(str(exc), is_error=True)
            return False
        state.current_dir = directory
        state.entries = entries
        state.cursor = 0
        state.search_query = ""
        state.search_active = False
        state.in_git_repo = find_git_root(directory) is not None
        if self.history_store is not None:
            state.command.history = self.history_store.history_for(directory)
        self.rebuild_items(preferred)
        return True

    # Cursor movement -----------------------------------------------------

    def move_cursor(self, delta: int) -> None:
        state = self.state
        if not state.items:
            return
        state.cursor = max(0, min(len(state.items) - 1, state.cursor + delta))
        state.dirty = True
        self.sync_preview()

    def move_vertical(self, direction: int) -> None:
        """Up/Down: one row, which in grid mode is a whole row of cells."""
        geometry = self.list_geometry()
        step = geometry.columns if geometry is not None else 1
        self.move_cursor(direction * step)

    def page(self, direction: int) -> None:
        geometry = self.list_geometry()
        rows = geometry.item_rows if geometry is not None else 10
        cols = geometry.columns if geometry is not None else 1
        self.move_cursor(direction * max(1, rows - 1) * cols)

    def cursor_home(self) -> None:
        self.move_cursor(-len(self.state.items))

    def cursor_end(self) -> None:
        self.move_cursor(len(self.state.items))

    def select_index(self, index: int) -> None:
        if 0 <= index < len(self.state.items) and index != self.state.cursor:
            self.state.cursor = index
            self.state.dirty = True
            self.sync_preview()

    # Opening and tree navigation -------------------------------------------

    def open_entry(self, entry: FileEntry | None = None) -> Effect | None:
        state = self.state
        entry = entry if entry is not None else state.selected
        if entry is None:
            return None
        if state.trash_only:
            return None
        if entry.is_parent:
            self.go_parent()
            return None
        if entry.is_dir:
            self.change_directory(entry.path)
            return None
        self.enter_full_preview(entry)
        return None

    def go_parent(self) -> None:
        state = self.state
        if state.trash_only:
            self.toggle_trash_view()
            return
        if is_root(state.current_dir):
            return
        self.change_directory(state.current_dir.parent, preferred=state.current_dir)

    def go_home(self) -> None:
        self.change_directory(self.state.home)

    def _selected_node(self):
        state = self.state
        if state.tree_nodes and 0 <= state.cursor < len(state.tree_nodes):
            return state.tree_nodes[state.cursor]
        return None

    def left(self) -> None:
        """Collapse the selected tree directory, climb to its parent row, or go up."""
        state = self.state
        node = self._selected_node()
        if state.display_mode == "tree" and node is not None:
            if node.entry.is_dir and node.entry.path in state.expanded:
                collapse(state.expanded, node.entry.path)
                self.rebuild_items(node.entry.path)
                return
            if node.depth > 0:
                parent = node.entry.path.parent
                index = state.index_of(parent)
                if index is not None:
                    self.select_index(index)
                    return
        self.go_parent()

    def right(self) -> None:
        state = self.state
        entry = state.selected
        if entry is None or not entry.is_dir or state.trash_only:
            return
        if entry.is_parent:
            self.go_parent()
            return
        if state.display_mode == "tree":
            if entry.path not in state.expanded:
                expand(state.expanded, entry.path)
                self.rebuild_items(entry.path)
            return
        self.change_directory(entry.path)

    def collapse_all(self) -> None:
        if self.state.expanded:
            self.state.expanded.clear()
            self.rebuild_items()

    # View toggles --------------------------------------------------------

    def toggle_hidden(self) -> None:
        state = self.state
        state.show_hidden = not state.show_hidden
        if self.persist_preferences:
            config.save_show_hidden(state.show_hidden)
        self.reload()
        state.set_status("Showing hidden files" if state.show_hidden else "Hiding hidden files")

    def set_display_mode(self, mode: str) -> None:
        state = self.state
        if mode not in config.DISPLAY_MODES or mode == state.display_mode:
            return
        state.display_mode = mode
        if self.persist_preferences:
            config.save_display_mode(mode)
        self.rebuild_items()
        self.refresh_preview_lines()

    def cycle_display_mode(self) -> None:
        modes = config.DISPLAY_MODES
        self.set_display_mode(modes[(modes.index(self.state.display_mode) + 1) % len(modes)])

    def set_sort(self, key: str) -> None:
        """Sort by ``key``; picking the active key again flips the direction."""
        state = self.state
        if key not in SORT_KEYS:
            return
        if key == state.sort_key:
            state.sort_ascending = not state.sort_ascending
        else:
            state.sort_key = key
            state.sort_ascending = True
        preferred = state.selected.path if state.selected is not None and not state.selected.is_parent else None
        state.entries = sort_entries(state.entries, state.sort_key, state.sort_ascending)
        self.rebuild_items(preferred)

    def toggle_dual_pane(self) -> None:
        state = self.state
        if state.view_mode == "dual":
            state.view_mode = "single"
            state.prompt_edit = None
        else:
            state.view_mode = "dual"
        state.focused_pane = "left"
        state.dirty = True
        self.sync_preview()

    def tab(self) -> None:
        """Tab opens the preview pane, then alternates focus between panes."""
        state = self.state
        if state.view_mode != "dual":
            self.toggle_dual_pane()
            return
        if state.focused_pane == "right" and self.start_prompt_edit():
            return
        state.focused_pane = "right" if state.focused_pane == "left" else "left"
        state.dirty = True
        self.refresh_preview_lines()

    def toggle_favorites_filter(self) -> None:
        state = self.state
        state.favorites_only = not state.favorites_only
        state.trash_only = False
        self.reload()
        state.set_status("Favorites filter on" if state.favorites_only else "Favorites filter off")

    def toggle_prompts_filter(self) -> None:
        state = self.state
        state.prompts_only = not state.prompts_only
        state.trash_only = False
        self.reload()
        state.set_status("Prompts library" if state.prompts_only else "Prompts filter off")

    def toggle_trash_view(self) -> None:
        state = self.state
        state.trash_only = not state.trash_only
        state.cursor = 0
        state.search_query = ""
        self.reload()
        if state.trash_only:
            total = self.trash.total_size()
            state.set_status(f"Trash: {len(state.entries)} items, {format_size(total)}")

    def refresh(self) -> None:
        self.prompt_dirs.clear()
        self.reload()
        self.state.set_status("Refreshed")

    def back_out(self) -> None:
        """Esc in the browser peels off the most recent filter or pane."""
        state = self.state
        if state.search_query:
            state.search_query = ""
            self.rebuild_items()
        elif state.trash_only:
            self.toggle_trash_view()
        elif state.favorites_only:
            self.toggle_favorites_filter()
        elif state.prompts_only:
            self.toggle_prompts_filter()
        elif state.view_mode == "dual":
            self.toggle_dual_pane()

    # In-listing search -----------------------------------------------------

    def start_search(self) -> None:
        self.state.search_active = True
        self.state.search_query = ""
        self.state.dirty = True

    def update_search(self, query: str) -> None:
        self.state.search_query = query
        self.state.cursor = 0
        self.rebuild_items()

    def finish_search(self, keep: bool) -> None:
        state = self.state
        state.search_active = False
        if not keep:
            state.search_query = ""
            self.rebuild_items()
        state.dirty = True

    # Favorites -----------------------------------------------------------

    def toggle_favorite(self, entry: FileEntry | None = None) -> None:
        state = self.state
        entry = entry if entry is not None else state.selected
        if entry is None or entry.is_parent or state.trash_only:
            return
        try:
            added = self.favorites.toggle(entry.path)
        except ConfigWriteError as exc:
            added = self.favorites.is_favorite(entry.path.absolute())
            state.set_status(str(exc), is_error=True)
        else:
            state.set_status(f"{'Added' if added else 'Removed'} favorite: {entry.name}")
        if state.favorites_only:
            self.reload()
        state.dirty = True

    # Preview -------------------------------------------------------------

    def sync_preview(self) -> None:
        """Load the selection into the preview when a preview pane is visible."""
        state = self.state
        if state.view_mode == "single":
            return
        if state.view_mode == "full":
            self.refresh_preview_lines()
            return
        entry = state.selected
        if entry is None or entry.is_dir:
            if state.preview.path is not None:
                state.preview = Preview.empty()
                state.prompt_edit = None
            return
        target = entry.trashed_path if entry.trashed_path is not None else entry.path
        if state.preview.path != target:
            self.load_preview(target)
        else:
            self.refresh_preview_lines()

    def load_preview(self, path: Path) -> None:
        state = self.state
        state.preview = Preview.load(path, state.home)
        state.prompt_edit = None
        state.dirty = True
        self.refresh_preview_lines()
        if state.preview.prompt_error:
            state.set_status(f"Prompt parse error: {state.preview.prompt_error}", is_error=True)

    def enter_full_preview(self, entry: FileEntry | None = None) -> None:
        state = self.state
        entry = entry if entry is not None else state.selected
        if entry is None or entry.is_dir:
            return
        if state.view_mode != "full":
            state.previous_view_mode = state.view_mode
        state.view_mode = "full"
        target = entry.trashed_path if entry.trashed_path is not None else entry.path
        if state.preview.path != target:
            state.preview = Preview.load(target, state.home)
            state.prompt_edit = None
        state.preview.invalidate()
        state.dirty = True
        self.refresh_preview_lines()

    def exit_full_preview(self) -> None:
        state = self.state
        state.view_mode = state.previous_view_mode if state.previous_view_mode != "full" else "single"
        state.text_selection_mode = False
        state.preview_search_editing = False
        state.preview_search_buffer = ""
        state.preview.clear_search()
        state.prompt_edit = None
        state.preview.invalidate()
        state.dirty = True
        self.sync_preview()

    def scroll_preview(self, delta: int) -> None:
        preview = self.state.preview
        self.refresh_preview_lines()
        preview.scroll_by(delta, self.preview_viewport())
        self.state.dirty = True

    def page_preview(self, direction: int) -> None:
        self.refresh_preview_lines()
        if direction > 0:
            self.state.preview.page_down(self.preview_viewport())
        else:
            self.state.preview.page_up(self.preview_viewport())
        self.state.dirty = True

    def preview_home(self) -> None:
        self.state.preview.scroll_home()
        self.state.dirty = True

    def preview_end(self) -> None:
        self.refresh_preview_lines()
        self.state.preview.scroll_end(self.preview_viewport())
        self.state.dirty = True

    def start_preview_search(self) -> None:
        self.state.preview_search_editing = True
        self.state.preview_search_buffer = self.state.preview.search_query
        self.state.dirty = True

    def commit_preview_search(self) -> None:
        state = self.state
        state.preview_search_editing = False
        self.refresh_preview_lines()
        count = state.preview.set_search(state.preview_search_buffer, self.preview_viewport())
        if state.preview_search_buffer:
            if count:
                state.set_status(f"{count} matches for '{state.preview_search_buffer}'")
            else:
                state.set_status(f"No matches for '{state.preview_search_buffer}'", is_error=True)
        state.dirty = True

    def cancel_preview_search(self) -> None:
        self.state.preview_search_editing = False
        self.state.preview_search_buffer = ""
        self.state.preview.clear_search()
        self.state.dirty = True

    def next_preview_match(self, forward: bool = True) -> None:
        preview = self.state.preview
        viewport = self.preview_viewport()
        moved = preview.next_match(viewport) if forward else preview.previous_match(viewport)
        if moved:
            self.state.set_status(f"Match {preview.current_match + 1} of {len(preview.search_matches)}")
        self.state.dirty = True

    def toggle_text_selection(self) -> None:
        state = self.state
        state.text_selection_mode = not state.text_selection_mode
        state.set_status(
            "Text selection mode: mouse released to the terminal (m to exit)"
            if state.text_selection_mode
            else "Mouse enabled"
        )

    # Prompt editing --------------------------------------------------------

    def _prompt_defaults(self) -> dict[str, str]:
        state = self.state
        selected = state.preview.path
        return context_variables(selected, state.current_dir)

    def start_prompt_edit(self) -> bool:
        state = self.state
        template = state.preview.prompt
        if state.preview.kind != "prompt" or template is None or not template.variables:
            return False
        if state.prompt_edit is None:
            state.prompt_edit = PromptEditSession.start(template, self._prompt_defaults())
            state.preview.invalidate()
            state.set_status("Edit mode: Tab/Shift+Tab to navigate, Esc to exit, F5 to copy")
        return True

    def stop_prompt_edit(self) -> None:
        self.state.prompt_edit = None
        self.state.preview.invalidate()
        self.state.set_status("Exited edit mode")

    def edit_prompt(self, operation: str, text: str = "") -> None:
        session = self.state.prompt_edit
        if session is None:
            return
        if operation == "next":
            session.focus_next()
        elif operation == "previous":
            session.focus_previous()
        elif operation == "insert":
            session.insert(text)
        elif operation == "backspace":
            session.backspace()
        elif operation == "clear":
            session.clear_focused()
        self.state.preview.invalidate()
        self.state.dirty = True

    def rendered_prompt(self) -> str | None:
        """Prompt body with context defaults and edited values filled in."""
        state = self.state
        template = state.preview.prompt
        if template is None:
            return None
        defaults = self._prompt_defaults()
        edited = state.prompt_edit.values if state.prompt_edit is not None else {}
        values = {}
        for name in template.variables:
            value = edited.get(name.lower()) or lookup_value(defaults, name)
            if value:
                values[name] = value
        return render_template(template.body, values)

    # Clipboard -------------------------------------------------------------

    def _copy(self, text: str, done: str) -> None:
        try:
            copy_to_clipboard(text)
        except ClipboardUnavailable as exc:
            self.state.set_status(f"Failed to copy to clipboard: {exc}", is_error=True)
            return
        self.state.set_status(done)

    def copy_path(self, entry: FileEntry | None = None) -> None:
        entry = entry if entry is not None else self.state.selected
        if entry is None:
            return
        self._copy(str(entry.path), "Path copied to clipboard")

    def copy_path_or_prompt(self) -> None:
        """F5: a prompt being previewed is copied rendered, anything else by path."""
        state = self.state
        showing_prompt = state.view_mode in ("dual", "full") and state.preview.kind == "prompt"
        if showing_prompt:
            rendered = self.rendered_prompt()
            if rendered is not None:
                self._copy(rendered, "Prompt copied to clipboard")
                return
        self.copy_path()

    # Dialog-driven file operations --------------------------------------------

    def open_dialog(self, dialog: Dialog) -> None:
        self.state.dialog = dialog
        self.state.dirty = True

    def request_rename(self, entry: FileEntry | None = None) -> None:
        entry = entry if entry is not None else self.state.selected
        if entry is None or entry.is_parent or self.state.trash_only:
            return
        self.open_dialog(input_dialog("Rename", "New name:", "rename", entry.path, initial=entry.name))

    def request_new_folder(self, entry: FileEntry | None = None) -> None:
        if self.state.trash_only:
            return
        if entry is not None and entry.is_dir and not entry.is_parent:
            self.change_directory(entry.path)
        self.open_dialog(input_dialog("Create Directory", "Enter directory name:", "new-folder", self.state.current_dir))

    def request_new_file(self, entry: FileEntry | None = None) -> None:
        if self.state.trash_only:
            return
        if entry is not None and entry.is_dir and not entry.is_parent:
            self.change_directory(entry.path)
        self.open_dialog(input_dialog("Create File", "Enter filename:", "new-file", self.state.current_dir))

    def request_copy(self, entry: FileEntry | None = None) -> None:
        entry = entry if entry is not None else self.state.selected
        if entry is None or entry.is_parent or self.state.trash_only:
            return
        self.open_dialog(input_dialog("Copy File", f"Copy '{entry.name}' to:", "copy", entry.path))

    def request_delete(self, entry: FileEntry | None = None) -> None:
        state = self.state
        entry = entry if entry is not None else state.selected
        if entry is None or entry.is_parent:
            return
        if state.trash_only:
            self.open_dialog(
                confirm_dialog(
                    "Permanently Delete",
                    f"Permanently delete '{entry.name}'?\nThis CANNOT be undone!",
                    "permanent-delete",
                    entry.trashed_path,
                )
            )
            return
        self.open_dialog(confirm_dialog("Move to Trash", f"Move '{entry.name}' to trash?", "delete", entry.path))

    def request_empty_trash(self) -> None:
        self.open_dialog(
            confirm_dialog("Empty Trash", "Permanently delete ALL items in trash?\nThis CANNOT be undone!", "empty-trash")
        )

    def show_help(self) -> None:
        self.open_dialog(message_dialog("Keyboard Shortcuts", HELP_TEXT))

    def show_about(self) -> None:
        self.open_dialog(message_dialog("About TFE", ABOUT_TEXT))

    def resolve_dialog(self, dialog: Dialog, confirmed: bool) -> None:
        state = self.state
        state.dialog = None
        state.dirty = True
        if not confirmed:
            return
        handler = {
            "rename": self._do_rename,
            "new-folder": self._do_new_folder,
            "new-file": self._do_new_file,
            "copy": self._do_copy,
            "delete": self._do_trash,
            "permanent-delete": self._do_permanent_delete,
            "empty-trash": self._do_empty_trash,
        }.get(dialog.action)
        if handler is not None:
            handler(dialog)

    @staticmethod
    def _valid_name(name: str) -> bool:
        return bool(name) and name not in (".", "..") and "/" not in name and "\x00" not in name

    def _do_rename(self, dialog: Dialog) -> None:
        state = self.state
        name = dialog.buffer.strip()
        target = dialog.target
        if target is None or not self._valid_name(name):
            state.set_status("Invalid name", is_error=True)
            return
        destination = target.with_name(name)
        if destination == target:
            return
        if destination.exists():
            state.set_status(f"'{name}' already exists", is_error=True)
            return
        try:
            target.rename(destination)
        except OSError as exc:
            state.set_status(f"Rename failed: {exc.strerror or exc}", is_error=True)
            return
        if target in self.favorites.favorites:
            self.favorites.favorites.discard(target)
            self.favorites.favorites.add(destination)
            try:
                self.favorites.save()
            except ConfigWriteError as exc:
                log.debug("favorite rename not persisted: %s", exc)
        self.reload(destination)
        state.set_status(f"Renamed to {name}")

    def _do_new_folder(self, dialog: Dialog) -> None:
        state = self.state
        name = dialog.buffer.strip()
        if not self._valid_name(name):
            state.set_status("Invalid folder name", is_error=True)
            return
        path = state.current_dir / name
        try:
            path.mkdir()
        except FileExistsError:
            state.set_status(f"'{name}' already exists", is_error=True)
            return
        except OSError as exc:
            state.set_status(f"Failed to create folder: {exc.strerror or exc}", is_error=True)
            return
        self.reload(path)
        state.set_status(f"Created folder: {name}")

    def _do_new_file(self, dialog: Dialog) -> None:
        state = self.state
        name = dialog.buffer.strip()
        if not self._valid_name(name):
            state.set_status("Invalid file name", is_error=True)
            return
        path = state.current_dir / name
        try:
            with path.open("x", encoding="utf-8"):
                pass
        except FileExistsError:
            state.set_status(f"'{name}' already exists", is_error=True)
            return
        except OSError as exc:
            state.set_status(f"Failed to create file: {exc.strerror or exc}", is_error=True)
            return
        self.reload(path)
        state.set_status(f"Created file: {name}")

    def _do_copy(self, dialog: Dialog) -> None:
        state = self.state
        source = dialog.target
        raw = dialog.buffer.strip()
        if source is None or not raw:
            return
        destination = Path(raw).expanduser()
        if not destination.is_absolute():
            destination = state.current_dir / destination
        if destination.is_dir():
            destination = destination / source.name
        if destination.exists():
            state.set_status(f"Destination exists: {destination}", is_error=True)
            return
        try:
            if source.is_dir() and not source.is_symlink():
                shutil.copytree(source, destination, symlinks=True)
            else:
                shutil.copy2(source, destination, follow_symlinks=False)
        except OSError as exc:
            state.set_status(f"Copy failed: {exc.strerror or exc}", is_error=True)
            return
        self.reload()
        state.set_status(f"Copied to {destination}")

    def _do_trash(self, dialog: Dialog) -> None:
        state = self.state
        if dialog.target is None:
            return
        try:
            self.trash.move_to_trash(dialog.target)
        except TrashIoError as exc:
            state.set_status(str(exc), is_error=True)
            return
        self.reload()
        state.set_status(f"Moved to trash: {dialog.target.name}")

    def _do_permanent_delete(self, dialog: Dialog) -> None:
        state = self.state
        if dialog.target is None:
            return
        try:
            self.trash.permanently_delete(dialog.target)
        except TrashIoError as exc:
            state.set_status(str(exc), is_error=True)
            return
        self.reload()
        state.set_status("Permanently deleted")

    def _do_empty_trash(self, dialog: Dialog) -> None:
        state = self.state
        try:
            removed = self.trash.empty()
        except TrashIoError as exc:
            state.set_status(str(exc), is_error=True)
            return
        self.reload()
        state.set_status(f"Emptied trash ({removed} items)")

    def restore_from_trash(self, entry: FileEntry | None = None) -> None:
        state = self.state
        entry = entry if entry is not None else state.selected
        if entry is None or entry.trashed_path is None:
            return
        try:
            restored = self.trash.restore(entry.trashed_path)
        except TrashIoError as exc:
            state.set_status(f"Failed to restore: {exc}", is_error=True)
            return
        self.reload()
        state.set_status(f"Restored {restored}")

    # Quick CD ----------------------------------------------------------------

    def quick_cd(self, entry: FileEntry | None = None) -> None:
        """Record a directory for the wrapping shell to ``cd`` into, then quit."""
        state = self.state
        entry = entry if entry is not None else state.selected
        target = entry.path if entry is not None and entry.is_dir else state.current_dir
        try:
            paths.CD_TARGET_PATH.write_text(str(target), encoding="utf-8")
        except OSError as exc:
            state.set_status(f"Failed to save directory for quick CD: {exc.strerror or exc}", is_error=True)
            return
        state.quit_requested = True

    # Effects -----------------------------------------------------------------

    def edit_selected(self, entry: FileEntry | None = None) -> Effect | None:
        state = self.state
        if state.view_mode == "full" and state.preview.path is not None and entry is None:
            return effects.edit_file(state.preview.path)
        entry = entry if entry is not None else state.selected
        if entry is None or entry.is_dir or state.trash_only:
            return None
        return effects.edit_file(entry.path)

    def run_script(self, entry: FileEntry | None = None) -> Effect | None:
        entry = entry if entry is not None else self.state.selected
        if entry is None or not is_executable_script(entry):
            return None
        return effects.run_script(entry.path)

    def open_in_browser(self, entry: FileEntry | None = None) -> Effect | None:
        entry = entry if entry is not None else self.state.selected
        if entry is None or entry.is_dir:
            return None
        return effects.open_browser(entry.path)

    def fuzzy_search(self) -> Effect:
        state = self.state
        root = find_git_root(state.current_dir) or state.current_dir
        return effects.fuzzy_search(root)

    def git_operation(self, operation: str) -> Effect | None:
        repo = find_git_root(self.state.current_dir)
        if repo is None:
            self.state.set_status("Not a git repository", is_error=True)
            return None
        return effects.git_operation(operation, repo)

    def run_command_line(self) -> Effect | None:
        state = self.state
        typed = state.command.buffer
        request = state.command.submit()
        if self.history_store is not None and request.kind in ("run", "run_and_exit"):
            self.history_store.record(typed, state.current_dir)
            try:
                self.history_store.save()
            except ConfigWriteError as exc:
                log.debug("history not saved: %s", exc)
        state.dirty = True
        if request.kind == "quit":
            state.quit_requested = True
            return None
        if request.kind == "empty":
            return None
        return effects.run_shell(request.command, state.current_dir, exit_after=request.kind == "run_and_exit")

    def quit(self) -> None:
        self.state.quit_requested = True

    def finish_effect(self, result: EffectResult) -> None:
        """Subprocess-finished event: report, reload, and follow up on the result."""
        state = self.state
        effect = result.effect
        state.dirty = True
        if result.error:
            state.set_status(result.error, is_error=True)
            return
        if effect.exit_after:
            state.quit_requested = True
            return
        if effect.kind == "fuzzy":
            if result.selected is not None:
                self.reveal(result.selected)
            return
        if effect.kind == "browser":
            state.set_status(f"Opened {effect.path.name if effect.path else ''} in browser")
            return
        self.reload()
        if state.preview.path is not None:
            state.preview = Preview.load(state.preview.path, state.home)
            state.prompt_edit = None
            self.refresh_preview_lines()
        if effect.kind == "git":
            if result.exit_code == 0:
                state.set_status(f"Git {effect.operation} completed")
            else:
                state.set_status(f"Git {effect.operation} failed (exit {result.exit_code})", is_error=True)
        elif result.exit_code not in (None, 0) and effect.kind != "editor":
            state.set_status(f"Command exited with code {result.exit_code}", is_error=True)

    def reveal(self, path: Path) -> None:
        """Navigate to ``path``'s directory and put the cursor on it."""
        state = self.state
        state.trash_only = False
        state.favorites_only = False
        state.prompts_only = False
        if not self.change_directory(path.parent, preferred=path):
            return
        if state.index_of(path) is None:
            state.set_status(f"{path.name} is hidden by the current filters")

    # Context menu --------------------------------------------------------------

    def open_context_menu(self, index: int, x: int, y: int) -> None:
        state = self.state
        if not 0 <= index < len(state.items):
            return
        entry = state.items[index]
        if entry.is_parent:
            return
        self.select_index(index)
        items = context_menu_items(
            entry,
            trash_view=state.trash_only,
            is_favorite=self.favorites.is_favorite(entry.path.absolute()),
        )
        ox, oy = context_menu_origin(x, y, dropdown_width(items), len(items), state.width, state.height)
        state.context_menu = ContextMenuState(entry=entry, items=items, x=ox, y=oy)
        state.menu.close()
        state.dirty = True

    def close_context_menu(self) -> None:
        self.state.context_menu = None
        self.state.dirty = True

    # Menu and context-menu action table -------------------------------------

    def run_action(self, action: str, entry: FileEntry | None = None) -> Effect | None:
        """Execute a menu action; ``entry`` is the context-menu target when given."""
        state = self.state
        simple = {
            "new-folder": lambda: self.request_new_folder(entry),
            "new-file": lambda: self.request_new_file(entry),
            "copy-path": lambda: self.copy_path(entry),
            "copy": lambda: self.request_copy(entry),
            "rename": lambda: self.request_rename(entry),
            "delete": lambda: self.request_delete(entry),
            "permanent-delete": lambda: self.request_delete(entry),
            "empty-trash": self.request_empty_trash,
            "restore": lambda: self.restore_from_trash(entry),
            "toggle-favorite": lambda: self.toggle_favorite(entry),
            "quick-cd": lambda: self.quick_cd(entry),
            "preview": lambda: self.enter_full_preview(entry),
            "full-preview": lambda: self.enter_full_preview(entry),
            "toggle-dual-pane": self.toggle_dual_pane,
            "toggle-hidden": self.toggle_hidden,
            "toggle-prompts": self.toggle_prompts_filter,
            "toggle-favorites": self.toggle_favorites_filter,
            "toggle-trash": self.toggle_trash_view,
            "refresh": self.refresh,
            "search": self.start_search,
            "show-hotkeys": self.show_help,
            "show-about": self.show_about,
            "quit": self.quit,
        }
        if action in simple:
            simple[action]()
            return None
        if action == "open":
            return self.open_entry(entry)
        if action == "edit":
            return self.edit_selected(entry)
        if action == "browser":
            return self.open_in_browser(entry)
        if action == "run-script":
            return self.run_script(entry)
        if action == "fuzzy-search":
            return self.fuzzy_search()
        if action == "toggle-command":
            state.command.focused = not state.command.focused
            state.dirty = True
            return None
        if action.startswith("display-"):
            self.set_display_mode(action[len("display-") :])
            return None
        if action.startswith("sort-"):
            self.set_sort(action[len("sort-") :])
            return None
        if action.startswith("git-"):
            return self.git_operation(action[len("git-") :])
        log.debug("unknown menu action %s", action)
        return None
