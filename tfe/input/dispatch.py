"""Route key and mouse tokens to explorer actions.

Layers are consulted in modal order: prompt edit, full preview, dialog,
context menu, menu bar, command line, in-listing search, a focused preview
pane, then the browser bindings. A layer either consumes the key or lets it
fall through.
"""

from __future__ import annotations

from .. import layout
from ..dialogs import CONFIRMED
from ..menus import (
    MENU_ORDER,
    box_item_at,
    dropdown_origin,
    dropdown_width,
    first_selectable,
    menu_key_at,
    neighbour_menu,
    step_selection,
)
from ..preview.model import WHEEL_SCROLL_LINES
from .command_line import insertable_text, is_paste, strip_paste_markers
from .key_registry import KeyComboBinding, KeyComboRegistry
from .mouse import MouseEvent, parse_mouse

_UNHANDLED = object()


def _lookup(registry: KeyComboRegistry, key: str):
    handler = registry.lookup(key)
    if handler is None:
        return _UNHANDLED
    return handler()


class KeyDispatcher:
    """Translate one input token into an action call and maybe an ``Effect``."""

    def __init__(self, actions) -> None:
        self.actions = actions
        self.state = actions.state
        a = actions

        self._prompt_edit_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("ESC",), a.stop_prompt_edit),
            KeyComboBinding(("TAB",), lambda: a.edit_prompt("next")),
            KeyComboBinding(("SHIFT_TAB",), lambda: a.edit_prompt("previous")),
            KeyComboBinding(("BACKSPACE",), lambda: a.edit_prompt("backspace")),
            KeyComboBinding(("CTRL_U",), lambda: a.edit_prompt("clear")),
            KeyComboBinding(("F5",), a.copy_path_or_prompt),
            KeyComboBinding(("F10",), a.quit),
            KeyComboBinding(("UP",), lambda: a.scroll_preview(-1)),
            KeyComboBinding(("DOWN",), lambda: a.scroll_preview(1)),
            KeyComboBinding(("PAGE_UP",), lambda: a.page_preview(-1)),
            KeyComboBinding(("PAGE_DOWN",), lambda: a.page_preview(1)),
        )

        self._preview_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("ESC", "F3", "q"), a.exit_full_preview),
            KeyComboBinding(("UP", "k"), lambda: a.scroll_preview(-1)),
            KeyComboBinding(("DOWN", "j"), lambda: a.scroll_preview(1)),
            KeyComboBinding(("PAGE_UP", "b"), lambda: a.page_preview(-1)),
            KeyComboBinding(("PAGE_DOWN", " "), lambda: a.page_preview(1)),
            KeyComboBinding(("HOME", "g"), a.preview_home),
            KeyComboBinding(("END", "G"), a.preview_end),
            KeyComboBinding(("/",), a.start_preview_search),
            KeyComboBinding(("n",), lambda: a.next_preview_match(True)),
            KeyComboBinding(("N",), lambda: a.next_preview_match(False)),
            KeyComboBinding(("m",), a.toggle_text_selection),
            KeyComboBinding(("TAB",), a.start_prompt_edit),
            KeyComboBinding(("F4",), a.edit_selected),
            KeyComboBinding(("F5",), a.copy_path_or_prompt),
            KeyComboBinding(("F10",), a.quit),
        )

        self._context_menu_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("ESC",), a.close_context_menu),
            KeyComboBinding(("UP", "k"), lambda: self._step_context_menu(-1)),
            KeyComboBinding(("DOWN", "j"), lambda: self._step_context_menu(1)),
            KeyComboBinding(("ENTER",), self._activate_context_menu),
        )

        self._menu_bar_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("ESC", "F9"), self.close_menu),
            KeyComboBinding(("LEFT",), lambda: self._switch_menu(-1)),
            KeyComboBinding(("RIGHT",), lambda: self._switch_menu(1)),
            KeyComboBinding(("UP",), lambda: self._step_menu(-1)),
            KeyComboBinding(("DOWN",), lambda: self._step_menu(1)),
            KeyComboBinding(("ENTER",), self._activate_menu),
            KeyComboBinding(("F10",), a.quit),
        )

        command = self.state.command
        self._command_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("ENTER",), a.run_command_line),
            KeyComboBinding(("ESC",), command.clear),
            KeyComboBinding(("BACKSPACE",), command.backspace),
            KeyComboBinding(("DELETE",), command.delete),
            KeyComboBinding(("LEFT",), lambda: command.move(-1)),
            KeyComboBinding(("RIGHT",), lambda: command.move(1)),
            KeyComboBinding(("HOME", "CTRL_A"), command.home),
            KeyComboBinding(("END", "CTRL_E"), command.end),
            KeyComboBinding(("CTRL_U",), command.kill_to_start),
            KeyComboBinding(("CTRL_K",), command.kill_to_end),
            KeyComboBinding(("UP",), command.history_previous),
            KeyComboBinding(("DOWN",), command.history_next),
        )

        self._search_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("ESC",), lambda: a.finish_search(keep=False)),
            KeyComboBinding(("ENTER",), lambda: a.finish_search(keep=True)),
            KeyComboBinding(("BACKSPACE",), lambda: a.update_search(self.state.search_query[:-1])),
        )

        self._preview_pane_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("UP", "k"), lambda: a.scroll_preview(-1)),
            KeyComboBinding(("DOWN", "j"), lambda: a.scroll_preview(1)),
            KeyComboBinding(("PAGE_UP",), lambda: a.page_preview(-1)),
            KeyComboBinding(("PAGE_DOWN",), lambda: a.page_preview(1)),
            KeyComboBinding(("HOME",), a.preview_home),
            KeyComboBinding(("END",), a.preview_end),
        )

        self._browser_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("UP", "k"), lambda: a.move_vertical(-1)),
            KeyComboBinding(("DOWN", "j"), lambda: a.move_vertical(1)),
            KeyComboBinding(("PAGE_UP",), lambda: a.page(-1)),
            KeyComboBinding(("PAGE_DOWN",), lambda: a.page(1)),
            KeyComboBinding(("HOME",), a.cursor_home),
            KeyComboBinding(("END",), a.cursor_end),
            KeyComboBinding(("ENTER",), a.open_entry),
            KeyComboBinding(("LEFT", "h"), a.left),
            KeyComboBinding(("RIGHT", "l"), a.right),
            KeyComboBinding(("BACKSPACE",), a.go_parent),
            KeyComboBinding((" ",), a.toggle_dual_pane),
            KeyComboBinding(("TAB",), a.tab),
            KeyComboBinding((".",), a.toggle_hidden),
            KeyComboBinding(("1",), lambda: a.set_display_mode("list")),
            KeyComboBinding(("2",), lambda: a.set_display_mode("detail")),
            KeyComboBinding(("3",), lambda: a.set_display_mode("tree")),
            KeyComboBinding(("4",), lambda: a.set_display_mode("grid")),
            KeyComboBinding(("/",), a.start_search),
            KeyComboBinding((":",), self.focus_command),
            KeyComboBinding(("CTRL_P",), a.fuzzy_search),
            KeyComboBinding(("s",), a.toggle_favorite),
            KeyComboBinding(("CTRL_W",), a.collapse_all),
            KeyComboBinding(("ESC",), a.back_out),
            KeyComboBinding(("F1",), a.show_help),
            KeyComboBinding(("F2",), a.request_rename),
            KeyComboBinding(("F3",), a.enter_full_preview),
            KeyComboBinding(("F4",), a.edit_selected),
            KeyComboBinding(("F5",), a.copy_path_or_prompt),
            KeyComboBinding(("F6",), a.toggle_favorites_filter),
            KeyComboBinding(("F7",), a.request_new_folder),
            KeyComboBinding(("F8",), a.request_delete),
            KeyComboBinding(("F9",), self.open_menu),
            KeyComboBinding(("F10",), a.quit),
            KeyComboBinding(("F11",), a.toggle_prompts_filter),
            KeyComboBinding(("F12",), a.toggle_trash_view),
        )

    # Entry point ----------------------------------------------------------

    def handle(self, key: str):
        """Process one token; return an ``Effect`` for the loop to run, or ``None``."""
        state = self.state
        state.dirty = True
        if key == "CTRL_C" and state.dialog is None:
            self.actions.quit()
            return None
        event = parse_mouse(key)
        if event is not None:
            return self.handle_mouse(event)
        if key.startswith("MOUSE_"):
            return None
        for layer in (
            self._prompt_edit_layer,
            self._full_preview_layer,
            self._dialog_layer,
            self._context_menu_layer,
            self._menu_bar_layer,
            self._command_layer,
            self._search_layer,
            self._preview_pane_layer,
        ):
            result = layer(key)
            if result is not _UNHANDLED:
                return result
        result = _lookup(self._browser_keys, key)
        return None if result is _UNHANDLED else result

    # Keyboard layers ------------------------------------------------------

    def _prompt_edit_layer(self, key: str):
        if self.state.prompt_edit is None:
            return _UNHANDLED
        result = _lookup(self._prompt_edit_keys, key)
        if result is not _UNHANDLED:
            return result
        if is_paste(key):
            text = strip_paste_markers(key).replace("\r\n", "\n").replace("\r", "\n")
            if text:
                self.actions.edit_prompt("insert", text)
            return None
        text = insertable_text(key)
        if text:
            self.actions.edit_prompt("insert", text)
        return None

    def _full_preview_layer(self, key: str):
        state = self.state
        if state.view_mode != "full":
            return _UNHANDLED
        if state.preview_search_editing:
            if key == "ENTER":
                self.actions.commit_preview_search()
            elif key == "ESC":
                self.actions.cancel_preview_search()
            elif key == "BACKSPACE":
                state.preview_search_buffer = state.preview_search_buffer[:-1]
            else:
                text = insertable_text(key)
                if text:
                    state.preview_search_buffer += text
            return None
        result = _lookup(self._preview_keys, key)
        return None if result is _UNHANDLED else result

    def _dialog_layer(self, key: str):
        dialog = self.state.dialog
        if dialog is None:
            return _UNHANDLED
        outcome = dialog.handle_key(key)
        if outcome is not None:
            self.actions.resolve_dialog(dialog, outcome == CONFIRMED)
        return None

    def _context_menu_layer(self, key: str):
        if self.state.context_menu is None:
            return _UNHANDLED
        result = _lookup(self._context_menu_keys, key)
        return None if result is _UNHANDLED else result

    def _menu_bar_layer(self, key: str):
        if not self.state.menu.focused:
            return _UNHANDLED
        result = _lookup(self._menu_bar_keys, key)
        return None if result is _UNHANDLED else result

    def _command_layer(self, key: str):
        command = self.state.command
        if not command.active:
            return _UNHANDLED
        result = _lookup(self._command_keys, key)
        if result is not _UNHANDLED:
            return result
        text = insertable_text(key)
        if text:
            command.insert(text)
            return None
        return _UNHANDLED

    def _search_layer(self, key: str):
        state = self.state
        if not state.search_active:
            return _UNHANDLED
        result = _lookup(self._search_keys, key)
        if result is not _UNHANDLED:
            return result
        text = insertable_text(key)
        if text:
            self.actions.update_search(state.search_query + text)
            return None
        return _UNHANDLED

    def _preview_pane_layer(self, key: str):
        state = self.state
        if state.view_mode != "dual" or state.focused_pane != "right":
            return _UNHANDLED
        return _lookup(self._preview_pane_keys, key)

    # Browser helpers --------------------------------------------------------

    def focus_command(self) -> None:
        self.state.command.focused = True

    # Menu bar ---------------------------------------------------------------

    def open_menu(self, key: str | None = None) -> None:
        menu = self.state.menu
        menus = self.state.menus()
        menu.focused = True
        menu.open = True
        menu.active = key if key in menus else MENU_ORDER[0]
        menu.selected = first_selectable(menus[menu.active].items)
        self.state.context_menu = None

    def close_menu(self) -> None:
        self.state.menu.close()

    def _switch_menu(self, step: int) -> None:
        menu = self.state.menu
        menu.active = neighbour_menu(menu.active, step)
        menu.selected = first_selectable(self.state.menus()[menu.active].items)

    def _step_menu(self, step: int) -> None:
        menu = self.state.menu
        items = self.state.menus()[menu.active].items
        if not menu.open:
            menu.open = True
            menu.selected = first_selectable(items)
            return
        menu.selected = step_selection(items, menu.selected, step)

    def _activate_menu(self):
        menu = self.state.menu
        if not menu.open:
            self._step_menu(1)
            return None
        items = self.state.menus()[menu.active].items
        if not 0 <= menu.selected < len(items) or not items[menu.selected].selectable:
            return None
        action = items[menu.selected].action
        self.close_menu()
        return self.actions.run_action(action)

    # Context menu -----------------------------------------------------------

    def _step_context_menu(self, step: int) -> None:
        context = self.state.context_menu
        context.selected = step_selection(context.items, context.selected, step)

    def _activate_context_menu(self, index: int | None = None):
        context = self.state.context_menu
        index = context.selected if index is None else index
        if not 0 <= index < len(context.items) or not context.items[index].selectable:
            return None
        self.actions.close_context_menu()
        return self.actions.run_action(context.items[index].action, context.entry)

    # Mouse ------------------------------------------------------------------

    def handle_mouse(self, event: MouseEvent):
        state = self.state
        if state.dialog is not None:
            return None
        if state.view_mode == "full":
            if event.kind == "WHEEL_UP":
                self.actions.scroll_preview(-WHEEL_SCROLL_LINES)
            elif event.kind == "WHEEL_DOWN":
                self.actions.scroll_preview(WHEEL_SCROLL_LINES)
            return None
        if event.kind in ("LEFT_UP", "RIGHT_UP"):
            popup = self._popup_click(event)
            if popup is not _UNHANDLED:
                return popup
        if event.is_wheel:
            return self._wheel(event)
        if event.kind == "LEFT_UP":
            return self._left_click(event)
        if event.kind == "RIGHT_UP":
            geometry = self.actions.list_geometry()
            index = geometry.index_at(event.x, event.y) if geometry is not None else None
            if index is not None:
                self.actions.open_context_menu(index, event.x, event.y)
        return None

    def _popup_click(self, event: MouseEvent):
        """Clicks aimed at an open dropdown or context menu; outside clicks close it."""
        state = self.state
        context = state.context_menu
        if context is not None:
            index = box_item_at((context.x, context.y), dropdown_width(context.items), len(context.items), event.x, event.y)
            if index is not None and event.kind == "LEFT_UP":
                return self._activate_context_menu(index)
            self.actions.close_context_menu()
            return None
        menu = state.menu
        if menu.open:
            menus = state.menus()
            items = menus[menu.active].items
            index = box_item_at(dropdown_origin(menus, menu.active), dropdown_width(items), len(items), event.x, event.y)
            if index is not None and event.kind == "LEFT_UP":
                if not items[index].selectable:
                    return None
                self.close_menu()
                return self.actions.run_action(items[index].action)
            if event.y != layout.MENU_ROW:
                self.close_menu()
                return None
        return _UNHANDLED

    def _wheel(self, event: MouseEvent):
        if event.kind not in ("WHEEL_UP", "WHEEL_DOWN"):
            return None
        direction = -1 if event.kind == "WHEEL_UP" else 1
        screen = self.actions.screen_layout()
        if screen.preview_rect is not None and screen.preview_rect.contains(event.x, event.y):
            self.actions.scroll_preview(direction * WHEEL_SCROLL_LINES)
        else:
            self.actions.move_cursor(direction)
        return None

    def _left_click(self, event: MouseEvent):
        state = self.state
        actions = self.actions
        if event.y == layout.MENU_ROW:
            key = menu_key_at(state.menus(), event.x)
            if key is None:
                self.close_menu()
            elif state.menu.open and state.menu.active == key:
                self.close_menu()
            else:
                self.open_menu(key)
            return None
        if event.y == layout.TOOLBAR_ROW:
            return self._toolbar(layout.toolbar_button_at(event.x, event.y))
        if event.y == layout.COMMAND_ROW:
            self.focus_command()
            return None

        screen = actions.screen_layout()
        if screen.preview_rect is not None and screen.preview_rect.contains(event.x, event.y):
            if state.focused_pane != "right":
                state.focused_pane = "right"
                actions.refresh_preview_lines()
            return None
        geometry = actions.list_geometry()
        if geometry is None:
            return None
        header_key = geometry.header_key_at(event.x, event.y)
        if header_key is not None:
            actions.set_sort(header_key)
            return None
        index = geometry.index_at(event.x, event.y)
        if index is None:
            return None
        if state.view_mode == "dual" and state.focused_pane != "left":
            state.focused_pane = "left"
        actions.select_index(index)
        if state.clicks.register(index):
            return actions.open_entry()
        return None

    def _toolbar(self, button: str | None):
        actions = self.actions
        if button == "home":
            actions.go_home()
        elif button == "favorites":
            actions.toggle_favorites_filter()
        elif button == "display":
            actions.cycle_display_mode()
        elif button == "pane":
            actions.toggle_dual_pane()
        elif button == "command":
            self.focus_command()
        elif button == "fuzzy":
            return actions.fuzzy_search()
        elif button == "prompts":
            actions.toggle_prompts_filter()
        elif button == "trash":
            actions.toggle_trash_view()
        return None
