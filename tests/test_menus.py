"""Menu construction, keyboard stepping, geometry, and dialogs."""

from __future__ import annotations

import unittest
from pathlib import Path

from tfe.dialogs import (
    CANCELLED,
    CONFIRMED,
    DIALOG_MIN_WIDTH,
    confirm_dialog,
    dialog_body,
    dialog_width,
    input_dialog,
    message_dialog,
)
from tfe.file_model.types import FileEntry
from tfe.menus import (
    MenuContext,
    MenuItem,
    box_item_at,
    build_menus,
    context_menu_items,
    context_menu_origin,
    dropdown_origin,
    format_item,
    menu_key_at,
    neighbour_menu,
    step_selection,
    title_spans,
)


class MenuTests(unittest.TestCase):
    def test_checks_follow_context(self) -> None:
        menus = build_menus(MenuContext(display_mode="tree", sort_key="size", dual_pane=True))
        checked = {item.action for item in menus["view"].items if item.checked}
        self.assertEqual(checked, {"display-tree", "sort-size", "toggle-dual-pane"})

    def test_git_items_disabled_outside_repository(self) -> None:
        tools = build_menus(MenuContext(in_git_repo=False))["tools"].items
        self.assertTrue(all(item.disabled for item in tools if item.action.startswith("git-")))
        tools = build_menus(MenuContext(in_git_repo=True))["tools"].items
        self.assertFalse(any(item.disabled for item in tools))

    def test_step_skips_separators_and_disabled(self) -> None:
        menus = build_menus(MenuContext())
        file_items = menus["file"].items
        self.assertEqual(step_selection(file_items, 1, 1), 3)
        self.assertEqual(step_selection(file_items, 0, -1), 7)
        tools = menus["tools"].items
        self.assertEqual(step_selection(tools, 2, 1), 0)

    def test_neighbours_wrap(self) -> None:
        self.assertEqual(neighbour_menu("file", -1), "help")
        self.assertEqual(neighbour_menu("help", 1), "file")
        self.assertEqual(neighbour_menu("bogus", 1), "file")

    def test_title_geometry(self) -> None:
        menus = build_menus(MenuContext())
        self.assertEqual(title_spans(menus)[:3], [("file", 0, 6), ("edit", 7, 6), ("view", 14, 6)])
        self.assertEqual(menu_key_at(menus, 8), "edit")
        self.assertIsNone(menu_key_at(menus, 6))
        self.assertEqual(dropdown_origin(menus, "view"), (14, 1))

    def test_box_hit_testing(self) -> None:
        self.assertEqual(box_item_at((10, 1), 20, 5, 11, 2), 0)
        self.assertEqual(box_item_at((10, 1), 20, 5, 30, 6), 4)
        self.assertIsNone(box_item_at((10, 1), 20, 5, 10, 2))
        self.assertIsNone(box_item_at((10, 1), 20, 5, 11, 7))

    def test_format_item_right_aligns_shortcut(self) -> None:
        text = format_item(MenuItem("Tree", "display-tree", "3", True, True), 20)
        self.assertTrue(text.startswith("  ✓ Tree"))
        self.assertTrue(text.endswith("3"))
        self.assertEqual(len(text), 18)
        self.assertEqual(format_item(MenuItem(separator=True), 5), "─────")


class ContextMenuTests(unittest.TestCase):
    def test_trash_view_actions(self) -> None:
        entry = FileEntry(name="a", path=Path("/a"), is_dir=False)
        actions = [item.action for item in context_menu_items(entry, trash_view=True, is_favorite=False)]
        self.assertEqual(actions, ["restore", "permanent-delete", "", "empty-trash"])

    def test_directory_actions(self) -> None:
        entry = FileEntry(name="src", path=Path("/src"), is_dir=True)
        items = context_menu_items(entry, trash_view=False, is_favorite=True)
        actions = [item.action for item in items]
        self.assertIn("quick-cd", actions)
        self.assertIn("new-folder", actions)
        self.assertEqual(items[-1].label, "⭐ Unfavorite")

    def test_file_actions_depend_on_type(self) -> None:
        script = FileEntry(name="run.sh", path=Path("/run.sh"), is_dir=False)
        page = FileEntry(name="index.html", path=Path("/index.html"), is_dir=False)
        script_actions = [item.action for item in context_menu_items(script, trash_view=False, is_favorite=False)]
        page_actions = [item.action for item in context_menu_items(page, trash_view=False, is_favorite=False)]
        self.assertIn("run-script", script_actions)
        self.assertNotIn("browser", script_actions)
        self.assertIn("browser", page_actions)
        self.assertNotIn("run-script", page_actions)

    def test_origin_stays_on_screen(self) -> None:
        self.assertEqual(context_menu_origin(100, 30, 20, 5, 80, 24), (58, 17))
        self.assertEqual(context_menu_origin(0, 0, 20, 5, 80, 24), (2, 1))


class DialogTests(unittest.TestCase):
    def test_input_editing(self) -> None:
        dialog = input_dialog("Rename", "New name:", "rename", initial="old")
        for key in ("BACKSPACE", "BACKSPACE", "BACKSPACE", "n", "e", "UP", "w"):
            self.assertIsNone(dialog.handle_key(key))
        self.assertEqual(dialog.buffer, "new")
        self.assertIsNone(dialog.handle_key("\x1b[200~.txt\x1b[201~"))
        self.assertEqual(dialog.buffer, "new.txt")
        self.assertEqual(dialog.handle_key("ENTER"), CONFIRMED)

    def test_input_clear_and_cancel(self) -> None:
        dialog = input_dialog("New File", "Name:", "new-file", initial="abc")
        dialog.handle_key("CTRL_U")
        self.assertEqual(dialog.buffer, "")
        self.assertEqual(dialog.handle_key("ESC"), CANCELLED)

    def test_confirm_keys(self) -> None:
        dialog = confirm_dialog("Delete", "Move x to trash?", "delete")
        self.assertIsNone(dialog.handle_key("x"))
        self.assertEqual(dialog.handle_key("Y"), CONFIRMED)
        self.assertEqual(dialog.handle_key("n"), CANCELLED)
        self.assertEqual(dialog.handle_key("ESC"), CANCELLED)

    def test_message_closes_on_any_key(self) -> None:
        self.assertEqual(message_dialog("Oops", "bad", is_error=True).handle_key("q"), CANCELLED)

    def test_geometry(self) -> None:
        dialog = input_dialog("Rename", "New name:", "rename", initial="file.txt")
        width = dialog_width(dialog, 120)
        self.assertEqual(width, DIALOG_MIN_WIDTH)
        body = dialog_body(dialog, width - 2)
        self.assertIn(" file.txt█", body)
        self.assertEqual(body[-1], " " + dialog.hint)
        self.assertEqual(dialog_width(dialog, 30), 28)


if __name__ == "__main__":
    unittest.main()
