"""End-to-end key and mouse handling against a real temporary directory tree."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from tfe.ansi import strip_ansi
from tfe.file_model.predicates import GLOBAL_PROMPTS_LABEL
from tfe.input.dispatch import KeyDispatcher
from tfe.render import render_frame
from tfe.runtime.actions import ExplorerActions
from tfe.runtime.effects import EffectResult, edit_file
from tfe.runtime.state import AppState
from tfe.storage import paths
from tfe.storage.favorites import FavoritesStore
from tfe.storage.history import HistoryStore
from tfe.storage.trash import TrashStore
from tfe.ui_theme import PLAIN_THEME


class ExplorerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.work = root / "work"
        (self.work / "alpha").mkdir(parents=True)
        (self.work / "beta").mkdir()
        (self.work / "alpha" / "inner.txt").write_text("inner\n", encoding="utf-8")
        (self.work / "a.txt").write_text("hello\n", encoding="utf-8")
        (self.work / "b.py").write_text("print('b')\n", encoding="utf-8")
        (self.work / "run.sh").write_text("echo hi\n", encoding="utf-8")
        self.config = root / "config"
        self.history_path = self.config / "history.json"

        self.state = AppState(current_dir=self.work, home=root / "home", width=100, height=30)
        self.actions = ExplorerActions(
            self.state,
            theme=PLAIN_THEME,
            favorites=FavoritesStore(self.config / "favorites.json"),
            trash=TrashStore(self.config / "trash.json", self.config / "trash"),
            history_store=HistoryStore(self.history_path),
            persist_preferences=False,
        )
        self.actions.change_directory(self.work)
        self.keys = KeyDispatcher(self.actions)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def names(self) -> list[str]:
        return [entry.name for entry in self.state.items]

    def press(self, *keys: str):
        result = None
        for key in keys:
            result = self.keys.handle(key)
        return result

    def type_text(self, text: str) -> None:
        self.press(*text)

    def select(self, name: str) -> None:
        self.actions.select_index(self.names().index(name))


class NavigationTests(ExplorerTestCase):
    def test_initial_listing(self) -> None:
        self.assertEqual(self.names(), ["..", "alpha", "beta", "a.txt", "b.py", "run.sh"])
        self.assertEqual(self.state.cursor, 0)

    def test_enter_directory_and_return_to_it(self) -> None:
        self.press("DOWN", "ENTER")
        self.assertEqual(self.state.current_dir, self.work / "alpha")
        self.assertEqual(self.names(), ["..", "inner.txt"])
        self.press("LEFT")
        self.assertEqual(self.state.current_dir, self.work)
        self.assertEqual(self.state.selected.name, "alpha")

    def test_cursor_is_clamped(self) -> None:
        self.press("UP")
        self.assertEqual(self.state.cursor, 0)
        self.press("END", "DOWN")
        self.assertEqual(self.state.selected.name, "run.sh")

    def test_sort_toggle_keeps_selection(self) -> None:
        self.select("a.txt")
        self.actions.set_sort("name")
        self.assertFalse(self.state.sort_ascending)
        self.assertEqual(self.names(), ["..", "beta", "alpha", "run.sh", "b.py", "a.txt"])
        self.assertEqual(self.state.selected.name, "a.txt")

    def test_search_filters_and_escape_clears(self) -> None:
        self.press("/", "b")
        self.assertEqual(self.names(), ["..", "beta", "b.py"])
        self.press("ENTER")
        self.assertFalse(self.state.search_active)
        self.assertEqual(self.state.search_query, "b")
        self.press("ESC")
        self.assertEqual(len(self.names()), 6)

    def test_tree_expand_and_collapse(self) -> None:
        self.press("3")
        self.assertEqual(self.state.display_mode, "tree")
        self.select("alpha")
        self.press("RIGHT")
        self.assertEqual(self.names()[:4], ["..", "alpha", "inner.txt", "beta"])
        self.select("inner.txt")
        self.press("LEFT")
        self.assertEqual(self.state.selected.name, "alpha")
        self.press("LEFT")
        self.assertNotIn("inner.txt", self.names())

    def test_unbound_printable_key_is_ignored(self) -> None:
        self.assertIsNone(self.press("z"))
        self.assertEqual(self.state.current_dir, self.work)
        self.assertFalse(self.state.command.active)

    def test_quit_keys(self) -> None:
        self.press("F10")
        self.assertTrue(self.state.quit_requested)
        self.state.quit_requested = False
        self.press("CTRL_C")
        self.assertTrue(self.state.quit_requested)

    def test_favorites_filter_and_back_out(self) -> None:
        self.select("a.txt")
        self.press("s")
        self.assertIn(self.work / "a.txt", self.actions.favorites.favorites)
        self.press("F6")
        self.assertEqual(self.names(), ["..", "a.txt"])
        self.press("ESC")
        self.assertFalse(self.state.favorites_only)
        self.assertEqual(len(self.names()), 6)

    def test_quick_cd_writes_target(self) -> None:
        target_file = self.config / "cd_target"
        self.config.mkdir(parents=True, exist_ok=True)
        self.select("alpha")
        with mock.patch.object(paths, "CD_TARGET_PATH", target_file):
            self.actions.quick_cd()
        self.assertEqual(target_file.read_text(encoding="utf-8"), str(self.work / "alpha"))
        self.assertTrue(self.state.quit_requested)


class FileOperationTests(ExplorerTestCase):
    def test_new_folder_dialog(self) -> None:
        self.press("F7")
        self.assertEqual(self.state.dialog.action, "new-folder")
        self.type_text("gamma")
        self.press("ENTER")
        self.assertIsNone(self.state.dialog)
        self.assertTrue((self.work / "gamma").is_dir())
        self.assertEqual(self.state.selected.name, "gamma")

    def test_new_folder_that_exists_reports_error(self) -> None:
        self.press("F7")
        self.type_text("alpha")
        self.press("ENTER")
        self.assertTrue(self.state.status.is_error)

    def test_rename(self) -> None:
        self.select("a.txt")
        self.press("F2", "CTRL_U")
        self.type_text("c.txt")
        self.press("ENTER")
        self.assertTrue((self.work / "c.txt").exists())
        self.assertFalse((self.work / "a.txt").exists())
        self.assertEqual(self.state.selected.name, "c.txt")

    def test_cancelled_dialog_changes_nothing(self) -> None:
        self.select("a.txt")
        self.press("F8", "n")
        self.assertIsNone(self.state.dialog)
        self.assertTrue((self.work / "a.txt").exists())

    def test_trash_and_restore(self) -> None:
        self.select("a.txt")
        self.press("F8", "y")
        self.assertFalse((self.work / "a.txt").exists())
        self.assertNotIn("a.txt", self.names())

        self.press("F12")
        self.assertTrue(self.state.trash_only)
        self.assertEqual(self.names(), ["a.txt"])
        self.actions.restore_from_trash()
        self.assertEqual(self.names(), [])
        self.assertEqual((self.work / "a.txt").read_text(encoding="utf-8"), "hello\n")

        self.press("ESC")
        self.assertFalse(self.state.trash_only)
        self.assertIn("a.txt", self.names())

    def test_prompts_library_shows_claude_folder_and_global_prompts(self) -> None:
        (self.work / ".claude" / "commands").mkdir(parents=True)
        (self.work / ".claude" / "commands" / "review.md").write_text("Review {{file}}\n", encoding="utf-8")
        (self.state.home / ".prompts").mkdir(parents=True)
        self.press("F11")
        self.assertFalse(self.state.show_hidden)
        self.assertEqual(self.names(), ["..", GLOBAL_PROMPTS_LABEL, ".claude"])
        self.press("DOWN", "ENTER")
        self.assertEqual(self.state.current_dir, self.state.home / ".prompts")


class CommandLineTests(ExplorerTestCase):
    def test_command_returns_shell_effect_and_records_history(self) -> None:
        self.press(":")
        self.type_text("ls")
        effect = self.press("ENTER")
        self.assertEqual((effect.kind, effect.command, effect.cwd, effect.exit_after), ("shell", "ls", self.work, False))
        self.assertFalse(self.state.command.active)
        stored = HistoryStore(self.history_path)
        self.assertEqual(stored.load().entries, ["ls"])
        self.assertEqual(stored.for_directory(self.work), ["ls"])

    def test_up_recalls_this_directory_commands_first(self) -> None:
        self.press(":")
        self.type_text("make")
        self.press("ENTER")
        self.press("DOWN", "ENTER")
        self.assertEqual(self.state.current_dir, self.work / "alpha")
        self.press(":")
        self.type_text("ls")
        self.press("ENTER")
        self.press("LEFT")
        self.assertEqual(self.state.current_dir, self.work)

        self.press(":", "UP")
        self.assertEqual(self.state.command.buffer, "make")
        self.press("UP")
        self.assertEqual(self.state.command.buffer, "ls")

    def test_bang_command_exits_after_running(self) -> None:
        self.press(":")
        self.type_text("!make")
        effect = self.press("ENTER")
        self.assertTrue(effect.exit_after)
        self.actions.finish_effect(EffectResult(effect, exit_code=0))
        self.assertTrue(self.state.quit_requested)

    def test_exit_command_quits(self) -> None:
        self.press(":")
        self.type_text("exit")
        self.assertIsNone(self.press("ENTER"))
        self.assertTrue(self.state.quit_requested)

    def test_effect_error_becomes_status(self) -> None:
        self.actions.finish_effect(EffectResult(edit_file(self.work / "a.txt"), error="no editor found"))
        self.assertEqual(self.state.status.text, "no editor found")
        self.assertTrue(self.state.status.is_error)

    def test_edit_key_returns_editor_effect(self) -> None:
        self.select("b.py")
        effect = self.press("F4")
        self.assertEqual((effect.kind, effect.path), ("editor", self.work / "b.py"))


class PreviewTests(ExplorerTestCase):
    def test_full_preview_round_trip(self) -> None:
        self.select("a.txt")
        self.press("ENTER")
        self.assertEqual(self.state.view_mode, "full")
        self.assertEqual(self.state.preview.raw_lines, ["hello"])
        self.press("q")
        self.assertEqual(self.state.view_mode, "single")

    def test_dual_pane_follows_cursor(self) -> None:
        self.press(" ")
        self.assertEqual(self.state.view_mode, "dual")
        self.select("b.py")
        self.assertEqual(self.state.preview.path, self.work / "b.py")
        self.select("alpha")
        self.assertIsNone(self.state.preview.path)

    def test_prompt_edit_and_copy(self) -> None:
        prompt = self.work / "ask.prompty"
        prompt.write_text("---\nname: Ask\n---\nAsk about {{topic}} on {{DATE}}\n", encoding="utf-8")
        self.actions.reload()
        self.select("ask.prompty")
        self.press("F3")
        self.assertEqual(self.state.preview.kind, "prompt")
        self.press("TAB")
        self.assertIsNotNone(self.state.prompt_edit)
        self.assertEqual(self.state.prompt_edit.focused_name, "topic")
        self.type_text("cats")
        with mock.patch("tfe.runtime.actions.copy_to_clipboard") as copy:
            self.press("F5")
        copied = copy.call_args[0][0]
        self.assertTrue(copied.startswith("Ask about cats on "))
        self.assertNotIn("{{", copied)
        self.press("ESC")
        self.assertIsNone(self.state.prompt_edit)
        self.assertEqual(self.state.view_mode, "full")


class MouseTests(ExplorerTestCase):
    def test_click_selects_and_double_click_opens(self) -> None:
        self.press("MOUSE_LEFT_UP:5:6")
        self.assertEqual(self.state.selected.name, "beta")
        self.press("MOUSE_LEFT_UP:5:6")
        self.assertEqual(self.state.current_dir, self.work / "beta")

    def test_right_click_opens_context_menu(self) -> None:
        self.press("MOUSE_RIGHT_UP:5:7")
        self.assertIsNotNone(self.state.context_menu)
        self.assertEqual(self.state.context_menu.entry.name, "a.txt")
        self.press("ESC")
        self.assertIsNone(self.state.context_menu)

    def test_toolbar_pane_button(self) -> None:
        self.press("MOUSE_LEFT_UP:18:2")
        self.assertEqual(self.state.view_mode, "dual")


class MenuTests(ExplorerTestCase):
    def test_menu_opens_and_runs_first_item(self) -> None:
        self.press("F9")
        self.assertTrue(self.state.menu.open)
        self.assertEqual(self.state.menu.active, "file")
        self.press("ENTER")
        self.assertFalse(self.state.menu.open)
        self.assertEqual(self.state.dialog.action, "new-folder")

    def test_view_menu_switches_display_mode(self) -> None:
        self.press("F9", "RIGHT", "RIGHT", "DOWN", "ENTER")
        self.assertEqual(self.state.display_mode, "detail")


class RenderTests(ExplorerTestCase):
    def test_frame_contains_chrome_and_rows(self) -> None:
        text = strip_ansi(render_frame(self.state, PLAIN_THEME))
        for expected in ("File", "Help", "a.txt", "run.sh", "F1 help"):
            self.assertIn(expected, text)

    def test_status_line_shows_focused_pane_in_dual_view(self) -> None:
        self.assertNotIn("focus:", strip_ansi(render_frame(self.state, PLAIN_THEME)))
        self.press(" ")
        self.assertEqual(self.state.view_mode, "dual")
        self.assertIn("focus: list", strip_ansi(render_frame(self.state, PLAIN_THEME)))
        self.press("TAB")
        self.assertEqual(self.state.focused_pane, "right")
        self.assertIn("focus: preview", strip_ansi(render_frame(self.state, PLAIN_THEME)))

    def test_dialog_is_drawn(self) -> None:
        self.press("F7")
        text = strip_ansi(render_frame(self.state, PLAIN_THEME))
        self.assertIn("Create Directory", text)

    def test_full_preview_frame(self) -> None:
        self.select("a.txt")
        self.press("ENTER")
        text = strip_ansi(render_frame(self.state, PLAIN_THEME))
        self.assertIn("hello", text)
        self.assertIn("Esc back", text)


if __name__ == "__main__":
    unittest.main()
