"""Command line buffer editing, paste handling, and submit classification."""

from __future__ import annotations

import unittest

from tfe.input.command_line import CommandLine, insertable_text, parse_command, strip_paste_markers
from tfe.input.mouse import ClickTracker, parse_mouse
from tfe.storage.history import CommandHistory


class InsertableTextTests(unittest.TestCase):
    def test_printable_and_named_keys(self) -> None:
        self.assertEqual(insertable_text("a"), "a")
        self.assertEqual(insertable_text("é"), "é")
        self.assertIsNone(insertable_text("UP"))
        self.assertIsNone(insertable_text("CTRL_A"))
        self.assertIsNone(insertable_text("F5"))
        self.assertIsNone(insertable_text("\x01"))
        self.assertIsNone(insertable_text(""))

    def test_paste_is_flattened_to_one_line(self) -> None:
        self.assertEqual(insertable_text("\x1b[200~echo hi\nls\x1b[201~"), "echo hi ls")
        self.assertEqual(insertable_text("[200~make[201~"), "make")
        self.assertEqual(strip_paste_markers("[200~[201~"), "")


class ParseCommandTests(unittest.TestCase):
    def test_classification(self) -> None:
        self.assertEqual(parse_command("   ").kind, "empty")
        self.assertEqual(parse_command("EXIT").kind, "quit")
        self.assertEqual(parse_command("quit").kind, "quit")
        request = parse_command("  ls -la ")
        self.assertEqual((request.kind, request.command), ("run", "ls -la"))
        request = parse_command("!vim notes.md")
        self.assertEqual((request.kind, request.command), ("run_and_exit", "vim notes.md"))
        self.assertEqual(parse_command("!").kind, "empty")


class CommandLineTests(unittest.TestCase):
    def test_editing_at_cursor(self) -> None:
        line = CommandLine()
        line.insert("helo")
        line.move(-1)
        line.insert("l")
        self.assertEqual((line.buffer, line.cursor), ("hello", 4))
        line.home()
        line.delete()
        self.assertEqual(line.buffer, "ello")
        line.end()
        line.backspace()
        self.assertEqual(line.buffer, "ell")
        line.move(-10)
        self.assertEqual(line.cursor, 0)

    def test_kill_commands(self) -> None:
        line = CommandLine()
        line.set_buffer("git status")
        line.move(-6)
        line.kill_to_end()
        self.assertEqual(line.buffer, "git ")
        line.set_buffer("git status")
        line.move(-6)
        line.kill_to_start()
        self.assertEqual((line.buffer, line.cursor), ("status", 0))

    def test_submit_records_history_and_clears(self) -> None:
        line = CommandLine(focused=True)
        line.set_buffer("make test")
        request = line.submit()
        self.assertEqual(request.kind, "run")
        self.assertEqual(line.buffer, "")
        self.assertFalse(line.focused)
        self.assertEqual(line.history.entries, ["make test"])

    def test_quit_is_not_recorded(self) -> None:
        line = CommandLine()
        line.set_buffer("exit")
        self.assertEqual(line.submit().kind, "quit")
        self.assertEqual(line.history.entries, [])

    def test_history_browsing_fills_buffer(self) -> None:
        line = CommandLine(history=CommandHistory(entries=["ls", "pwd"], position=2))
        line.history_previous()
        self.assertEqual(line.buffer, "pwd")
        line.history_previous()
        self.assertEqual(line.buffer, "ls")
        line.history_next()
        self.assertEqual(line.buffer, "pwd")
        line.history_next()
        self.assertEqual(line.buffer, "")

    def test_active_when_focused_or_buffered(self) -> None:
        line = CommandLine()
        self.assertFalse(line.active)
        line.insert("x")
        self.assertTrue(line.active)


class MouseTests(unittest.TestCase):
    def test_parse_mouse_is_zero_based(self) -> None:
        event = parse_mouse("MOUSE_LEFT_UP:10:3")
        self.assertEqual((event.kind, event.x, event.y), ("LEFT_UP", 9, 2))
        self.assertTrue(parse_mouse("MOUSE_WHEEL_DOWN:1:1").is_wheel)
        self.assertIsNone(parse_mouse("MOUSE_LEFT_UP:x:3"))
        self.assertIsNone(parse_mouse("ENTER"))

    def test_double_click_needs_same_item_within_threshold(self) -> None:
        tracker = ClickTracker()
        self.assertFalse(tracker.register(4, now=10.0))
        self.assertTrue(tracker.register(4, now=10.3))
        self.assertFalse(tracker.register(4, now=10.4))
        self.assertFalse(tracker.register(5, now=10.5))
        self.assertFalse(tracker.register(5, now=11.5))

    def test_releases_exactly_at_threshold_are_two_single_clicks(self) -> None:
        tracker = ClickTracker()
        self.assertFalse(tracker.register(3, now=10.0))
        self.assertFalse(tracker.register(3, now=10.5))
        self.assertTrue(tracker.register(3, now=10.99))


if __name__ == "__main__":
    unittest.main()
