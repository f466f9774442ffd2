"""Raw byte decoding into key tokens and key-combo registries."""

from __future__ import annotations

import os
import unittest

from tfe.input import reader
from tfe.input.key_registry import KeyComboBinding, KeyComboRegistry
from tfe.input.reader import read_key


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        reader._PENDING_BYTES.clear()
        self.read_fd, self.write_fd = os.pipe()

    def tearDown(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)
        reader._PENDING_BYTES.clear()

    def keys(self, data: bytes, count: int = 1) -> list[str]:
        os.write(self.write_fd, data)
        return [read_key(self.read_fd, timeout_ms=50) for _ in range(count)]

    def test_plain_and_control_keys(self) -> None:
        self.assertEqual(self.keys(b"a\t\r\x7f\x03", 5), ["a", "TAB", "ENTER_CR", "BACKSPACE", "CTRL_C"])

    def test_utf8_character(self) -> None:
        self.assertEqual(self.keys("é".encode("utf-8")), ["é"])

    def test_arrow_and_function_keys(self) -> None:
        self.assertEqual(
            self.keys(b"\x1b[A\x1b[B\x1bOP\x1b[15~\x1b[24~\x1b[Z", 6),
            ["UP", "DOWN", "F1", "F5", "F12", "SHIFT_TAB"],
        )

    def test_lone_escape(self) -> None:
        self.assertEqual(self.keys(b"\x1b"), ["ESC"])

    def test_escape_followed_by_text_keeps_the_text(self) -> None:
        self.assertEqual(self.keys(b"\x1bx", 2), ["ESC", "x"])

    def test_sgr_mouse(self) -> None:
        self.assertEqual(
            self.keys(b"\x1b[<0;10;5m\x1b[<2;3;4m\x1b[<64;1;1M", 3),
            ["MOUSE_LEFT_UP:10:5", "MOUSE_RIGHT_UP:3:4", "MOUSE_WHEEL_UP:1:1"],
        )

    def test_bracketed_paste(self) -> None:
        self.assertEqual(self.keys(b"\x1b[200~ls -la\x1b[201~"), ["\x1b[200~ls -la\x1b[201~"])

    def test_timeout_returns_empty(self) -> None:
        self.assertEqual(read_key(self.read_fd, timeout_ms=10), "")


class RegistryTests(unittest.TestCase):
    def test_every_combo_maps_to_its_handler(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("q", "ESC"), lambda: calls.append("quit") or "done"),
            KeyComboBinding(("ENTER",), lambda: calls.append("open")),
        )
        self.assertEqual(registry.lookup("ESC")(), "done")
        self.assertIsNone(registry.lookup("esc"))
        registry.lookup("ENTER")()
        self.assertEqual(calls, ["quit", "open"])

    def test_later_binding_wins(self) -> None:
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("TAB",), lambda: "first"),
            KeyComboBinding(("TAB",), lambda: "second"),
        )
        self.assertEqual(registry.lookup("TAB")(), "second")


if __name__ == "__main__":
    unittest.main()
