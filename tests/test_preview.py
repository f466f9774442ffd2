"""Preview loading, wrapping, scrolling, and in-preview search."""

from __future__ import annotations

import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

from tfe.errors import MarkdownRenderTimeout
from tfe.preview import MAX_PREVIEW_BYTES, Preview, render_markdown_with_timeout, scrollbar_thumb
from tfe.ui_theme import PLAIN_THEME


class PreviewLoadTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, data: bytes) -> Path:
        path = self.root / name
        path.write_bytes(data)
        return path

    def test_plain_text_lines(self) -> None:
        preview = Preview.load(self._write("notes.txt", b"one\r\ntwo\n"))
        self.assertEqual(preview.kind, "plain")
        self.assertEqual(preview.raw_lines, ["one", "two"])
        self.assertTrue(preview.shows_line_numbers)

    def test_nul_byte_means_binary(self) -> None:
        preview = Preview.load(self._write("blob.dat", b"abc\x00def"))
        self.assertEqual(preview.kind, "binary")
        self.assertEqual(preview.raw_lines[0], "Binary file detected")

    def test_oversized_file_is_not_read(self) -> None:
        path = self._write("big.txt", b"x" * (MAX_PREVIEW_BYTES + 1))
        with mock.patch.object(Path, "read_bytes") as read_bytes:
            preview = Preview.load(path)
        read_bytes.assert_not_called()
        self.assertEqual(preview.kind, "too-large")

    def test_missing_file_reports_error_instead_of_raising(self) -> None:
        preview = Preview.load(self.root / "gone.txt")
        self.assertEqual(preview.kind, "unloaded")
        self.assertIn("File not found", preview.load_error)

    def test_control_bytes_are_escaped(self) -> None:
        preview = Preview.load(self._write("bell.txt", b"ring\x07bell\n"))
        self.assertEqual(preview.raw_lines, ["ring\\x07bell"])

    def test_prompt_file_is_parsed(self) -> None:
        path = self._write("ask.prompty", b"---\nname: Ask\n---\nAsk about {{topic}}\n")
        preview = Preview.load(path, home=self.root / "home")
        self.assertEqual(preview.kind, "prompt")
        self.assertEqual(preview.plain_text(), "Ask about {{topic}}")
        self.assertFalse(preview.shows_line_numbers)

    def test_broken_prompt_falls_back_to_plain(self) -> None:
        path = self._write("bad.prompty", b"no markers here\n")
        preview = Preview.load(path, home=self.root / "home")
        self.assertEqual(preview.kind, "plain")
        self.assertIsNotNone(preview.prompt_error)


def _preview_with(lines: list[str]) -> Preview:
    preview = Preview(path=Path("/tmp/x.txt"), name="x.txt", kind="unloaded", raw_lines=lines)
    return preview


class ScrollTests(unittest.TestCase):
    def test_wrapping_tracks_logical_line_numbers(self) -> None:
        preview = _preview_with(["abcdef", "g"])
        self.assertEqual(preview.wrapped_lines(3, PLAIN_THEME), ["abc", "def", "g"])
        self.assertEqual(preview.line_count, 3)
        self.assertEqual([preview.line_number(index) for index in range(3)], [1, None, 2])

    def test_scroll_is_clamped(self) -> None:
        preview = _preview_with([str(index) for index in range(20)])
        preview.wrapped_lines(10, PLAIN_THEME)
        preview.scroll_by(100, 5)
        self.assertEqual(preview.scroll, 15)
        preview.page_up(5)
        self.assertEqual(preview.scroll, 11)
        preview.scroll_by(-100, 5)
        self.assertEqual(preview.scroll, 0)
        preview.scroll_end(5)
        self.assertEqual(preview.scroll, 15)
        preview.scroll_home()
        self.assertEqual(preview.scroll, 0)

    def test_short_content_never_scrolls(self) -> None:
        preview = _preview_with(["only"])
        preview.wrapped_lines(10, PLAIN_THEME)
        preview.page_down(5)
        self.assertEqual(preview.scroll, 0)

    def test_scrollbar_thumb(self) -> None:
        self.assertEqual(scrollbar_thumb(0, 10, 5), (0, 10))
        self.assertEqual(scrollbar_thumb(0, 10, 100), (0, 1))
        self.assertEqual(scrollbar_thumb(90, 10, 100), (9, 1))


class SearchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.preview = _preview_with([f"line {index}" + (" needle" if index % 10 == 0 else "") for index in range(40)])
        self.preview.wrapped_lines(80, PLAIN_THEME)

    def test_matches_are_counted_and_revealed(self) -> None:
        count = self.preview.set_search("NEEDLE", 5)
        self.assertEqual(count, 4)
        self.assertEqual(self.preview.current_match_line(), 0)
        self.preview.next_match(5)
        self.assertEqual(self.preview.current_match_line(), 10)
        self.assertTrue(self.preview.scroll <= 10 < self.preview.scroll + 5)

    def test_previous_match_wraps(self) -> None:
        self.preview.set_search("needle", 5)
        self.preview.previous_match(5)
        self.assertEqual(self.preview.current_match_line(), 30)

    def test_no_matches(self) -> None:
        self.assertEqual(self.preview.set_search("absent", 5), 0)
        self.assertFalse(self.preview.next_match(5))
        self.assertIsNone(self.preview.current_match_line())

    def test_clear_search(self) -> None:
        self.preview.set_search("needle", 5)
        self.preview.clear_search()
        self.assertEqual(self.preview.search_matches, [])
        self.assertEqual(self.preview.search_query, "")


class MarkdownTests(unittest.TestCase):
    def test_timeout_falls_back_to_raw_lines(self) -> None:
        preview = Preview(path=Path("/tmp/r.md"), name="r.md", kind="markdown", raw_lines=["# Title", "text"])
        with mock.patch(
            "tfe.preview.model.render_markdown_with_timeout",
            side_effect=MarkdownRenderTimeout("markdown rendering timeout after 5.0s"),
        ):
            lines = preview.wrapped_lines(40, PLAIN_THEME)
        self.assertEqual(lines, ["# Title", "text"])
        self.assertIn("timeout", preview.markdown_error)

    def test_renderer_failure_becomes_timeout_error(self) -> None:
        with mock.patch("tfe.preview.markdown.render_markdown", side_effect=ValueError("boom")):
            with self.assertRaises(MarkdownRenderTimeout) as caught:
                render_markdown_with_timeout("# hi", 20, timeout=5)
        self.assertIn("panic", str(caught.exception))

    def test_overrunning_render_does_not_delay_the_next_one(self) -> None:
        release = threading.Event()

        def render(text: str, width: int) -> list[str]:
            if text == "slow":
                release.wait(5)
            return [text]

        with mock.patch("tfe.preview.markdown.render_markdown", side_effect=render):
            try:
                with self.assertRaises(MarkdownRenderTimeout) as caught:
                    render_markdown_with_timeout("slow", 20, timeout=0.05)
                self.assertIn("timeout", str(caught.exception))
                self.assertEqual(render_markdown_with_timeout("fast", 20, timeout=2.0), ["fast"])
            finally:
                release.set()

    def test_rendered_markdown_fits_width(self) -> None:
        preview = Preview(path=Path("/tmp/r.md"), name="r.md", kind="markdown", raw_lines=["# Title", "", "word " * 30])
        lines = preview.wrapped_lines(30, PLAIN_THEME)
        self.assertTrue(lines)
        self.assertIsNone(preview.markdown_error)
        self.assertTrue(all(line_number is None for line_number in (preview.line_number(i) for i in range(len(lines)))))


if __name__ == "__main__":
    unittest.main()
