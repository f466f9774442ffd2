"""Cell grid writes and popup boxes painted over existing frame content."""

from __future__ import annotations

import unittest

from tfe.ansi import strip_ansi
from tfe.render.cells import CellGrid
from tfe.render.overlays import draw_box


class PopupOverlayTests(unittest.TestCase):
    def test_box_edge_splitting_a_wide_glyph_blanks_its_other_half(self) -> None:
        grid = CellGrid(10, 3)
        grid.put_text(0, 1, "中文abcd")
        draw_box(grid, 1, 0, 4, [("xy", "")], border_style="")
        self.assertEqual(grid.serialize_row(0), " ╭──╮     ")
        self.assertEqual(grid.serialize_row(1), " │xy│bcd  ")
        self.assertEqual(grid.serialize_row(2), " ╰──╯     ")

    def test_styled_text_keeps_its_color_around_the_box(self) -> None:
        grid = CellGrid(10, 2)
        grid.put_text(0, 1, "\033[31mredline!!")
        draw_box(grid, 2, 0, 4, [("ok", "")], border_style="\033[1m")
        self.assertEqual(grid.styles[1][1], "\033[31m")
        self.assertEqual((grid.chars[1][2], grid.styles[1][2]), ("│", "\033[1m"))
        self.assertEqual((grid.chars[1][3], grid.styles[1][3]), ("o", ""))
        self.assertEqual(grid.styles[1][6], "\033[31m")
        row = grid.serialize_row(1)
        self.assertEqual(strip_ansi(row), "re│ok│e!! ")
        self.assertIn("\033[31me!!", row)

    def test_box_past_the_grid_edge_is_clipped(self) -> None:
        grid = CellGrid(10, 3)
        draw_box(grid, 8, 1, 6, [("abcd", ""), ("efgh", "")], border_style="")
        self.assertEqual(grid.serialize_row(0), " " * 10)
        self.assertEqual(grid.serialize_row(1), "        ╭─")
        self.assertEqual(grid.serialize_row(2), "        │a")


if __name__ == "__main__":
    unittest.main()
