"""Character-cell frame buffer.

Regions draw into a ``CellGrid`` instead of concatenating strings so that
overlays (menus, dialogs) can replace exact cells underneath them. The grid
is serialized to one ANSI string per frame.
"""

from __future__ import annotations

from ..ansi import ANSI_ESCAPE_RE, VARIATION_SELECTOR_16, char_display_width, emoji_compensation

# Right half of a double-width glyph; never emitted on its own.
CONTINUATION = ""
RESET = "\033[0m"


class CellGrid:
    """Fixed ``width`` x ``height`` grid of ``(text, style)`` cells."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self.chars: list[list[str]] = [[" "] * self.width for _ in range(self.height)]
        self.styles: list[list[str]] = [[""] * self.width for _ in range(self.height)]

    def _clear_cell(self, x: int, y: int) -> None:
        # Overwriting half of a wide glyph blanks the other half.
        row = self.chars[y]
        if row[x] == CONTINUATION and x > 0:
            row[x - 1] = " "
        elif x + 1 < self.width and row[x + 1] == CONTINUATION:
            row[x + 1] = " "

    def set_cell(self, x: int, y: int, text: str, style: str = "") -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        self._clear_cell(x, y)
        self.chars[y][x] = text
        self.styles[y][x] = style

    def fill(self, x: int, y: int, width: int, height: int, char: str = " ", style: str = "") -> None:
        for row in range(max(0, y), min(self.height, y + height)):
            for col in range(max(0, x), min(self.width, x + width)):
                self.set_cell(col, row, char, style)

    def put_text(self, x: int, y: int, text: str, style: str = "", max_width: int | None = None) -> int:
        """Write ``text`` (which may carry SGR escapes) starting at ``(x, y)``.

        Escapes inside ``text`` layer on top of ``style`` until a reset.
        Returns the number of cells consumed.
        """
        if not 0 <= y < self.height:
            return 0
        limit = self.width if max_width is None else min(self.width, x + max(0, max_width))
        active = style
        col = x
        last: int | None = None
        i = 0
        n = len(text)
        while i < n:
            if text[i] == "\x1b":
                match = ANSI_ESCAPE_RE.match(text, i)
                if match:
                    seq = match.group(0)
                    if seq.endswith("m"):
                        active = style if seq in (RESET, "\033[m") else active + seq
                    i = match.end()
                    continue
            ch = text[i]
            i += 1
            if ch == VARIATION_SELECTOR_16 or char_display_width(ch, col - x) == 0 and ch != "\t":
                if last is not None:
                    self.chars[y][last] += ch
                    if ch == VARIATION_SELECTOR_16:
                        # Terminals that draw the selector wider swallow the next cells.
                        for _ in range(max(0, emoji_compensation())):
                            if col < limit:
                                self.set_cell(col, y, CONTINUATION, active)
                            col += 1
                continue
            w = char_display_width(ch, col - x)
            if ch == "\t":
                ch, w = " ", 1
            if col + w > limit:
                break
            if col >= 0:
                self.set_cell(col, y, ch, active)
                last = col
                if w == 2:
                    self.set_cell(col + 1, y, CONTINUATION, active)
            col += w
        return col - x

    def serialize_row(self, y: int) -> str:
        out: list[str] = []
        current = ""
        for text, style in zip(self.chars[y], self.styles[y]):
            if text == CONTINUATION:
                continue
            if style != current:
                out.append(RESET)
                if style:
                    out.append(style)
                current = style
            out.append(text)
        if current:
            out.append(RESET)
        return "".join(out)

    def serialize(self) -> str:
        """Full frame: cursor home, each row positioned explicitly."""
        out = ["\033[H"]
        for y in range(self.height):
            out.append(f"\033[{y + 1};1H")
            out.append(self.serialize_row(y))
        return "".join(out)
