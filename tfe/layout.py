"""Screen geometry shared by the renderer and mouse hit testing.

Everything here is pure arithmetic on terminal size plus a few view flags, so
the frame composer and the mouse dispatcher can never disagree about where a
row or a column header lives. Coordinates are 0-based cells; mouse tokens are
1-based and are converted by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass

HEADER_ROWS = 3
FOOTER_ROWS = 3
MENU_ROW = 0
TOOLBAR_ROW = 1
COMMAND_ROW = 2

NARROW_THRESHOLD = 100
NARROW_SHARE = 0.4
MIN_LEFT_WIDTH = 20
MIN_RIGHT_WIDTH = 30

GRID_CELL_WIDTH = 15
GRID_MAX_COLUMNS = 8

DETAIL_SIZE_WIDTH = 9
DETAIL_MODIFIED_WIDTH = 10
DETAIL_TYPE_WIDTH = 12
DETAIL_MIN_NAME_WIDTH = 12

TOOLBAR_BUTTON_WIDTH = 5
TOOLBAR_BUTTONS = ("home", "favorites", "display", "pane", "command", "fuzzy", "prompts", "trash")


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


@dataclass(frozen=True)
class ScreenLayout:
    """Placement of every screen region for one frame."""

    width: int
    height: int
    orientation: str
    list_rect: Rect | None
    preview_rect: Rect | None
    separator: Rect | None

    @property
    def status_rows(self) -> tuple[int, int]:
        return self.height - 3, self.height - 2

    @property
    def message_row(self) -> int:
        return self.height - 1


def content_height(height: int) -> int:
    return max(1, height - HEADER_ROWS - FOOTER_ROWS)


def use_horizontal_split(width: int, display_mode: str) -> bool:
    """Side-by-side panes need room; detail columns always stack vertically."""
    return width >= NARROW_THRESHOLD and display_mode in ("list", "tree", "grid")


def horizontal_widths(width: int, focused: str) -> tuple[int, int]:
    """Return ``(left, right)`` widths; one separator column sits between them."""
    narrow = int(width * NARROW_SHARE)
    if focused == "left":
        right = narrow
        left = width - narrow - 1
    else:
        left = narrow
        right = width - narrow - 1
    if left < MIN_LEFT_WIDTH:
        left = MIN_LEFT_WIDTH
        right = width - left - 1
    if right < MIN_RIGHT_WIDTH:
        right = MIN_RIGHT_WIDTH
        left = max(1, width - right - 1)
    return left, max(1, right)


def vertical_heights(total: int, focused: str) -> tuple[int, int]:
    """Return ``(top, bottom)`` heights around a one-row separator, 2:1 for focus."""
    usable = max(2, total - 1)
    major = max(1, (usable * 2) // 3)
    minor = max(1, usable - major)
    if focused == "left":
        return major, minor
    return minor, major


def compute_layout(
    width: int,
    height: int,
    view_mode: str,
    focused: str = "left",
    display_mode: str = "list",
) -> ScreenLayout:
    width = max(1, width)
    height = max(HEADER_ROWS + FOOTER_ROWS + 1, height)
    if view_mode == "full":
        preview = Rect(0, 1, width, max(1, height - 2))
        return ScreenLayout(width, height, "full", None, preview, None)

    top = HEADER_ROWS
    body = content_height(height)
    if view_mode != "dual":
        return ScreenLayout(width, height, "single", Rect(0, top, width, body), None, None)

    if use_horizontal_split(width, display_mode):
        left, right = horizontal_widths(width, focused)
        return ScreenLayout(
            width,
            height,
            "horizontal",
            Rect(0, top, left, body),
            Rect(left + 1, top, right, body),
            Rect(left, top, 1, body),
        )

    upper, lower = vertical_heights(body, focused)
    return ScreenLayout(
        width,
        height,
        "vertical",
        Rect(0, top, width, upper),
        Rect(0, top + upper + 1, width, lower),
        Rect(0, top + upper, width, 1),
    )


# List geometry --------------------------------------------------------------


def grid_columns(width: int) -> int:
    return max(1, min(GRID_MAX_COLUMNS, width // GRID_CELL_WIDTH))


def visible_window(cursor: int, count: int, rows: int) -> int:
    """First visible index of a ``rows``-tall window centred on ``cursor``."""
    if rows <= 0 or count <= rows:
        return 0
    start = cursor - rows // 2
    return max(0, min(start, count - rows))


@dataclass(frozen=True)
class DetailColumn:
    key: str
    label: str
    start: int
    width: int

    @property
    def end(self) -> int:
        return self.start + self.width


def detail_columns(width: int) -> list[DetailColumn]:
    """Name/Size/Modified/Type columns; the narrowest terminals drop Type then Modified."""
    optional = [("size", "Size", DETAIL_SIZE_WIDTH), ("modified", "Modified", DETAIL_MODIFIED_WIDTH), ("type", "Type", DETAIL_TYPE_WIDTH)]
    while optional and width - sum(w + 1 for _, _, w in optional) < DETAIL_MIN_NAME_WIDTH:
        optional.pop()
    name_width = max(1, width - sum(w + 1 for _, _, w in optional))
    columns = [DetailColumn("name", "Name", 0, name_width)]
    x = name_width + 1
    for key, label, w in optional:
        columns.append(DetailColumn(key, label, x, w))
        x += w + 1
    return columns


@dataclass(frozen=True)
class ListGeometry:
    """Where listing items land inside the list pane for one frame."""

    rect: Rect
    display_mode: str
    count: int
    cursor: int

    @property
    def header_rows(self) -> int:
        return 1 if self.display_mode == "detail" else 0

    @property
    def item_rows(self) -> int:
        return max(1, self.rect.height - self.header_rows)

    @property
    def columns(self) -> int:
        return grid_columns(self.rect.width) if self.display_mode == "grid" else 1

    @property
    def cell_width(self) -> int:
        return max(1, self.rect.width // self.columns)

    @property
    def first_row(self) -> int:
        """First visible item row (grid rows, not items, in grid mode)."""
        cols = self.columns
        total_rows = (self.count + cols - 1) // cols
        return visible_window(self.cursor // cols, total_rows, self.item_rows)

    @property
    def start(self) -> int:
        return self.first_row * self.columns

    @property
    def end(self) -> int:
        return min(self.count, self.start + self.item_rows * self.columns)

    def item_position(self, index: int) -> tuple[int, int] | None:
        """Screen ``(x, y)`` of ``index`` or ``None`` when scrolled out."""
        if not self.start <= index < self.end:
            return None
        offset = index - self.start
        row, col = divmod(offset, self.columns)
        return self.rect.x + col * self.cell_width, self.rect.y + self.header_rows + row

    def index_at(self, x: int, y: int) -> int | None:
        if not self.rect.contains(x, y):
            return None
        row = y - self.rect.y - self.header_rows
        if row < 0:
            return None
        col = (x - self.rect.x) // self.cell_width
        if col >= self.columns:
            return None
        index = self.start + row * self.columns + col
        if index >= self.end:
            return None
        return index

    def header_key_at(self, x: int, y: int) -> str | None:
        """Sort key under a click on the detail header row."""
        if self.display_mode != "detail" or y != self.rect.y or not self.rect.contains(x, y):
            return None
        rel = x - self.rect.x
        for column in detail_columns(self.rect.width):
            if column.start <= rel < column.end:
                return column.key
        return None


def toolbar_button_at(x: int, y: int) -> str | None:
    if y != TOOLBAR_ROW or x < 0:
        return None
    index = x // TOOLBAR_BUTTON_WIDTH
    if index < len(TOOLBAR_BUTTONS):
        return TOOLBAR_BUTTONS[index]
    return None


LINE_NUMBER_WIDTH = 6
SCROLLBAR_WIDTH = 1


def preview_text_width(rect_width: int, line_numbers: bool) -> int:
    """Cells left for preview text after the gutter and the scrollbar column."""
    gutter = LINE_NUMBER_WIDTH if line_numbers else 0
    return max(1, rect_width - gutter - SCROLLBAR_WIDTH)
