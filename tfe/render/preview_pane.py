"""Draw the preview pane: gutter, wrapped text, search highlights, scrollbar."""

from __future__ import annotations

from .. import layout
from ..ansi import pad_to_width, strip_ansi, truncate_to_width, visual_width
from ..file_model.format import format_size
from ..preview.model import Preview, scrollbar_thumb
from ..prompts.render import PromptEditSession
from ..ui_theme import UITheme
from .cells import CellGrid

PLACEHOLDER = "Select a file to preview"


def highlight_matches(line: str, query: str, style: str, reset: str) -> str:
    """Plain ``line`` with every case-insensitive ``query`` hit wrapped in ``style``."""
    plain = strip_ansi(line)
    if not query:
        return plain
    lowered = plain.lower()
    needle = query.lower()
    out: list[str] = []
    start = 0
    while True:
        hit = lowered.find(needle, start)
        if hit < 0:
            out.append(plain[start:])
            break
        out.append(plain[start:hit])
        out.append(style + plain[hit : hit + len(needle)] + reset)
        start = hit + len(needle)
    return "".join(out)


def render_preview(
    grid: CellGrid,
    rect: layout.Rect,
    preview: Preview,
    theme: UITheme,
    edit: PromptEditSession | None = None,
) -> None:
    if preview.path is None:
        grid.put_text(rect.x + 2, rect.y + 1, PLACEHOLDER, theme.dim, max_width=rect.width - 2)
        return

    line_numbers = preview.shows_line_numbers
    text_width = layout.preview_text_width(rect.width, line_numbers)
    gutter = layout.LINE_NUMBER_WIDTH if line_numbers else 0
    lines = preview.wrapped_lines(text_width, theme, edit)
    viewport = max(1, rect.height)
    preview.clamp_scroll(viewport)

    matches = set(preview.search_matches)
    current = preview.current_match_line()
    for row in range(viewport):
        index = preview.scroll + row
        if index >= len(lines):
            break
        y = rect.y + row
        if line_numbers:
            number = preview.line_number(index)
            label = f"{number:>{gutter - 1}} " if number is not None else " " * gutter
            grid.put_text(rect.x, y, label, theme.line_number, max_width=gutter)
        line = lines[index]
        if index in matches:
            style = theme.search_current if index == current else theme.search_match
            line = highlight_matches(line, preview.search_query, style, theme.reset)
        grid.put_text(rect.x + gutter, y, truncate_to_width(line, text_width), "", max_width=text_width)

    bar_x = rect.x + rect.width - 1
    start, size = scrollbar_thumb(preview.scroll, viewport, len(lines))
    if len(lines) > viewport:
        for row in range(viewport):
            thumb = start <= row < start + size
            grid.set_cell(bar_x, rect.y + row, "█" if thumb else "│", theme.scrollbar_thumb if thumb else theme.scrollbar_track)


def preview_title(preview: Preview, viewport: int, width: int, edit: PromptEditSession | None = None) -> str:
    """One-line header for the full-screen preview."""
    total = preview.line_count
    first = min(total, preview.scroll + 1)
    last = min(total, preview.scroll + viewport)
    left = f" {preview.name}  {format_size(preview.size)}  [{preview.kind}]"
    if preview.prompt is not None:
        left += f"  {preview.prompt.name}"
    right = f"{first}-{last}/{total} "
    if edit is not None and edit.variables:
        right = f"✏ {edit.focused_name} ({edit.focused + 1}/{len(edit.variables)})  " + right
    gap = max(1, width - visual_width(left) - visual_width(right))
    return pad_to_width(truncate_to_width(left + " " * gap + right, width), width)
