"""ANSI-aware text measurement, truncation, and word wrapping.

Every layout decision in the explorer goes through these helpers so that
escape sequences, tabs, wide characters, and emoji presentation selectors are
counted the same way by renderers and hit-testing code.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
ELLIPSIS = "..."
VARIATION_SELECTOR_16 = "\ufe0f"
_ZERO_WIDTH = {"\u200b", "\u200c", "\u200d", "\u2060", "\ufeff"}
_TOKEN_RE = re.compile(r"\s+|\S+")

# Extra cells a terminal draws for each emoji carrying U+FE0F, keyed on the
# identity returned by ``terminal_env.detect_terminal_type``.
EMOJI_WIDTH_COMPENSATION: dict[str, int] = {
    "windows-terminal": 1,
}

_active_compensation = 0


def configure_emoji_compensation(terminal_type: str, table: dict[str, int] | None = None) -> int:
    """Select the per-selector width correction for ``terminal_type``.

    Returns the active correction so callers can log it.
    """
    global _active_compensation
    source = EMOJI_WIDTH_COMPENSATION if table is None else table
    _active_compensation = int(source.get(terminal_type, 0))
    return _active_compensation


def emoji_compensation() -> int:
    return _active_compensation


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks and variation
    selectors consume no columns, and East Asian wide/fullwidth characters
    (which covers most pictographic emoji) consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if ch in _ZERO_WIDTH or "\ufe00" <= ch <= "\ufe0f":
        return 0
    if unicodedata.combining(ch):
        return 0
    if ord(ch) < 32 or ord(ch) == 127:
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def visual_width(text: str, compensation: int | None = None) -> int:
    """Count display cells for ``text``, ignoring ANSI escape sequences."""
    if not text:
        return 0
    extra = _active_compensation if compensation is None else compensation
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                i = match.end()
                continue
        ch = text[i]
        if ch == VARIATION_SELECTOR_16:
            col += extra
        else:
            col += char_display_width(ch, col)
        i += 1
    return col


def truncate_to_width(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` cells, ending with ``...`` when room allows.

    Escape sequences are kept. If styling was started and the text is cut, a
    reset is appended so the color does not bleed into following cells.
    """
    if width <= 0 or not text:
        return ""
    if visual_width(text) <= width:
        return text

    out: list[str] = []
    widths: list[int] = []
    col = 0
    i = 0
    n = len(text)
    styled = False
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                widths.append(0)
                styled = True
                i = match.end()
                continue
        ch = text[i]
        w = _active_compensation if ch == VARIATION_SELECTOR_16 else char_display_width(ch, col)
        if col + w > width:
            break
        out.append(ch)
        widths.append(w)
        col += w
        i += 1

    if width >= len(ELLIPSIS):
        # Back off until the ellipsis fits; tabs give back the width they took.
        while out and col + len(ELLIPSIS) > width:
            out.pop()
            col -= widths.pop()
        out.append(ELLIPSIS)
    if styled:
        out.append("\x1b[0m")
    return "".join(out)


def expand_tabs(text: str) -> str:
    """Replace tabs with spaces up to the next stop, skipping escape sequences."""
    if "\t" not in text:
        return text
    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1
    return "".join(out)


def _split_to_width(word: str, width: int) -> tuple[str, str]:
    """Split ``word`` into a head fitting ``width`` cells and the remainder."""
    col = 0
    i = 0
    n = len(word)
    while i < n:
        if word[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(word, i)
            if match:
                i = match.end()
                continue
        ch = word[i]
        w = _active_compensation if ch == VARIATION_SELECTOR_16 else char_display_width(ch, col)
        if col + w > width:
            break
        col += w
        i += 1
    if i == 0:
        # A single glyph wider than the budget; drop it rather than overflow.
        return "", word[1:]
    return word[:i], word[i:]


def wrap_line(line: str, width: int) -> list[str]:
    """Word-wrap ``line`` on whitespace into chunks of at most ``width`` cells.

    Runs of whitespace between words are kept inside a chunk and dropped at
    chunk boundaries. Words longer than the width are hard-broken. Empty
    lines come back as ``[""]``.
    """
    if width <= 0 or not line:
        return [""]
    text = expand_tabs(line)
    if not strip_ansi(text).strip():
        return [truncate_to_width(text, width)]

    lines: list[str] = []
    current = ""
    current_width = 0
    for token in _TOKEN_RE.findall(text):
        token_width = visual_width(token)
        if token.isspace():
            if current_width + token_width <= width:
                current += token
                current_width += token_width
            else:
                if current_width:
                    lines.append(current.rstrip(" "))
                current, current_width = "", 0
            continue
        if current_width + token_width <= width:
            current += token
            current_width += token_width
            continue
        if token_width <= width:
            if strip_ansi(current).strip():
                lines.append(current.rstrip(" "))
            current, current_width = token, token_width
            continue
        if strip_ansi(current).strip():
            lines.append(current.rstrip(" "))
        remaining = token
        while remaining and visual_width(remaining) > width:
            head, remaining = _split_to_width(remaining, width)
            if head:
                lines.append(head)
        current, current_width = remaining, visual_width(remaining)
    if current or not lines:
        lines.append(current)
    return lines


def pad_to_width(text: str, width: int) -> str:
    """Truncate or right-pad ``text`` so it occupies exactly ``width`` cells."""
    clipped = truncate_to_width(text, width)
    return clipped + " " * max(0, width - visual_width(clipped))


__all__ = [
    "ANSI_ESCAPE_RE",
    "EMOJI_WIDTH_COMPENSATION",
    "TAB_STOP",
    "char_display_width",
    "configure_emoji_compensation",
    "emoji_compensation",
    "expand_tabs",
    "pad_to_width",
    "strip_ansi",
    "truncate_to_width",
    "visual_width",
    "wrap_line",
]
