"""Text decoding, control-byte sanitizing, and pygments highlighting."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import get_lexer_for_filename
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

log = logging.getLogger(__name__)

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTER = TerminalFormatter()


def decode_text(data: bytes) -> str:
    for encoding in ("utf-8", "utf-8-sig"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def highlight_lines(lines: list[str], path: Path) -> list[str] | None:
    """Return pygments-colored copies of ``lines``, or ``None`` when unknown.

    Plain-text lexers are treated as unknown so ordinary text keeps the
    theme's file color.
    """
    source = "\n".join(lines)
    try:
        lexer = get_lexer_for_filename(path.name, source)
    except ClassNotFound:
        return None
    if isinstance(lexer, TextLexer):
        return None
    try:
        rendered = pygments_highlight(source, lexer, _FORMATTER)
    except Exception as exc:
        log.debug("highlighting %s failed: %s", path, exc)
        return None
    colored = rendered.split("\n")
    if colored and colored[-1] == "" and len(colored) == len(lines) + 1:
        colored.pop()
    if len(colored) != len(lines):
        return None
    return colored
