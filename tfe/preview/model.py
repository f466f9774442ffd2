"""Preview loading, classification, wrapped-line caching, scroll, and search."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..ansi import strip_ansi, truncate_to_width, wrap_line
from ..errors import MarkdownRenderTimeout, PreviewLoadError, PromptParseError
from ..file_model.format import format_size
from ..file_model.predicates import is_markdown_file, is_prompt_file
from ..prompts.parser import PromptTemplate, parse_prompt_text
from ..prompts.render import PromptEditSession, header_lines, highlight_variables, render_edit_body
from ..ui_theme import UITheme
from .highlight import decode_text, highlight_lines, sanitize_terminal_text
from .markdown import MARKDOWN_RENDER_TIMEOUT_SECONDS, render_markdown_with_timeout

log = logging.getLogger(__name__)

MAX_PREVIEW_BYTES = 1024 * 1024
BINARY_SNIFF_BYTES = 512
MAX_PREVIEW_LINES = 10_000
WHEEL_SCROLL_LINES = 3

PREVIEW_KINDS = ("plain", "markdown", "prompt", "binary", "too-large", "unloaded")


def scrollbar_thumb(scroll: int, viewport: int, total: int) -> tuple[int, int]:
    """Return ``(start_row, size)`` of the scrollbar thumb within ``viewport``."""
    if total <= viewport or viewport <= 0:
        return 0, viewport
    size = max(1, (viewport * viewport) // total)
    start = (scroll * viewport) // total
    return min(start, viewport - size), size


@dataclass
class Preview:
    """Loaded preview content plus the view state built on top of it.

    ``wrapped_lines`` is the only reader of the render cache; it rebuilds when
    the cache was invalidated or the requested width differs.
    """

    path: Path | None
    name: str = ""
    size: int = 0
    kind: str = "unloaded"
    raw_lines: list[str] = field(default_factory=list)
    truncated: bool = False
    prompt: PromptTemplate | None = None
    prompt_error: str | None = None
    load_error: str | None = None
    markdown_error: str | None = None
    scroll: int = 0
    search_query: str = ""
    search_matches: list[int] = field(default_factory=list)
    current_match: int = -1
    _wrapped: list[str] = field(default_factory=list)
    _wrapped_numbers: list[int | None] = field(default_factory=list)
    _cached_width: int = -1
    _cache_valid: bool = False
    _rendered_markdown: list[str] | None = None
    _markdown_width: int = -1

    @classmethod
    def empty(cls) -> Preview:
        return cls(path=None)

    @classmethod
    def load(cls, path: Path, home: Path | None = None) -> Preview:
        """Load and classify ``path``; never raises for I/O problems."""
        preview = cls(path=path, name=path.name)
        try:
            preview._load(home)
        except PreviewLoadError as exc:
            preview.kind = "unloaded"
            preview.load_error = str(exc)
            preview.raw_lines = [str(exc)]
        return preview

    def _load(self, home: Path | None) -> None:
        assert self.path is not None
        path = self.path
        try:
            info = path.stat()
        except FileNotFoundError as exc:
            raise PreviewLoadError(f"File not found: {path}") from exc
        except OSError as exc:
            raise PreviewLoadError(f"Cannot read {path.name}: {exc.strerror or exc}") from exc
        self.size = int(info.st_size)

        if self.size > MAX_PREVIEW_BYTES:
            self.kind = "too-large"
            self.raw_lines = [
                "File too large to preview",
                "",
                f"Size: {format_size(self.size)} (limit {format_size(MAX_PREVIEW_BYTES)})",
                "Press F4 to open it in an editor.",
            ]
            return

        try:
            data = path.read_bytes()
        except OSError as exc:
            raise PreviewLoadError(f"Cannot read {path.name}: {exc.strerror or exc}") from exc

        if b"\x00" in data[:BINARY_SNIFF_BYTES]:
            self.kind = "binary"
            self.raw_lines = [
                "Binary file detected",
                "",
                f"Size: {format_size(self.size)}",
            ]
            return

        text = sanitize_terminal_text(decode_text(data).replace("\r\n", "\n"))
        self.kind = "plain"
        if is_markdown_file(path):
            self.kind = "markdown"
        if is_prompt_file(path, home):
            try:
                self.prompt = parse_prompt_text(text, path, home)
                self.kind = "prompt"
            except PromptParseError as exc:
                log.debug("prompt parse failed for %s: %s", path, exc)
                self.prompt_error = str(exc)
                self.kind = "plain"

        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        if len(lines) > MAX_PREVIEW_LINES:
            lines = lines[:MAX_PREVIEW_LINES]
            lines.append(f"... (truncated after {MAX_PREVIEW_LINES} lines)")
            self.truncated = True
        self.raw_lines = lines

    @property
    def is_loaded(self) -> bool:
        return self.path is not None and self.kind != "unloaded"

    @property
    def shows_line_numbers(self) -> bool:
        return self.kind == "plain"

    def invalidate(self) -> None:
        self._cache_valid = False

    def _logical_lines(self, theme: UITheme, edit: PromptEditSession | None) -> list[str]:
        if self.kind == "prompt" and self.prompt is not None:
            if edit is not None:
                body = render_edit_body(self.prompt.body, edit.values, edit.focused_name, theme)
            else:
                body = highlight_variables(self.prompt.body, theme)
            return [*header_lines(self.prompt), *body.split("\n")]
        if self.kind == "plain" and self.path is not None:
            colored = highlight_lines(self.raw_lines, self.path)
            if colored is not None:
                return colored
        return list(self.raw_lines)

    def _markdown_lines(self, width: int) -> list[str] | None:
        if self._rendered_markdown is not None and self._markdown_width == width:
            return self._rendered_markdown
        try:
            rendered = render_markdown_with_timeout("\n".join(self.raw_lines), width, MARKDOWN_RENDER_TIMEOUT_SECONDS)
        except MarkdownRenderTimeout as exc:
            self.markdown_error = str(exc)
            return None
        self.markdown_error = None
        self._rendered_markdown = [truncate_to_width(line, width) for line in rendered]
        self._markdown_width = width
        return self._rendered_markdown

    def wrapped_lines(
        self,
        width: int,
        theme: UITheme,
        edit: PromptEditSession | None = None,
    ) -> list[str]:
        """Return display lines wrapped to ``width`` cells, using the cache."""
        width = max(1, width)
        if self._cache_valid and self._cached_width == width:
            return self._wrapped

        wrapped: list[str] = []
        numbers: list[int | None] = []
        markdown = self._markdown_lines(width) if self.kind == "markdown" else None
        if markdown is not None:
            wrapped = list(markdown)
            numbers = [None] * len(wrapped)
        else:
            for index, line in enumerate(self._logical_lines(theme, edit), start=1):
                chunks = wrap_line(line, width)
                wrapped.extend(chunks)
                numbers.append(index)
                numbers.extend([None] * (len(chunks) - 1))

        self._wrapped = wrapped
        self._wrapped_numbers = numbers
        self._cached_width = width
        self._cache_valid = True
        if self.search_query:
            self._collect_matches()
        return wrapped

    def line_number(self, wrapped_index: int) -> int | None:
        if 0 <= wrapped_index < len(self._wrapped_numbers):
            return self._wrapped_numbers[wrapped_index]
        return None

    # Scrolling -----------------------------------------------------------

    @property
    def line_count(self) -> int:
        return len(self._wrapped)

    def max_scroll(self, viewport: int) -> int:
        return max(0, len(self._wrapped) - max(1, viewport))

    def clamp_scroll(self, viewport: int) -> None:
        self.scroll = max(0, min(self.scroll, self.max_scroll(viewport)))

    def scroll_by(self, delta: int, viewport: int) -> None:
        self.scroll += delta
        self.clamp_scroll(viewport)

    def page_down(self, viewport: int) -> None:
        self.scroll_by(max(1, viewport - 1), viewport)

    def page_up(self, viewport: int) -> None:
        self.scroll_by(-max(1, viewport - 1), viewport)

    def scroll_home(self) -> None:
        self.scroll = 0

    def scroll_end(self, viewport: int) -> None:
        self.scroll = self.max_scroll(viewport)

    # Search --------------------------------------------------------------

    def _collect_matches(self) -> None:
        needle = self.search_query.lower()
        self.search_matches = [
            index for index, line in enumerate(self._wrapped) if needle in strip_ansi(line).lower()
        ]
        if not self.search_matches:
            self.current_match = -1
        elif not 0 <= self.current_match < len(self.search_matches):
            self.current_match = 0

    def set_search(self, query: str, viewport: int) -> int:
        """Search wrapped lines for ``query``; return the match count."""
        self.search_query = query
        self.current_match = -1
        if not query:
            self.search_matches = []
            return 0
        self._collect_matches()
        self._reveal_current(viewport)
        return len(self.search_matches)

    def clear_search(self) -> None:
        self.search_query = ""
        self.search_matches = []
        self.current_match = -1

    def next_match(self, viewport: int) -> bool:
        if not self.search_matches:
            return False
        self.current_match = (self.current_match + 1) % len(self.search_matches)
        self._reveal_current(viewport)
        return True

    def previous_match(self, viewport: int) -> bool:
        if not self.search_matches:
            return False
        self.current_match = (self.current_match - 1) % len(self.search_matches)
        self._reveal_current(viewport)
        return True

    def current_match_line(self) -> int | None:
        if 0 <= self.current_match < len(self.search_matches):
            return self.search_matches[self.current_match]
        return None

    def _reveal_current(self, viewport: int) -> None:
        line = self.current_match_line()
        if line is None:
            return
        viewport = max(1, viewport)
        if line < self.scroll or line >= self.scroll + viewport:
            self.scroll = line - viewport // 3
        self.clamp_scroll(viewport)

    def plain_text(self) -> str:
        """Raw text for clipboard copies (prompt bodies without headers)."""
        if self.kind == "prompt" and self.prompt is not None:
            return self.prompt.body
        return "\n".join(self.raw_lines)
