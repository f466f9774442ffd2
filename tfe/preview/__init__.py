"""Preview subsystem: load, classify, wrap, scroll, and search file content."""

from .markdown import MARKDOWN_RENDER_TIMEOUT_SECONDS, render_markdown, render_markdown_with_timeout
from .model import (
    BINARY_SNIFF_BYTES,
    MAX_PREVIEW_BYTES,
    MAX_PREVIEW_LINES,
    WHEEL_SCROLL_LINES,
    Preview,
    scrollbar_thumb,
)

__all__ = [
    "BINARY_SNIFF_BYTES",
    "MARKDOWN_RENDER_TIMEOUT_SECONDS",
    "MAX_PREVIEW_BYTES",
    "MAX_PREVIEW_LINES",
    "WHEEL_SCROLL_LINES",
    "Preview",
    "render_markdown",
    "render_markdown_with_timeout",
    "scrollbar_thumb",
]
