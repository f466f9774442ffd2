"""Markdown rendering through rich, bounded by a wall-clock timeout."""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from rich.console import Console
from rich.markdown import Markdown

from ..errors import MarkdownRenderTimeout

log = logging.getLogger(__name__)

MARKDOWN_RENDER_TIMEOUT_SECONDS = 5.0


def render_markdown(text: str, width: int) -> list[str]:
    """Render markdown to ANSI-styled lines no wider than ``width`` cells."""
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        force_terminal=True,
        color_system="256",
        width=max(1, width),
        legacy_windows=False,
        soft_wrap=False,
    )
    console.print(Markdown(text))
    lines = buffer.getvalue().split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def render_markdown_with_timeout(
    text: str,
    width: int,
    timeout: float = MARKDOWN_RENDER_TIMEOUT_SECONDS,
) -> list[str]:
    """Run ``render_markdown`` in a worker thread and wait at most ``timeout``.

    Raises ``MarkdownRenderTimeout`` when the budget is exceeded; renderer
    failures propagate as ``MarkdownRenderTimeout`` too, flagged as a panic,
    so callers have one fallback path. Each call gets its own worker, and a
    render that overruns is abandoned so it never delays the next one.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tfe-markdown")
    future = executor.submit(render_markdown, text, width)
    try:
        return future.result(timeout=max(0.0, timeout))
    except FutureTimeoutError as exc:
        future.cancel()
        log.debug("markdown render exceeded %.3fs timeout, abandoning worker", timeout)
        raise MarkdownRenderTimeout(f"markdown rendering timeout after {timeout}s") from exc
    except Exception as exc:
        log.debug("markdown render failed: %s", exc)
        raise MarkdownRenderTimeout(f"markdown rendering panic: {exc}") from exc
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
