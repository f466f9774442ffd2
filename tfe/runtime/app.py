"""Application bootstrap: load preferences and stores, build state, run the loop."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from .. import layout
from ..ansi import configure_emoji_compensation
from ..file_model.predicates import is_image_file
from ..input.dispatch import KeyDispatcher
from ..render import render_frame
from ..storage import config
from ..storage.favorites import FavoritesStore
from ..storage.history import HistoryStore
from ..storage.trash import TrashStore
from ..terminal_env import detect_graphics_protocol, detect_terminal_type
from ..ui_theme import resolve_theme
from .actions import ExplorerActions
from .effects import EffectRunner
from .loop import RuntimeLoopCallbacks, run_main_loop
from .state import AppState
from .terminal import TerminalController

log = logging.getLogger(__name__)

IMAGE_TOP_OFFSET = 5


class NotATerminalError(RuntimeError):
    """stdin or stdout is not attached to a terminal."""


def build_state(
    start_dir: Path,
    *,
    show_hidden: bool | None = None,
    display_mode: str | None = None,
    home: Path | None = None,
) -> AppState:
    """Initial state from CLI overrides, falling back to saved preferences."""
    if show_hidden is None:
        show_hidden = config.load_show_hidden()
    if display_mode not in config.DISPLAY_MODES:
        display_mode = config.load_display_mode() or "list"
    return AppState(
        current_dir=start_dir.absolute(),
        home=home if home is not None else Path.home(),
        show_hidden=show_hidden,
        display_mode=display_mode,
    )


def image_geometry(state: AppState) -> tuple[int, int, int, int]:
    """1-based ``(col, row, width, height)`` for an inline image under the preview text."""
    screen = layout.compute_layout(state.width, state.height, "full")
    rect = screen.preview_rect
    top = rect.y + IMAGE_TOP_OFFSET
    return 3, top + 1, max(1, rect.width - 4), max(1, rect.height - IMAGE_TOP_OFFSET - 1)


def run_explorer(
    start_dir: Path,
    *,
    theme_name: str | None = None,
    no_color: bool = False,
    show_hidden: bool | None = None,
    display_mode: str | None = None,
) -> int:
    """Run the interactive explorer in ``start_dir``; return the exit status."""
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not (os.isatty(stdin_fd) and os.isatty(stdout_fd)):
        raise NotATerminalError("tfe needs an interactive terminal on stdin and stdout")

    terminal_type = detect_terminal_type()
    configure_emoji_compensation(terminal_type)
    protocol = detect_graphics_protocol()
    log.debug("terminal %s, graphics protocol %s", terminal_type, protocol)

    theme = resolve_theme(theme_name or config.load_theme_name(), no_color=no_color)
    favorites = FavoritesStore()
    favorites.load()
    trash = TrashStore()
    history_store = HistoryStore()

    state = build_state(start_dir, show_hidden=show_hidden, display_mode=display_mode)
    history_store.load()

    terminal = TerminalController(stdin_fd, stdout_fd)
    state.width, state.height = terminal.size()

    actions = ExplorerActions(
        state,
        theme=theme,
        favorites=favorites,
        trash=trash,
        history_store=history_store,
    )
    actions.change_directory(state.current_dir)
    dispatcher = KeyDispatcher(actions)
    runner = EffectRunner(terminal)

    def current_image() -> Path | None:
        path = state.preview.path
        if state.view_mode == "full" and path is not None and is_image_file(path):
            return path
        return None

    callbacks = RuntimeLoopCallbacks(
        render=lambda: render_frame(state, theme, favorites.favorites),
        handle_key=dispatcher.handle,
        run_effect=runner.run,
        finish_effect=actions.finish_effect,
        on_resize=actions.refresh_preview_lines,
        current_image=current_image,
        image_geometry=lambda: image_geometry(state),
    )
    run_main_loop(state, terminal, stdin_fd, callbacks, graphics_protocol=protocol)
    return 0
