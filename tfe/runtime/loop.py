"""Main interactive event loop for the explorer.

Coordinates resize bookkeeping, status expiry, rendering, image overlays,
input dispatch, and running deferred effects. Feature logic lives in the
injected callbacks.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..input.reader import read_key
from ..services.graphics import kitty_clear_sequence, try_render_image
from .effects import Effect, EffectResult
from .state import AppState
from .terminal import TerminalController

READ_TIMEOUT_MS = 120


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    render: Callable[[], str]
    handle_key: Callable[[str], Effect | None]
    run_effect: Callable[[Effect], EffectResult]
    finish_effect: Callable[[EffectResult], None]
    on_resize: Callable[[], None]
    current_image: Callable[[], Path | None]
    image_geometry: Callable[[], tuple[int, int, int, int]]


def run_main_loop(
    state: AppState,
    terminal: TerminalController,
    stdin_fd: int,
    callbacks: RuntimeLoopCallbacks,
    graphics_protocol: str = "none",
) -> None:
    """Run the TUI until an action sets ``state.quit_requested``."""
    ops = callbacks
    image_state: tuple[str, int, int, int, int] | None = None
    skip_next_lf = False

    with terminal.raw_mode():
        while not state.quit_requested:
            width, height = terminal.size()
            if (width, height) != (state.width, state.height):
                state.width, state.height = width, height
                ops.on_resize()
                state.dirty = True

            terminal.set_mouse_reporting(not state.text_selection_mode)

            now = time.monotonic()
            if state.status is not None and state.status.expired(now, sticky=state.prompt_edit is not None):
                state.status = None
                state.dirty = True

            if state.dirty:
                terminal.write(ops.render())
                image_path = ops.current_image() if graphics_protocol != "none" else None
                desired: tuple[str, int, int, int, int] | None = None
                if image_path is not None:
                    desired = (str(image_path), *ops.image_geometry())
                if desired != image_state:
                    if image_state is not None and graphics_protocol == "kitty":
                        terminal.write(kitty_clear_sequence())
                    if desired is not None and image_path is not None:
                        col, row, cols, rows = desired[1:]
                        payload = try_render_image(
                            image_path,
                            graphics_protocol,
                            col=col,
                            row=row,
                            width_cells=cols,
                            height_cells=rows,
                        )
                        if payload:
                            terminal.write(payload)
                    image_state = desired
                state.dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=READ_TIMEOUT_MS)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue
            if skip_next_lf and key == "ENTER_LF":
                skip_next_lf = False
                continue
            if key == "ENTER_CR":
                key = "ENTER"
                skip_next_lf = True
            elif key == "ENTER_LF":
                key = "ENTER"
                skip_next_lf = False
            else:
                skip_next_lf = False

            effect = ops.handle_key(key)
            if effect is None:
                continue
            result = ops.run_effect(effect)
            # The child owned the screen; everything must be drawn again.
            image_state = None
            state.dirty = True
            ops.finish_effect(result)
