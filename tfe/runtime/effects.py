"""Deferred side effects that need the terminal.

Input handlers never spawn foreground programs themselves; they return an
``Effect`` and the loop runs it here with the TUI suspended, then hands the
``EffectResult`` back to the actions layer as a subprocess-finished event.
"""

from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from ..errors import SubprocessSpawnError
from ..services import browser, editor, fuzzy, git, shell
from .terminal import TerminalController

log = logging.getLogger(__name__)

EFFECT_KINDS = ("editor", "shell", "script", "git", "fuzzy", "browser")
PAUSE_PROMPT = "Press any key to continue..."


@dataclass(frozen=True)
class Effect:
    kind: str
    path: Path | None = None
    command: str = ""
    cwd: Path | None = None
    operation: str = ""
    exit_after: bool = False

    @property
    def needs_terminal(self) -> bool:
        return self.kind != "browser"


def edit_file(path: Path) -> Effect:
    return Effect("editor", path=path)


def run_shell(command: str, cwd: Path, exit_after: bool = False) -> Effect:
    return Effect("shell", command=command, cwd=cwd, exit_after=exit_after)


def run_script(path: Path) -> Effect:
    return Effect("script", path=path, cwd=path.parent)


def git_operation(operation: str, repo: Path) -> Effect:
    return Effect("git", operation=operation, cwd=repo)


def fuzzy_search(root: Path) -> Effect:
    return Effect("fuzzy", cwd=root)


def open_browser(path: Path) -> Effect:
    return Effect("browser", path=path)


@dataclass(frozen=True)
class EffectResult:
    effect: Effect
    exit_code: int | None = None
    error: str | None = None
    selected: Path | None = None


def _echo(stdout_fd: int, text: str) -> None:
    os.write(stdout_fd, text.encode("utf-8", errors="replace"))


@contextlib.contextmanager
def suspended(terminal: TerminalController) -> Iterator[None]:
    """Leave raw/alternate-screen mode for a foreground child, then come back."""
    terminal.disable_tui_mode()
    try:
        yield
    finally:
        terminal.enable_tui_mode()


class EffectRunner:
    """Execute effects against a terminal controller."""

    def __init__(
        self,
        terminal: TerminalController,
        *,
        wait_for_key: Callable[[], None] | None = None,
    ) -> None:
        self.terminal = terminal
        self._wait_for_key = wait_for_key if wait_for_key is not None else terminal.wait_for_keypress

    def _pause(self, exit_code: int) -> None:
        _echo(self.terminal.stdout_fd, f"\nExit code: {exit_code}\n\n{PAUSE_PROMPT}")
        self._wait_for_key()

    def run(self, effect: Effect) -> EffectResult:
        try:
            if not effect.needs_terminal:
                assert effect.path is not None
                browser.open_in_browser(effect.path)
                return EffectResult(effect, exit_code=0)
            with suspended(self.terminal):
                return self._run_foreground(effect)
        except SubprocessSpawnError as exc:
            log.debug("effect %s failed: %s", effect.kind, exc)
            return EffectResult(effect, error=str(exc))

    def _run_foreground(self, effect: Effect) -> EffectResult:
        if effect.kind == "editor":
            assert effect.path is not None
            return EffectResult(effect, exit_code=editor.open_in_editor(effect.path))
        if effect.kind == "shell":
            cwd = effect.cwd or Path.cwd()
            _echo(self.terminal.stdout_fd, f"$ {effect.command}\n")
            code = shell.run_command(effect.command, cwd)
            self._pause(code)
            return EffectResult(effect, exit_code=code)
        if effect.kind == "script":
            assert effect.path is not None
            _echo(self.terminal.stdout_fd, f"$ {shell.shell_quote(str(effect.path))}\n")
            code = shell.run_file(effect.path)
            self._pause(code)
            return EffectResult(effect, exit_code=code)
        if effect.kind == "git":
            assert effect.cwd is not None
            return EffectResult(effect, exit_code=git.run_git_operation(effect.operation, effect.cwd))
        if effect.kind == "fuzzy":
            root = effect.cwd or Path.cwd()
            return EffectResult(effect, exit_code=0, selected=fuzzy.fuzzy_find_file(root))
        raise ValueError(f"unknown effect kind: {effect.kind}")
