"""Hand files to the platform's default opener without waiting."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

from ..errors import SubprocessSpawnError
from ..terminal_env import is_wsl

log = logging.getLogger(__name__)


def opener_command(
    target: Path,
    which: Callable[[str], str | None] = shutil.which,
    wsl: bool | None = None,
) -> list[str] | None:
    running_in_wsl = is_wsl() if wsl is None else wsl
    if running_in_wsl:
        if which("wslview") is not None:
            return ["wslview", str(target)]
        if which("cmd.exe") is not None:
            return ["cmd.exe", "/c", "start", "", str(target)]
    if which("xdg-open") is not None:
        return ["xdg-open", str(target)]
    if which("open") is not None:
        return ["open", str(target)]
    return None


def open_in_browser(target: Path) -> None:
    """Start the opener detached from the terminal."""
    cmd = opener_command(target)
    if cmd is None:
        raise SubprocessSpawnError("No browser opener found (wslview, xdg-open, open)")
    log.debug("opening %s with %s", target, cmd[0])
    try:
        subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        raise SubprocessSpawnError(f"Cannot open {target.name}: {exc.strerror or exc}") from exc
