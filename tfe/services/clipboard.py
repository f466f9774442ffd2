"""Clipboard copy through whichever platform utility is installed."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable

from ..errors import ClipboardUnavailable

log = logging.getLogger(__name__)

CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("termux-clipboard-set",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("pbcopy",),
    ("clip.exe",),
)


def copy_to_clipboard(
    text: str,
    which: Callable[[str], str | None] = shutil.which,
) -> str:
    """Copy ``text`` with the first working backend and return its name.

    Raises ``ClipboardUnavailable`` when no backend is installed or every
    installed one fails.
    """
    tried: list[str] = []
    for command in CLIPBOARD_COMMANDS:
        if which(command[0]) is None:
            continue
        tried.append(command[0])
        try:
            proc = subprocess.run(
                list(command),
                input=text,
                text=True,
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=5,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            log.debug("clipboard backend %s failed: %s", command[0], exc)
            continue
        if proc.returncode == 0:
            return command[0]
        log.debug("clipboard backend %s exited with %s", command[0], proc.returncode)
    if tried:
        raise ClipboardUnavailable(f"Clipboard copy failed ({', '.join(tried)})")
    raise ClipboardUnavailable("No clipboard utility found (install termux-api, xclip, xsel, or use WSL)")
