"""Terminal identity and graphics-protocol detection from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

TERMINAL_TYPES = (
    "windows-terminal",
    "wezterm",
    "iterm2",
    "kitty",
    "termux",
    "xterm",
    "unknown",
)
GRAPHICS_PROTOCOLS = ("kitty", "iterm2", "sixel", "none")


def _env(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def detect_terminal_type(environ: Mapping[str, str] | None = None) -> str:
    """Classify the hosting terminal emulator.

    ``TFE_TERMINAL_TYPE`` wins when it names a known type; otherwise the
    emulator-specific markers are checked from most to least specific.
    """
    env = _env(environ)
    override = env.get("TFE_TERMINAL_TYPE", "").strip().lower()
    if override in TERMINAL_TYPES:
        return override
    if env.get("WT_SESSION"):
        return "windows-terminal"
    term_program = env.get("TERM_PROGRAM", "")
    if env.get("WEZTERM_EXECUTABLE") or term_program == "WezTerm":
        return "wezterm"
    if term_program == "iTerm.app":
        return "iterm2"
    term = env.get("TERM", "")
    if "kitty" in term or env.get("KITTY_WINDOW_ID"):
        return "kitty"
    if "com.termux" in env.get("PREFIX", ""):
        return "termux"
    if "xterm" in term:
        return "xterm"
    return "unknown"


def is_wsl(environ: Mapping[str, str] | None = None, proc_version: Path = Path("/proc/version")) -> bool:
    env = _env(environ)
    if env.get("WSL_DISTRO_NAME") or env.get("WSL_INTEROP"):
        return True
    try:
        return "microsoft" in proc_version.read_text(encoding="utf-8", errors="replace").lower()
    except OSError:
        return False


def detect_graphics_protocol(
    environ: Mapping[str, str] | None = None,
    *,
    wsl: bool | None = None,
) -> str:
    """Pick the inline image protocol the terminal can display.

    Order: explicit ``TFE_TERMINAL_PROTOCOL`` override, Kitty markers, WezTerm
    (kitty protocol natively, but unsupported across the WSL boundary),
    iTerm2, then ``"none"``.
    """
    env = _env(environ)
    override = env.get("TFE_TERMINAL_PROTOCOL", "").strip().lower()
    if override in GRAPHICS_PROTOCOLS:
        return override

    if "kitty" in env.get("TERM", "") or env.get("KITTY_WINDOW_ID"):
        return "kitty"

    is_wezterm = bool(env.get("WEZTERM_EXECUTABLE")) or env.get("TERM_PROGRAM") == "WezTerm"
    if is_wezterm:
        running_in_wsl = is_wsl(env) if wsl is None else wsl
        if running_in_wsl:
            return "none"
        return "kitty"

    if env.get("TERM_PROGRAM") == "iTerm.app":
        return "iterm2"
    return "none"
