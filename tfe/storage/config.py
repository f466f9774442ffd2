"""Persistent JSON preferences.

Stores hidden-file visibility, the preferred display mode, and the theme.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import logging

from . import paths

log = logging.getLogger(__name__)

DISPLAY_MODES = ("list", "grid", "detail", "tree")


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    data = paths.read_json(paths.CONFIG_PATH)
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Preferences are a convenience, so write failures are logged and dropped.
    """
    try:
        paths.write_json(paths.CONFIG_PATH, data)
    except OSError as exc:
        log.debug("cannot save preferences to %s: %s", paths.CONFIG_PATH, exc)


def load_show_hidden() -> bool:
    """Return persisted hidden-file visibility preference."""
    value = load_config().get("show_hidden")
    return bool(value) if isinstance(value, bool) else False


def save_show_hidden(show_hidden: bool) -> None:
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)


def load_display_mode() -> str | None:
    value = load_config().get("display_mode")
    return value if value in DISPLAY_MODES else None


def save_display_mode(mode: str) -> None:
    if mode not in DISPLAY_MODES:
        return
    config = load_config()
    config["display_mode"] = mode
    save_config(config)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None
