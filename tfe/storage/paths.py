"""Per-user config locations and JSON file helpers shared by the stores."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from platformdirs.unix import Unix

APP_NAME = "tfe"


def default_config_dir() -> Path:
    """XDG-style ``~/.config/tfe`` on every platform, macOS included."""
    return Path(Unix(APP_NAME, appauthor=False).user_config_dir)


CONFIG_DIR = default_config_dir()
CONFIG_PATH = CONFIG_DIR / "config.json"
FAVORITES_PATH = CONFIG_DIR / "favorites.json"
TRASH_METADATA_PATH = CONFIG_DIR / "trash.json"
TRASH_DIR = CONFIG_DIR / "trash"
HISTORY_PATH = CONFIG_DIR / "command_history.json"
CD_TARGET_PATH = Path.home() / ".tfe_cd_target"


def read_json(path: Path) -> object | None:
    """Decode ``path`` as JSON, returning ``None`` when missing or malformed."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None


def write_json(path: Path, data: object) -> None:
    """Write ``data`` as indented JSON via a temp file and rename.

    ``OSError`` propagates so each store can map it to its own error type.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)
            handle.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
