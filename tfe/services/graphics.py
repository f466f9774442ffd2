"""Inline image escapes for terminals with a graphics protocol."""

from __future__ import annotations

import base64
import logging
from pathlib import Path

log = logging.getLogger(__name__)

KITTY_FORMATS = frozenset({".png"})
ITERM2_MAX_BYTES = 10 * 1024 * 1024


def kitty_clear_sequence() -> str:
    """Delete all kitty placements from the current screen."""
    return "\x1b_Ga=d,d=A,q=2;\x1b\\"


def _positioned(payload: str, col: int, row: int) -> str:
    return f"\x1b7\x1b[{max(1, row)};{max(1, col)}H{payload}\x1b8"


def _kitty_payload(path: Path, width_cells: int, height_cells: int) -> str:
    encoded_path = base64.b64encode(str(path).encode("utf-8")).decode("ascii")
    return (
        f"\x1b_Ga=T,t=f,f=100,q=2,c={max(1, width_cells)},r={max(1, height_cells)};"
        f"{encoded_path}\x1b\\"
    )


def _iterm2_payload(data: bytes, name: str, width_cells: int, height_cells: int) -> str:
    encoded_name = base64.b64encode(name.encode("utf-8")).decode("ascii")
    encoded = base64.b64encode(data).decode("ascii")
    return (
        f"\x1b]1337;File=name={encoded_name};size={len(data)};inline=1;"
        f"width={max(1, width_cells)};height={max(1, height_cells)};preserveAspectRatio=1:"
        f"{encoded}\x07"
    )


def try_render_image(
    path: Path,
    protocol: str,
    *,
    col: int = 1,
    row: int = 1,
    width_cells: int = 40,
    height_cells: int = 20,
) -> str | None:
    """Return the escape sequence drawing ``path`` at ``(col, row)``, or ``None``.

    ``None`` means the image cannot be shown: no protocol, a format the
    protocol cannot decode itself, an unreadable file, or sixel (no encoder).
    """
    if protocol == "kitty":
        if path.suffix.lower() not in KITTY_FORMATS or not path.is_file():
            return None
        return _positioned(_kitty_payload(path.resolve(), width_cells, height_cells), col, row)
    if protocol == "iterm2":
        try:
            if path.stat().st_size > ITERM2_MAX_BYTES:
                return None
            data = path.read_bytes()
        except OSError as exc:
            log.debug("cannot read image %s: %s", path, exc)
            return None
        return _positioned(_iterm2_payload(data, path.name, width_cells, height_cells), col, row)
    return None
