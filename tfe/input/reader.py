"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, CSI function keys, SGR mouse events, and
bracketed paste.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
PASTE_TIMEOUT_MS = 200
MAX_PASTE_BYTES = 1 << 20
PASTE_START = "\x1b[200~"
PASTE_END = "\x1b[201~"
_PENDING_BYTES: list[bytes] = []

_CONTROL_TOKENS = {
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER_CR",
    b"\n": "ENTER_LF",
}

_TILDE_KEYS = {
    1: "HOME",
    2: "INSERT",
    3: "DELETE",
    4: "END",
    5: "PAGE_UP",
    6: "PAGE_DOWN",
    7: "HOME",
    8: "END",
    11: "F1",
    12: "F2",
    13: "F3",
    14: "F4",
    15: "F5",
    17: "F6",
    18: "F7",
    19: "F8",
    20: "F9",
    21: "F10",
    23: "F11",
    24: "F12",
}

_FINAL_KEYS = {
    "A": "UP",
    "B": "DOWN",
    "C": "RIGHT",
    "D": "LEFT",
    "H": "HOME",
    "F": "END",
    "Z": "SHIFT_TAB",
    "P": "F1",
    "Q": "F2",
    "R": "F3",
    "S": "F4",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    if _PENDING_BYTES:
        return _PENDING_BYTES.pop(0)
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _control_token(ch: bytes) -> str | None:
    token = _CONTROL_TOKENS.get(ch)
    if token is not None:
        return token
    code = ch[0]
    if 1 <= code <= 26:
        return f"CTRL_{chr(ord('A') + code - 1)}"
    return None


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_text_char(fd: int, first: bytes) -> str:
    data = first
    for _ in range(_utf8_length(first[0]) - 1):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def _read_paste(fd: int) -> str:
    """Collect bytes up to the paste-end marker; returns the full marked token."""
    end = PASTE_END.encode("ascii")
    data = bytearray()
    while not data.endswith(end) and len(data) < MAX_PASTE_BYTES:
        ch = _read_ready_byte(fd, PASTE_TIMEOUT_MS)
        if ch is None:
            break
        data += ch
    text = bytes(data).decode("utf-8", errors="replace")
    if not text.endswith(PASTE_END):
        text += PASTE_END
    return PASTE_START + text


def _mouse_token(payload: str, final: str) -> str:
    # SGR mouse: ESC [ < btn ; col ; row (M = press, m = release)
    try:
        btn_s, col_s, row_s = payload.split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return "ESC"
    button = btn & 0b11
    if btn & 0b0100_0000:
        direction = {0: "UP", 1: "DOWN", 2: "LEFT", 3: "RIGHT"}[button]
        return f"MOUSE_WHEEL_{direction}:{col}:{row}"
    if btn & 0b0010_0000:
        return f"MOUSE_MOVE:{col}:{row}"
    suffix = "DOWN" if final == "M" else "UP"
    if button == 0:
        return f"MOUSE_LEFT_{suffix}:{col}:{row}"
    if button == 2:
        return f"MOUSE_RIGHT_{suffix}:{col}:{row}"
    if button == 1:
        return f"MOUSE_MIDDLE_{suffix}:{col}:{row}"
    return "MOUSE"


def _read_csi(fd: int) -> str:
    params = ""
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        ch = part.decode("latin-1")
        if "\x40" <= ch <= "\x7e":
            final = ch
            break
        params += ch
        if len(params) > 64:
            return "ESC"

    if params.startswith("<") and final in ("M", "m"):
        return _mouse_token(params[1:], final)
    if final == "~":
        first = params.split(";", 1)[0]
        if first == "200":
            return _read_paste(fd)
        try:
            return _TILDE_KEYS.get(int(first), "ESC")
        except ValueError:
            return "ESC"
    modifier = params.split(";")[1] if ";" in params else ""
    if final in ("C", "D") and modifier == "2":
        return "SHIFT_RIGHT" if final == "C" else "SHIFT_LEFT"
    if final in ("C", "D") and modifier in ("3", "9"):
        return "ALT_RIGHT" if final == "C" else "ALT_LEFT"
    return _FINAL_KEYS.get(final, "ESC")


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Block for the next key token; ``""`` on timeout or EOF."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch != b"\x1b":
        token = _control_token(ch)
        if token is not None:
            return token
        return _read_text_char(fd, ch)

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _FINAL_KEYS.get(final.decode("latin-1"), "ESC")
    if seq in {b"b", b"B"}:
        return "ALT_LEFT"
    if seq in {b"f", b"F"}:
        return "ALT_RIGHT"
    _PENDING_BYTES.append(seq)
    return "ESC"
