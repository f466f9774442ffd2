"""Modal input, confirm, and message dialogs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .ansi import visual_width, wrap_line
from .input.command_line import insertable_text

DIALOG_KINDS = ("input", "confirm", "message")
INPUT_HINT = "Enter: confirm | Esc: cancel"
CONFIRM_HINT = "[Y]es / [N]o / [Esc]"
MESSAGE_HINT = "Press any key to close"
DIALOG_MIN_WIDTH = 40
DIALOG_MAX_WIDTH = 70

CONFIRMED = "confirm"
CANCELLED = "cancel"


@dataclass
class Dialog:
    """One open dialog.

    ``action`` names what a confirmation does (``"rename"``,
    ``"new-folder"``...) and ``target`` is the path it applies to.
    """

    kind: str
    title: str
    message: str
    action: str = ""
    target: Path | None = None
    buffer: str = ""
    is_error: bool = False
    extra: dict[str, object] = field(default_factory=dict)

    @property
    def hint(self) -> str:
        if self.kind == "input":
            return INPUT_HINT
        if self.kind == "confirm":
            return CONFIRM_HINT
        return MESSAGE_HINT

    def handle_key(self, key: str) -> str | None:
        """Apply ``key``; return ``CONFIRMED``/``CANCELLED`` when the dialog closes."""
        if self.kind == "message":
            return CANCELLED
        if self.kind == "confirm":
            if key in ("y", "Y"):
                return CONFIRMED
            if key in ("n", "N", "ESC"):
                return CANCELLED
            return None
        if key in ("ENTER", "ENTER_CR", "ENTER_LF"):
            return CONFIRMED
        if key == "ESC":
            return CANCELLED
        if key == "BACKSPACE":
            self.buffer = self.buffer[:-1]
            return None
        if key == "CTRL_U":
            self.buffer = ""
            return None
        text = insertable_text(key)
        if text:
            self.buffer += text
        return None


def input_dialog(title: str, message: str, action: str, target: Path | None = None, initial: str = "") -> Dialog:
    return Dialog("input", title, message, action=action, target=target, buffer=initial)


def confirm_dialog(title: str, message: str, action: str, target: Path | None = None) -> Dialog:
    return Dialog("confirm", title, message, action=action, target=target)


def message_dialog(title: str, message: str, is_error: bool = False) -> Dialog:
    return Dialog("message", title, message, is_error=is_error)


def dialog_width(dialog: Dialog, screen_width: int) -> int:
    """Outer box width, sized to the longest message line within bounds."""
    longest = max(
        [visual_width(line) for line in dialog.message.split("\n")]
        + [visual_width(dialog.title) + 4, visual_width(dialog.hint)]
    )
    width = max(DIALOG_MIN_WIDTH, min(DIALOG_MAX_WIDTH, longest + 4))
    return max(4, min(width, screen_width - 2))


def dialog_body(dialog: Dialog, inner_width: int) -> list[str]:
    """Body rows inside the border: message, optional input field, hint."""
    text_width = max(1, inner_width - 2)
    rows: list[str] = [""]
    for line in dialog.message.split("\n"):
        rows.extend(" " + chunk for chunk in wrap_line(line, text_width))
    rows.append("")
    if dialog.kind == "input":
        field_text = dialog.buffer + "█"
        overflow = visual_width(field_text) - text_width
        if overflow > 0:
            field_text = field_text[overflow:]
        rows.append(" " + field_text)
        rows.append("")
    rows.append(" " + dialog.hint)
    return rows


def dialog_origin(box_width: int, box_height: int, screen_width: int, screen_height: int) -> tuple[int, int]:
    return max(0, (screen_width - box_width) // 2), max(0, (screen_height - box_height) // 2)
