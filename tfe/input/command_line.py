"""Persistent command line: edit buffer, history browsing, paste cleanup."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..storage.history import CommandHistory

# Marker forms seen from terminals that do and don't pass the leading ESC.
PASTE_MARKERS = ("\x1b[200~", "\x1b[201~", "[200~", "[201~")

SPECIAL_KEYS = frozenset(
    {
        "UP",
        "DOWN",
        "LEFT",
        "RIGHT",
        "HOME",
        "END",
        "PAGE_UP",
        "PAGE_DOWN",
        "INSERT",
        "DELETE",
        "TAB",
        "SHIFT_TAB",
        "BACKSPACE",
        "ENTER",
        "ENTER_CR",
        "ENTER_LF",
        "ESC",
        "SHIFT_LEFT",
        "SHIFT_RIGHT",
        "ALT_LEFT",
        "ALT_RIGHT",
        "MOUSE",
        *(f"F{n}" for n in range(1, 13)),
    }
)
SPECIAL_PREFIXES = ("CTRL_", "MOUSE_")


def strip_paste_markers(text: str) -> str:
    for marker in PASTE_MARKERS:
        text = text.replace(marker, "")
    return text


def is_paste(key: str) -> bool:
    return any(marker in key for marker in PASTE_MARKERS)


def is_special_key(key: str) -> bool:
    return key in SPECIAL_KEYS or key.startswith(SPECIAL_PREFIXES)


def insertable_text(key: str) -> str | None:
    """Text a key token contributes to an input buffer, or ``None``.

    Pastes are flattened onto one line; named keys never insert anything.
    """
    if not key:
        return None
    if is_paste(key):
        text = strip_paste_markers(key).replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
        return text or None
    if is_special_key(key):
        return None
    if len(key) == 1 and key.isprintable():
        return key
    return None


@dataclass(frozen=True)
class CommandRequest:
    kind: str
    command: str = ""


def parse_command(buffer: str) -> CommandRequest:
    """Classify a submitted buffer: ``empty``, ``quit``, ``run``, or ``run_and_exit``."""
    command = buffer.strip()
    if not command:
        return CommandRequest("empty")
    if command.lower() in ("exit", "quit"):
        return CommandRequest("quit")
    if command.startswith("!"):
        rest = command[1:].strip()
        if not rest:
            return CommandRequest("empty")
        return CommandRequest("run_and_exit", rest)
    return CommandRequest("run", command)


@dataclass
class CommandLine:
    buffer: str = ""
    cursor: int = 0
    focused: bool = False
    history: CommandHistory = field(default_factory=CommandHistory)

    @property
    def active(self) -> bool:
        return self.focused or bool(self.buffer)

    def set_buffer(self, text: str) -> None:
        self.buffer = text
        self.cursor = len(text)

    def insert(self, text: str) -> None:
        self.buffer = self.buffer[: self.cursor] + text + self.buffer[self.cursor :]
        self.cursor += len(text)

    def backspace(self) -> None:
        if self.cursor > 0:
            self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
            self.cursor -= 1

    def delete(self) -> None:
        self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]

    def move(self, delta: int) -> None:
        self.cursor = max(0, min(len(self.buffer), self.cursor + delta))

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.buffer)

    def kill_to_start(self) -> None:
        self.buffer = self.buffer[self.cursor :]
        self.cursor = 0

    def kill_to_end(self) -> None:
        self.buffer = self.buffer[: self.cursor]

    def history_previous(self) -> None:
        entry = self.history.previous()
        if entry is not None:
            self.set_buffer(entry)

    def history_next(self) -> None:
        self.set_buffer(self.history.next())

    def clear(self) -> None:
        self.buffer = ""
        self.cursor = 0
        self.focused = False
        self.history.reset_position()

    def submit(self) -> CommandRequest:
        """Take the buffer as a request, recording runnable commands in history."""
        request = parse_command(self.buffer)
        if request.kind in ("run", "run_and_exit"):
            self.history.add(self.buffer.strip())
        self.clear()
        return request
