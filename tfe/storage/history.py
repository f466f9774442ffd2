"""Command-line history with de-duplication and an on-disk copy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import ConfigWriteError
from . import paths

log = logging.getLogger(__name__)

MAX_HISTORY = 100
HISTORY_FORMAT_VERSION = 2


def push_history(entries: list[str], command: str, limit: int = MAX_HISTORY) -> list[str]:
    """Append ``command`` after dropping any earlier copy, keeping the newest ``limit``."""
    updated = [entry for entry in entries if entry != command]
    updated.append(command)
    return updated[-limit:]


@dataclass
class CommandHistory:
    """History list plus a browsing cursor; ``position == len(entries)`` is past the end."""

    entries: list[str] = field(default_factory=list)
    position: int = 0

    def add(self, command: str) -> None:
        command = command.strip()
        if not command:
            return
        self.entries = push_history(self.entries, command)
        self.position = len(self.entries)

    def reset_position(self) -> None:
        self.position = len(self.entries)

    def previous(self) -> str | None:
        if not self.entries:
            return None
        if self.position > 0:
            self.position -= 1
        return self.entries[self.position]

    def next(self) -> str:
        """Step forward; stepping past the newest entry yields an empty buffer."""
        if self.position < len(self.entries) - 1:
            self.position += 1
            return self.entries[self.position]
        self.position = len(self.entries)
        return ""


class HistoryStore:
    """``command_history.json`` with a global list and per-directory lists."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path if path is not None else paths.HISTORY_PATH
        self.global_entries: list[str] = []
        self.directories: dict[str, list[str]] = {}

    @staticmethod
    def _strings(value: object) -> list[str]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str) and item][-MAX_HISTORY:]

    def load(self) -> CommandHistory:
        data = paths.read_json(self.path)
        if isinstance(data, list):
            # Version 1 stored a bare array of commands.
            self.global_entries = self._strings(data)
        elif isinstance(data, dict):
            self.global_entries = self._strings(data.get("global"))
            raw_dirs = data.get("directories")
            if isinstance(raw_dirs, dict):
                self.directories = {str(key): self._strings(value) for key, value in raw_dirs.items()}
        history = CommandHistory(entries=list(self.global_entries))
        history.reset_position()
        return history

    def record(self, command: str, directory: Path) -> None:
        """Remember ``command`` globally and under ``directory``."""
        command = command.strip()
        if not command:
            return
        self.global_entries = push_history(self.global_entries, command)
        key = str(directory)
        self.directories[key] = push_history(self.directories.get(key, []), command)

    def for_directory(self, directory: Path) -> list[str]:
        return list(self.directories.get(str(directory), []))

    def history_for(self, directory: Path) -> CommandHistory:
        """Browsing list for ``directory``: Up reaches its own commands before global ones."""
        local = self.for_directory(directory)
        shared = [entry for entry in self.global_entries if entry not in local]
        history = CommandHistory(entries=(shared + local)[-MAX_HISTORY:])
        history.reset_position()
        return history

    def save(self) -> None:
        payload = {
            "version": HISTORY_FORMAT_VERSION,
            "global": self.global_entries,
            "directories": self.directories,
        }
        try:
            paths.write_json(self.path, payload)
        except OSError as exc:
            log.debug("cannot write history to %s: %s", self.path, exc)
            raise ConfigWriteError(f"Could not save command history: {exc.strerror or exc}") from exc
