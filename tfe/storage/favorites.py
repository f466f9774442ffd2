"""Favorite paths persisted as a JSON array of absolute paths."""

from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ConfigWriteError
from . import paths

log = logging.getLogger(__name__)


class FavoritesStore:
    """In-memory favorite set mirrored to ``favorites.json`` after each change."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path if path is not None else paths.FAVORITES_PATH
        self.favorites: set[Path] = set()

    def load(self) -> set[Path]:
        """Read the store; anything but a JSON array of strings reads as empty."""
        data = paths.read_json(self.path)
        if not isinstance(data, list):
            self.favorites = set()
            return self.favorites
        self.favorites = {Path(item) for item in data if isinstance(item, str) and item}
        return self.favorites

    def save(self) -> None:
        try:
            paths.write_json(self.path, sorted(str(path) for path in self.favorites))
        except OSError as exc:
            log.debug("cannot write favorites to %s: %s", self.path, exc)
            raise ConfigWriteError(f"Could not save favorites: {exc.strerror or exc}") from exc

    def is_favorite(self, path: Path) -> bool:
        return path in self.favorites

    def toggle(self, path: Path) -> bool:
        """Flip ``path`` in the set and persist; return whether it is now a favorite.

        The in-memory set is updated even when the write fails, in which case
        ``ConfigWriteError`` is raised after the change.
        """
        path = path.absolute()
        if path in self.favorites:
            self.favorites.discard(path)
            added = False
        else:
            self.favorites.add(path)
            added = True
        self.save()
        return added
