"""On-disk stores under the per-user config directory."""

from .favorites import FavoritesStore
from .history import MAX_HISTORY, CommandHistory, HistoryStore, push_history
from .trash import TrashRecord, TrashStore

__all__ = [
    "MAX_HISTORY",
    "CommandHistory",
    "FavoritesStore",
    "HistoryStore",
    "TrashRecord",
    "TrashStore",
    "push_history",
]
