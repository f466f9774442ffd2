"""Core file-listing data types shared by the model, renderers, and input."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

PARENT_NAME = ".."

SORT_KEYS = ("name", "size", "modified", "type")


@dataclass(frozen=True)
class FileEntry:
    """One row of a directory listing.

    ``modified`` is epoch seconds. ``trashed_path`` is only set for rows built
    from trash records, where it identifies the record to restore or purge.
    """

    name: str
    path: Path
    is_dir: bool
    is_symlink: bool = False
    symlink_target: str | None = None
    is_broken_link: bool = False
    size: int = 0
    modified: float = 0.0
    mode: int = 0
    trashed_path: Path | None = None

    @property
    def is_parent(self) -> bool:
        return self.name == PARENT_NAME

    @property
    def extension(self) -> str:
        if self.is_dir:
            return ""
        return Path(self.name).suffix.lower()


@dataclass(frozen=True)
class TreeNode:
    """Flattened tree row with the box-drawing context it needs."""

    entry: FileEntry
    depth: int
    is_last: bool
    parent_is_last: tuple[bool, ...] = ()


@dataclass
class DirectoryListing:
    """Rows for one directory plus an optional user-facing load error."""

    directory: Path
    entries: list[FileEntry] = field(default_factory=list)
    error: str | None = None
