"""Directory loading, ordering, and view filters."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from ..errors import ReadDirError, StatError
from .predicates import (
    GLOBAL_PROMPTS_LABEL,
    IMPORTANT_FOLDERS,
    PROMPT_FOLDERS,
    PromptDirectoryCache,
    global_prompts_dir,
    is_inside_important_folder,
    is_prompt_entry,
)
from .types import PARENT_NAME, SORT_KEYS, DirectoryListing, FileEntry

log = logging.getLogger(__name__)


def is_root(directory: Path) -> bool:
    return directory.parent == directory


def parent_entry(directory: Path) -> FileEntry:
    return FileEntry(name=PARENT_NAME, path=directory.parent, is_dir=True)


def stat_entry(path: Path, name: str | None = None) -> FileEntry:
    """Build a ``FileEntry`` from ``lstat`` plus symlink resolution.

    Raises ``StatError`` when the entry itself cannot be stat'ed. A symlink
    whose target is missing is returned with ``is_broken_link`` set.
    """
    try:
        info = path.lstat()
    except OSError as exc:
        raise StatError(f"cannot stat {path}: {exc}") from exc

    is_symlink = path.is_symlink()
    is_dir = os.path.isdir(path) if is_symlink else path.is_dir()
    target: str | None = None
    broken = False
    size = info.st_size
    if is_symlink:
        try:
            target = os.readlink(path)
        except OSError:
            target = None
        broken = not path.exists()
        if not broken and not is_dir:
            try:
                size = path.stat().st_size
            except OSError:
                broken = True
    return FileEntry(
        name=name if name is not None else path.name,
        path=path,
        is_dir=is_dir,
        is_symlink=is_symlink,
        symlink_target=target,
        is_broken_link=broken,
        size=0 if is_dir else int(size),
        modified=float(info.st_mtime),
        mode=int(info.st_mode),
    )


def load_directory(directory: Path, show_hidden: bool = False) -> DirectoryListing:
    """Read ``directory`` into a default-ordered listing.

    Permission problems come back as an empty listing carrying an error
    message; any other failure to list raises ``ReadDirError``. Entries that
    fail to stat are skipped.
    """
    directory = directory.absolute()
    listing = DirectoryListing(directory=directory)
    if not is_root(directory):
        listing.entries.append(parent_entry(directory))

    try:
        with os.scandir(directory) as scanned:
            names = [child.name for child in scanned]
    except PermissionError as exc:
        listing.error = f"Permission denied: {directory}"
        log.debug("cannot list %s: %s", directory, exc)
        return listing
    except OSError as exc:
        raise ReadDirError(f"cannot read {directory}: {exc.strerror or exc}") from exc

    reveal_all = show_hidden or is_inside_important_folder(directory)
    dirs: list[FileEntry] = []
    files: list[FileEntry] = []
    for name in names:
        if not reveal_all and name.startswith(".") and name not in IMPORTANT_FOLDERS:
            continue
        try:
            entry = stat_entry(directory / name, name)
        except StatError as exc:
            log.debug("skipping entry: %s", exc)
            continue
        (dirs if entry.is_dir else files).append(entry)

    dirs.sort(key=lambda item: item.name.lower())
    files.sort(key=lambda item: item.name.lower())
    listing.entries.extend(dirs)
    listing.entries.extend(files)
    return listing


def _sort_value(entry: FileEntry, key: str) -> object:
    if key == "size":
        return entry.size
    if key == "modified":
        return entry.modified
    if key == "type":
        return entry.extension
    return entry.name.lower()


def sort_entries(entries: Iterable[FileEntry], key: str = "name", ascending: bool = True) -> list[FileEntry]:
    """Return entries ordered by ``key``; directories always precede files.

    The parent row stays pinned at the top. Ties fall back to the
    case-insensitive name so the ordering is total and stable.
    """
    if key not in SORT_KEYS:
        key = "name"
    items = list(entries)
    parents = [entry for entry in items if entry.is_parent]
    rest = [entry for entry in items if not entry.is_parent]

    def ordered(group: list[FileEntry]) -> list[FileEntry]:
        by_name = sorted(group, key=lambda entry: entry.name.lower())
        if key == "name":
            return by_name if ascending else list(reversed(by_name))
        return sorted(by_name, key=lambda entry: _sort_value(entry, key), reverse=not ascending)

    dirs = ordered([entry for entry in rest if entry.is_dir])
    files = ordered([entry for entry in rest if not entry.is_dir])
    return parents + dirs + files


def filter_entries(
    entries: Iterable[FileEntry],
    *,
    favorites: set[Path] | None = None,
    favorites_only: bool = False,
    prompts_only: bool = False,
    prompt_dirs: PromptDirectoryCache | None = None,
    home: Path | None = None,
) -> list[FileEntry]:
    """Apply the favorites and prompts view filters to a listing."""
    result = list(entries)
    if favorites_only:
        favorite_set = favorites or set()
        result = [entry for entry in result if entry.is_parent or entry.path in favorite_set]
    if prompts_only:
        cache = prompt_dirs if prompt_dirs is not None else PromptDirectoryCache(home=home)
        kept: list[FileEntry] = []
        for entry in result:
            if entry.is_parent:
                kept.append(entry)
            elif entry.is_dir:
                if entry.name in PROMPT_FOLDERS or cache.contains_prompts(entry.path):
                    kept.append(entry)
            elif is_prompt_entry(entry, home):
                kept.append(entry)
        result = kept
    return result


def with_global_prompts(entries: list[FileEntry], directory: Path, home: Path | None = None) -> list[FileEntry]:
    """Insert the ``~/.prompts`` shortcut row right after the parent row.

    Skipped when the folder is missing, already listed, or being browsed.
    """
    target = global_prompts_dir(home).absolute()
    if not target.is_dir() or directory.absolute().is_relative_to(target):
        return entries
    if any(entry.path == target for entry in entries):
        return entries
    try:
        shortcut = stat_entry(target, GLOBAL_PROMPTS_LABEL)
    except StatError as exc:
        log.debug("global prompts shortcut skipped: %s", exc)
        return entries
    parents = [entry for entry in entries if entry.is_parent]
    return parents + [shortcut] + [entry for entry in entries if not entry.is_parent]


def search_filter(entries: Iterable[FileEntry], query: str) -> list[FileEntry]:
    """Keep the parent row and entries whose name contains ``query``."""
    needle = query.strip().lower()
    items = list(entries)
    if not needle:
        return items
    return [entry for entry in items if entry.is_parent or needle in entry.name.lower()]
