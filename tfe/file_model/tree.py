"""Expanded-directory bookkeeping and depth-first tree flattening."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from .types import FileEntry, TreeNode

ChildLoader = Callable[[Path], list[FileEntry]]

# Guards against symlink cycles among expanded directories.
MAX_TREE_DEPTH = 32


def toggle_expanded(expanded: set[Path], path: Path) -> bool:
    """Flip membership of ``path``; return ``True`` when it is now expanded."""
    if path in expanded:
        expanded.discard(path)
        return False
    expanded.add(path)
    return True


def expand(expanded: set[Path], path: Path) -> None:
    expanded.add(path)


def collapse(expanded: set[Path], path: Path) -> None:
    """Collapse ``path`` and forget any expanded descendants below it."""
    expanded.discard(path)
    for other in [candidate for candidate in expanded if path in candidate.parents]:
        expanded.discard(other)


def flatten_tree(
    entries: Iterable[FileEntry],
    expanded: set[Path],
    load_children: ChildLoader,
    depth: int = 0,
    parent_is_last: tuple[bool, ...] = (),
) -> list[TreeNode]:
    """Walk ``entries`` depth-first, descending into expanded directories.

    ``load_children`` must return a directory's rows already sorted and
    filtered, without a parent row; the flattened order therefore matches
    the per-directory ordering used by the flat views.
    """
    rows = list(entries)
    nodes: list[TreeNode] = []
    for index, entry in enumerate(rows):
        is_last = index == len(rows) - 1
        nodes.append(TreeNode(entry=entry, depth=depth, is_last=is_last, parent_is_last=parent_is_last))
        if not entry.is_dir or entry.is_parent or entry.path not in expanded:
            continue
        if depth >= MAX_TREE_DEPTH:
            continue
        children = load_children(entry.path)
        nodes.extend(
            flatten_tree(
                children,
                expanded,
                load_children,
                depth=depth + 1,
                parent_is_last=parent_is_last + (is_last,),
            )
        )
    return nodes


def tree_prefix(node: TreeNode) -> str:
    """Return the box-drawing prefix for one tree row."""
    if node.depth == 0:
        return ""
    parts = ["    " if last else "│   " for last in node.parent_is_last[1:]]
    parts.append("└── " if node.is_last else "├── ")
    return "".join(parts)
