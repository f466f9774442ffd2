"""Filesystem model: listings, ordering, filters, and tree flattening."""

from .format import file_icon, file_type_label, format_relative_time, format_size
from .listing import (
    filter_entries,
    is_root,
    load_directory,
    search_filter,
    sort_entries,
    stat_entry,
    with_global_prompts,
)
from .predicates import (
    PromptDirectoryCache,
    is_claude_context,
    is_executable_script,
    is_markdown_file,
    is_prompt_file,
)
from .tree import collapse, expand, flatten_tree, toggle_expanded, tree_prefix
from .types import PARENT_NAME, SORT_KEYS, DirectoryListing, FileEntry, TreeNode

__all__ = [
    "DirectoryListing",
    "FileEntry",
    "PARENT_NAME",
    "PromptDirectoryCache",
    "SORT_KEYS",
    "TreeNode",
    "collapse",
    "expand",
    "file_icon",
    "file_type_label",
    "filter_entries",
    "flatten_tree",
    "format_relative_time",
    "format_size",
    "is_claude_context",
    "is_executable_script",
    "is_markdown_file",
    "is_prompt_file",
    "is_root",
    "load_directory",
    "search_filter",
    "sort_entries",
    "stat_entry",
    "toggle_expanded",
    "tree_prefix",
    "with_global_prompts",
]
