"""Adapters for external programs: editors, shells, clipboard, browser, fzf, git, graphics."""

from .browser import open_in_browser
from .clipboard import copy_to_clipboard
from .editor import open_in_editor, resolve_editor
from .fuzzy import fuzzy_find_file
from .git import GIT_OPERATIONS, find_git_root, run_git_operation
from .graphics import try_render_image
from .shell import run_command, run_file, run_script, shell_quote

__all__ = [
    "GIT_OPERATIONS",
    "copy_to_clipboard",
    "find_git_root",
    "fuzzy_find_file",
    "open_in_browser",
    "open_in_editor",
    "resolve_editor",
    "run_command",
    "run_file",
    "run_script",
    "shell_quote",
    "try_render_image",
]
