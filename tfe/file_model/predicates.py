"""Classification predicates for prompt assets, context files, and scripts."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from .types import FileEntry

log = logging.getLogger(__name__)

PROMPTY_EXTENSION = ".prompty"
PROMPT_TEXT_EXTENSIONS = frozenset({".md", ".markdown", ".yaml", ".yml", ".txt"})
MARKDOWN_EXTENSIONS = frozenset({".md", ".markdown"})
CLAUDE_CONTEXT_NAMES = frozenset({"CLAUDE.md", "CLAUDE.local.md", ".claude"})
# Dot folders listed even when hidden files are off; everything inside them is listed too.
IMPORTANT_FOLDERS = frozenset(
    {
        ".claude",
        ".git",
        ".vscode",
        ".github",
        ".config",
        ".docker",
        ".prompts",
        ".codex",
        ".copilot",
        ".devcontainer",
        ".gemini",
        ".opencode",
    }
)
PROMPT_FOLDERS = frozenset({".claude", ".prompts"})
GLOBAL_PROMPTS_LABEL = "🌐 ~/.prompts/"
SCRIPT_EXTENSIONS = frozenset({".sh", ".bash", ".zsh", ".fish"})
IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".svg", ".ico", ".tiff"})
BROWSER_EXTENSIONS = frozenset({".html", ".htm", ".svg", ".pdf"})

PROMPT_DIR_SCAN_DEPTH = 2


def global_prompts_dir(home: Path | None = None) -> Path:
    return (home if home is not None else Path.home()) / ".prompts"


def is_inside_important_folder(directory: Path) -> bool:
    return any(part in IMPORTANT_FOLDERS for part in directory.parts)


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def is_prompt_file(path: Path, home: Path | None = None) -> bool:
    """Return whether ``path`` names a prompt template.

    ``.prompty`` files always qualify; markdown, YAML, and text files qualify
    only inside a ``.claude/`` subtree or under the global ``~/.prompts/``.
    """
    suffix = path.suffix.lower()
    if suffix == PROMPTY_EXTENSION:
        return True
    if suffix not in PROMPT_TEXT_EXTENSIONS:
        return False
    if ".claude" in path.parts[:-1]:
        return True
    return _is_within(path, global_prompts_dir(home))


def is_prompt_entry(entry: FileEntry, home: Path | None = None) -> bool:
    return not entry.is_dir and is_prompt_file(entry.path, home)


def is_claude_context(name: str) -> bool:
    return name in CLAUDE_CONTEXT_NAMES


def is_markdown_file(path: Path) -> bool:
    return path.suffix.lower() in MARKDOWN_EXTENSIONS


def is_image_file(path: Path) -> bool:
    return path.suffix.lower() in IMAGE_EXTENSIONS


def is_browser_file(path: Path) -> bool:
    return path.suffix.lower() in BROWSER_EXTENSIONS


def is_executable_script(entry: FileEntry) -> bool:
    if entry.is_dir:
        return False
    if entry.extension in SCRIPT_EXTENSIONS:
        return True
    return bool(entry.mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


class PromptDirectoryCache:
    """Memoized "does this directory hold prompt files" lookups.

    Results are keyed by absolute path and kept for the lifetime of the
    process; ``clear`` drops them when the user explicitly refreshes.
    """

    def __init__(self, max_depth: int = PROMPT_DIR_SCAN_DEPTH, home: Path | None = None) -> None:
        self.max_depth = max_depth
        self.home = home
        self._cache: dict[Path, bool] = {}

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def contains_prompts(self, directory: Path) -> bool:
        key = directory.absolute()
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        result = self._scan(key, 0)
        self._cache[key] = result
        return result

    def _scan(self, directory: Path, depth: int) -> bool:
        if depth > self.max_depth:
            return False
        try:
            with os.scandir(directory) as entries:
                children = list(entries)
        except OSError as exc:
            log.debug("prompt scan skipped %s: %s", directory, exc)
            return False

        subdirs: list[Path] = []
        for child in children:
            name = child.name
            if name.startswith(".") and name not in PROMPT_FOLDERS:
                continue
            child_path = Path(child.path)
            try:
                is_dir = child.is_dir()
            except OSError:
                continue
            if is_dir:
                subdirs.append(child_path)
            elif is_prompt_file(child_path, self.home):
                return True
        return any(self._scan(subdir, depth + 1) for subdir in subdirs)
