"""Human-facing labels for listing rows: icons, sizes, ages, and types."""

from __future__ import annotations

import time
from pathlib import Path

from .predicates import is_image_file, is_prompt_entry
from .types import FileEntry

_DIR_ICONS = {
    ".claude": "🤖",
    ".git": "📦",
    ".github": "🐙",
    ".vscode": "💻",
    ".prompts": "📝",
    "node_modules": "📚",
    "docs": "📖",
    "tests": "🧪",
    "test": "🧪",
    "build": "📦",
    "dist": "📦",
}

_EXTENSION_ICONS = {
    ".py": "🐍",
    ".go": "🐹",
    ".rs": "🦀",
    ".js": "🟨",
    ".ts": "🔷",
    ".rb": "💎",
    ".java": "☕",
    ".sh": "🐚",
    ".bash": "🐚",
    ".zsh": "🐚",
    ".html": "🌐",
    ".css": "🎨",
    ".json": "📊",
    ".yaml": "📄",
    ".yml": "📄",
    ".toml": "📄",
    ".md": "📝",
    ".markdown": "📝",
    ".txt": "📄",
    ".pdf": "📕",
    ".zip": "🗜",
    ".tar": "🗜",
    ".gz": "🗜",
    ".lock": "🔒",
}

_TYPE_NAMES = {
    ".py": "Python",
    ".go": "Go",
    ".rs": "Rust",
    ".js": "JavaScript",
    ".ts": "TypeScript",
    ".md": "Markdown",
    ".markdown": "Markdown",
    ".json": "JSON",
    ".yaml": "YAML",
    ".yml": "YAML",
    ".toml": "TOML",
    ".txt": "Text",
    ".sh": "Shell",
    ".html": "HTML",
    ".css": "CSS",
    ".prompty": "Prompt",
}


def file_icon(entry: FileEntry, home: Path | None = None) -> str:
    """Pick a single emoji icon for ``entry``."""
    if entry.is_parent:
        return "⬆"
    if entry.is_symlink:
        return "🌀"
    if entry.is_dir:
        if home is not None and entry.path == home:
            return "🏠"
        return _DIR_ICONS.get(entry.name, "📁")
    if is_prompt_entry(entry, home):
        return "📝"
    if is_image_file(entry.path):
        return "🖼"
    return _EXTENSION_ICONS.get(entry.extension, "📄")


def format_size(size: int) -> str:
    """Format bytes with 1024-based units: ``512B``, ``1.5KB``, ``2.0MB``."""
    if size < 1024:
        return f"{size}B"
    value = float(size)
    for unit in "KMGTPE":
        value /= 1024.0
        if value < 1024.0 or unit == "E":
            return f"{value:.1f}{unit}B"
    return f"{size}B"


def format_relative_time(modified: float, now: float | None = None) -> str:
    """Describe how long ago ``modified`` (epoch seconds) was."""
    current = time.time() if now is None else now
    delta = max(0.0, current - modified)
    if delta < 60:
        return "just now"
    minutes = int(delta // 60)
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    if days < 30:
        return f"{days // 7}w ago"
    if days < 365:
        return f"{days // 30}mo ago"
    return f"{days // 365}y ago"


def file_type_label(entry: FileEntry) -> str:
    if entry.is_parent:
        return "Parent"
    if entry.is_symlink:
        return "Broken link" if entry.is_broken_link else "Symlink"
    if entry.is_dir:
        return "Folder"
    ext = entry.extension
    if ext in _TYPE_NAMES:
        return _TYPE_NAMES[ext]
    if ext:
        return ext[1:].upper()
    return "File"
