"""Fuzzy file picking through an external ``fzf``."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path

from ..errors import SubprocessSpawnError

log = logging.getLogger(__name__)

MAX_CANDIDATES = 50000
SKIP_DIRS = frozenset({".git", "node_modules", "__pycache__", ".venv"})
FZF_OPTIONS = (
    "--height=100%",
    "--layout=reverse",
    "--border",
    "--cycle",
    "--no-mouse",
)


def collect_candidates(root: Path, limit: int = MAX_CANDIDATES) -> list[str]:
    """Relative paths of files under ``root``, skipping VCS and dependency trees."""
    found: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=lambda exc: None):
        dirnames[:] = sorted(name for name in dirnames if name not in SKIP_DIRS)
        base = Path(dirpath)
        for name in sorted(filenames):
            found.append(str((base / name).relative_to(root)))
            if len(found) >= limit:
                return found
    return found


def choose(items: Iterable[str], prompt: str = "File> ", cwd: Path | None = None) -> str:
    """Feed ``items`` to fzf on stdin and return the chosen line or ``""``."""
    if shutil.which("fzf") is None:
        raise SubprocessSpawnError("fzf not found. Install: sudo apt install fzf (Linux) or brew install fzf (macOS)")
    payload = "\n".join(items)
    try:
        proc = subprocess.run(
            ["fzf", *FZF_OPTIONS, f"--prompt={prompt}"],
            input=payload,
            stdout=subprocess.PIPE,
            text=True,
            cwd=str(cwd) if cwd is not None else None,
            check=False,
        )
    except OSError as exc:
        raise SubprocessSpawnError(f"Cannot start fzf: {exc.strerror or exc}") from exc
    if proc.returncode != 0:
        # 1 = no match, 130 = cancelled
        log.debug("fzf exited with %s", proc.returncode)
        return ""
    return proc.stdout.strip()


def fuzzy_find_file(root: Path) -> Path | None:
    """Pick a file beneath ``root``; ``None`` when cancelled."""
    selected = choose(collect_candidates(root), prompt=f"{root.name or root}> ", cwd=root)
    if not selected:
        return None
    return root / selected
