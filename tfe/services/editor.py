"""Editor discovery and launch for external file edits.

The caller leaves raw/alternate-screen mode around ``open_in_editor``.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Callable, Mapping
from pathlib import Path

from ..errors import SubprocessSpawnError

log = logging.getLogger(__name__)

EDITOR_PREFERENCE = ("micro", "nano", "vim", "vi")


def resolve_editor(
    environ: Mapping[str, str] | None = None,
    which: Callable[[str], str | None] = shutil.which,
) -> list[str] | None:
    """Return the editor command line, honouring ``$EDITOR`` first."""
    env = os.environ if environ is None else environ
    editor_env = env.get("EDITOR", "").strip()
    if editor_env:
        cmd = shlex.split(editor_env)
        if cmd and which(cmd[0]) is not None:
            return cmd
    for name in EDITOR_PREFERENCE:
        if which(name) is not None:
            return [name]
    return None


def open_in_editor(target: Path, editor: list[str] | None = None) -> int:
    """Run the editor on ``target`` with inherited stdio and wait for it."""
    cmd = editor if editor is not None else resolve_editor()
    if not cmd:
        raise SubprocessSpawnError("No editor found (tried $EDITOR, micro, nano, vim, vi)")
    log.debug("launching editor %s on %s", cmd, target)
    try:
        completed = subprocess.run([*cmd, str(target)], check=False)
    except OSError as exc:
        raise SubprocessSpawnError(f"Failed to launch editor: {exc.strerror or exc}") from exc
    return completed.returncode
