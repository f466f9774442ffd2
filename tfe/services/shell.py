"""Shell command execution and the single shell-quoting helper."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from ..errors import SubprocessSpawnError

log = logging.getLogger(__name__)

SHELL = "sh"
SCRIPT_SHELL = "bash"


def shell_quote(value: str) -> str:
    """Single-quote ``value`` for POSIX shells; embedded quotes become ``'\\''``."""
    return "'" + value.replace("'", "'\\''") + "'"


def run_command(command: str, cwd: Path) -> int:
    """Run ``command`` through ``sh -c`` in ``cwd`` with inherited stdio."""
    log.debug("running %r in %s", command, cwd)
    try:
        completed = subprocess.run([SHELL, "-c", command], cwd=str(cwd), check=False)
    except OSError as exc:
        raise SubprocessSpawnError(f"Cannot run command: {exc.strerror or exc}") from exc
    return completed.returncode


def run_script(script: str, cwd: Path | None = None) -> int:
    """Run an embedded multi-line script through ``bash -c``."""
    try:
        completed = subprocess.run(
            [SCRIPT_SHELL, "-c", script],
            cwd=str(cwd) if cwd is not None else None,
            check=False,
        )
    except OSError as exc:
        raise SubprocessSpawnError(f"Cannot start {SCRIPT_SHELL}: {exc.strerror or exc}") from exc
    return completed.returncode


def script_command(script_path: Path) -> list[str]:
    """Command line that runs an executable or shell script file."""
    if os.access(script_path, os.X_OK):
        return [str(script_path)]
    suffix = script_path.suffix.lower()
    interpreter = {".bash": "bash", ".zsh": "zsh", ".fish": "fish"}.get(suffix, SHELL)
    return [interpreter, str(script_path)]


def run_file(script_path: Path) -> int:
    try:
        completed = subprocess.run(script_command(script_path), cwd=str(script_path.parent), check=False)
    except OSError as exc:
        raise SubprocessSpawnError(f"Cannot run {script_path.name}: {exc.strerror or exc}") from exc
    return completed.returncode
