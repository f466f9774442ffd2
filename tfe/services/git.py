"""Scripted git operations run in the foreground terminal.

Each operation is a small bash script that echoes the command, runs it,
reports success or failure and waits for a keypress before exiting with
git's status, so the caller only needs to suspend the TUI around it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .shell import run_script, shell_quote

log = logging.getLogger(__name__)

GIT_OPERATIONS = ("pull", "push", "sync", "fetch")

_PAUSE = """echo ""
echo "Press any key to continue..."
read -n 1 -s -r
"""


def find_git_root(start: Path) -> Path | None:
    """Walk upward from ``start`` to the directory holding ``.git``."""
    current = start
    while True:
        if (current / ".git").exists():
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _single_step_script(operation: str, repo: Path, success_note: str = "") -> str:
    title = operation.capitalize()
    return (
        f'echo "$ git {operation}"\n'
        f"cd {shell_quote(str(repo))} || exit 1\n"
        f"git {operation}\n"
        "exitCode=$?\n"
        'echo ""\n'
        "if [ $exitCode -eq 0 ]; then\n"
        f'    echo "✓ {title} completed successfully"\n'
        f"{success_note}"
        "else\n"
        f'    echo "✗ {title} failed with exit code: $exitCode"\n'
        "fi\n"
        f"{_PAUSE}"
        "exit $exitCode\n"
    )


def _sync_script(repo: Path) -> str:
    return (
        'echo "$ git sync (pull + push)"\n'
        f"cd {shell_quote(str(repo))} || exit 1\n"
        'echo "Step 1: Pulling changes..."\n'
        "git pull\n"
        "pullCode=$?\n"
        "if [ $pullCode -ne 0 ]; then\n"
        '    echo ""\n'
        '    echo "✗ Pull failed with exit code: $pullCode"\n'
        '    echo "Cannot proceed with push."\n'
        f"{_PAUSE}"
        "    exit $pullCode\n"
        "fi\n"
        'echo ""\n'
        'echo "✓ Pull completed successfully"\n'
        'echo ""\n'
        'echo "Step 2: Pushing changes..."\n'
        "git push\n"
        "pushCode=$?\n"
        'echo ""\n'
        "if [ $pushCode -eq 0 ]; then\n"
        '    echo "✓ Sync completed successfully (pulled and pushed)"\n'
        "else\n"
        '    echo "✗ Push failed with exit code: $pushCode"\n'
        '    echo "Note: Pull succeeded, but push failed."\n'
        "fi\n"
        f"{_PAUSE}"
        "exit $pushCode\n"
    )


def git_script(operation: str, repo: Path) -> str:
    """Build the bash script for one of ``GIT_OPERATIONS``."""
    if operation == "sync":
        return _sync_script(repo)
    if operation == "fetch":
        note = (
            '    echo ""\n'
            '    echo "Remote tracking branches updated."\n'
            "    echo \"Use 'git status' to see if your branch is behind/ahead.\"\n"
        )
        return _single_step_script("fetch", repo, note)
    if operation in ("pull", "push"):
        return _single_step_script(operation, repo)
    raise ValueError(f"unknown git operation: {operation}")


def run_git_operation(operation: str, repo: Path) -> int:
    log.debug("git %s in %s", operation, repo)
    return run_script(git_script(operation, repo))
