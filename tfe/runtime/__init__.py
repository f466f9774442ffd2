"""Runtime orchestration for the interactive explorer."""

from __future__ import annotations

from .app import NotATerminalError, run_explorer

__all__ = ["NotATerminalError", "run_explorer"]
