"""Command-line front door for tfe.

Parses CLI options, validates the start directory, wires optional debug
logging, then hands over to the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .storage.config import DISPLAY_MODES
from .ui_theme import available_theme_names

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tfe",
        description="Terminal file explorer with dual-pane previews and a prompt template library.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to the current directory.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colors.")
    parser.add_argument("--show-hidden", action="store_true", default=None, help="Show dotfiles on start.")
    parser.add_argument("--display-mode", choices=DISPLAY_MODES, default=None, help="Initial listing layout.")
    parser.add_argument("--debug-log", metavar="FILE", default=None, help="Write debug logging to FILE.")
    return parser


def configure_debug_log(path: str) -> logging.Handler:
    """Attach a DEBUG file handler to the package logger."""
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger = logging.getLogger("tfe")
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    return handler


def resolve_start_dir(raw: str | None, default_path: Path | None = None) -> Path:
    """Start directory from the CLI; a file argument opens its parent."""
    path = Path(raw).expanduser() if raw else (default_path or Path.cwd())
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not path.is_dir():
        path = path.parent
    return path.absolute()


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and run the explorer; exits 0 on quit, 1 on startup failure."""
    args = build_parser().parse_args(argv)
    if args.debug_log:
        try:
            configure_debug_log(args.debug_log)
        except OSError as exc:
            raise SystemExit(f"Cannot open debug log {args.debug_log}: {exc.strerror or exc}") from exc

    start_dir = resolve_start_dir(args.path, default_path)

    from .runtime import NotATerminalError, run_explorer

    try:
        status = run_explorer(
            start_dir,
            theme_name=args.theme,
            no_color=args.no_color,
            show_hidden=args.show_hidden,
            display_mode=args.display_mode,
        )
    except NotATerminalError as exc:
        raise SystemExit(str(exc)) from exc
    sys.exit(status)
