"""Exception taxonomy for recoverable explorer failures.

Every class here is caught somewhere in the runtime and turned into a status
message; none of them is allowed to take down the event loop.
"""

from __future__ import annotations


class TfeError(Exception):
    """Base class for recoverable explorer errors."""


class ReadDirError(TfeError):
    """A directory could not be listed."""


class StatError(TfeError):
    """A filesystem entry could not be stat'ed."""


class PreviewLoadError(TfeError):
    """A file could not be loaded into the preview pane."""


class MarkdownRenderTimeout(TfeError):
    """Markdown rendering exceeded its wall-clock budget."""


class PromptParseError(TfeError):
    """A prompt template file is malformed."""


class ClipboardUnavailable(TfeError):
    """No clipboard backend could accept the text."""


class SubprocessSpawnError(TfeError):
    """An external program could not be started."""


class TrashIoError(TfeError):
    """A trash store operation failed."""


class ConfigWriteError(TfeError):
    """A persistent store could not be written."""


__all__ = [
    "TfeError",
    "ReadDirError",
    "StatError",
    "PreviewLoadError",
    "MarkdownRenderTimeout",
    "PromptParseError",
    "ClipboardUnavailable",
    "SubprocessSpawnError",
    "TrashIoError",
    "ConfigWriteError",
]
