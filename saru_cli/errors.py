"""Error taxonomy for the ``create`` workflow.

Every stage raises one of these; the workflow catches ``SaruError`` exactly
once and turns it into a user-visible message and exit status.
"""

from __future__ import annotations

from pathlib import Path


class SaruError(Exception):
    """Base class for failures the CLI reports without a traceback."""

    kind = "error"


class InputError(SaruError):
    """Raised when interactive input cannot be obtained."""

    kind = "input"


class FilesystemError(SaruError):
    """Raised when a directory or file cannot be created or written."""

    kind = "filesystem"

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class FetchError(SaruError):
    """Raised when cloning or relocating the framework sources fails."""

    kind = "fetch"

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


class ServerError(SaruError):
    """Raised when ``saru run`` cannot start serving the project."""

    kind = "server"
