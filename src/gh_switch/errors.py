"""Exception taxonomy for gh-switch.

Filesystem failures are not wrapped: they surface as the built-in
``OSError`` (``IOError``) and propagate to the CLI.
"""
from typing import Optional, Sequence


class GhSwitchError(Exception):
    """Base class for all gh-switch errors."""
    pass


class NotFoundError(GhSwitchError):
    """A referenced profile or host does not exist."""
    pass


class CorruptConfigError(GhSwitchError):
    """A persisted file cannot be decoded, or the config violates the schema."""
    pass


class ValidationError(GhSwitchError):
    """Malformed user input (bad email, bad profile name, missing key)."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class SubprocessError(GhSwitchError):
    """An external tool is missing, exited non-zero, or produced bad output."""

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = list(command) if command else []
        self.returncode = returncode
        self.stderr = stderr
