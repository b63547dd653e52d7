"""pbpup-specific exception hierarchy."""

from __future__ import annotations


class PbPupError(Exception):
    """Base exception for all pbpup-specific errors."""


class ProfileError(PbPupError):
    """Raised when a profile mutation would break a profile invariant."""


class DriverConnectionError(PbPupError):
    """Raised when the browser driver cannot be started or connected."""


class RemoteActionError(PbPupError):
    """Raised when a browser action fails or a mandatory element is missing.

    Attributes:
        action: Short name of the action that failed (``click``, ``find``...).
        detail: Human-readable cause reported by the driver.
    """

    def __init__(self, action: str, detail: str) -> None:
        self.action = action
        self.detail = detail
        super().__init__(f"Remote {action} failed: {detail}")


class BuildCommandError(PbPupError):
    """Raised when the build command cannot be spawned or exits non-zero.

    Attributes:
        command: The shell command that was run.
        returncode: Process exit code, or ``None`` if it never ran to completion.
        stderr: Captured standard error (may be empty).
    """

    def __init__(self, command: str, returncode: int | None, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            message = f"Build command could not be run: {command}"
        else:
            message = f"Build command exited with status {returncode}: {command}"
        super().__init__(message)


class ClipboardError(PbPupError):
    """Raised when the system clipboard cannot be read or written."""
