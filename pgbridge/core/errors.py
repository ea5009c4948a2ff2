"""
Error taxonomy for the bridge.

Per-file errors (``SecurityViolation``, ``FileSystemError``) are collected
by the file-application engine and never abort a batch.  Everything else
aborts the current tool call and is reported to the caller as a tool
failure; the process itself keeps running.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for all errors raised by pgbridge."""

    #: Short human label used when the error is surfaced to a tool caller.
    label = "Bridge error"


class PreconditionError(BridgeError):
    """Project root unset, missing, not a directory, or not writable."""

    label = "Precondition failed"


class InvalidProjectPath(PreconditionError):
    """The resolved project path does not exist or is not a directory."""

    label = "Invalid project path"

    def __init__(self, path: object, reason: str = "does not exist") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Project path {path} {reason}")


class SecurityViolation(BridgeError):
    """A write target would land outside the project root."""

    label = "Security violation"

    def __init__(self, path: str, project_root: object) -> None:
        self.path = path
        self.project_root = project_root
        super().__init__(f"Path escapes project root {project_root}: {path}")


class FileSystemError(BridgeError):
    """An I/O failure while applying a single file."""

    label = "File system error"


class RemoteServiceError(BridgeError):
    """The generation service answered, but rejected the request."""

    label = "Generation service error"

    def __init__(self, message: str, *, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class ConnectivityError(BridgeError):
    """The generation service could not be reached (refused, DNS, timeout)."""

    label = "Cannot reach generation service"
