"""Project-native typed exceptions for platform adapter failures."""

from __future__ import annotations


class CourierError(Exception):
    """Base exception for courier-level platform failures.

    Attributes:
        output: Raw command output captured before the failure.
    """

    def __init__(self, message: str, output: bytes = b""):
        super().__init__(message)
        self.output = output


class CourierCommandError(CourierError, RuntimeError):
    """Platform command exited unsuccessfully."""

    def __init__(self, message: str, output: bytes = b"", exit_code: int | None = None):
        super().__init__(message, output=output)
        self.exit_code = exit_code


class CourierTimeoutError(CourierError, TimeoutError):
    """Platform command did not finish within the configured timeout."""


class ArtifactFetchError(RuntimeError):
    """Artifact download or extraction failure."""


class ArtifactExtractionError(ArtifactFetchError, ValueError):
    """Downloaded artifact is not a usable zip archive."""
