"""Error hierarchy shared by the reader and its command-line entry point."""
from __future__ import annotations


EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class ReaderError(Exception):
    """Base class for fatal reader failures reported by the CLI."""

    exit_code: int = EXIT_FAILURE


class ResourceError(ReaderError):
    """Raised when loading or tokenizing the text exhausts memory."""


class ReaderIOError(ReaderError):
    """Raised when a file, terminal or timer operation fails."""

    def __init__(self, operation: str, reason: str | None = None) -> None:
        self.operation = operation
        self.reason = reason
        message = operation if reason is None else f"{operation}: {reason}"
        super().__init__(message)

    @classmethod
    def from_os_error(cls, operation: str, exc: OSError) -> "ReaderIOError":
        """Wrap ``exc`` so the diagnostic names ``operation``."""

        return cls(operation, exc.strerror or str(exc))


class InvocationError(ReaderError):
    """Raised when the command line or configuration is invalid."""

    exit_code = EXIT_USAGE


__all__ = [
    "EXIT_FAILURE",
    "EXIT_SUCCESS",
    "EXIT_USAGE",
    "InvocationError",
    "ReaderError",
    "ReaderIOError",
    "ResourceError",
]
