"""Custom exception hierarchy for cloudstore.

All library-specific exceptions inherit from ``CloudStoreError`` so consumers
can catch ``except CloudStoreError`` to handle any cloudstore failure.
None of them are retried internally; retry policy belongs to the caller.
"""

from __future__ import annotations


class CloudStoreError(Exception):
    """Base exception for all cloudstore errors."""


class ConfigError(CloudStoreError):
    """Raised when the storage backend configuration is invalid."""


class BackendError(CloudStoreError):
    """Raised when the object store rejects or fails an operation.

    SDK-specific failures (not found, permission denied, network errors)
    are collapsed into this kind; the original exception is kept as
    ``__cause__``.
    """


class EnumerationTimeoutError(CloudStoreError, TimeoutError):
    """Raised when a bucket or object enumeration exceeds its deadline."""


class CsvParseError(CloudStoreError):
    """Raised when an object cannot be parsed as CSV rows."""

    def __init__(self, path: str, line: int, reason: str) -> None:
        """Initialize with the object path, 1-based line number and reason."""
        self.path = path
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed CSV in {path} at line {line}: {reason}")


class IncompleteWriteError(CloudStoreError):
    """Raised when data was written but closing the object writer failed.

    The object's durability is unconfirmed: it may or may not exist with
    the new content.  Callers may safely retry the whole write.
    """

    def __init__(self, path: str) -> None:
        """Initialize with the path of the object being written."""
        self.path = path
        super().__init__(
            f"Data was written to {path} but closing the writer failed; "
            "the object may not have been committed"
        )
