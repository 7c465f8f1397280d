"""Type definitions for S3 client interfaces."""

from __future__ import annotations

from typing import Any, Protocol


class S3Client(Protocol):
    """Structural protocol for a boto3 S3 client (subset used by cloudstore)."""

    def list_buckets(self, **kwargs: Any) -> dict[str, Any]:  # noqa: ANN401
        """List buckets owned by the caller."""
        ...

    def get_paginator(self, operation_name: str) -> Any:  # noqa: ANN401
        """Return a paginator for *operation_name*."""
        ...

    def get_object(self, *, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        """Retrieve an object from S3."""
        ...

    def put_object(self, *, Bucket: str, Key: str, Body: bytes) -> dict[str, Any]:  # noqa: N803
        """Put an object to S3."""
        ...

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        ...
