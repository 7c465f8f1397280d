"""Protocol defining the object store boundary.

``ObjectStorePort`` is the single seam between the listing / transfer logic
and a storage SDK.  In production it is satisfied by ``S3ObjectStore`` or
``GcsObjectStore``; in tests a trivial in-memory fake can be used instead.

Implementations translate SDK failures into
:class:`~cloudstore.exceptions.BackendError` and SDK timeouts into
:class:`~cloudstore.exceptions.EnumerationTimeoutError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cloudstore._store.dtos import RawBucket, RawObject


class ObjectReader(Protocol):
    """Readable byte stream over a single object."""

    size: int

    def read(self, n: int = -1) -> bytes:
        """Read up to *n* bytes (everything when *n* is negative)."""
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...


class ObjectWriter(Protocol):
    """Writable byte stream over a single object."""

    def write(self, data: bytes) -> int:
        """Append *data*; return the number of bytes accepted."""
        ...

    def close(self) -> None:
        """Flush and commit the object.  Raises on commit failure."""
        ...

    def abort(self) -> None:
        """Release the stream without committing anything."""
        ...


class ObjectStorePort(Protocol):
    """Minimal interface for object store operations used by cloudstore."""

    scheme: str

    def iter_buckets(
        self, project_id: str, *, timeout: float
    ) -> Iterable[RawBucket]:
        """Yield buckets visible to *project_id*."""
        ...

    def iter_objects(
        self,
        bucket: str,
        prefix: str,
        delimiter: str | None,
        *,
        timeout: float,
    ) -> Iterable[RawObject]:
        """Yield objects in *bucket* whose key starts with *prefix*.

        With a *delimiter*, only keys one level below *prefix* are yielded.
        """
        ...

    def open_reader(self, bucket: str, key: str) -> ObjectReader:
        """Open a read stream for an existing object."""
        ...

    def open_writer(self, bucket: str, key: str) -> ObjectWriter:
        """Open a write stream that creates or replaces an object."""
        ...

    def close(self) -> None:
        """Release the SDK client."""
        ...
