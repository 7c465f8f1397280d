"""Google Cloud Storage adapter implementing ``ObjectStorePort``.

This is the only module that imports ``google-cloud-storage``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import requests
from google.api_core import exceptions as api_exceptions
from google.cloud import storage
from loguru import logger

from cloudstore._store.dtos import RawBucket, RawObject
from cloudstore._store.streams import BufferedObjectWriter, StreamObjectReader
from cloudstore.exceptions import BackendError, EnumerationTimeoutError

if TYPE_CHECKING:
    import io
    from collections.abc import Iterator

_TIMEOUT_ERRORS = (api_exceptions.DeadlineExceeded, requests.exceptions.Timeout)
_BACKEND_ERRORS = (api_exceptions.GoogleAPIError, requests.exceptions.RequestException)


class GcsObjectStore:
    """``ObjectStorePort`` implementation backed by ``google.cloud.storage``.

    Enumeration timeouts are forwarded to the SDK as per-request timeouts and
    the SDK's built-in retry policies are disabled (``retry=None``).
    """

    scheme = "gs"

    def __init__(
        self,
        client: Any = None,  # noqa: ANN401
        *,
        project_id: str | None = None,
    ) -> None:
        """Wrap *client*, or create one for *project_id* with default credentials."""
        self._client = (
            client if client is not None else storage.Client(project=project_id or None)
        )

    def iter_buckets(self, project_id: str, *, timeout: float) -> Iterator[RawBucket]:
        """Yield buckets of *project_id*."""
        try:
            for bucket in self._client.list_buckets(
                project=project_id or None, timeout=timeout, retry=None
            ):
                yield RawBucket(
                    name=bucket.name,
                    attrs={
                        "created": bucket.time_created,
                        "location": bucket.location,
                    },
                )
        except _TIMEOUT_ERRORS as e:
            raise EnumerationTimeoutError(
                f"Timed out listing buckets of project {project_id!r}: {e}"
            ) from e
        except _BACKEND_ERRORS as e:
            raise BackendError(
                f"Failed to list buckets of project {project_id!r}: {e}"
            ) from e

    def iter_objects(
        self,
        bucket: str,
        prefix: str,
        delimiter: str | None,
        *,
        timeout: float,
    ) -> Iterator[RawObject]:
        """Yield blobs under *prefix*; sub-folder prefixes are not yielded."""
        try:
            blobs = self._client.list_blobs(
                bucket,
                prefix=prefix or None,
                delimiter=delimiter or None,
                timeout=timeout,
                retry=None,
            )
            for blob in blobs:
                yield RawObject(name=blob.name, updated=blob.updated, size=blob.size or 0)
        except _TIMEOUT_ERRORS as e:
            raise EnumerationTimeoutError(
                f"Timed out listing gs://{bucket}/{prefix}: {e}"
            ) from e
        except _BACKEND_ERRORS as e:
            raise BackendError(f"Failed to list gs://{bucket}/{prefix}: {e}") from e

    def open_reader(self, bucket: str, key: str) -> StreamObjectReader:
        """Fetch blob metadata and open a streaming reader."""
        try:
            blob = self._client.bucket(bucket).get_blob(key, retry=None)
            if blob is None:
                raise BackendError(f"Object gs://{bucket}/{key} does not exist")
            reader = blob.open("rb", retry=None)
        except _BACKEND_ERRORS as e:
            raise BackendError(f"Failed to open gs://{bucket}/{key}: {e}") from e
        return StreamObjectReader(reader, int(blob.size or 0), errors=_BACKEND_ERRORS)

    def open_writer(self, bucket: str, key: str) -> BufferedObjectWriter:
        """Return a writer that uploads the blob in one request on close."""
        blob = self._client.bucket(bucket).blob(key)

        def _commit(buffer: io.BytesIO) -> None:
            try:
                blob.upload_from_file(buffer, retry=None)
            except _BACKEND_ERRORS as e:
                raise BackendError(f"Failed to upload gs://{bucket}/{key}: {e}") from e

        return BufferedObjectWriter(_commit)

    def close(self) -> None:
        """Close the SDK's HTTP session."""
        logger.trace("Closing GCS client")
        self._client.close()
