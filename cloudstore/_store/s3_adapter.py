"""boto3 adapter implementing ``ObjectStorePort``.

This is the only module that imports and interacts with ``boto3``.
It converts S3 API responses into typed DTOs from ``dtos.py`` and
botocore exceptions into cloudstore errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)
from loguru import logger

from cloudstore._store.dtos import RawBucket, RawObject
from cloudstore._store.streams import BufferedObjectWriter, StreamObjectReader
from cloudstore.exceptions import BackendError, EnumerationTimeoutError

if TYPE_CHECKING:
    import io
    from collections.abc import Iterator

    from cloudstore.s3_types import S3Client

_DEFAULT_TIMEOUT_S = 30.0


def make_s3_client(
    endpoint_url: str | None = None,
    region: str | None = None,
    timeout: float = _DEFAULT_TIMEOUT_S,
) -> S3Client:
    """Create a boto3 S3 client with a single attempt per request.

    Retries are disabled: every backend call is attempted exactly once and
    failures propagate to the caller.
    """
    config = Config(
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )
    client: S3Client = boto3.Session().client(
        "s3",
        endpoint_url=endpoint_url or None,
        region_name=region or None,
        config=config,
    )
    return client


def _error_code(exc: ClientError) -> str:
    return str((exc.response.get("Error") or {}).get("Code") or "")


class S3ObjectStore:
    """``ObjectStorePort`` implementation backed by a boto3 S3 client.

    Per-request deadlines come from the client's ``read_timeout``; the
    *timeout* argument of the enumeration methods is accepted for protocol
    compatibility and the overall deadline is enforced by the caller.
    """

    scheme = "s3"

    def __init__(self, client: S3Client | None = None, **client_kwargs: Any) -> None:  # noqa: ANN401
        """Wrap *client*, or build one from *client_kwargs* via :func:`make_s3_client`."""
        self._client = client if client is not None else make_s3_client(**client_kwargs)

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def iter_buckets(
        self,
        project_id: str,
        *,
        timeout: float,  # noqa: ARG002
    ) -> Iterator[RawBucket]:
        """Yield all buckets owned by the credentials.

        S3 has no notion of projects; *project_id* is only logged.
        """
        if project_id:
            logger.trace(f"S3 has no projects, ignoring project id {project_id!r}")
        kwargs: dict[str, str] = {}
        try:
            while True:
                resp = self._client.list_buckets(**kwargs)
                for raw in resp.get("Buckets", []):
                    yield RawBucket(
                        name=raw["Name"],
                        attrs={k: v for k, v in raw.items() if k != "Name"},
                    )
                token = resp.get("ContinuationToken")
                if not token:
                    break
                kwargs["ContinuationToken"] = token
        except (ConnectTimeoutError, ReadTimeoutError) as e:
            raise EnumerationTimeoutError(f"Timed out listing S3 buckets: {e}") from e
        except (BotoCoreError, ClientError) as e:
            raise BackendError(f"Failed to list S3 buckets: {e}") from e

    def iter_objects(
        self,
        bucket: str,
        prefix: str,
        delimiter: str | None,
        *,
        timeout: float,  # noqa: ARG002
    ) -> Iterator[RawObject]:
        """Yield objects under *prefix* page by page.

        With a *delimiter*, S3 folds deeper keys into ``CommonPrefixes``;
        those are not objects and are not yielded.
        """
        kwargs: dict[str, str] = {"Bucket": bucket}
        if prefix:
            kwargs["Prefix"] = prefix
        if delimiter:
            kwargs["Delimiter"] = delimiter
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(**kwargs):
                for obj in page.get("Contents", []) or []:
                    yield RawObject(
                        name=obj["Key"],
                        updated=obj["LastModified"],
                        size=int(obj.get("Size") or 0),
                    )
        except (ConnectTimeoutError, ReadTimeoutError) as e:
            raise EnumerationTimeoutError(
                f"Timed out listing s3://{bucket}/{prefix}: {e}"
            ) from e
        except (BotoCoreError, ClientError) as e:
            raise BackendError(f"Failed to list s3://{bucket}/{prefix}: {e}") from e

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    def open_reader(self, bucket: str, key: str) -> StreamObjectReader:
        """Start a GET request and wrap its streaming body."""
        try:
            resp = self._client.get_object(Bucket=bucket, Key=key)
        except ClientError as e:
            code = _error_code(e)
            raise BackendError(
                f"Failed to open s3://{bucket}/{key} ({code or 'error'}): {e}"
            ) from e
        except BotoCoreError as e:
            raise BackendError(f"Failed to open s3://{bucket}/{key}: {e}") from e
        return StreamObjectReader(
            resp["Body"],
            int(resp.get("ContentLength") or 0),
            errors=(BotoCoreError, ClientError),
        )

    def open_writer(self, bucket: str, key: str) -> BufferedObjectWriter:
        """Return a writer that uploads with a single PUT on close."""

        def _commit(buffer: io.BytesIO) -> None:
            try:
                self._client.put_object(Bucket=bucket, Key=key, Body=buffer.getvalue())
            except (BotoCoreError, ClientError) as e:
                raise BackendError(f"Failed to upload s3://{bucket}/{key}: {e}") from e

        return BufferedObjectWriter(_commit)

    def close(self) -> None:
        """Close the boto3 connection pool."""
        self._client.close()
