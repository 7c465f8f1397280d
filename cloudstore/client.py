"""High-level storage client: owns an object store, exposes list/read/write."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from cloudstore import listing, transfer
from cloudstore.config import StorageConfig
from cloudstore.exceptions import ConfigError
from cloudstore.sorting import SortMode

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from typing_extensions import Self

    from cloudstore._store.ports import ObjectStorePort


def make_object_store(cfg: StorageConfig) -> ObjectStorePort:
    """Build the SDK adapter selected by ``cfg.backend``.

    Adapters are imported lazily so that only the selected SDK has to be
    importable.
    """
    if cfg.backend == "s3":
        from cloudstore._store.s3_adapter import S3ObjectStore

        return S3ObjectStore(endpoint_url=cfg.endpoint_url, region=cfg.region)
    if cfg.backend == "gcs":
        from cloudstore._store.gcs_adapter import GcsObjectStore

        return GcsObjectStore(project_id=cfg.project_id)
    raise ConfigError(f"Unsupported storage backend: {cfg.backend!r}")


class StorageClient:
    """Facade over the listing and transfer functions.

    Use it as a context manager so the SDK client is released::

        with StorageClient(cfg) as client:
            names = client.list_objects("bucket", "reports/", sort_mode=SortMode.NATURAL_NAME)
            rows = client.read_csv("bucket", names[-1])

    When *store* is injected (tests, callers that manage their own SDK
    client), the caller keeps ownership and ``__exit__`` leaves it open.
    """

    def __init__(
        self,
        cfg: StorageConfig | None = None,
        *,
        store: ObjectStorePort | None = None,
    ) -> None:
        """Store configuration and an optional pre-built object store.

        When *cfg* is ``None`` configuration is loaded from environment
        variables, config file and built-in preset via
        :meth:`StorageConfig.load`.
        """
        self._cfg = cfg or StorageConfig.load()
        self._store = store
        self._owns_store = store is None

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> Self:
        """Create the object store if none was injected."""
        self._ensure_store()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the object store if this client created it."""
        self.close()

    def close(self) -> None:
        """Release the SDK client owned by this facade."""
        if self._owns_store and self._store is not None:
            logger.trace(f"Closing {self._cfg.backend} object store")
            self._store.close()
            self._store = None

    def _ensure_store(self) -> ObjectStorePort:
        if self._store is None:
            self._store = make_object_store(self._cfg)
        return self._store

    @property
    def store(self) -> ObjectStorePort:
        """The underlying object store (created on first use)."""
        return self._ensure_store()

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_buckets(self, project_id: str | None = None) -> list[str]:
        """List bucket names; *project_id* defaults to the configured one."""
        project = self._cfg.project_id if project_id is None else project_id
        return listing.list_buckets(self.store, project)

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: str | None = None,
        sort_mode: SortMode = SortMode.NONE,
    ) -> list[str]:
        """See :func:`cloudstore.listing.list_objects`."""
        return listing.list_objects(self.store, bucket, prefix, delimiter, sort_mode)

    def list_objects_in_folder(self, bucket: str, folder: str) -> list[str]:
        """See :func:`cloudstore.listing.list_objects_in_folder`."""
        return listing.list_objects_in_folder(self.store, bucket, folder)

    # ------------------------------------------------------------------
    # Transfer
    # ------------------------------------------------------------------

    def read_bytes(self, bucket: str, key: str) -> bytes:
        """See :func:`cloudstore.transfer.read_bytes`."""
        return transfer.read_bytes(self.store, bucket, key)

    def read_csv(self, bucket: str, key: str) -> list[list[str]]:
        """See :func:`cloudstore.transfer.read_csv`."""
        return transfer.read_csv(self.store, bucket, key)

    def write_bytes(self, bucket: str, key: str, data: bytes) -> None:
        """See :func:`cloudstore.transfer.write_bytes`."""
        transfer.write_bytes(self.store, bucket, key, data)

    def write_csv(self, bucket: str, key: str, rows: Sequence[Sequence[str]]) -> None:
        """See :func:`cloudstore.transfer.write_csv`."""
        transfer.write_csv(self.store, bucket, key, rows)
