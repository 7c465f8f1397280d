"""cloudstore -- bucket listing and whole-object read/write for cloud storage."""

from cloudstore._store.dtos import RawBucket, RawObject
from cloudstore._store.ports import ObjectStorePort
from cloudstore.client import StorageClient, make_object_store
from cloudstore.config import StorageConfig
from cloudstore.exceptions import (
    BackendError,
    CloudStoreError,
    ConfigError,
    CsvParseError,
    EnumerationTimeoutError,
    IncompleteWriteError,
)
from cloudstore.listing import (
    ENUMERATION_TIMEOUT_S,
    list_buckets,
    list_objects,
    list_objects_in_folder,
)
from cloudstore.paths import (
    format_folder_prefix,
    strip_edge_separators,
    strip_leading_separators,
    strip_trailing_separators,
)
from cloudstore.sorting import SortMode, natural_compare, natural_key
from cloudstore.transfer import read_bytes, read_csv, write_bytes, write_csv

__all__ = [
    "ENUMERATION_TIMEOUT_S",
    "BackendError",
    "CloudStoreError",
    "ConfigError",
    "CsvParseError",
    "EnumerationTimeoutError",
    "IncompleteWriteError",
    "ObjectStorePort",
    "RawBucket",
    "RawObject",
    "SortMode",
    "StorageClient",
    "StorageConfig",
    "format_folder_prefix",
    "list_buckets",
    "list_objects",
    "list_objects_in_folder",
    "make_object_store",
    "natural_compare",
    "natural_key",
    "read_bytes",
    "read_csv",
    "strip_edge_separators",
    "strip_leading_separators",
    "strip_trailing_separators",
    "write_bytes",
    "write_csv",
]
