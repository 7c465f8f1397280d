"""Bucket and object listing on top of an ``ObjectStorePort``.

Every enumeration is bounded by :data:`ENUMERATION_TIMEOUT_S` from the start
of the call and the full result set is materialized before it is returned;
a failure at any point discards whatever was accumulated.

The backend receives the time left before the deadline as its request
timeout and the deadline is re-checked after every item.  Adapters apply
that timeout to each page request they issue, so a page fetched close to the
deadline may overrun it by up to one request timeout before the call fails.
"""

from __future__ import annotations

from time import monotonic
from typing import TYPE_CHECKING, TypeVar

from loguru import logger

from cloudstore.exceptions import EnumerationTimeoutError
from cloudstore.paths import format_folder_prefix
from cloudstore.sorting import SortMode, sort_objects

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cloudstore._store.dtos import RawBucket, RawObject
    from cloudstore._store.ports import ObjectStorePort

_T = TypeVar("_T")

ENUMERATION_TIMEOUT_S = 30.0
"""Deadline in seconds for a single bucket or object enumeration."""


def _remaining(deadline: float) -> float:
    """Seconds left until *deadline*, never negative."""
    return max(deadline - monotonic(), 0.0)


def _collect(items: Iterable[_T], deadline: float, what: str) -> list[_T]:
    """Drain *items* into a list, failing once *deadline* has passed."""
    collected: list[_T] = []
    for item in items:
        if monotonic() > deadline:
            raise EnumerationTimeoutError(
                f"Listing {what} exceeded {ENUMERATION_TIMEOUT_S:g}s"
            )
        collected.append(item)
    if monotonic() > deadline:
        raise EnumerationTimeoutError(
            f"Listing {what} exceeded {ENUMERATION_TIMEOUT_S:g}s"
        )
    return collected


def get_buckets(store: ObjectStorePort, project_id: str) -> list[RawBucket]:
    """Return descriptors of all buckets visible to *project_id*."""
    deadline = monotonic() + ENUMERATION_TIMEOUT_S
    return _collect(
        store.iter_buckets(project_id, timeout=_remaining(deadline)),
        deadline,
        f"buckets of project {project_id!r}",
    )


def list_buckets(store: ObjectStorePort, project_id: str) -> list[str]:
    """Return names of all buckets visible to *project_id* in backend order."""
    logger.debug(f"Loading buckets for project: {project_id}")
    names = [bucket.name for bucket in get_buckets(store, project_id)]
    logger.debug(f"Loaded {len(names)} buckets for project: {project_id}")
    return names


def get_objects(
    store: ObjectStorePort,
    bucket: str,
    prefix: str,
    delimiter: str | None = None,
) -> list[RawObject]:
    """Return descriptors of objects in *bucket* under *prefix*.

    With a *delimiter*, only objects one level below *prefix* are returned.
    """
    path = f"{store.scheme}://{bucket}/{prefix}"
    deadline = monotonic() + ENUMERATION_TIMEOUT_S
    return _collect(
        store.iter_objects(bucket, prefix, delimiter, timeout=_remaining(deadline)),
        deadline,
        path,
    )


def list_objects(
    store: ObjectStorePort,
    bucket: str,
    prefix: str,
    delimiter: str | None = None,
    sort_mode: SortMode = SortMode.NONE,
) -> list[str]:
    """Return keys of objects in *bucket* under *prefix*.

    Parameters
    ----------
    store:
        Open object store; borrowed for the duration of the call.
    bucket:
        Bucket name.
    prefix:
        Raw key prefix (may be empty).  Use :func:`list_objects_in_folder`
        for folder-style arguments.
    delimiter:
        Restrict results to a single "directory level" below *prefix*.
    sort_mode:
        Ordering applied before names are projected.  ``SortMode.NONE``
        keeps the backend's enumeration order.

    """
    path = f"{store.scheme}://{bucket}/{prefix}"
    logger.debug(f"Getting objects in {path}")
    objects = get_objects(store, bucket, prefix, delimiter)
    logger.debug(f"Got {len(objects)} objects in {path}")
    return [obj.name for obj in sort_objects(objects, sort_mode)]


def list_objects_in_folder(store: ObjectStorePort, bucket: str, folder: str) -> list[str]:
    """Return keys of all objects below *folder*, at any depth."""
    return list_objects(store, bucket, format_folder_prefix(folder))
