"""Typed data-transfer objects for object store listings.

These simple dataclasses represent raw data consumed from a storage SDK,
providing a typed boundary that is trivial to construct in tests.  They are
immutable snapshots: they do not track later changes to the object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class RawBucket:
    """A storage bucket.

    Only ``name`` is interpreted; ``attrs`` carries whatever else the SDK
    reported (creation time, location, ...) untouched.
    """

    name: str
    attrs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RawObject:
    """A stored object identified by its full key within a bucket."""

    name: str
    updated: datetime
    size: int = 0
