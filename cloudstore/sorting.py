"""Ordering of listing results: sort modes and natural name comparison."""

from __future__ import annotations

import re
from enum import Enum
from functools import cmp_to_key
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from cloudstore._store.dtos import RawObject

_RUN_RE = re.compile(r"\d+|\D+")


class SortMode(str, Enum):
    """How a listing result is ordered before it is returned."""

    NONE = "none"
    MODIFICATION_TIME = "mtime"
    NATURAL_NAME = "natural"

    @classmethod
    def parse(cls, value: str | SortMode | None) -> SortMode:
        """Convert CLI / config text to a ``SortMode``.

        ``None`` and the empty string mean :attr:`NONE`.  Unknown values
        raise ``ValueError`` instead of being silently ignored.
        """
        if value is None:
            return cls.NONE
        if isinstance(value, SortMode):
            return value
        text = value.strip().lower()
        if not text:
            return cls.NONE
        try:
            return cls(text)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(
                f"Unknown sort mode {value!r}; expected one of: {choices}"
            ) from None


def _split_runs(name: str) -> list[str]:
    """Split *name* into alternating digit / non-digit runs."""
    return _RUN_RE.findall(name)


def _cmp(a: str | int, b: str | int) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def natural_compare(a: str, b: str) -> int:
    """Compare two names in natural (human-friendly) order.

    Digit runs compare numerically (``"file2" < "file10"``); all other run
    pairs compare case-sensitively as plain text.  Digit runs with equal
    value but different spelling (``"01"`` vs ``"1"``) fall back to text
    comparison.  When every shared run is equal, the name with fewer runs
    sorts first.

    Returns a negative number, zero, or a positive number like a classic
    ``cmp`` function.
    """
    runs_a = _split_runs(a)
    runs_b = _split_runs(b)
    for run_a, run_b in zip(runs_a, runs_b):
        if run_a.isdecimal() and run_b.isdecimal():
            result = _cmp(int(run_a), int(run_b))
            if result:
                return result
        result = _cmp(run_a, run_b)
        if result:
            return result
    return _cmp(len(runs_a), len(runs_b))


natural_key: Callable[[str], object] = cmp_to_key(natural_compare)
"""Key function for ``sorted(names, key=natural_key)``."""


def sort_objects(objects: list[RawObject], mode: SortMode) -> list[RawObject]:
    """Return *objects* ordered according to *mode*.

    Both sorts are stable: objects that compare equal keep the order in
    which the backend enumerated them.
    """
    match mode:
        case SortMode.NONE:
            return list(objects)
        case SortMode.MODIFICATION_TIME:
            return sorted(objects, key=lambda obj: obj.updated)
        case SortMode.NATURAL_NAME:
            return sorted(objects, key=lambda obj: natural_key(obj.name))
    raise ValueError(f"Unsupported sort mode: {mode!r}")
