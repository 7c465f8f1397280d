"""Folder-style path helpers for object keys.

Object stores have a flat key space; "folders" are emulated with ``/``
separated prefixes.  These helpers normalize user supplied folder names
into the prefix form the backends expect.
"""

from __future__ import annotations

SEPARATOR = "/"


def strip_edge_separators(path: str) -> str:
    """Remove at most one leading and one trailing ``/`` from *path*.

    Repeated separators inside the path (and any extra ones at the edges)
    are left untouched: ``"//a//b//"`` becomes ``"/a//b/"``.
    """
    if path.startswith(SEPARATOR):
        path = path[1:]
    if path.endswith(SEPARATOR):
        path = path[:-1]
    return path


def strip_trailing_separators(path: str) -> str:
    """Remove all trailing ``/`` from *path*."""
    return path.rstrip(SEPARATOR)


def strip_leading_separators(path: str) -> str:
    """Remove all leading ``/`` from *path*."""
    return path.lstrip(SEPARATOR)


def format_folder_prefix(path: str) -> str:
    """Return *path* as a folder prefix ending in exactly one ``/``.

    The result never starts with a separator (except for the empty folder,
    which yields ``"/"``) and the function is idempotent::

        >>> format_folder_prefix("/a/b/")
        'a/b/'
        >>> format_folder_prefix("")
        '/'

    Edge separators are stripped greedily so that inputs like ``"//a//"``
    still satisfy the single-trailing-separator contract; for paths with at
    most one separator at each edge this equals
    ``strip_edge_separators(path) + "/"``.
    """
    core = strip_leading_separators(strip_trailing_separators(path))
    return core + SEPARATOR
