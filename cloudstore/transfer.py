"""Whole-object reads and writes: raw bytes and CSV rows.

Streams are opened immediately before use and always released before the
call returns.  Failures to close a reader are logged and otherwise ignored
(the data already read is valid); failures to close a writer after all data
was written raise :class:`IncompleteWriteError`.
"""

from __future__ import annotations

import csv
import io
from contextlib import contextmanager
from typing import TYPE_CHECKING

from loguru import logger

from cloudstore.exceptions import (
    BackendError,
    CloudStoreError,
    CsvParseError,
    IncompleteWriteError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from cloudstore._store.ports import ObjectReader, ObjectStorePort, ObjectWriter

CSV_ENCODING = "utf-8"


def _object_path(store: ObjectStorePort, bucket: str, key: str) -> str:
    return f"{store.scheme}://{bucket}/{key}"


# ---------------------------------------------------------------------------
# Scoped streams
# ---------------------------------------------------------------------------


@contextmanager
def get_object_reader(
    store: ObjectStorePort, bucket: str, key: str
) -> Iterator[ObjectReader]:
    """Open a read stream for *key* and close it when the block exits.

    A failure to close is logged and does not replace the block's outcome.
    """
    path = _object_path(store, bucket, key)
    logger.debug(f"Loading object reader for {path}")
    reader = store.open_reader(bucket, key)
    try:
        yield reader
    finally:
        try:
            reader.close()
        except (OSError, CloudStoreError) as e:
            logger.error(f"Error closing file {path}: {e}")


@contextmanager
def get_object_writer(
    store: ObjectStorePort, bucket: str, key: str
) -> Iterator[ObjectWriter]:
    """Open a write stream for *key*; commit it if the block succeeds.

    When the block raises, the writer is aborted and nothing is committed.
    A failure to commit after a successful block raises
    :class:`IncompleteWriteError`.
    """
    path = _object_path(store, bucket, key)
    logger.debug(f"Getting object writer for {path}")
    writer = store.open_writer(bucket, key)
    try:
        yield writer
    except BaseException:
        try:
            writer.abort()
        except (OSError, CloudStoreError) as e:
            logger.error(f"Error aborting writer for {path}: {e}")
        raise
    try:
        writer.close()
    except (OSError, CloudStoreError) as e:
        logger.error(f"Error closing file handle for {path}: {e}")
        raise IncompleteWriteError(path) from e


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def _read_all(reader: ObjectReader, path: str) -> bytes:
    """Read the whole stream, checking the byte count against its size."""
    try:
        data = reader.read()
    except OSError as e:
        raise BackendError(f"Failed to read {path}: {e}") from e
    if len(data) != reader.size:
        raise BackendError(
            f"Incomplete read of {path}: got {len(data)} of {reader.size} bytes"
        )
    return data


def read_bytes(store: ObjectStorePort, bucket: str, key: str) -> bytes:
    """Return the full content of *key* in *bucket*.

    Raises
    ------
    BackendError
        If the object cannot be opened, or reading fails or stops short.

    """
    path = _object_path(store, bucket, key)
    logger.debug(f"Reading file {path}")
    with get_object_reader(store, bucket, key) as reader:
        data = _read_all(reader, path)
    logger.debug(f"Loaded {len(data)} bytes from {path}")
    return data


def _parse_csv(data: bytes, path: str) -> list[list[str]]:
    """Parse *data* as CSV; every row must have as many fields as the first."""
    try:
        text = data.decode(CSV_ENCODING)
    except UnicodeDecodeError as e:
        line = data[: e.start].count(b"\n") + 1
        raise CsvParseError(path, line, f"invalid {CSV_ENCODING}: {e.reason}") from e

    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    rows: list[list[str]] = []
    expected: int | None = None
    try:
        for row in reader:
            if not row:
                continue
            if expected is None:
                expected = len(row)
            elif len(row) != expected:
                raise CsvParseError(
                    path,
                    reader.line_num,
                    f"expected {expected} fields, got {len(row)}",
                )
            rows.append(row)
    except csv.Error as e:
        raise CsvParseError(path, reader.line_num, str(e)) from e
    return rows


def read_csv(store: ObjectStorePort, bucket: str, key: str) -> list[list[str]]:
    """Return the rows of a CSV object as lists of strings.

    Blank lines are skipped.  The first row fixes the number of fields.

    Raises
    ------
    BackendError
        If the object cannot be read.
    CsvParseError
        If the content is not valid UTF-8 CSV or a row has the wrong
        number of fields.  No partial table is returned.

    """
    path = _object_path(store, bucket, key)
    logger.debug(f"Loading csv file {path}")
    with get_object_reader(store, bucket, key) as reader:
        data = _read_all(reader, path)
    rows = _parse_csv(data, path)
    logger.debug(f"Loaded {len(rows)} rows from csv file {path}")
    return rows


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def _write_all(store: ObjectStorePort, bucket: str, key: str, data: bytes) -> None:
    path = _object_path(store, bucket, key)
    with get_object_writer(store, bucket, key) as writer:
        try:
            writer.write(data)
        except (OSError, ValueError) as e:
            logger.error(f"Error writing data to {path}: {e}")
            raise BackendError(f"Failed to write {path}: {e}") from e


def write_bytes(store: ObjectStorePort, bucket: str, key: str, data: bytes) -> None:
    """Create or replace *key* in *bucket* with *data*.

    Raises
    ------
    BackendError
        If the writer cannot be opened or the data cannot be written.
    IncompleteWriteError
        If the data was written but the writer failed to close.

    """
    path = _object_path(store, bucket, key)
    logger.info(f"Writing {len(data)} bytes to {path}")
    _write_all(store, bucket, key, data)
    logger.info(f"Wrote {len(data)} bytes to {path}")


def format_csv(rows: Sequence[Sequence[str]]) -> bytes:
    """Serialize *rows* as UTF-8 CSV with minimal quoting and CRLF line ends."""
    buffer = io.StringIO(newline="")
    csv.writer(buffer).writerows(rows)
    return buffer.getvalue().encode(CSV_ENCODING)


def write_csv(
    store: ObjectStorePort,
    bucket: str,
    key: str,
    rows: Sequence[Sequence[str]],
) -> None:
    """Create or replace *key* in *bucket* with *rows* encoded as CSV.

    Fields containing a comma, a quote or a line break are quoted.
    Same error contract as :func:`write_bytes`.
    """
    path = _object_path(store, bucket, key)
    logger.info(f"Writing {len(rows)} records to {path}")
    _write_all(store, bucket, key, format_csv(rows))
    logger.info(f"Wrote {len(rows)} records to {path}")
