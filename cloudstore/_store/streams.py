"""Stream wrappers shared by the SDK adapters."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, Any

from cloudstore.exceptions import BackendError

if TYPE_CHECKING:
    from collections.abc import Callable


class StreamObjectReader:
    """``ObjectReader`` over an SDK file-like body with a known size.

    Exceptions listed in *errors* (the SDK's own failure types) are
    re-raised as :class:`BackendError`.
    """

    def __init__(
        self,
        body: Any,  # noqa: ANN401
        size: int,
        errors: tuple[type[BaseException], ...] = (),
    ) -> None:
        """Wrap *body* (anything with ``read`` and ``close``)."""
        self._body = body
        self._errors = errors
        self.size = size

    def read(self, n: int = -1) -> bytes:
        """Read from the underlying body."""
        try:
            if n < 0:
                return self._body.read()
            return self._body.read(n)
        except self._errors as e:
            raise BackendError(f"Failed to read object body: {e}") from e

    def close(self) -> None:
        """Close the underlying body."""
        try:
            self._body.close()
        except self._errors as e:
            raise BackendError(f"Failed to close object body: {e}") from e


class BufferedObjectWriter:
    """``ObjectWriter`` that buffers in memory and commits on ``close``.

    *commit* receives a file-like object positioned at the start of the
    buffered data and must upload it in one request.
    """

    def __init__(self, commit: Callable[[io.BytesIO], None]) -> None:
        """Store the commit callback."""
        self._commit = commit
        self._buffer = io.BytesIO()
        self._closed = False

    def write(self, data: bytes) -> int:
        """Append *data* to the buffer."""
        if self._closed:
            raise ValueError("write to a closed object writer")
        return self._buffer.write(data)

    def close(self) -> None:
        """Upload the buffered data.  A second call is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._buffer.seek(0)
        try:
            self._commit(self._buffer)
        finally:
            self._buffer.close()

    def abort(self) -> None:
        """Drop the buffered data without uploading."""
        self._closed = True
        self._buffer.close()
