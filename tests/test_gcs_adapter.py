"""Tests for GcsObjectStore against a mocked ``google.cloud.storage`` client."""

from __future__ import annotations

import io
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests
from google.api_core import exceptions as api_exceptions
from google.cloud import storage

from cloudstore._store.gcs_adapter import GcsObjectStore
from cloudstore.exceptions import BackendError, EnumerationTimeoutError
from tests.conftest import at


def _blob(name: str, minutes: int, size: int | None = 0) -> SimpleNamespace:
    return SimpleNamespace(name=name, updated=at(minutes), size=size)


class TestIterBuckets:
    """Tests for GcsObjectStore.iter_buckets()."""

    def test_lists_project_buckets(self) -> None:
        client = MagicMock()
        client.list_buckets.return_value = iter(
            [
                SimpleNamespace(name="b1", time_created=at(0), location="EU"),
                SimpleNamespace(name="b2", time_created=at(1), location="US"),
            ]
        )

        buckets = list(GcsObjectStore(client=client).iter_buckets("proj", timeout=30.0))

        assert [b.name for b in buckets] == ["b1", "b2"]
        assert buckets[1].attrs == {"created": at(1), "location": "US"}
        client.list_buckets.assert_called_once_with(
            project="proj", timeout=30.0, retry=None
        )

    def test_deadline_exceeded(self) -> None:
        client = MagicMock()
        client.list_buckets.side_effect = api_exceptions.DeadlineExceeded("slow")

        with pytest.raises(EnumerationTimeoutError):
            list(GcsObjectStore(client=client).iter_buckets("proj", timeout=30.0))

    def test_forbidden(self) -> None:
        client = MagicMock()
        client.list_buckets.side_effect = api_exceptions.Forbidden("denied")

        with pytest.raises(BackendError, match="proj"):
            list(GcsObjectStore(client=client).iter_buckets("proj", timeout=30.0))


class TestIterObjects:
    """Tests for GcsObjectStore.iter_objects()."""

    def test_yields_blobs(self) -> None:
        client = MagicMock()
        client.list_blobs.return_value = iter(
            [_blob("p/a", 2, size=4), _blob("p/b", 1, size=None)]
        )

        objects = list(
            GcsObjectStore(client=client).iter_objects("bkt", "p/", "/", timeout=30.0)
        )

        assert [(o.name, o.updated, o.size) for o in objects] == [
            ("p/a", at(2), 4),
            ("p/b", at(1), 0),
        ]
        client.list_blobs.assert_called_once_with(
            "bkt", prefix="p/", delimiter="/", timeout=30.0, retry=None
        )

    def test_empty_prefix_passed_as_none(self) -> None:
        client = MagicMock()
        client.list_blobs.return_value = iter([])

        list(GcsObjectStore(client=client).iter_objects("bkt", "", None, timeout=5.0))

        client.list_blobs.assert_called_once_with(
            "bkt", prefix=None, delimiter=None, timeout=5.0, retry=None
        )

    def test_missing_bucket(self) -> None:
        client = MagicMock()
        client.list_blobs.side_effect = api_exceptions.NotFound("no bucket")

        with pytest.raises(BackendError, match="gs://nope/"):
            list(GcsObjectStore(client=client).iter_objects("nope", "", None, timeout=30.0))

    def test_http_timeout(self) -> None:
        client = MagicMock()
        client.list_blobs.side_effect = requests.exceptions.ReadTimeout("read timed out")

        with pytest.raises(EnumerationTimeoutError):
            list(GcsObjectStore(client=client).iter_objects("b", "", None, timeout=30.0))


class TestStreams:
    """Tests for GcsObjectStore.open_reader() / open_writer()."""

    def test_reader(self) -> None:
        client = MagicMock()
        blob = client.bucket.return_value.get_blob.return_value
        blob.size = 5
        blob.open.return_value = io.BytesIO(b"hello")

        reader = GcsObjectStore(client=client).open_reader("bkt", "k")

        assert reader.size == 5
        assert reader.read() == b"hello"
        client.bucket.assert_called_once_with("bkt")
        client.bucket.return_value.get_blob.assert_called_once_with("k", retry=None)
        blob.open.assert_called_once_with("rb", retry=None)

    def test_reader_disables_sdk_retry(self) -> None:
        client = MagicMock()
        blob = storage.Blob("k", bucket=storage.Bucket(client, name="bkt"))
        client.bucket.return_value.get_blob.return_value = blob

        reader = GcsObjectStore(client=client).open_reader("bkt", "k")

        assert reader._body._retry is None

    def test_reader_missing_blob(self) -> None:
        client = MagicMock()
        client.bucket.return_value.get_blob.return_value = None

        with pytest.raises(BackendError, match="does not exist"):
            GcsObjectStore(client=client).open_reader("bkt", "missing")

    def test_reader_not_found(self) -> None:
        client = MagicMock()
        client.bucket.return_value.get_blob.side_effect = api_exceptions.NotFound("gone")

        with pytest.raises(BackendError, match="gs://bkt/k"):
            GcsObjectStore(client=client).open_reader("bkt", "k")

    def test_read_failure_is_translated(self) -> None:
        client = MagicMock()
        blob = client.bucket.return_value.get_blob.return_value
        blob.size = 5
        blob.open.return_value.read.side_effect = requests.exceptions.ConnectionError(
            "reset"
        )

        reader = GcsObjectStore(client=client).open_reader("bkt", "k")

        with pytest.raises(BackendError):
            reader.read()

    def test_writer_uploads_on_close(self) -> None:
        client = MagicMock()
        blob = client.bucket.return_value.blob.return_value
        uploaded: list[bytes] = []
        blob.upload_from_file.side_effect = lambda fh, retry: uploaded.append(fh.read())

        writer = GcsObjectStore(client=client).open_writer("bkt", "out")
        writer.write(b"abc")
        blob.upload_from_file.assert_not_called()
        writer.close()

        assert uploaded == [b"abc"]
        client.bucket.return_value.blob.assert_called_once_with("out")

    def test_upload_failure(self) -> None:
        client = MagicMock()
        blob = client.bucket.return_value.blob.return_value
        blob.upload_from_file.side_effect = api_exceptions.Forbidden("denied")
        writer = GcsObjectStore(client=client).open_writer("bkt", "out")
        writer.write(b"x")

        with pytest.raises(BackendError, match="gs://bkt/out"):
            writer.close()


def test_close_closes_client() -> None:
    client = MagicMock()
    GcsObjectStore(client=client).close()
    client.close.assert_called_once_with()
