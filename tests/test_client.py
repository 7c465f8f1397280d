"""Tests for StorageClient and backend selection."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest

from cloudstore.client import StorageClient, make_object_store
from cloudstore.config import StorageConfig
from cloudstore.exceptions import ConfigError
from cloudstore.sorting import SortMode
from tests.fixtures.fake_object_store import FakeObjectStore

if TYPE_CHECKING:
    from pathlib import Path


class TestOwnership:
    """Injected stores are borrowed; created stores are owned."""

    def test_injected_store_is_left_open(self, store: FakeObjectStore) -> None:
        with StorageClient(StorageConfig(), store=store) as client:
            assert client.store is store

        assert not store.closed

    def test_created_store_is_closed(self) -> None:
        fake = FakeObjectStore()
        with patch("cloudstore.client.make_object_store", return_value=fake) as factory:
            with StorageClient(StorageConfig(backend="gcs")) as client:
                assert client.store is fake
            factory.assert_called_once()

        assert fake.closed

    def test_close_is_idempotent(self) -> None:
        fake = MagicMock()
        with patch("cloudstore.client.make_object_store", return_value=fake):
            client = StorageClient(StorageConfig())
            client.store  # noqa: B018
            client.close()
            client.close()

        fake.close.assert_called_once_with()

    def test_loads_config_when_none_given(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        clean_env: None,  # noqa: ARG002
    ) -> None:
        monkeypatch.setenv("CLOUDSTORE_CONFIG", str(tmp_path / "missing.yaml"))
        monkeypatch.setenv("CLOUDSTORE_PROJECT", "env-proj")
        fake = FakeObjectStore()
        fake.add_bucket("only", project_id="env-proj")

        client = StorageClient(store=fake)

        assert client.list_buckets() == ["only"]


class TestOperations:
    """StorageClient delegates to the listing and transfer functions."""

    def test_list_buckets_defaults_to_configured_project(
        self, store: FakeObjectStore
    ) -> None:
        store.add_bucket("mine", project_id="p1")
        store.add_bucket("theirs", project_id="p2")
        client = StorageClient(StorageConfig(project_id="p1"), store=store)

        assert client.list_buckets() == ["mine"]
        assert client.list_buckets("p2") == ["theirs"]

    def test_list_and_read(self, store: FakeObjectStore) -> None:
        store.put("data", "r/10.csv", b"x,y\r\n1,2\r\n")
        store.put("data", "r/9.csv", b"")
        client = StorageClient(StorageConfig(), store=store)

        names = client.list_objects("data", "r/", sort_mode=SortMode.NATURAL_NAME)

        assert names == ["r/9.csv", "r/10.csv"]
        assert client.list_objects_in_folder("data", "/r/") == ["r/10.csv", "r/9.csv"]
        assert client.read_csv("data", names[-1]) == [["x", "y"], ["1", "2"]]
        assert client.read_bytes("data", names[0]) == b""

    def test_write(self, store: FakeObjectStore) -> None:
        client = StorageClient(StorageConfig(), store=store)

        client.write_bytes("data", "raw", b"\x00")
        client.write_csv("data", "t.csv", [["a", "b"]])

        assert store.get("data", "raw") == b"\x00"
        assert store.get("data", "t.csv") == b"a,b\r\n"


class TestMakeObjectStore:
    """Tests for make_object_store()."""

    def test_s3(self) -> None:
        cfg = StorageConfig(backend="s3", endpoint_url="http://minio:9000", region="us")
        with patch("cloudstore._store.s3_adapter.S3ObjectStore") as cls:
            assert make_object_store(cfg) is cls.return_value
        cls.assert_called_once_with(endpoint_url="http://minio:9000", region="us")

    def test_gcs(self) -> None:
        cfg = StorageConfig(backend="gcs", project_id="proj")
        with patch("cloudstore._store.gcs_adapter.GcsObjectStore") as cls:
            assert make_object_store(cfg) is cls.return_value
        cls.assert_called_once_with(project_id="proj")

    def test_unsupported_backend(self) -> None:
        cfg = StorageConfig.model_construct(backend="azure")
        with pytest.raises(ConfigError, match="azure"):
            make_object_store(cfg)
