"""Shared pytest fixtures for cloudstore tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import pytest
import yaml

from tests.fixtures.fake_object_store import FakeObjectStore

if TYPE_CHECKING:
    from pathlib import Path

CLOUDSTORE_ENV_VARS = (
    "CLOUDSTORE_CONFIG",
    "CLOUDSTORE_BACKEND",
    "CLOUDSTORE_PROJECT",
    "CLOUDSTORE_ENDPOINT_URL",
    "CLOUDSTORE_REGION",
)

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> FakeObjectStore:
    """Empty in-memory store with a single ``data`` bucket."""
    fake = FakeObjectStore()
    fake.add_bucket("data")
    return fake


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all CLOUDSTORE_* variables from the environment."""
    for var in CLOUDSTORE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def at(minutes: int) -> datetime:
    """Timestamp *minutes* after a fixed reference time."""
    return T0 + timedelta(minutes=minutes)


def write_test_config(path: Path, **storage: object) -> None:
    """Write a config YAML with the given ``storage`` section."""
    path.write_text(yaml.safe_dump({"storage": storage}), encoding="utf-8")
