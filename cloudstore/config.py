"""Configuration loading with priority: env > config file > preset > defaults."""

from __future__ import annotations

import importlib.resources
import os
from pathlib import Path
from typing import Literal

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError

from cloudstore.exceptions import ConfigError

CONFIG_DIR = Path.home() / ".config" / "cloudstore"
CONFIG_PATH = CONFIG_DIR / "config.yaml"

_SECTION = "storage"

Backend = Literal["s3", "gcs"]


def get_config_path(config_path: Path | None = None) -> Path:
    """Return path to config file.

    Uses *config_path* if provided, otherwise CLOUDSTORE_CONFIG env var,
    otherwise default CONFIG_PATH.
    """
    if config_path is not None:
        return config_path
    path = os.environ.get("CLOUDSTORE_CONFIG")
    return Path(path) if path else CONFIG_PATH


def _load_preset_data() -> dict[str, object]:
    """Load the bundled preset YAML and return raw dict."""
    ref = importlib.resources.files("cloudstore.presets").joinpath("default.yaml")
    text = ref.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if isinstance(data, dict):
        return data
    return {}


def _load_raw_yaml(path: Path) -> dict[str, object]:
    """Load a YAML file and return its top-level mapping (or empty dict)."""
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        logger.warning(f"Invalid config format in {path}; expected mapping.")
        return {}
    return data


class StorageConfig(BaseModel):
    """Object store connection settings."""

    backend: Backend = "s3"
    project_id: str = ""
    endpoint_url: str | None = None
    region: str | None = None

    @classmethod
    def _from_section(cls, data: dict[str, object]) -> StorageConfig:
        """Build from a raw YAML top-level dict (reads the ``storage`` key)."""
        section = data.get(_SECTION, {})
        if not isinstance(section, dict):
            return cls()
        try:
            return cls(**{k: v for k, v in section.items() if k in cls.model_fields})
        except ValidationError as e:
            raise ConfigError(f"Invalid {_SECTION!r} config section: {e}") from e

    @classmethod
    def from_file(cls, path: Path = CONFIG_PATH) -> StorageConfig:
        """Load config from a YAML file.  Returns empty config if file is missing."""
        if not path.is_file():
            return cls()
        logger.trace(f"Loading config from {path}")
        return cls._from_section(_load_raw_yaml(path))

    @classmethod
    def from_env(cls) -> StorageConfig:
        """Build config from environment variables.

        Only variables that are set end up in ``model_fields_set``, so
        unset ones never override lower-priority sources.
        """
        env_map = {
            "backend": "CLOUDSTORE_BACKEND",
            "project_id": "CLOUDSTORE_PROJECT",
            "endpoint_url": "CLOUDSTORE_ENDPOINT_URL",
            "region": "CLOUDSTORE_REGION",
        }
        values = {
            field: os.environ[var]
            for field, var in env_map.items()
            if os.environ.get(var)
        }
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid CLOUDSTORE_* environment: {e}") from e

    def merge(self, override: StorageConfig) -> StorageConfig:
        """Return a new config where explicitly set *override* values win."""
        return self.model_copy(
            update={name: getattr(override, name) for name in override.model_fields_set}
        )

    @classmethod
    def load(cls, config_path: Path | None = None) -> StorageConfig:
        """Merge preset, file, and env: preset < file < env."""
        preset_cfg = cls._from_section(_load_preset_data())
        file_cfg = cls.from_file(get_config_path(config_path))
        env_cfg = cls.from_env()
        return preset_cfg.merge(file_cfg).merge(env_cfg)

    def save_to_file(self, path: Path = CONFIG_PATH) -> Path:
        """Write the ``storage`` section, preserving other top-level sections."""
        path.parent.mkdir(parents=True, exist_ok=True)
        existing = _load_raw_yaml(path)
        existing[_SECTION] = self.model_dump(exclude_none=True)
        content = yaml.safe_dump(existing, default_flow_style=False, sort_keys=False)
        if not content.endswith("\n"):
            content += "\n"
        path.write_text(content, encoding="utf-8")
        logger.info(f"Config saved to {path}")
        return path
