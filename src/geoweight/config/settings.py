# src/geoweight/config/settings.py
"""
Library settings (Pydantic).

Settings are loaded from `src/geoweight/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `GEOWEIGHT_CONFIG_PATH` (replaces the packaged defaults)
- environment variables (e.g., `GEOWEIGHT_LOG_LEVEL`)

Function signatures keep their own literal defaults; settings only cover what a call does
not expose directly (cancellation cadence, logging).
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from geoweight.core.env import load_dotenv_if_present, resolve_config_path

import yaml
from pydantic import BaseModel, Field, PositiveInt


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `geoweight.config`."""
    text = resources.files("geoweight.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "geoweight"
    log_level: str = "INFO"


class CheckEveryRows(BaseModel):
    dist_weighted_mean: PositiveInt = 100
    popdist_weighted_mean: PositiveInt = 1000
    dist_min: PositiveInt = 100


class CancellationSettings(BaseModel):
    check_every_rows: CheckEveryRows = Field(default_factory=CheckEveryRows)

    def every(self, operation: Literal["dist_weighted_mean", "popdist_weighted_mean", "dist_min"]) -> int:
        return int(getattr(self.check_every_rows, operation))


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    cancellation: CancellationSettings = Field(default_factory=CancellationSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)
    log_level = os.getenv("GEOWEIGHT_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level
    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GEOWEIGHT_CONFIG_PATH")
    raw = (
        _read_yaml_file(resolve_config_path(config_path))
        if config_path
        else _read_package_yaml("defaults.yaml")
    )
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
