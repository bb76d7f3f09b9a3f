# src/geoverify/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/geoverify/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `GEOVERIFY_LOG_LEVEL`)
- an external YAML file via `GEOVERIFY_CONFIG_PATH`

Design rule:
- Calibration knobs (radius floor, default radius, spoof weights) live in YAML,
  not hard-coded in the verifier. Their values are a product decision.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

from geoverify.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `geoverify.config`."""
    text = resources.files("geoverify.config").joinpath(filename).read_text(encoding="utf-8")
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
    model_config = ConfigDict(frozen=True)

    name: str = "GeoVerify"
    log_level: str = "INFO"


class VerificationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Targets with a smaller (or no) radius are widened to these values.
    radius_floor_m: float = Field(10, ge=0)
    default_radius_m: float = Field(50, gt=0)


SpoofCheckName = Literal["is_emulator", "mock_location"]


class SpoofingSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    check_weights: dict[SpoofCheckName, float] = Field(
        default_factory=lambda: {"is_emulator": 0.6, "mock_location": 0.6}
    )
    pass_threshold: float = Field(0.5, ge=0, le=1)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    app: AppSettings = Field(default_factory=AppSettings)
    verification: VerificationSettings = Field(default_factory=VerificationSettings)
    spoofing: SpoofingSettings = Field(default_factory=SpoofingSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    data = dict(data)
    log_level = os.getenv("GEOVERIFY_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level
    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GEOVERIFY_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
