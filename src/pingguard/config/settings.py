# src/pingguard/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/pingguard/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `PINGGUARD_CONFIG_PATH`
- a few environment variables (e.g., `PINGGUARD_LOG_LEVEL`)

Design rule:
- Fraud thresholds and weights live in YAML, not hard-coded in detection logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from pingguard.core.env import load_dotenv_if_present
from pingguard.domain.models import FraudSignal


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `pingguard.config`."""
    text = resources.files("pingguard.config").joinpath(filename).read_text(encoding="utf-8")
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
    name: str = "PingGuard"
    log_level: str = "INFO"


class FraudThresholds(BaseModel):
    max_accuracy_m: float = Field(60, ge=0)
    teleport_distance_m: float = Field(250, ge=0)
    teleport_window_sec: float = Field(5, gt=0)
    max_speed_mps: float = Field(45, gt=0)
    heading_min_speed_mps: float = Field(2, ge=0)
    heading_tolerance_deg: float = Field(75, ge=0, le=180)
    min_dt_sec: float = Field(0.001, gt=0)


class FraudWeights(BaseModel):
    gps_disabled: int = Field(30, ge=0)
    mock_location: int = Field(80, ge=0)
    low_accuracy: int = Field(15, ge=0)
    device_id_mismatch: int = Field(40, ge=0)
    teleport: int = Field(70, ge=0)
    unrealistic_speed: int = Field(50, ge=0)
    heading_mismatch: int = Field(10, ge=0)

    def for_signal(self, signal: FraudSignal) -> int:
        return int(getattr(self, signal.value.lower()))


class ScoreBounds(BaseModel):
    min_score: int = Field(0, ge=0, le=100)
    max_score: int = Field(100, ge=0, le=100)

    @model_validator(mode="after")
    def _validate_order(self) -> "ScoreBounds":
        if self.min_score > self.max_score:
            raise ValueError("fraud.bounds.min_score must not exceed fraud.bounds.max_score")
        return self


class FraudSettings(BaseModel):
    thresholds: FraudThresholds = Field(default_factory=FraudThresholds)
    weights: FraudWeights = Field(default_factory=FraudWeights)
    bounds: ScoreBounds = Field(default_factory=ScoreBounds)


class StoreSettings(BaseModel):
    history_limit: int = Field(100, ge=1)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    fraud: FraudSettings = Field(default_factory=FraudSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: thresholds and weights are deliberately not env-overridable; tune them in YAML.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("PINGGUARD_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    history_limit = os.getenv("PINGGUARD_HISTORY_LIMIT")
    if history_limit:
        data.setdefault("store", {})["history_limit"] = int(history_limit)

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("PINGGUARD_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
