"""Application configuration models and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppPaths(BaseModel):
    """Resolved directories for specmatrix runtime files."""

    base_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("SPECMATRIX_HOME", Path.home() / ".specmatrix"))
    )

    @property
    def config_dir(self) -> Path:
        return self.base_dir / "config"

    @property
    def logs_dir(self) -> Path:
        return self.base_dir / "logs"

    @property
    def data_dir(self) -> Path:
        return self.base_dir / "data"

    @property
    def preferences_file(self) -> Path:
        return self.config_dir / "preferences.json"

    def ensure(self) -> None:
        for path in (self.base_dir, self.config_dir, self.logs_dir, self.data_dir):
            path.mkdir(parents=True, exist_ok=True)


class UISettings(BaseModel):
    theme: Literal["Light", "Dark", "System"] = "System"
    refresh_s: float = Field(default=1.0, ge=0.1, le=60.0)


class SamplerSettings(BaseModel):
    battery_interval_s: float = Field(default=1.0, ge=0.05, le=60.0)
    memory_interval_s: float = Field(default=0.1, ge=0.05, le=60.0)
    storage_interval_s: float = Field(default=5.0, ge=0.05, le=60.0)
    network_interval_s: float = Field(default=1.0, ge=0.05, le=60.0)
    brightness_interval_s: float = Field(default=1.0, ge=0.05, le=60.0)
    join_timeout_s: float = Field(default=2.0, ge=0.1, le=30.0)


class NetworkSettings(BaseModel):
    measure_speed: bool = True
    speed_url: str = "https://www.apple.com/favicon.ico"
    speed_interval_s: float = Field(default=1.0, ge=0.05, le=60.0)
    request_timeout_s: float = Field(default=5.0, ge=0.5, le=60.0)


class SpecMatrixSettings(BaseModel):
    app_name: str = "specmatrix"
    paths: AppPaths = Field(default_factory=AppPaths)
    ui: UISettings = Field(default_factory=UISettings)
    samplers: SamplerSettings = Field(default_factory=SamplerSettings)
    network: NetworkSettings = Field(default_factory=NetworkSettings)


def _maybe_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _maybe_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return None


_INTERVAL_ENV = {
    "SPECMATRIX_BATTERY_INTERVAL": "battery_interval_s",
    "SPECMATRIX_MEMORY_INTERVAL": "memory_interval_s",
    "SPECMATRIX_STORAGE_INTERVAL": "storage_interval_s",
    "SPECMATRIX_NETWORK_INTERVAL": "network_interval_s",
    "SPECMATRIX_BRIGHTNESS_INTERVAL": "brightness_interval_s",
}


def load_settings(env_path: Path | None = None) -> SpecMatrixSettings:
    """Load user settings from environment variables and defaults."""

    env_file = env_path or Path('.env')
    if env_file.exists():
        load_dotenv(env_file)

    overrides: dict[str, Any] = {}

    if theme := os.getenv('SPECMATRIX_THEME'):
        if theme.capitalize() in {"Light", "Dark", "System"}:
            overrides.setdefault('ui', {})['theme'] = theme.capitalize()

    for env_name, field_name in _INTERVAL_ENV.items():
        if (interval := _maybe_float(os.getenv(env_name))) is not None and 0.05 <= interval <= 60.0:
            overrides.setdefault('samplers', {})[field_name] = interval

    if (measure := _maybe_bool(os.getenv('SPECMATRIX_MEASURE_SPEED'))) is not None:
        overrides.setdefault('network', {})['measure_speed'] = measure

    if speed_url := os.getenv('SPECMATRIX_SPEED_URL'):
        overrides.setdefault('network', {})['speed_url'] = speed_url

    settings = SpecMatrixSettings(**overrides)
    settings.paths.ensure()
    return settings
