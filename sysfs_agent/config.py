"""
Sysfs Agent - Configuration

Loads the deployment configuration from a YAML file and validates it.
Every setting has a default, so the agent runs with no file at all.
"""

from pathlib import Path
from typing import Dict, Optional, Union

import structlog
import yaml
from pydantic import BaseModel, Field, PositiveFloat, PositiveInt, ValidationError, field_validator

from .errors import ConfigError

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = "/etc/sysfs-agent/config.yaml"

_UFS = "/sys/devices/platform/soc/1d84000.ufshc"

# Source name -> sysfs node, in collection order
DEFAULT_SOURCE_PATHS: Dict[str, str] = {
    "charge_cycles": "/sys/class/power_supply/maxfg/cycle_counts_bins",
    "codec_state": "/sys/devices/platform/soc/171c0000.slim/tavil-slim-pgd/tavil_codec/codec_state",
    "slowio_read": f"{_UFS}/slowio_read_cnt",
    "slowio_write": f"{_UFS}/slowio_write_cnt",
    "slowio_unmap": f"{_UFS}/slowio_unmap_cnt",
    "slowio_sync": f"{_UFS}/slowio_sync_cnt",
    "speaker_impedance": "/sys/class/misc/msm_cirrus_playback/resistance_left_right",
}


class AgentSettings(BaseModel):
    name: str = "sysfs-agent"
    version: str = "1.0.0"


class ScheduleSettings(BaseModel):
    """Collection cadence, in seconds."""

    # Codec driver needs time to load after boot
    warmup_delay: float = Field(default=30.0, ge=0)
    period: PositiveFloat = 24 * 60 * 60
    max_sleep: PositiveFloat = 60.0


class SinkSettings(BaseModel):
    socket_path: str = "/run/pixelstats/stats.sock"
    connect_timeout: PositiveFloat = 1.0


class SourceSettings(BaseModel):
    paths: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SOURCE_PATHS))
    impedance_scale: PositiveInt = 1000

    @field_validator("paths")
    @classmethod
    def _merge_paths(cls, value: Dict[str, str]) -> Dict[str, str]:
        unknown = sorted(set(value) - set(DEFAULT_SOURCE_PATHS))
        if unknown:
            raise ValueError(f"unknown source(s): {', '.join(unknown)}")
        merged = dict(DEFAULT_SOURCE_PATHS)
        merged.update(value)
        return merged


class LoggingSettings(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def _upper(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid log level: {value}")
        return level


class Settings(BaseModel):
    """Top-level agent configuration."""

    agent: AgentSettings = Field(default_factory=AgentSettings)
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)
    sink: SinkSettings = Field(default_factory=SinkSettings)
    sources: SourceSettings = Field(default_factory=SourceSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from a YAML file, falling back to defaults if it is absent."""
    path = Path(config_path or DEFAULT_CONFIG_PATH)
    if not path.exists():
        logger.warning("Config file not found, using defaults", path=str(path))
        return Settings()

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    logger.info("Configuration loaded", path=str(path))
    return settings
