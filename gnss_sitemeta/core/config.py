"""
Configuration management for gnss-sitemeta.

Uses Pydantic for validation and supports YAML configuration files
with environment variable expansion.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from gnss_sitemeta.core.exceptions import ConfigurationError


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in strings."""
    if isinstance(value, str):
        return os.path.expandvars(value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(v) for v in value]
    return value


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_dir: Path | None = None
    log_to_file: bool = False
    log_to_console: bool = True
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"invalid log level: {v}")
        return level


class SitelogConfig(BaseModel):
    """IGS sitelog decoding."""

    key_column_width: int = Field(default=32, gt=0)
    max_serial_length: int = 20
    antenna_type_length: int = 20


class CleanerConfig(BaseModel):
    """Equipment history cleaning."""

    force: bool = False
    time_shift_seconds: int = Field(default=1, gt=0)
    receiver_type_corrections: dict[str, str] = Field(
        default_factory=lambda: {"POLARX5": "SEPT POLARX5"}
    )


class ReconcileConfig(BaseModel):
    """Receiver/antenna interval reconciliation."""

    ignore_receiver_firmware: bool = False
    status_flag: str = "001"
    far_future: datetime = Field(
        default_factory=lambda: datetime(2099, 12, 31, tzinfo=timezone.utc)
    )

    @field_validator("far_future")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class Settings(BaseSettings):
    """Main settings container."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    sitelog: SitelogConfig = Field(default_factory=SitelogConfig)
    cleaner: CleanerConfig = Field(default_factory=CleanerConfig)
    reconcile: ReconcileConfig = Field(default_factory=ReconcileConfig)

    class Config:
        env_prefix = "GNSS_SITEMETA_"
        env_nested_delimiter = "__"


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML file.

    Args:
        config_path: Path to YAML configuration file.
                    If None, tries default locations.

    Returns:
        Settings instance.

    Raises:
        ConfigurationError: If the file cannot be read or holds invalid values
    """
    search_paths = []

    if config_path:
        search_paths.append(Path(config_path))
    else:
        # Default search locations
        search_paths.extend([
            Path("config/settings.local.yaml"),
            Path("config/settings.yaml"),
            Path.home() / ".gnss_sitemeta" / "settings.yaml",
        ])

    config_data: dict[str, Any] = {}

    for path in search_paths:
        if path.exists():
            try:
                with open(path) as f:
                    raw_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
            if raw_data:
                if not isinstance(raw_data, dict):
                    raise ConfigurationError(f"Expected a mapping in {path}")
                config_data = expand_env_vars(raw_data)
            break
    else:
        if config_path:
            raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        return Settings(**config_data)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
