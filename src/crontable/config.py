"""Configuration management for crontable."""

from __future__ import annotations

import os
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, ValidationError

from crontable.errors import CrontableError, ErrorCategory

CONFIG_FILE = Path.home() / ".crontable" / "config.yaml"


class ConfigError(CrontableError):
    """Error loading or accessing configuration."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, category=ErrorCategory.CONFIG)


class TableSettings(BaseModel):
    """Defaults applied to cron tables built from the CLI or a jobs file."""

    timezone: str = Field(default="local", description="Timezone for schedules")
    resolution: float = Field(default=60.0, gt=0, description="Clock resolution in seconds")


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Resolve a timezone name.

    Args:
        name: IANA timezone name, or None/"local" for local time.

    Returns:
        The timezone, or None for local time.

    Raises:
        ConfigError: If the name is unknown.
    """
    if name is None or name == "local":
        return None

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown timezone: {name}") from e


def get_crontable_config(path: Path | None = None) -> dict[str, object]:
    """Load crontable configuration file.

    Args:
        path: Config file to read, defaults to ~/.crontable/config.yaml.

    Returns:
        Configuration dictionary, empty if file doesn't exist.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f)
            return config if isinstance(config, dict) else {}
    except (yaml.YAMLError, OSError):
        return {}


def load_settings(path: Path | None = None) -> TableSettings:
    """Build table settings.

    Checks in order of priority:
    1. CRONTABLE_TIMEZONE / CRONTABLE_RESOLUTION environment variables
    2. crontable config file (~/.crontable/config.yaml)
    3. Built-in defaults

    Raises:
        ConfigError: If a configured value is invalid.
    """
    data: dict[str, object] = {}

    config = get_crontable_config(path)
    for key in ("timezone", "resolution"):
        if key in config:
            data[key] = config[key]

    if tz := os.environ.get("CRONTABLE_TIMEZONE"):
        data["timezone"] = tz
    if resolution := os.environ.get("CRONTABLE_RESOLUTION"):
        data["resolution"] = resolution

    try:
        return TableSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid crontable settings: {e}") from e
