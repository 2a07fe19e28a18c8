"""Configuration management for PulseMap."""

from .loader import DEFAULT_CONFIG_PATH, Config, load_config, save_config
from .models import (
    BackfillDefaults,
    ConfigModel,
    GeocoderConfig,
    PostgresConfig,
    ReliefWebConfig,
    WHOConfig,
)

__all__ = [
    "BackfillDefaults",
    "Config",
    "ConfigModel",
    "DEFAULT_CONFIG_PATH",
    "GeocoderConfig",
    "PostgresConfig",
    "ReliefWebConfig",
    "WHOConfig",
    "load_config",
    "save_config",
]
