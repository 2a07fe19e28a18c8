"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .models import ConfigModel

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "pulsemap" / "config.yaml"


def _secret(value: Optional[str], env_name: Optional[str]) -> Optional[str]:
    """A non-empty environment variable wins over the value in the file."""
    if env_name:
        from_env = os.environ.get(env_name)
        if from_env:
            return from_env
    return value


class Config:
    """
    Loaded configuration plus resolved secrets.

    The YAML file is read on first access. Secrets named by *_env settings are
    read from the environment on every call, so they can change between runs
    of a long-lived process.
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    def get_db_config(self) -> Dict[str, Any]:
        """Postgres section with the password resolved."""
        postgres = self.config.postgres
        db_config = postgres.model_dump()
        db_config["password"] = _secret(postgres.password, postgres.password_env)
        return db_config

    def get_mapbox_token(self) -> Optional[str]:
        """Mapbox token, or None when geocoding is static-only."""
        geocoder = self.config.geocoder
        return _secret(geocoder.mapbox_token, geocoder.mapbox_token_env)


def load_config(config_path: Path) -> ConfigModel:
    """
    Load configuration from YAML file.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file is not valid YAML or fails validation
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")

    if not isinstance(config_data, dict):
        raise ValueError(f"Invalid configuration: expected a mapping, got {type(config_data).__name__}")

    try:
        return ConfigModel(**config_data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Write configuration as YAML, creating parent directories."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
