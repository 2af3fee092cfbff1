"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. Settings field defaults
  2. config/config.yaml  -- static defaults checked into the repo
  3. .env file           -- local developer overrides (not committed)
  4. Environment vars    -- set at deploy time

YAML sections are flattened: ``chunking: {min_chunk_size: 300}`` sets the
``min_chunk_size`` setting.  Keys that are not settings are ignored with a
warning.
"""

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from studyflow.config.settings import Settings
from studyflow.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"


class _LayeredSettings(Settings):
    """Settings whose constructor values rank below env vars and .env."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(path: str | Path | None = DEFAULT_CONFIG_PATH) -> Settings:
    """Load YAML config and layer environment-based settings on top.

    Args:
        path: Path to the YAML configuration file.  A missing file (or
            ``None``) means no YAML layer.

    Returns:
        Fully resolved :class:`Settings`.

    Raises:
        ConfigurationError: If the YAML is malformed or a value is invalid.
    """
    yaml_values = _flatten(_read_yaml(path)) if path is not None else {}

    known = set(Settings.model_fields)
    unknown = sorted(set(yaml_values) - known)
    if unknown:
        logger.warning("unknown_config_keys", keys=unknown, path=str(path))

    yaml_layer = {k: v for k, v in yaml_values.items() if k in known}
    try:
        return _LayeredSettings(**yaml_layer)
    except ValidationError as exc:
        raise ConfigurationError(message=f"Invalid configuration: {exc}") from exc


def _read_yaml(path: str | Path) -> dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            # safe_load only builds plain Python types.
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(message=f"Malformed YAML in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(message=f"{config_path} must contain a mapping at the top level")
    return data


def _flatten(data: dict[str, Any]) -> dict[str, Any]:
    """Lift one level of nested sections into a flat key/value dict."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(value)
        else:
            flat[key] = value
    return flat
