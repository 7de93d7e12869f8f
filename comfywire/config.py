from __future__ import annotations

import os
from typing import Optional

import yaml
from pydantic import BaseModel

from .constants import DEFAULT_PAYLOAD_PREVIEW_CHARS


class ValidationConfig(BaseModel):
    """Knobs for contract validation."""

    check_output_arity: bool = True
    payload_preview_chars: int = DEFAULT_PAYLOAD_PREVIEW_CHARS


class LoggingConfig(BaseModel):
    """Logging settings applied by the CLI."""

    level: str = "WARNING"


class ComfywireConfig(BaseModel):
    """Top-level configuration model."""

    validation: ValidationConfig = ValidationConfig()
    logging: LoggingConfig = LoggingConfig()


_TRUE_VALUES = {"1", "true", "yes", "on"}


def load_config(path: Optional[str] = None) -> ComfywireConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to COMFYWIRE_CONFIG env
            variable or 'comfywire.yaml' in the current directory.
    """

    config_path = path or os.getenv("COMFYWIRE_CONFIG", "comfywire.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = ComfywireConfig(**data)
    else:
        config = ComfywireConfig()

    env_level = os.getenv("COMFYWIRE_LOG_LEVEL")
    if env_level:
        config.logging.level = env_level.upper()
    env_arity = os.getenv("COMFYWIRE_CHECK_OUTPUT_ARITY")
    if env_arity:
        config.validation.check_output_arity = env_arity.lower() in _TRUE_VALUES
    return config


_config_instance: ComfywireConfig | None = None


def get_config() -> ComfywireConfig:
    """Return the process-wide configuration, loading it on first use."""

    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance
