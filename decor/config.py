"""Runtime settings for decor.

Settings come from an optional YAML file and are then overridden by
``DECOR_*`` environment variables:

- DECOR_CONFIG: path to the YAML file
- DECOR_STRICT_ALIASES: raise instead of storing nothing for dangling aliases
- DECOR_LOG_LEVEL: level used by configure_logging()
- DECOR_SERIALIZER_OPERATION: operation the HTTP endpoint renders
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ENV_PREFIX = "DECOR_"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class DecorSettings(BaseModel):
    """Settings shared by registries and the HTTP layer."""

    strict_aliases: bool = Field(
        default=False,
        description="Raise AliasTargetMissingError when aliasing to an unregistered key",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    serializer_operation: str = Field(
        default="as_json",
        description="View operation rendered by versioned HTTP endpoints",
    )


def _env_overrides() -> dict[str, str]:
    overrides = {}
    for name in DecorSettings.model_fields:
        value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            overrides[name] = value
    return overrides


def load_settings(path: Optional[Path] = None) -> DecorSettings:
    """Load settings from YAML (if any) with environment overrides applied."""
    if path is None and os.getenv(f"{ENV_PREFIX}CONFIG"):
        path = Path(os.environ[f"{ENV_PREFIX}CONFIG"])

    data: dict = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            logger.warning(f"Settings file not found: {path}")
        else:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            logger.debug(f"Loaded settings from {path}")

    data.update(_env_overrides())
    return DecorSettings.model_validate(data)


# Global settings instance
_settings: Optional[DecorSettings] = None


def get_settings() -> DecorSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging the way the HTTP app expects."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format=LOG_FORMAT,
    )
