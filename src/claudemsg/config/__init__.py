"""Configuration loading for claudemsg.

This subpackage provides:
- ClientConfig: Pydantic model for client settings
- APIVersion: supported anthropic-version header values
- Config loading from defaults, the environment and JSON files
"""

from claudemsg.config.loader import (
    DEFAULT_BASE_URL,
    ENV_KEY,
    APIVersion,
    ClientConfig,
    default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "ENV_KEY",
    "APIVersion",
    "ClientConfig",
    "default_config",
    "get_default_config_path",
    "load_config",
]
