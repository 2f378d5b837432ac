"""Client configuration for claudemsg.

Provides the Pydantic model for client settings and functions to build it
from defaults, the environment, or a JSON file.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

ENV_KEY = "ANTHROPIC_API_KEY"
DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
DEFAULT_TIMEOUT = 600.0


class APIVersion(str, Enum):
    """Values of the anthropic-version header."""

    V2023_06_01 = "2023-06-01"
    V2023_01_01 = "2023-01-01"
    LATEST = "2023-06-01"
    INITIAL = "2023-01-01"


class ClientConfig(BaseModel):
    """Settings of a Client.

    Attributes:
        api_key: API key sent in the x-api-key header.
        base_url: API root, without trailing slash.
        api_version: Value of the anthropic-version header.
        timeout: Request timeout in seconds for the default HTTP client.
        http_client: Optional caller-owned httpx.Client to send requests with.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    api_key: str = Field("", repr=False)
    base_url: str = DEFAULT_BASE_URL
    api_version: APIVersion = APIVersion.LATEST
    timeout: float = DEFAULT_TIMEOUT
    http_client: Optional[httpx.Client] = Field(None, exclude=True)


def default_config(api_key: str | None = None) -> ClientConfig:
    """Return the standard configuration.

    Args:
        api_key: API key. Falls back to the ANTHROPIC_API_KEY env var.
    """
    if api_key is None:
        api_key = os.environ.get(ENV_KEY, "")
    return ClientConfig(api_key=api_key)


def get_default_config_path() -> Path:
    """Returns the default configuration path ~/.claudemsg/config.json."""
    return Path.home() / ".claudemsg" / "config.json"


def load_config(config_path: Path | str | None = None) -> ClientConfig:
    """Load configuration from a JSON file.

    A missing or empty ``api_key`` falls back to the ANTHROPIC_API_KEY
    environment variable.

    Args:
        config_path: Path to config file. If None, uses default path.

    Returns:
        ClientConfig instance with loaded values.

    Raises:
        FileNotFoundError: If config file does not exist.
        json.JSONDecodeError: If config file contains invalid JSON.
        pydantic.ValidationError: If config values don't match schema.
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = Path(config_path).expanduser().resolve()

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not data.get("api_key"):
        data["api_key"] = os.environ.get(ENV_KEY, "")

    return ClientConfig(**data)
