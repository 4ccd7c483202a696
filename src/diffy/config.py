"""Configuration management for the Diffy client.

Configuration comes from an optional JSON file overlaid with ``DIFFY_*``
environment variables.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .api_clients.base_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

DEFAULT_CONFIG_PATH = Path.home() / ".diffy" / "config.json"
MIN_TIMEOUT = 1
MAX_TIMEOUT = 300

logger = logging.getLogger(__name__)


class DiffyConfig(BaseModel):
    """Connection settings for the Diffy API."""

    api_key: str = Field(..., description="Diffy API key")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, description="Request timeout in seconds"
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("api_key cannot be empty")
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v:
            raise ValueError("base_url cannot be empty")
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"base_url must be an http(s) URL. Got: {v}")
        return v if v.endswith("/") else v + "/"

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v < MIN_TIMEOUT or v > MAX_TIMEOUT:
            raise ValueError(
                f"timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT} seconds. "
                f"Got: {v}"
            )
        return v


def load_config(
    config_path: Optional[Union[str, Path]] = None, use_env: bool = True
) -> DiffyConfig:
    """Load configuration from file and/or environment variables.

    Args:
        config_path: Path to config JSON file. When omitted the default
            ~/.diffy/config.json is read if it exists.
        use_env: Whether environment variables override file values

    Returns:
        DiffyConfig instance

    Raises:
        FileNotFoundError: If an explicit config file does not exist
        json.JSONDecodeError: If the config file contains invalid JSON
        ValueError: If required fields are missing or invalid

    Environment Variables:
        DIFFY_API_KEY: API key
        DIFFY_BASE_URL: API base URL
        DIFFY_TIMEOUT: Timeout in seconds
    """
    config_data: Dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        path = DEFAULT_CONFIG_PATH

    if path.exists():
        with open(path) as f:
            config_data = json.load(f)
        if not isinstance(config_data, dict):
            raise ValueError(
                f"Config file {path} must contain a JSON object\n"
                "  Fix: Write the settings as {\"api_key\": \"...\"}\n"
                "  Or: Set DIFFY_API_KEY environment variable"
            )
        logger.debug(f"Loaded Diffy configuration from {path}")

    if use_env:
        if "DIFFY_API_KEY" in os.environ:
            config_data["api_key"] = os.environ["DIFFY_API_KEY"]
        if "DIFFY_BASE_URL" in os.environ:
            config_data["base_url"] = os.environ["DIFFY_BASE_URL"]
        if "DIFFY_TIMEOUT" in os.environ:
            config_data["timeout"] = float(os.environ["DIFFY_TIMEOUT"])

    if not config_data.get("api_key"):
        raise ValueError(
            "Missing required field: api_key\n"
            "  Fix: Set DIFFY_API_KEY environment variable\n"
            f"  Or: Add 'api_key' to {DEFAULT_CONFIG_PATH}"
        )

    return DiffyConfig(**config_data)
