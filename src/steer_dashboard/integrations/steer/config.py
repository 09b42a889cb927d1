"""Steer dashboard configuration models."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

# XDG-compliant config location
CONFIG_DIR = Path.home() / ".config" / "steer"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_REFRESH_INTERVAL = 5.0


class SteerConnectionConfig(BaseModel):
    """Steer API connection configuration."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = "http://localhost:8080"
    api_prefix: str = "/api/v1"
    timeout: int = 30
    verify_ssl: bool = True
    token: str | None = None

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalize to a single leading slash and no trailing slash."""
        return "/" + v.strip("/") if v.strip("/") else ""

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @property
    def api_url(self) -> str:
        """Base URL including the API prefix."""
        return f"{self.base_url}{self.api_prefix}"


class DashboardConfig(BaseModel):
    """Refresh cadence and caller-side retry policy."""

    model_config = ConfigDict(extra="forbid")

    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    retries: int = 3

    @field_validator("refresh_interval")
    @classmethod
    def validate_refresh_interval(cls, v: float) -> float:
        """Validate refresh interval is positive."""
        if v <= 0:
            raise ValueError("refresh_interval must be positive")
        return v

    @field_validator("retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        """Validate retries is at least one attempt."""
        if v < 1:
            raise ValueError("retries must be at least 1")
        return v


class SteerConfig(BaseModel):
    """Complete dashboard configuration."""

    model_config = ConfigDict(extra="forbid")

    connection: SteerConnectionConfig = SteerConnectionConfig()
    dashboard: DashboardConfig = DashboardConfig()

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> SteerConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            STEER_BASE_URL: Backend base URL
            STEER_API_TOKEN: Bearer token sent with every request
            STEER_TIMEOUT: Request timeout in seconds
            STEER_REFRESH_INTERVAL: Dashboard refresh interval in seconds
            STEER_RETRIES: Attempts for one-shot CLI commands
        """
        config_dict = {
            key: dict(value) if isinstance(value, dict) else value
            for key, value in (base_config or {}).items()
        }
        connection = config_dict.setdefault("connection", {})
        dashboard = config_dict.setdefault("dashboard", {})

        if base_url := os.environ.get("STEER_BASE_URL"):
            connection["base_url"] = base_url
        if token := os.environ.get("STEER_API_TOKEN"):
            connection["token"] = token
        if timeout := os.environ.get("STEER_TIMEOUT"):
            connection["timeout"] = timeout
        if interval := os.environ.get("STEER_REFRESH_INTERVAL"):
            dashboard["refresh_interval"] = interval
        if retries := os.environ.get("STEER_RETRIES"):
            dashboard["retries"] = retries

        return cls.model_validate(config_dict)


def load_config(path: Path | None = None) -> SteerConfig:
    """Load configuration from YAML, then apply environment overrides.

    Args:
        path: Config file path. Defaults to ``~/.config/steer/config.yaml``;
            a missing default file is not an error.

    Returns:
        Validated configuration.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ValueError: If the file does not contain a mapping.
    """
    config_path = path or CONFIG_FILE
    base: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open() as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{config_path} must contain a mapping")
        base = loaded
    elif path is not None:
        raise FileNotFoundError(config_path)
    return SteerConfig.from_env(base)
