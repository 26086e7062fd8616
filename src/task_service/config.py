"""Configuration management using pydantic-settings.

This module provides configuration loading with the following precedence:
1. CLI arguments (highest priority)
2. Environment variables (TASK_SERVICE_* prefix)
3. Global config file (~/.config/task-service/config.toml)
4. Built-in defaults (lowest priority)
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import tomli
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_config_path() -> Path:
    """Get the global config file path (XDG compliant).

    Returns:
        Path to config file:
        - Linux/macOS: ~/.config/task-service/config.toml
        - Windows: %APPDATA%/task-service/config.toml
    """
    if os.name == "nt":  # Windows
        base = Path(os.environ.get("APPDATA", Path.home()))
    else:  # Linux/macOS
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "task-service" / "config.toml"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment variables use TASK_SERVICE_ prefix:
    - TASK_SERVICE_HOST
    - TASK_SERVICE_PORT
    - TASK_SERVICE_LOG_LEVEL
    etc.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASK_SERVICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # HTTP server
    host: str = Field(default="localhost", description="HTTP server bind address")
    port: int = Field(default=6969, ge=1, le=65535, description="HTTP server port")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )
    log_file: str | None = Field(default=None, description="Log file path (optional)")

    # Metrics Configuration
    metrics_enabled: bool = Field(default=True, description="Expose Prometheus metrics at /metrics")


def load_toml_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        path: Path to config file (uses default if None)

    Returns:
        Configuration dictionary (empty if file doesn't exist)
    """
    config_path = path or get_config_path()
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomli.load(f)
    return {}


def flatten_toml_config(toml_config: dict[str, Any]) -> dict[str, Any]:
    """Flatten nested TOML config to flat dictionary for Settings.

    Args:
        toml_config: Nested TOML configuration

    Returns:
        Flattened configuration dictionary
    """
    overrides: dict[str, Any] = {}

    if "server" in toml_config:
        for key in ["host", "port"]:
            if key in toml_config["server"]:
                overrides[key] = toml_config["server"][key]

    if "logging" in toml_config:
        for key in ["level", "format", "file"]:
            if key in toml_config["logging"]:
                overrides[f"log_{key}"] = toml_config["logging"][key]

    if "metrics" in toml_config and "enabled" in toml_config["metrics"]:
        overrides["metrics_enabled"] = toml_config["metrics"]["enabled"]

    return overrides


def load_settings_with_toml(config_path: Path | None = None, **cli_overrides: Any) -> Settings:
    """Load settings with TOML config as base, env vars as override.

    pydantic-settings gives init arguments priority over the environment, so
    TOML values are only passed for fields the environment does not set.
    CLI overrides (non-None values) always win.

    Args:
        config_path: Optional path to TOML config file
        **cli_overrides: Field values from command-line options

    Returns:
        Settings instance with merged configuration
    """
    toml_overrides = flatten_toml_config(load_toml_config(config_path))
    env_keys = {key.upper() for key in os.environ}
    values = {
        k: v for k, v in toml_overrides.items() if f"TASK_SERVICE_{k.upper()}" not in env_keys
    }
    values.update({k: v for k, v in cli_overrides.items() if v is not None})
    return Settings(**values)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance (environment and defaults only).

    Returns:
        Settings instance (cached)
    """
    return Settings()
