"""Configuration loading — aurora.yml settings and application configs."""

from aurora.core.config.loader import (
    ConfigError,
    app_config_path,
    find_settings_file,
    load_app_config,
    load_settings,
)

__all__ = [
    "ConfigError",
    "app_config_path",
    "find_settings_file",
    "load_app_config",
    "load_settings",
]
