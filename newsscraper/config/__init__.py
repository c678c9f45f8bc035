"""Configuration module - settings and environment management."""

from newsscraper.config.settings import (
    ConfigurationError,
    DEFAULT_BROWSER_EXECUTABLES,
    Settings,
    load_settings,
)

__all__ = [
    "ConfigurationError",
    "DEFAULT_BROWSER_EXECUTABLES",
    "Settings",
    "load_settings",
]
