"""Configuration module for the plugin installer."""

from .settings import (
    DEFAULT_REGISTRY_FILE,
    DEFAULT_REPOSITORY_FILE,
    PLUGIN_PACKAGE_TYPE,
    Settings,
    get_settings,
)
from .logging import configure_logging, JSONFormatter, TextFormatter

__all__ = [
    "DEFAULT_REGISTRY_FILE",
    "DEFAULT_REPOSITORY_FILE",
    "PLUGIN_PACKAGE_TYPE",
    "Settings",
    "get_settings",
    "configure_logging",
    "JSONFormatter",
    "TextFormatter",
]
