"""Settings and configuration management."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PLUGIN_PACKAGE_TYPE = "paw-plugin"
DEFAULT_REGISTRY_FILE = "paw/plugins.py"
DEFAULT_REPOSITORY_FILE = "paw/installed.json"


class Settings(BaseSettings):
    """Installer settings, read from ``PAW_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PAW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Paths
    vendor_dir: Path = Field(
        default_factory=lambda: Path.cwd() / "vendor",
        description="Install root holding every managed package",
    )
    registry_file: str = Field(
        DEFAULT_REGISTRY_FILE,
        description="Generated plugin registry, relative to the vendor dir",
    )
    repository_file: str = Field(
        DEFAULT_REPOSITORY_FILE,
        description="Installed-package bookkeeping, relative to the vendor dir",
    )

    # Plugins
    plugin_type: str = Field(
        PLUGIN_PACKAGE_TYPE, description="Package type handled by the plugin installer"
    )
    class_file_extension: str = Field(
        ".php", description="File extension of the host application's class files"
    )

    # Logging
    log_level: str = Field("WARNING", description="Logging level")
    log_format: str = Field("text", description="Log format: 'text' or 'json'")

    @field_validator("vendor_dir")
    @classmethod
    def _absolute_vendor_dir(cls, value: Path) -> Path:
        return value.expanduser().absolute()

    @field_validator("class_file_extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        if value and not value.startswith("."):
            return "." + value
        return value

    @property
    def registry_path(self) -> Path:
        """Absolute path of the generated plugin registry."""
        return self.vendor_dir / self.registry_file

    @property
    def repository_path(self) -> Path:
        """Absolute path of the installed-package repository file."""
        return self.vendor_dir / self.repository_file


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
