"""Exceptions raised by the plugin installer."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .packages.models import Package


class PluginInstallerError(Exception):
    """Base class for installer errors."""


class InvalidPluginError(PluginInstallerError):
    """A plugin package declares metadata that cannot be registered."""

    def __init__(self, package: Package, reason: str) -> None:
        self.package = package
        self.reason = reason
        super().__init__(f"{package.pretty_name}: {reason}")


class RegistryCorruptedError(PluginInstallerError):
    """The generated plugin registry exists but cannot be parsed."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(
            f"Plugin registry {path} is corrupted ({detail}). "
            "Delete it and reinstall your plugins to regenerate it."
        )


class ManifestError(PluginInstallerError):
    """A package manifest is missing or malformed."""
