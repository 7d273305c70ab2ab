"""Installers for placing packages and maintaining the plugin registry."""

from .library import LibraryInstaller
from .manager import InstallationManager
from .plugin_installer import PluginInstaller
from .repository import FilesystemRepository, InstalledRepository

__all__ = [
    "FilesystemRepository",
    "InstallationManager",
    "InstalledRepository",
    "LibraryInstaller",
    "PluginInstaller",
]
