"""paw-installer - keeps a registry of installed plugin packages."""

__version__ = "1.0.0"

from .config import Settings, get_settings
from .console import BufferIO, ConsoleIO, IOInterface, NullIO
from .errors import (
    InvalidPluginError,
    ManifestError,
    PluginInstallerError,
    RegistryCorruptedError,
)
from .packages import Package, load_package
from .plugins import PluginRecord, extract_plugin, infer_aliases, normalize_handle
from .registry import RegistryStore, expand, portabilize
from .installer import (
    FilesystemRepository,
    InstallationManager,
    InstalledRepository,
    LibraryInstaller,
    PluginInstaller,
)
from .activation import activate, create_installation_manager

__all__ = [
    "Settings",
    "get_settings",
    "BufferIO",
    "ConsoleIO",
    "IOInterface",
    "NullIO",
    "InvalidPluginError",
    "ManifestError",
    "PluginInstallerError",
    "RegistryCorruptedError",
    "Package",
    "load_package",
    "PluginRecord",
    "extract_plugin",
    "infer_aliases",
    "normalize_handle",
    "RegistryStore",
    "expand",
    "portabilize",
    "FilesystemRepository",
    "InstallationManager",
    "InstalledRepository",
    "LibraryInstaller",
    "PluginInstaller",
    "activate",
    "create_installation_manager",
]
