"""Hook the plugin installer into a package manager."""

from __future__ import annotations

import logging

from .config import Settings, get_settings
from .console import IOInterface
from .installer import InstallationManager, LibraryInstaller, PluginInstaller

logger = logging.getLogger(__name__)


def activate(
    manager: InstallationManager, io: IOInterface, settings: Settings | None = None
) -> PluginInstaller:
    """Register a :class:`PluginInstaller` with ``manager`` and return it."""
    settings = settings or get_settings()
    installer = PluginInstaller(
        io,
        settings.vendor_dir,
        registry_file=settings.registry_file,
        plugin_type=settings.plugin_type,
        class_file_extension=settings.class_file_extension,
    )
    manager.add_installer(installer)
    logger.debug("Activated plugin installer for type %s", settings.plugin_type)
    return installer


def create_installation_manager(
    io: IOInterface, settings: Settings | None = None
) -> tuple[InstallationManager, PluginInstaller]:
    """Build a manager with the library installer as fallback and plugins activated."""
    settings = settings or get_settings()
    manager = InstallationManager(LibraryInstaller(settings.vendor_dir))
    return manager, activate(manager, io, settings)
