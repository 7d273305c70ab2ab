"""Installer for plugin packages that keeps the plugin registry in sync."""

from __future__ import annotations

import logging
import os

from ..config.settings import DEFAULT_REGISTRY_FILE, PLUGIN_PACKAGE_TYPE
from ..console import IOInterface
from ..errors import InvalidPluginError
from ..packages.models import Package
from ..plugins.extractor import DEFAULT_CLASS_FILE_EXTENSION, extract_plugin
from ..plugins.models import PluginRecord
from ..registry.store import RegistryStore
from .library import LibraryInstaller
from .repository import InstalledRepository

logger = logging.getLogger(__name__)


class PluginInstaller(LibraryInstaller):
    """Install plugin packages and record them in the plugin registry.

    The package files are handled by :class:`LibraryInstaller`. When the
    plugin metadata turns out to be invalid, the file operation is reversed
    before the error propagates, so the installed repository and the
    registry never disagree. Updates are reversed from a backup of the
    previously installed files.
    """

    def __init__(
        self,
        io: IOInterface,
        vendor_dir: str | os.PathLike,
        registry_file: str = DEFAULT_REGISTRY_FILE,
        plugin_type: str = PLUGIN_PACKAGE_TYPE,
        class_file_extension: str = DEFAULT_CLASS_FILE_EXTENSION,
    ) -> None:
        super().__init__(vendor_dir)
        self.io = io
        self.plugin_type = plugin_type
        self.class_file_extension = class_file_extension
        self.registry = RegistryStore(self.vendor_dir, registry_file)

    def supports(self, package_type: str) -> bool:
        return package_type == self.plugin_type

    def install(self, repo: InstalledRepository, package: Package) -> None:
        super().install(repo, package)
        try:
            self.add_plugin(package)
        except InvalidPluginError as e:
            logger.warning("Rolling back install of %s: %s", package.pretty_name, e.reason)
            super().uninstall(repo, package)
            raise

    def update(self, repo: InstalledRepository, initial: Package, target: Package) -> None:
        backup = self._update_code(repo, initial, target)
        try:
            initial_plugin = self.remove_plugin(initial)
            try:
                self.add_plugin(target)
            except InvalidPluginError as e:
                logger.warning(
                    "Rolling back update of %s to %s: %s",
                    initial,
                    target.pretty_version,
                    e.reason,
                )
                try:
                    if initial_plugin is not None:
                        self.registry.register(initial.name, initial_plugin)
                finally:
                    self._rollback_update(repo, initial, target, backup)
                raise
        finally:
            self._discard_backup(backup)

    def uninstall(self, repo: InstalledRepository, package: Package) -> None:
        super().uninstall(repo, package)
        self.remove_plugin(package)

    def add_plugin(self, package: Package) -> PluginRecord:
        """Validate ``package`` and register its plugin record."""
        record = extract_plugin(
            package,
            self.vendor_dir,
            self.io,
            class_file_extension=self.class_file_extension,
        )
        self.registry.register(package.name, record)
        return record

    def remove_plugin(self, package: Package) -> PluginRecord | None:
        """Unregister ``package``, returning its previous record if it had one."""
        return self.registry.unregister(package.name)

    def get_plugins(self) -> dict[str, PluginRecord]:
        return self.registry.load()
