"""Route package operations to the installer responsible for the package type."""

from __future__ import annotations

import logging

from ..packages.models import Package
from .library import LibraryInstaller
from .repository import InstalledRepository

logger = logging.getLogger(__name__)


class InstallationManager:
    """Dispatch install/update/uninstall to the first installer supporting the type.

    Installers added later take precedence. Types no added installer supports
    fall through to ``default_installer``.
    """

    def __init__(self, default_installer: LibraryInstaller) -> None:
        self.default_installer = default_installer
        self._installers: list[LibraryInstaller] = []

    def add_installer(self, installer: LibraryInstaller) -> None:
        self._installers.insert(0, installer)

    def remove_installer(self, installer: LibraryInstaller) -> None:
        if installer in self._installers:
            self._installers.remove(installer)

    @property
    def installers(self) -> list[LibraryInstaller]:
        return list(self._installers)

    def get_installer(self, package_type: str) -> LibraryInstaller:
        for installer in self._installers:
            if installer.supports(package_type):
                return installer
        return self.default_installer

    def install(self, repo: InstalledRepository, package: Package) -> None:
        self.get_installer(package.type).install(repo, package)

    def update(self, repo: InstalledRepository, initial: Package, target: Package) -> None:
        initial_installer = self.get_installer(initial.type)
        target_installer = self.get_installer(target.type)
        if initial_installer is target_installer:
            initial_installer.update(repo, initial, target)
            return

        logger.debug(
            "Package type of %s changed from %s to %s, reinstalling",
            target.pretty_name,
            initial.type,
            target.type,
        )
        initial_installer.uninstall(repo, initial)
        target_installer.install(repo, target)

    def uninstall(self, repo: InstalledRepository, package: Package) -> None:
        self.get_installer(package.type).uninstall(repo, package)
