"""Generic installer placing package files under the vendor dir."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from ..packages.models import Package
from .repository import InstalledRepository

logger = logging.getLogger(__name__)

_IGNORED_FILES = shutil.ignore_patterns(".git", "__pycache__")
_BACKUP_PREFIX = ".paw-backup-"


class LibraryInstaller:
    """Install any package type by copying its source dir to ``<vendor>/<name>``."""

    def __init__(self, vendor_dir: str | os.PathLike) -> None:
        self.vendor_dir = Path(os.path.abspath(vendor_dir))

    def supports(self, package_type: str) -> bool:
        return True

    def get_install_path(self, package: Package) -> Path:
        return self.vendor_dir / package.pretty_name

    def is_installed(self, repo: InstalledRepository, package: Package) -> bool:
        return repo.has_package(package) and self.get_install_path(package).is_dir()

    def install(self, repo: InstalledRepository, package: Package) -> None:
        logger.info("Installing %s", package, extra={"package": package.name, "operation": "install"})
        self._install_code(package)
        if not repo.has_package(package):
            repo.add_package(package)

    def update(self, repo: InstalledRepository, initial: Package, target: Package) -> None:
        backup = self._update_code(repo, initial, target)
        self._discard_backup(backup)

    def _update_code(
        self, repo: InstalledRepository, initial: Package, target: Package
    ) -> Path | None:
        """Replace ``initial`` with ``target`` and return the backup of ``initial``.

        The installed files of ``initial`` are moved aside first, so the update
        can be reversed with :meth:`_rollback_update` without going back to the
        initial package's source dir. The caller owns the returned backup.
        """
        if not repo.has_package(initial):
            raise ValueError(f"Package is not installed: {initial}")
        logger.info(
            "Updating %s to %s",
            initial,
            target.pretty_version,
            extra={"package": target.name, "operation": "update"},
        )
        backup = self._backup_code(initial)
        try:
            self._remove_code(initial)
            self._install_code(target)
        except Exception:
            self._rollback_update(repo, initial, target, backup)
            self._discard_backup(backup)
            raise
        repo.remove_package(initial)
        if not repo.has_package(target):
            repo.add_package(target)
        return backup

    def _rollback_update(
        self,
        repo: InstalledRepository,
        initial: Package,
        target: Package,
        backup: Path | None,
    ) -> None:
        """Put ``initial`` back in place of ``target`` from its backup."""
        logger.info(
            "Restoring %s",
            initial,
            extra={"package": initial.name, "operation": "update"},
        )
        self._remove_code(target)
        self._restore_code(initial, backup)
        if repo.has_package(target):
            repo.remove_package(target)
        if not repo.has_package(initial):
            repo.add_package(initial)

    def uninstall(self, repo: InstalledRepository, package: Package) -> None:
        if not repo.has_package(package):
            raise ValueError(f"Package is not installed: {package}")
        logger.info("Removing %s", package, extra={"package": package.name, "operation": "uninstall"})
        self._remove_code(package)
        repo.remove_package(package)

    def _install_code(self, package: Package) -> None:
        target = self.get_install_path(package)
        if target.exists():
            shutil.rmtree(target)
        if package.source_dir is None:
            # Nothing to copy, the package only carries metadata
            target.mkdir(parents=True)
            return
        if not package.source_dir.is_dir():
            raise FileNotFoundError(f"Package source not found: {package.source_dir}")
        shutil.copytree(package.source_dir, target, ignore=_IGNORED_FILES)

    def _remove_code(self, package: Package) -> None:
        target = self.get_install_path(package)
        if target.exists():
            shutil.rmtree(target)
        # Drop the vendor namespace dir once its last package is gone
        parent = target.parent
        if parent != self.vendor_dir and parent.is_dir() and not any(parent.iterdir()):
            parent.rmdir()

    def _backup_code(self, package: Package) -> Path | None:
        """Move the installed files of ``package`` into a backup dir."""
        installed = self.get_install_path(package)
        if not installed.exists():
            return None
        self.vendor_dir.mkdir(parents=True, exist_ok=True)
        backup = Path(tempfile.mkdtemp(prefix=_BACKUP_PREFIX, dir=self.vendor_dir))
        shutil.move(str(installed), str(backup / "code"))
        logger.debug("Backed up %s to %s", package, backup)
        return backup

    def _restore_code(self, package: Package, backup: Path | None) -> None:
        installed = self.get_install_path(package)
        if installed.exists():
            shutil.rmtree(installed)
        if backup is None:
            return
        installed.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(backup / "code"), str(installed))

    def _discard_backup(self, backup: Path | None) -> None:
        if backup is not None and backup.exists():
            shutil.rmtree(backup)
