"""Bookkeeping of installed packages."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from ..errors import PluginInstallerError
from ..packages.models import Package

logger = logging.getLogger(__name__)


class InstalledRepository:
    """In-memory set of installed packages.

    A package is identified by its name together with its version, so an
    update can hold the initial and target package side by side.
    """

    def __init__(self, packages: list[Package] | None = None) -> None:
        self._packages: list[Package] = list(packages or [])

    def get_packages(self) -> list[Package]:
        return list(self._packages)

    def has_package(self, package: Package) -> bool:
        return any(self._same(p, package) for p in self._packages)

    def find_package(self, name: str) -> Package | None:
        """Find an installed package by (case-insensitive) name."""
        name = name.lower()
        for package in self._packages:
            if package.name == name:
                return package
        return None

    def add_package(self, package: Package) -> None:
        if self.has_package(package):
            raise ValueError(f"Package {package} is already in the repository")
        self._packages.append(package)

    def remove_package(self, package: Package) -> None:
        self._packages = [p for p in self._packages if not self._same(p, package)]

    @staticmethod
    def _same(a: Package, b: Package) -> bool:
        return a.name == b.name and a.pretty_version == b.pretty_version

    def __len__(self) -> int:
        return len(self._packages)


class FilesystemRepository(InstalledRepository):
    """Installed repository persisted as JSON, written on every change."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(self._read())

    def _read(self) -> list[Package]:
        if not self.path.is_file():
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            return [Package.model_validate(entry) for entry in raw.get("packages", [])]
        except (json.JSONDecodeError, AttributeError, ValidationError) as e:
            raise PluginInstallerError(f"Installed repository {self.path} is corrupted: {e}") from e

    def write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {"packages": [p.model_dump(mode="json") for p in self._packages]}
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        logger.debug("Wrote %d installed packages to %s", len(self._packages), self.path)

    def add_package(self, package: Package) -> None:
        super().add_package(package)
        self.write()

    def remove_package(self, package: Package) -> None:
        super().remove_package(package)
        self.write()
