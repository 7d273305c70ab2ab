"""Load package manifests from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ManifestError
from .models import Package

logger = logging.getLogger(__name__)

MANIFEST_NAMES = ("paw.yaml", "paw.yml", "paw.json")


def find_manifest(package_dir: Path) -> Path:
    """Return the manifest file inside ``package_dir``."""
    for name in MANIFEST_NAMES:
        candidate = package_dir / name
        if candidate.is_file():
            return candidate
    raise ManifestError(
        f"No package manifest in {package_dir} (expected one of {', '.join(MANIFEST_NAMES)})"
    )


def load_package(path: str | Path) -> Package:
    """Load a package from a package directory or a manifest file.

    The package's ``source_dir`` is set to the directory holding the manifest,
    which is what the library installer copies into the vendor dir.
    """
    path = Path(path)
    manifest_path = find_manifest(path) if path.is_dir() else path
    if not manifest_path.is_file():
        raise ManifestError(f"Package manifest not found: {manifest_path}")

    try:
        with open(manifest_path, encoding="utf-8") as f:
            if manifest_path.suffix == ".json":
                raw = json.load(f)
            else:
                raw = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ManifestError(f"Invalid manifest {manifest_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ManifestError(f"Manifest {manifest_path} must contain a mapping")
    if not raw.get("name"):
        raise ManifestError(f"Manifest {manifest_path} is missing 'name'")

    try:
        package = Package(
            pretty_name=str(raw["name"]),
            pretty_version=str(raw.get("version", "dev-main")),
            type=raw.get("type", "library"),
            extra=raw.get("extra") or {},
            autoload=raw.get("autoload") or {},
            description=raw.get("description"),
            authors=raw.get("authors"),
            source_dir=manifest_path.parent.resolve(),
        )
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest {manifest_path}: {e}") from e

    logger.debug("Loaded package %s from %s", package, manifest_path)
    return package
