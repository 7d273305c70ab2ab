"""Build plugin records from package metadata."""

from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError
from rich.markup import escape

from ..console import IOInterface
from ..errors import InvalidPluginError
from ..packages.models import Package
from ..registry.paths import is_absolute_path, normalize_path
from .handles import is_valid_handle, normalize_handle
from .models import PluginRecord

logger = logging.getLogger(__name__)

DEFAULT_CLASS_FILE_EXTENSION = ".php"


@dataclass(frozen=True)
class AliasInference:
    """Result of scanning a package's namespace declarations."""

    class_name: str | None
    base_path: str | None
    aliases: dict[str, str] = field(default_factory=dict)


def namespace_alias(namespace: str) -> str:
    """``Acme\\Foo\\`` -> ``@Acme/Foo``."""
    return "@" + namespace.strip("\\").replace("\\", "/")


def infer_aliases(
    package: Package,
    vendor_dir: str | os.PathLike,
    class_name: str | None = None,
    base_path: str | None = None,
    class_file_extension: str = DEFAULT_CLASS_FILE_EXTENSION,
) -> AliasInference:
    """Derive aliases, and fill in a missing plugin class or base path.

    Walks the package's ``psr-4`` declarations in order. Namespaces mapped to
    several directories are skipped since no single alias path exists for them.
    A namespace whose directory holds ``Plugin<ext>`` provides the default
    plugin class; the directory holding the plugin class file becomes the
    base path.
    """
    vendor_root = normalize_path(vendor_dir)
    aliases: dict[str, str] = {}

    for namespace, path in package.psr4.items():
        if not isinstance(path, str):
            continue
        if not is_absolute_path(path):
            path = f"{vendor_root}/{package.pretty_name}/{path}"
        path = normalize_path(path)
        aliases[namespace_alias(namespace)] = path

        if class_name is None and os.path.isfile(f"{path}/Plugin{class_file_extension}"):
            class_name = namespace + "Plugin"
            logger.debug("Inferred plugin class %s for %s", class_name, package.pretty_name)

        if base_path is None and isinstance(class_name, str) and class_name.startswith(namespace):
            relative = class_name[len(namespace):].replace("\\", "/")
            class_file = f"{path}/{relative}{class_file_extension}"
            if os.path.isfile(class_file):
                base_path = posixpath.dirname(normalize_path(class_file))
                logger.debug("Inferred base path %s for %s", base_path, package.pretty_name)

    return AliasInference(class_name=class_name, base_path=base_path, aliases=aliases)


def extract_plugin(
    package: Package,
    vendor_dir: str | os.PathLike,
    io: IOInterface,
    class_file_extension: str = DEFAULT_CLASS_FILE_EXTENSION,
) -> PluginRecord:
    """Validate a plugin package and return its registry record.

    Raises:
        InvalidPluginError: the class, base path or handle cannot be determined.
    """
    extra = package.extra
    inferred = infer_aliases(
        package,
        vendor_dir,
        class_name=extra.get("class"),
        base_path=extra.get("basePath"),
        class_file_extension=class_file_extension,
    )

    if inferred.class_name is None:
        raise InvalidPluginError(package, "Unable to determine the Plugin class")
    if inferred.base_path is None:
        raise InvalidPluginError(package, "Unable to determine the base path")

    handle = extra.get("handle")
    if not is_valid_handle(handle):
        raise InvalidPluginError(package, "Invalid or missing plugin handle")

    normalized = normalize_handle(handle)
    if normalized != handle:
        io.write(
            f"[yellow]{escape(package.pretty_name)} uses the old plugin handle format "
            f'("{escape(handle)}"). It should be "{normalized}".[/yellow]'
        )

    developer = _first_set(extra.get("developer"), package.first_author("name") or package.vendor)
    description = _first_set(extra.get("description"), package.description or None)

    try:
        record = PluginRecord(
            class_name=inferred.class_name,
            base_path=inferred.base_path,
            handle=normalized,
            aliases=inferred.aliases or None,
            name=_first_set(extra.get("name"), package.short_name),
            version=_first_set(extra.get("version"), package.pretty_version),
            description=description,
            developer=developer,
        )
    except ValidationError as e:
        error = e.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        raise InvalidPluginError(package, f"Invalid plugin metadata ({location}: {error['msg']})") from e

    logger.debug("Extracted plugin %s from %s", record.handle, package)
    return record


def _first_set(value: Any, default: Any) -> Any:
    return default if value is None else value
