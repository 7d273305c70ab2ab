"""Load and save the generated plugin registry."""

from __future__ import annotations

import ast
import importlib
import importlib.util
import linecache
import logging
import os
from pathlib import Path, PurePosixPath
from typing import Any, Mapping

from pydantic import ValidationError

from ..config.settings import DEFAULT_REGISTRY_FILE
from ..errors import RegistryCorruptedError
from ..plugins.models import PluginRecord
from .paths import VENDOR_DIR_TOKEN, expand, portabilize

logger = logging.getLogger(__name__)

_VENDOR_DIR_VAR = "vendor_dir"
_PLUGINS_VAR = "plugins"
_INDENT = "    "


def invalidate_bytecode(path: Path) -> None:
    """Drop any cached bytecode for ``path`` so importers see the new source."""
    try:
        cached = importlib.util.cache_from_source(str(path))
    except NotImplementedError:
        cached = None
    if cached:
        try:
            Path(cached).unlink(missing_ok=True)
        except OSError as e:
            logger.debug("Could not remove cached bytecode %s: %s", cached, e)
    importlib.invalidate_caches()
    linecache.checkcache(str(path))


class _ExpandVendorDir(ast.NodeTransformer):
    """Rewrite ``vendor_dir + '...'`` back into ``'<vendor-dir>...'`` constants."""

    def visit_BinOp(self, node: ast.BinOp) -> ast.AST:
        self.generic_visit(node)
        if (
            isinstance(node.op, ast.Add)
            and isinstance(node.left, ast.Name)
            and node.left.id == _VENDOR_DIR_VAR
            and isinstance(node.right, ast.Constant)
            and isinstance(node.right.value, str)
        ):
            return ast.copy_location(ast.Constant(VENDOR_DIR_TOKEN + node.right.value), node)
        return node


class RegistryStore:
    """The plugin registry file under the vendor dir.

    The file is a Python module that computes ``vendor_dir`` from its own
    location and exposes ``plugins``, a literal mapping of package name to
    plugin record. Paths under the vendor dir are written relative to
    ``vendor_dir`` so the file survives moving the install root.
    """

    def __init__(
        self, vendor_dir: str | os.PathLike, registry_file: str = DEFAULT_REGISTRY_FILE
    ) -> None:
        if PurePosixPath(registry_file).is_absolute() or ".." in PurePosixPath(registry_file).parts:
            raise ValueError(f"Registry file must be relative to the vendor dir: {registry_file}")
        self.vendor_dir = Path(os.path.abspath(vendor_dir))
        self.registry_file = registry_file

    @property
    def path(self) -> Path:
        return self.vendor_dir / self.registry_file

    def load(self) -> dict[str, PluginRecord]:
        """Read the registry, expanding ``<vendor-dir>`` paths.

        Returns an empty registry when the file does not exist.

        Raises:
            RegistryCorruptedError: the file exists but cannot be parsed.
        """
        path = self.path
        if not path.is_file():
            return {}

        source = path.read_text(encoding="utf-8")
        invalidate_bytecode(path)

        raw = self._parse(source)
        plugins: dict[str, PluginRecord] = {}
        for name, entry in raw.items():
            if not isinstance(name, str) or not isinstance(entry, dict):
                raise RegistryCorruptedError(path, f"invalid entry {name!r}")
            try:
                record = PluginRecord.model_validate(entry)
            except ValidationError as e:
                raise RegistryCorruptedError(path, f"invalid entry {name!r}: {e}") from e
            plugins[name] = record.map_paths(self.expand)

        logger.debug("Loaded %d plugins from %s", len(plugins), path)
        return plugins

    def save(self, plugins: Mapping[str, PluginRecord]) -> None:
        """Write the whole registry, portabilizing paths under the vendor dir."""
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(plugins), encoding="utf-8")
        invalidate_bytecode(path)
        logger.debug("Saved %d plugins to %s", len(plugins), path)

    def register(self, name: str, record: PluginRecord) -> None:
        """Add or replace the record for ``name``."""
        plugins = self.load()
        plugins[name] = record
        self.save(plugins)
        logger.info("Registered plugin %s (%s)", name, record.handle)

    def unregister(self, name: str) -> PluginRecord | None:
        """Remove and return the record for ``name``; no-op when absent."""
        plugins = self.load()
        record = plugins.pop(name, None)
        if record is None:
            return None
        self.save(plugins)
        logger.info("Unregistered plugin %s", name)
        return record

    def portabilize(self, path: str) -> str:
        return portabilize(path, self.vendor_dir)

    def expand(self, path: str) -> str:
        return expand(path, self.vendor_dir)

    def render(self, plugins: Mapping[str, PluginRecord]) -> str:
        """Return the source of the registry file for ``plugins``."""
        data = {
            name: record.map_paths(self.portabilize).to_registry()
            for name, record in plugins.items()
        }
        vendor_dir_expr = "os.path.abspath(__file__)"
        for _ in PurePosixPath(self.registry_file).parts:
            vendor_dir_expr = f"os.path.dirname({vendor_dir_expr})"
        return (
            "# This file is generated by paw-installer. Do not edit it by hand.\n"
            "import os\n"
            "\n"
            f"{_VENDOR_DIR_VAR} = {vendor_dir_expr}\n"
            "\n"
            f"{_PLUGINS_VAR} = {_render_literal(data)}\n"
        )

    def _parse(self, source: str) -> dict[str, Any]:
        try:
            tree = ast.parse(source, filename=str(self.path))
        except SyntaxError as e:
            raise RegistryCorruptedError(self.path, f"syntax error on line {e.lineno}") from e

        for node in tree.body:
            if (
                isinstance(node, ast.Assign)
                and len(node.targets) == 1
                and isinstance(node.targets[0], ast.Name)
                and node.targets[0].id == _PLUGINS_VAR
            ):
                try:
                    value = ast.literal_eval(_ExpandVendorDir().visit(node.value))
                except (ValueError, TypeError, SyntaxError) as e:
                    raise RegistryCorruptedError(self.path, str(e)) from e
                if not isinstance(value, dict):
                    raise RegistryCorruptedError(self.path, f"'{_PLUGINS_VAR}' is not a mapping")
                return value

        raise RegistryCorruptedError(self.path, f"no '{_PLUGINS_VAR}' assignment")


def _render_literal(value: Any, depth: int = 0) -> str:
    """Render ``value`` as a Python literal, one key or item per line."""
    inner = _INDENT * (depth + 1)
    if isinstance(value, dict):
        if not value:
            return "{}"
        lines = [
            f"{inner}{_render_literal(key)}: {_render_literal(item, depth + 1)},"
            for key, item in value.items()
        ]
        return "{\n" + "\n".join(lines) + "\n" + _INDENT * depth + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        lines = [f"{inner}{_render_literal(item, depth + 1)}," for item in value]
        return "[\n" + "\n".join(lines) + "\n" + _INDENT * depth + "]"
    if isinstance(value, str) and value.startswith(VENDOR_DIR_TOKEN):
        return f"{_VENDOR_DIR_VAR} + {value[len(VENDOR_DIR_TOKEN):]!r}"
    return repr(value)
