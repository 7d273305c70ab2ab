"""Pydantic model for a registered plugin."""

from __future__ import annotations

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


class PluginRecord(BaseModel):
    """One entry of the plugin registry, keyed by package name.

    Field aliases are the keys written to the registry file. Paths are kept
    absolute in memory; the registry store converts them on save and load.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    class_name: str = Field(..., alias="class")
    base_path: str = Field(..., alias="basePath")
    handle: str
    aliases: Optional[dict[str, str]] = None
    name: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    developer: Optional[str] = None

    def to_registry(self) -> dict[str, Any]:
        """Return the registry-file representation (absent fields omitted)."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        if not data.get("aliases"):
            data.pop("aliases", None)
        return data

    def map_paths(self, func: Callable[[str], str]) -> PluginRecord:
        """Return a copy with ``func`` applied to the base path and alias paths."""
        update: dict[str, Any] = {"base_path": func(self.base_path)}
        if self.aliases:
            update["aliases"] = {alias: func(path) for alias, path in self.aliases.items()}
        return self.model_copy(update=update)
