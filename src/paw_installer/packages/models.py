"""Pydantic models describing packages handed to the installers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

AutoloadPaths = Union[str, list[str]]

_PSR4_ADAPTER = TypeAdapter(dict[str, AutoloadPaths])


class Package(BaseModel):
    """A resolved package as seen by the installers.

    ``description`` and ``authors`` stay ``None`` when the package does not
    declare them at all, which is different from declaring them empty.
    """

    pretty_name: str
    pretty_version: str = "dev-main"
    type: str = "library"
    extra: dict[str, Any] = Field(default_factory=dict)
    autoload: dict[str, Any] = Field(default_factory=dict)
    description: Optional[str] = None
    authors: Optional[list[dict[str, Any]]] = None
    source_dir: Optional[Path] = None

    @field_validator("autoload")
    @classmethod
    def check_psr4(cls, autoload: dict[str, Any]) -> dict[str, Any]:
        """``psr-4`` must map namespaces to a path or a list of paths."""
        psr4 = autoload.get("psr-4")
        if not psr4:
            return autoload
        try:
            autoload["psr-4"] = _PSR4_ADAPTER.validate_python(psr4)
        except ValidationError as e:
            raise ValueError("psr-4 must map namespaces to a path or a list of paths") from e
        return autoload

    @property
    def name(self) -> str:
        """Registry key: the lower-cased pretty name."""
        return self.pretty_name.lower()

    @property
    def vendor(self) -> str | None:
        vendor, _ = split_pretty_name(self.pretty_name)
        return vendor

    @property
    def short_name(self) -> str:
        _, short_name = split_pretty_name(self.pretty_name)
        return short_name

    @property
    def psr4(self) -> dict[str, AutoloadPaths]:
        """Namespace to path declarations, in declaration order."""
        return self.autoload.get("psr-4") or {}

    def first_author(self, key: str) -> Any:
        """Return ``key`` of the first declared author, or None."""
        if not self.authors:
            return None
        author = self.authors[0]
        if not isinstance(author, dict):
            return None
        return author.get(key)

    def __str__(self) -> str:
        return f"{self.pretty_name} ({self.pretty_version})"


def split_pretty_name(pretty_name: str) -> tuple[str | None, str]:
    """Split ``vendor/name`` into its parts; bare names have no vendor."""
    if "/" not in pretty_name:
        return None, pretty_name
    vendor, name = pretty_name.split("/", 1)
    return vendor, name
