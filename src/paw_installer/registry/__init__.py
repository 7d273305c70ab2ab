"""Persistence of the aggregated plugin registry."""

from .paths import (
    VENDOR_DIR_TOKEN,
    expand,
    is_absolute_path,
    is_within,
    normalize_path,
    portabilize,
)
from .store import RegistryStore, invalidate_bytecode

__all__ = [
    "VENDOR_DIR_TOKEN",
    "RegistryStore",
    "expand",
    "invalidate_bytecode",
    "is_absolute_path",
    "is_within",
    "normalize_path",
    "portabilize",
]
