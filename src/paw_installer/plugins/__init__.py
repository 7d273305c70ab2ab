"""Plugin metadata extraction and validation."""

from .extractor import (
    DEFAULT_CLASS_FILE_EXTENSION,
    AliasInference,
    extract_plugin,
    infer_aliases,
    namespace_alias,
)
from .handles import HANDLE_PATTERN, is_valid_handle, normalize_handle
from .models import PluginRecord

__all__ = [
    "DEFAULT_CLASS_FILE_EXTENSION",
    "AliasInference",
    "HANDLE_PATTERN",
    "PluginRecord",
    "extract_plugin",
    "infer_aliases",
    "is_valid_handle",
    "namespace_alias",
    "normalize_handle",
]
