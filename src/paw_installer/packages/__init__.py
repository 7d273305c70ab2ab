"""Package model and manifest loading."""

from .loader import MANIFEST_NAMES, find_manifest, load_package
from .models import Package, split_pretty_name

__all__ = [
    "MANIFEST_NAMES",
    "Package",
    "find_manifest",
    "load_package",
    "split_pretty_name",
]
