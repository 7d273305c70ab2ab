"""Conversion between absolute paths and ``<vendor-dir>`` tokens."""

from __future__ import annotations

import os
import posixpath
import re

VENDOR_DIR_TOKEN = "<vendor-dir>"

_DRIVE_PREFIX = re.compile(r"[A-Za-z]:")


def is_absolute_path(path: str) -> bool:
    """Recognize POSIX, UNC and drive-letter absolute paths on any platform."""
    return path.startswith(("/", "\\")) or _DRIVE_PREFIX.match(path) is not None


def normalize_path(path: str | os.PathLike) -> str:
    """Normalize separators to ``/`` and collapse ``.`` and ``..`` segments."""
    return posixpath.normpath(os.fspath(path).replace("\\", "/"))


def is_within(path: str, root: str) -> bool:
    """True when ``path`` is ``root`` itself or lies below it."""
    return (path + "/").startswith(root.rstrip("/") + "/")


def portabilize(path: str, vendor_dir: str | os.PathLike) -> str:
    """Replace the vendor dir prefix of ``path`` with the token.

    Paths outside the vendor dir and paths already in token form are returned
    unchanged.
    """
    if path.startswith(VENDOR_DIR_TOKEN):
        return path
    root = normalize_path(vendor_dir)
    normalized = normalize_path(path)
    if not is_within(normalized, root):
        return path
    return VENDOR_DIR_TOKEN + normalized[len(root.rstrip("/")):]


def expand(path: str, vendor_dir: str | os.PathLike) -> str:
    """Turn a token path back into an absolute path under ``vendor_dir``."""
    if not path.startswith(VENDOR_DIR_TOKEN):
        return path
    return normalize_path(vendor_dir).rstrip("/") + path[len(VENDOR_DIR_TOKEN):]
