"""Plugin handle validation and normalization."""

from __future__ import annotations

import re

HANDLE_PATTERN = re.compile(r"[a-zA-Z][\w-]*", re.ASCII)

_UPPER_WORD_START = re.compile(r"(?<![A-Z])[A-Z]")
_REPEATED_DASHES = re.compile(r"-{2,}")


def is_valid_handle(handle: object) -> bool:
    """True for a string starting with a letter followed by word chars or dashes."""
    return isinstance(handle, str) and HANDLE_PATTERN.fullmatch(handle) is not None


def normalize_handle(handle: str) -> str:
    """Convert a camel/snake-cased handle to kebab-case.

    >>> normalize_handle("MyCoolPlugin")
    'my-cool-plugin'
    >>> normalize_handle("My_Plugin")
    'my-plugin'

    Handles that are already lower case are returned untouched.
    """
    if handle.lower() == handle:
        return handle
    kebab = _UPPER_WORD_START.sub(lambda m: "-" + m.group(0), handle)
    kebab = kebab.replace("_", "-").lower()
    return _REPEATED_DASHES.sub("-", kebab).strip("-")
