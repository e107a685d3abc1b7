"""
Cache key utilities.

Keys are composed by callers (e.g. "logs:2024-01-05", "archive:2024-01-05")
and sanitized before they reach a store so that every operation on the same
logical key lands on the same slot.
"""

from __future__ import annotations

import re

from core.errors import ValidationError

_DISALLOWED = re.compile(r"[^A-Za-z0-9_:.-]")


def sanitize_key(key: object) -> str:
    """Replace characters outside [A-Za-z0-9_:.-] with '_'.

    Whitespace is replaced like any other disallowed character, so "a "
    and "a" are distinct keys. Raises ValidationError for None, non-string
    keys and blank keys.
    """
    if key is None:
        raise ValidationError("Cache key cannot be None")
    if not isinstance(key, str):
        raise ValidationError(f"Cache key must be a string, got {type(key).__name__}")

    if not key.strip():
        raise ValidationError("Cache key is empty")
    return _DISALLOWED.sub("_", key)


def make_key(kind: str, ident: object) -> str:
    # "<entity-type>:<identifier>" convention used by the tools
    return sanitize_key(f"{kind}:{ident}")
