"""Custom decoding capabilities a destination type can opt into.

A type opts in by implementing one of the methods below; no base class is
required. When a type implements several, the first in this order wins:

1. ``decode(value: str)``
2. ``set(value: str)`` (same shape as a command line flag value)
3. ``unmarshal_text(text: str)``
4. ``unmarshal_binary(data: bytes)``

Each method mutates the instance in place.
"""

from __future__ import annotations

from typing import Any

CAPABILITY_METHODS = ("decode", "set", "unmarshal_text", "unmarshal_binary")


def _defining_class(tp: type, name: str) -> type | None:
    for klass in tp.__mro__:
        if name in vars(klass):
            return klass
    return None


def capability_of(tp: Any) -> str | None:
    """Name of the first decoding capability implemented by a type.

    Methods inherited from builtins (``bytes.decode`` for instance) do not
    count as capabilities.

    Args:
        tp: A destination type

    Returns:
        The capability method name, or None
    """
    if not isinstance(tp, type):
        return None
    for name in CAPABILITY_METHODS:
        owner = _defining_class(tp, name)
        if owner is None or owner.__module__ == "builtins":
            continue
        if callable(getattr(tp, name, None)):
            return name
    return None


__all__ = [
    "CAPABILITY_METHODS",
    "capability_of",
]
