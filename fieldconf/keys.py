"""Lookup-key derivation from declared attribute names.

Keys are built from camel-case word segments, upper-cased and joined with
underscores, so both ``maxRetries`` and ``max_retries`` become
``MAX_RETRIES``. Prefixes are composed the same way.
"""

from __future__ import annotations


def camel_split(name: str) -> list[str]:
    """Split a name into camel-case word segments.

    A lowercase (or digit) to uppercase transition starts a new segment. A run
    of uppercase letters followed by a lowercase letter keeps its last
    uppercase letter with the following segment, so acronyms split cleanly.
    Underscores and other non-alphanumeric characters separate segments and
    are dropped.

    Examples:
        >>> camel_split("FOOBar")
        ['FOO', 'Bar']
        >>> camel_split("fooBar")
        ['foo', 'Bar']
        >>> camel_split("max_retries")
        ['max', 'retries']
        >>> camel_split("")
        []

    Args:
        name: The declared name

    Returns:
        The word segments in order
    """
    segments: list[str] = []
    current: list[str] = []

    for ch in name:
        if not ch.isalnum():
            if current:
                segments.append("".join(current))
                current = []
            continue

        if current:
            prev = current[-1]
            if ch.isupper() and (prev.islower() or prev.isdigit()):
                segments.append("".join(current))
                current = []
            elif ch.islower() and prev.isupper() and len(current) > 1 and current[-2].isupper():
                current.pop()
                segments.append("".join(current))
                current = [prev]

        current.append(ch)

    if current:
        segments.append("".join(current))
    return segments


def env_name(name: str) -> str:
    """Derive the upper-case, underscore-joined key segment for a name.

    Args:
        name: The declared name (camelCase, PascalCase or snake_case)

    Returns:
        The key segment, e.g. ``"dbHost"`` -> ``"DB_HOST"``
    """
    return "_".join(segment.upper() for segment in camel_split(name))


def join_prefix(prefix: str, name: str) -> str:
    """Compose a prefix and a key segment with an underscore.

    An empty prefix or an empty name leaves the other side untouched.
    """
    if not prefix:
        return name
    if not name:
        return prefix
    return f"{prefix}_{name}"


__all__ = [
    "camel_split",
    "env_name",
    "join_prefix",
]
