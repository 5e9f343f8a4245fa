"""Contracts for the value sources consulted during resolution.

Each source is a structural protocol: any object with the right methods
can be passed to the resolver, which keeps tests free to inject fakes.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyedSource(Protocol):
    """Primary lookup-by-name source, e.g. the process environment."""

    def lookup(self, key: str) -> tuple[str, bool]:
        """Return ``(value, present)`` for a key."""
        ...


@runtime_checkable
class StructuredSource(Protocol):
    """Secondary backend holding scalars, mappings and sequences by dotted path."""

    def present(self, key: str) -> bool: ...

    def get(self, key: str) -> Any: ...


@runtime_checkable
class FlagSource(Protocol):
    """Command line flags bound for CLI-eligible fields."""

    def lookup(self, flag: str) -> tuple[str, bool]:
        """Return ``(value, changed)``; ``changed`` is True only when the
        flag was given explicitly on the command line.
        """
        ...


@runtime_checkable
class ParameterStore(Protocol):
    """Remote parameter store addressed by path."""

    def get_parameter(self, path: str) -> str:
        """Fetch one parameter.

        Raises:
            BackendError: If the parameter cannot be read
        """
        ...


__all__ = [
    "FlagSource",
    "KeyedSource",
    "ParameterStore",
    "StructuredSource",
]
