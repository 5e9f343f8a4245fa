"""Keyed sources backed by the process environment or a plain mapping."""

from __future__ import annotations

import os
from collections.abc import Mapping


class MappingSource:
    """Keyed source over a fixed mapping of names to raw strings."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = mapping

    def lookup(self, key: str) -> tuple[str, bool]:
        if key in self._mapping:
            return self._mapping[key], True
        return "", False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._mapping)} keys)"


class EnvSource(MappingSource):
    """Keyed source over the process environment.

    The mapping is read on every lookup, not copied, so changes made to the
    environment between resolution passes are visible.

    Args:
        environ: Mapping to read instead of ``os.environ``
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        super().__init__(os.environ if environ is None else environ)


__all__ = [
    "EnvSource",
    "MappingSource",
]
