"""Structured sources: nested dictionaries and YAML/JSON config files.

Values are addressed by the dotted lower-case path of a field
(``db.max_conns``). Keys in the data are matched case-insensitively with
``-`` and ``_`` treated alike, so ``maxConns``, ``max-conns`` and
``MAX_CONNS`` all answer for ``max_conns``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from fieldconf.keys import env_name
from fieldconf.utils.env_utils import EnvVarExpansionError, expand_env_vars
from fieldconf.utils.errors import BackendError

logger = logging.getLogger(__name__)

_MISSING = object()

SUPPORTED_SUFFIXES = (".yaml", ".yml", ".json")


def _normalize(key: str) -> str:
    return env_name(str(key)).lower()


class DictSource:
    """Structured source over nested dictionaries."""

    def __init__(self, data: Mapping[str, Any] | None = None, name: str = "dict") -> None:
        self._data = data or {}
        self.name = name

    def _find(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, Mapping):
                return _MISSING
            wanted = _normalize(part)
            for candidate, value in node.items():
                if _normalize(candidate) == wanted:
                    node = value
                    break
            else:
                return _MISSING
        return node

    def present(self, key: str) -> bool:
        return self._find(key) is not _MISSING

    def get(self, key: str) -> Any:
        value = self._find(key)
        return None if value is _MISSING else value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class ConfigFileSource(DictSource):
    """Structured source loaded from a YAML or JSON file."""

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        expand_env: bool = False,
        strict: bool = False,
    ) -> ConfigFileSource:
        """Load a config file.

        Args:
            path: File ending in ``.yaml``, ``.yml`` or ``.json``
            expand_env: Expand ``${VAR}`` references in string values
            strict: With ``expand_env``, fail on undefined variables

        Returns:
            The loaded source

        Raises:
            BackendError: If the file cannot be read, parsed or expanded
        """
        path = Path(path).expanduser()
        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise BackendError(
                f"Unsupported config file type '{suffix}' for {path}. "
                f"Supported: {', '.join(SUPPORTED_SUFFIXES)}",
                backend="file",
            )

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise BackendError(f"Cannot read config file {path}: {e}", backend="file") from e

        try:
            if suffix == ".json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text) or {}
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise BackendError(f"Invalid config file {path}: {e}", backend="file") from e

        if not isinstance(data, Mapping):
            raise BackendError(
                f"Config file {path} must contain a mapping at the top level",
                backend="file",
            )

        if expand_env:
            try:
                data = expand_env_vars(data, strict=strict, context=str(path))
            except EnvVarExpansionError as e:
                raise BackendError(str(e), backend="file") from e

        logger.debug(f"Loaded config file {path} ({len(data)} top-level keys)")
        return cls(data, name=str(path))


class LayeredSource:
    """Several structured sources consulted in order; the first hit wins."""

    def __init__(self, sources: Iterable[Any]) -> None:
        self._sources = list(sources)

    def present(self, key: str) -> bool:
        return any(source.present(key) for source in self._sources)

    def get(self, key: str) -> Any:
        for source in self._sources:
            if source.present(key):
                return source.get(key)
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._sources!r})"


__all__ = [
    "ConfigFileSource",
    "DictSource",
    "LayeredSource",
    "SUPPORTED_SUFFIXES",
]
