"""Value sources consulted by the resolver.

This package contains:
- base: Protocols every source implements
- env: Process environment and mapping-backed keyed sources
- files: Nested-dict, YAML and JSON structured sources
- cli: click flag binding and the flag source
- pstore: Remote parameter stores
"""

from fieldconf.sources.base import (
    FlagSource,
    KeyedSource,
    ParameterStore,
    StructuredSource,
)
from fieldconf.sources.cli import ClickFlagSource, bind_cli
from fieldconf.sources.env import EnvSource, MappingSource
from fieldconf.sources.files import ConfigFileSource, DictSource, LayeredSource
from fieldconf.sources.pstore import ConsulParameterStore, MappingParameterStore

__all__ = [
    # Protocols
    "FlagSource",
    "KeyedSource",
    "ParameterStore",
    "StructuredSource",
    # Keyed
    "EnvSource",
    "MappingSource",
    # Structured
    "ConfigFileSource",
    "DictSource",
    "LayeredSource",
    # Flags
    "ClickFlagSource",
    "bind_cli",
    # Parameter stores
    "ConsulParameterStore",
    "MappingParameterStore",
]
