"""Value resolution for discovered fields.

For every field the resolver walks a fixed priority chain and stops at the
first source that has a value:

1. Command line flag, when the field is CLI-eligible and the flag was given
2. Keyed source (environment), unless the field's key is ``-``
3. Structured source (config files), looked up by the field's bind name
4. The annotation default

A field with none of these is either a :class:`MissingRequiredValueError`
(when required) or left untouched. The chosen raw string is decoded into
the field's storage.

Sources are injected so tests can resolve against plain mappings::

    resolver = Resolver(env=MappingSource({"APP_PORT": "9000"}))
    resolver.resolve(settings, prefix="app")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fieldconf.decode import encode_value, process_field
from fieldconf.field import Field, fields
from fieldconf.sources.base import FlagSource, KeyedSource, StructuredSource
from fieldconf.sources.env import EnvSource
from fieldconf.tag import EXCLUDE
from fieldconf.utils.errors import (
    BackendError,
    DecodeError,
    FieldConfError,
    MissingRequiredValueError,
    ResolutionErrors,
)
from fieldconf.utils.logging import log_message

logger = logging.getLogger(__name__)


class ResolveMode(Enum):
    """How a batch resolution pass reports per-field failures."""

    FAIL_FAST = "fail_fast"
    AGGREGATE = "aggregate"


class Source(str, Enum):
    """Where a resolved value came from."""

    CLI = "cli"
    ENV = "env"
    FILE = "file"
    DEFAULT = "default"


@dataclass
class Resolution:
    """Outcome of looking a single field up.

    Attributes:
        field: The field that was looked up
        value: Raw string chosen for the field, or None when skipped
        source: The source that supplied ``value``, or None when skipped
    """

    field: Field
    value: str | None = None
    source: Source | None = None

    @property
    def found(self) -> bool:
        return self.source is not None


# Per-field errors an aggregating pass collects instead of raising
_FIELD_ERRORS = (MissingRequiredValueError, DecodeError, BackendError)


class Resolver:
    """Resolves field values from the injected sources.

    Args:
        env: Keyed source; defaults to the process environment
        files: Optional structured source
        flags: Optional command line flag source
        mode: Fail on the first field error or collect them all
        allow_empty: Treat an empty value from a source as present. By
            default an empty value counts as absent, so the default applies.
    """

    def __init__(
        self,
        *,
        env: KeyedSource | None = None,
        files: StructuredSource | None = None,
        flags: FlagSource | None = None,
        mode: ResolveMode = ResolveMode.FAIL_FAST,
        allow_empty: bool = False,
    ) -> None:
        self.env = env if env is not None else EnvSource()
        self.files = files
        self.flags = flags
        self.mode = mode
        self.allow_empty = allow_empty

    def _usable(self, value: str, present: bool) -> bool:
        return present and (self.allow_empty or value != "")

    def lookup(self, field: Field) -> Resolution:
        """Pick the raw value for a field without touching its storage.

        Raises:
            MissingRequiredValueError: If the field is required and no
                source or default provides a value
            BackendError: If the structured source fails
        """
        if self.flags is not None and field.is_cli():
            value, changed = self.flags.lookup(field.cli_flag())
            if self._usable(value, changed):
                return Resolution(field, value, Source.CLI)

        key = field.env_variable
        if key != EXCLUDE:
            value, present = self.env.lookup(key)
            if self._usable(value, present):
                return Resolution(field, value, Source.ENV)

        if self.files is not None and self.files.present(field.bind_name):
            value = encode_value(self.files.get(field.bind_name))
            if self._usable(value, True):
                return Resolution(field, value, Source.FILE)

        if field.is_default():
            return Resolution(field, field.default_value(), Source.DEFAULT)

        if field.is_required():
            raise MissingRequiredValueError(field.name, key)

        return Resolution(field)

    def apply(self, field: Field) -> Resolution:
        """Look a field up and decode the chosen value into its storage.

        Raises:
            MissingRequiredValueError: If a required field has no value
            DecodeError: If the value cannot be converted
        """
        resolution = self.lookup(field)
        if resolution.value is None or field.ref is None:
            logger.debug(f"Skipping field {field.name}: no value")
            return resolution

        try:
            process_field(resolution.value, field.ref)
        except DecodeError as e:
            raise DecodeError(
                f"process_field failed ({field.name}): {e}",
                field_name=field.name,
                value=e.value,
            ) from e

        logger.debug(f"Resolved field {field.name} from {resolution.source.value}")
        return resolution

    def resolve(self, spec: Any, prefix: str = "") -> list[Resolution]:
        """Resolve every field of a dataclass instance in place.

        Discovery errors always abort the pass. Per-field errors abort it in
        ``FAIL_FAST`` mode; in ``AGGREGATE`` mode every field is attempted and
        the failures are raised together.

        Args:
            spec: Dataclass instance to populate
            prefix: Optional root prefix for derived keys

        Returns:
            One resolution per discovered field, in declaration order

        Raises:
            InvalidSpecError: If ``spec`` is not a dataclass instance
            MalformedAnnotationError: If an annotation cannot be parsed
            ResolutionErrors: In aggregate mode, if any field failed
            FieldConfError: In fail-fast mode, the first field failure
        """
        discovered = fields(spec, prefix)
        results: list[Resolution] = []
        errors: list[FieldConfError] = []

        for field in discovered:
            try:
                results.append(self.apply(field))
            except _FIELD_ERRORS as e:
                if self.mode is ResolveMode.FAIL_FAST:
                    raise
                errors.append(e)
                results.append(Resolution(field))

        if errors:
            log_message(
                f"Resolution of {type(spec).__name__} failed for {len(errors)} field(s)"
            )
            raise ResolutionErrors(errors)

        resolved = sum(1 for r in results if r.found)
        log_message(
            f"Resolved {resolved}/{len(results)} field(s) of {type(spec).__name__}"
        )
        return results


__all__ = [
    "Resolution",
    "ResolveMode",
    "Resolver",
    "Source",
]
