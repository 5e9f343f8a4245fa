"""Field discovery over annotated dataclass instances.

:func:`fields` walks a dataclass instance depth-first in declaration order
and returns one :class:`Field` per configurable leaf. Nested dataclasses are
flattened into the result, extending the key prefix with their own name;
``None`` optional composites are materialised first so their interior is
reachable.

Example::

    @dataclass
    class Database:
        host: str = conf("default:localhost")
        port: int = conf("default:5432")

    @dataclass
    class Settings:
        debug: bool = conf("env:DEBUG,default:false")
        db: Database | None = None

    fields(Settings(), "app")
    # -> APP_DEBUG, APP_DB_HOST, APP_DB_PORT
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any

from fieldconf.capabilities import capability_of
from fieldconf.keys import env_name, join_prefix
from fieldconf.tag import EXCLUDE, TAG_KEY, Tag, parse_tag
from fieldconf.typeinfo import (
    is_composite,
    new_composite,
    strip_annotated,
    type_hints,
    unwrap_optional,
)
from fieldconf.utils.errors import InvalidSpecError, MalformedAnnotationError

logger = logging.getLogger(__name__)

# Metadata key marking a nested dataclass whose fields join the parent's prefix
EMBED_KEY = "conf_embed"

# Reserved parameter-store path segment for values shared across applications
GLOBAL_PARAM_STORE_KEY = "global"


def conf(tag: str = "", *, embed: bool = False, **kwargs: Any) -> Any:
    """Declare a dataclass field carrying a ``conf`` annotation.

    A thin wrapper over :func:`dataclasses.field`; every keyword besides
    ``embed`` is passed through (``default``, ``default_factory``, ``repr``...).
    Without ``default`` or ``default_factory`` the attribute starts as None
    and is filled in by resolution.

    Args:
        tag: The annotation string, e.g. ``"env:PORT,default:8080"``
        embed: For nested dataclasses, join the parent's prefix instead of
            adding a segment of their own

    Returns:
        A dataclass field specifier
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = tag
    if embed:
        metadata[EMBED_KEY] = True
    if "default" not in kwargs and "default_factory" not in kwargs:
        kwargs["default"] = None
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class FieldRef:
    """Borrowed reference to one attribute of a caller-owned instance."""

    owner: Any
    attr: str
    type: Any = Any

    def get(self) -> Any:
        return getattr(self.owner, self.attr)

    def set(self, value: Any) -> None:
        params = getattr(type(self.owner), "__dataclass_params__", None)
        if params is not None and params.frozen:
            object.__setattr__(self.owner, self.attr, value)
        else:
            setattr(self.owner, self.attr, value)


@dataclass
class Field:
    """Information about one configuration variable.

    Attributes:
        name: Declared attribute name
        path: Declared names from the root instance down to this field
        prefix: Composed ancestor prefix, e.g. ``"APP_DB"``
        env_name: Key segment derived from the name, e.g. ``"MAX_RETRIES"``
        tag: Options parsed from the annotation
        ref: Destination storage; None for detached fields
    """

    name: str = ""
    path: tuple[str, ...] = ()
    prefix: str = ""
    env_name: str = ""
    tag: Tag = dataclasses.field(default_factory=Tag)
    ref: FieldRef | None = None

    @property
    def env_key(self) -> str:
        """Derived name composed with the prefix, ignoring any override."""
        return join_prefix(self.prefix, self.env_name)

    @property
    def env_variable(self) -> str:
        """Resolved key for the keyed backend, or ``-`` when excluded from it."""
        if self.tag.env_var == EXCLUDE:
            return EXCLUDE
        name = self.tag.env_var or self.env_name
        if self.tag.no_prefix:
            return name
        return join_prefix(self.prefix, name)

    @property
    def bind_name(self) -> str:
        """Dotted lower-case path used to look the field up in config files."""
        return ".".join(env_name(part).lower() for part in self.path)

    @property
    def declared_type(self) -> Any:
        return self.ref.type if self.ref is not None else Any

    def is_required(self) -> bool:
        return self.tag.required

    def is_default(self) -> bool:
        return self.tag.is_default

    def default_value(self) -> str:
        return self.tag.default

    def is_cli(self) -> bool:
        return self.tag.cli_flag != ""

    def cli_flag(self) -> str:
        return self.tag.cli_flag

    def cli_short_flag(self) -> str:
        return self.tag.cli_short

    def cli_usage(self) -> str:
        return self.tag.cli_usage

    def param_store_key(self) -> str:
        """Explicit parameter-store path; empty when unset or global."""
        if self.is_global_param_store():
            return ""
        return self.tag.pstore_var

    def is_global_param_store(self) -> bool:
        return self.tag.pstore_var == GLOBAL_PARAM_STORE_KEY

    def is_masked(self) -> bool:
        return self.tag.mask

    def is_printable(self) -> bool:
        return not self.tag.no_print


def fields(spec: Any, prefix: str = "") -> list[Field]:
    """Discover the configurable fields of a dataclass instance.

    Args:
        spec: The dataclass instance to walk; nested values are mutated in
            place when ``None`` composites must be materialised
        prefix: Optional root prefix, normalised like a declared name

    Returns:
        Fields in declaration order, depth first

    Raises:
        InvalidSpecError: If ``spec`` is not a dataclass instance
        MalformedAnnotationError: If any annotation cannot be parsed
    """
    if isinstance(spec, type) or not dataclasses.is_dataclass(spec):
        raise InvalidSpecError("configuration target must be a dataclass instance")

    root = env_name(prefix) if prefix else ""
    result = _collect(spec, root, ())
    logger.debug(f"Discovered {len(result)} field(s) in {type(spec).__name__}")
    return result


def _collect(obj: Any, prefix: str, path: tuple[str, ...]) -> list[Field]:
    hints = type_hints(type(obj))
    result: list[Field] = []

    for f in dataclasses.fields(obj):
        raw = f.metadata.get(TAG_KEY, "")
        if f.name.startswith("_") or raw == EXCLUDE:
            continue

        try:
            tag = parse_tag(raw)
        except MalformedAnnotationError as e:
            raise MalformedAnnotationError(
                f"parse_tag failed for ({f.name}): {e}", field_name=f.name
            ) from e

        declared = strip_annotated(hints.get(f.name, Any))
        target, _ = unwrap_optional(declared)
        ref = FieldRef(obj, f.name, declared)
        field_path = (*path, f.name)

        if is_composite(target):
            value = ref.get()
            if value is None:
                value = new_composite(target)
                ref.set(value)

            if capability_of(target) is None:
                nested_prefix = _nested_prefix(prefix, f.name, tag, f.metadata.get(EMBED_KEY, False))
                try:
                    inner = _collect(value, nested_prefix, field_path)
                except MalformedAnnotationError as e:
                    raise MalformedAnnotationError(
                        f"Fields failed for embedded struct ({f.name}): {e}",
                        field_name=e.field_name,
                    ) from e
                result.extend(inner)
                continue

        result.append(
            Field(
                name=f.name,
                path=field_path,
                prefix=prefix,
                env_name=env_name(f.name),
                tag=tag,
                ref=ref,
            )
        )

    return result


def _nested_prefix(prefix: str, name: str, tag: Tag, embedded: bool) -> str:
    if embedded:
        return prefix
    if tag.env_var and tag.env_var != EXCLUDE:
        contribution = tag.env_var
    else:
        contribution = env_name(name)
    if tag.no_prefix:
        return contribution
    return join_prefix(prefix, contribution)


__all__ = [
    "EMBED_KEY",
    "GLOBAL_PARAM_STORE_KEY",
    "Field",
    "FieldRef",
    "conf",
    "fields",
]
