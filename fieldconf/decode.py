"""Conversion of raw string values into typed field storage.

:func:`decode_value` turns a raw string into a value of the declared type;
:func:`process_field` stores the result through a :class:`FieldRef`.
:func:`encode_value` is the inverse: it reduces a Python value to the
canonical string form the decoder accepts, e.g. ``[3, 5, 10]`` ->
``"3,5,10"`` and ``{"a": 1}`` -> ``"a:1"``.

Decoding order for a destination type:

1. A custom capability (``decode``, ``set``, ``unmarshal_text``,
   ``unmarshal_binary``; see :mod:`fieldconf.capabilities`)
2. Built-in handling for scalars, durations, sequences and mappings
3. Anything else is left untouched
"""

from __future__ import annotations

import re
import uuid
from collections import abc
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Any, get_args, get_origin

from fieldconf.capabilities import capability_of
from fieldconf.duration import format_duration, parse_duration
from fieldconf.field import FieldRef
from fieldconf.typeinfo import (
    is_composite,
    new_composite,
    strip_annotated,
    type_name,
    unwrap_optional,
)
from fieldconf.utils.errors import DecodeError


class _NoValue:
    """Marker returned when a destination kind is not supported."""

    def __repr__(self) -> str:
        return "NO_VALUE"


NO_VALUE: Any = _NoValue()

TRUE_TOKENS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_TOKENS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_LEGACY_OCTAL = re.compile(r"[+-]?0[0-7_]+")

_SEQUENCE_ORIGINS = (
    list,
    abc.Sequence,
    abc.MutableSequence,
    abc.Collection,
    abc.Iterable,
)
_SET_ORIGINS = (set, frozenset, abc.Set, abc.MutableSet)
_MAPPING_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)


def parse_bool(raw: str) -> bool:
    """Parse ``1 t T TRUE true True`` / ``0 f F FALSE false False``.

    Raises:
        ValueError: For any other token
    """
    token = raw.strip()
    if token in TRUE_TOKENS:
        return True
    if token in FALSE_TOKENS:
        return False
    raise ValueError(f"invalid boolean {raw!r}")


def parse_int(raw: str) -> int:
    """Parse an integer with base prefixes (``0x``, ``0o``, ``0b``, leading ``0``).

    Raises:
        ValueError: If the string is not an integer literal
    """
    token = raw.strip()
    if _LEGACY_OCTAL.fullmatch(token):
        return int(token, 8)
    return int(token, 0)


def _parse_datetime(raw: str) -> datetime:
    token = raw.strip()
    if token.endswith(("Z", "z")):
        token = token[:-1] + "+00:00"
    return datetime.fromisoformat(token)


_SCALAR_PARSERS: dict[Any, Any] = {
    int: parse_int,
    float: lambda raw: float(raw.strip()),
    timedelta: parse_duration,
    datetime: _parse_datetime,
    date: lambda raw: date.fromisoformat(raw.strip()),
    time: lambda raw: time.fromisoformat(raw.strip()),
    Decimal: lambda raw: Decimal(raw.strip()),
    uuid.UUID: lambda raw: uuid.UUID(raw.strip()),
    bytes: lambda raw: raw.encode("utf-8"),
    bytearray: lambda raw: bytearray(raw.encode("utf-8")),
}


def process_field(value: str, ref: FieldRef) -> None:
    """Decode a raw value and store it in the referenced attribute.

    Unsupported destination kinds leave the attribute untouched.

    Args:
        value: Raw string from a source or a default
        ref: Destination storage

    Raises:
        DecodeError: If the value cannot be converted
    """
    result = decode_value(value, ref.type, ref.get())
    if result is not NO_VALUE:
        ref.set(result)


def decode_value(raw: str, tp: Any, current: Any = None) -> Any:
    """Convert a raw string into a value of type ``tp``.

    Args:
        raw: The raw string
        tp: Destination type hint
        current: Current value of the destination; capability types decode
            into it in place when it is an instance of ``tp``

    Returns:
        The decoded value, or ``NO_VALUE`` for unsupported types

    Raises:
        DecodeError: If the value cannot be converted
    """
    tp, _ = unwrap_optional(strip_annotated(tp))

    capability = capability_of(tp)
    if capability is not None:
        return _decode_with_capability(raw, tp, capability, current)

    if tp is str:
        return raw
    if tp is bool:
        return _convert(parse_bool, raw, tp)
    if isinstance(tp, type) and issubclass(tp, Enum):
        return _decode_enum(raw, tp)
    if tp in _SCALAR_PARSERS:
        return _convert(_SCALAR_PARSERS[tp], raw, tp)
    if isinstance(tp, type) and issubclass(tp, PurePath):
        return tp(raw)

    origin = get_origin(tp) or tp
    args = get_args(tp)
    if origin is tuple:
        return _decode_tuple(raw, tp, args)
    if origin in _SEQUENCE_ORIGINS:
        return _decode_sequence(raw, args[0] if args else str)
    if origin in _SET_ORIGINS:
        items = _decode_sequence(raw, args[0] if args else str)
        return frozenset(items) if origin is frozenset else set(items)
    if origin in _MAPPING_ORIGINS:
        key_type, value_type = args if len(args) == 2 else (str, str)
        return _decode_mapping(raw, key_type, value_type)

    return NO_VALUE


def _convert(parser: Any, raw: str, tp: Any) -> Any:
    try:
        return parser(raw)
    except (ValueError, ArithmeticError) as e:
        raise DecodeError(
            f"cannot decode {raw!r} as {type_name(tp)}: {e}", value=raw
        ) from e


def _allocate(tp: type) -> Any:
    try:
        return tp()
    except TypeError:
        return tp.__new__(tp)


def _decode_with_capability(raw: str, tp: type, capability: str, current: Any) -> Any:
    if isinstance(current, tp):
        target = current
    elif is_composite(tp):
        target = new_composite(tp)
    else:
        target = _allocate(tp)

    arg: str | bytes = raw.encode("utf-8") if capability == "unmarshal_binary" else raw
    try:
        getattr(target, capability)(arg)
    except DecodeError:
        raise
    except Exception as e:
        raise DecodeError(
            f"{type_name(tp)}.{capability} failed for {raw!r}: {e}", value=raw
        ) from e
    return target


def _decode_enum(raw: str, tp: type[Enum]) -> Enum:
    for member in tp:
        if isinstance(member.value, str):
            if member.value == raw:
                return member
        elif encode_value(member.value) == raw.strip():
            return member
    member = tp.__members__.get(raw.strip())
    if member is None:
        allowed = ", ".join(encode_value(m.value) for m in tp)
        raise DecodeError(
            f"cannot decode {raw!r} as {tp.__name__}. Allowed values: {allowed}",
            value=raw,
        )
    return member


def _decode_sequence(raw: str, item_type: Any) -> list[Any]:
    if raw.strip() == "":
        return []
    items = []
    for part in raw.split(","):
        item = decode_value(part, item_type)
        items.append(None if item is NO_VALUE else item)
    return items


def _decode_tuple(raw: str, tp: Any, args: tuple[Any, ...]) -> tuple[Any, ...]:
    if not args or (len(args) == 2 and args[1] is Ellipsis):
        return tuple(_decode_sequence(raw, args[0] if args else str))
    if args == ((),):
        args = ()

    parts = [] if raw.strip() == "" else raw.split(",")
    if len(parts) != len(args):
        raise DecodeError(
            f"cannot decode {raw!r} as {type_name(tp)}: "
            f"expected {len(args)} item(s), got {len(parts)}",
            value=raw,
        )
    return tuple(decode_value(part, item_type) for part, item_type in zip(parts, args))


def _decode_mapping(raw: str, key_type: Any, value_type: Any) -> dict[Any, Any]:
    if raw.strip() == "":
        return {}
    result: dict[Any, Any] = {}
    for pair in raw.split(","):
        kv = pair.split(":")
        if len(kv) != 2:
            raise DecodeError(f"invalid map item: {pair!r}", value=raw)
        result[decode_value(kv[0], key_type)] = decode_value(kv[1], value_type)
    return result


def encode_value(value: Any) -> str:
    """Reduce a value to the canonical string form the decoder accepts.

    Used to hand structured-backend values (YAML/JSON scalars, lists, maps)
    to the decoder and to render resolved values in reports.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return encode_value(value.value)
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return ",".join(f"{encode_value(k)}:{encode_value(v)}" for k, v in value.items())
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(encode_value(v) for v in value)
    return str(value)


__all__ = [
    "FALSE_TOKENS",
    "NO_VALUE",
    "TRUE_TOKENS",
    "decode_value",
    "encode_value",
    "parse_bool",
    "parse_int",
    "process_field",
]
