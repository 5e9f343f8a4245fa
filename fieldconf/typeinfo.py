"""Type introspection helpers shared by the field walker and the decoder.

Declared annotations are resolved with :func:`typing.get_type_hints`, so
dataclasses using ``from __future__ import annotations`` work as long as
their annotations can be resolved at module level.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections import abc
from datetime import timedelta
from typing import Annotated, Any, Union, get_args, get_origin

from fieldconf.utils.errors import InvalidSpecError

NoneType = type(None)

_ZERO_FACTORIES: dict[Any, Any] = {
    str: str,
    int: int,
    float: float,
    bool: bool,
    bytes: bytes,
    bytearray: bytearray,
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    dict: dict,
    timedelta: timedelta,
    abc.Sequence: list,
    abc.MutableSequence: list,
    abc.Collection: list,
    abc.Iterable: list,
    abc.Set: set,
    abc.MutableSet: set,
    abc.Mapping: dict,
    abc.MutableMapping: dict,
}


def strip_annotated(tp: Any) -> Any:
    """Return the underlying type of an ``Annotated[...]`` hint."""
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Split ``Optional[T]`` / ``T | None`` into ``(T, True)``.

    Unions of more than one non-None member are returned unchanged.
    """
    tp = strip_annotated(tp)
    if get_origin(tp) in (Union, types.UnionType):
        args = get_args(tp)
        members = [a for a in args if a is not NoneType]
        if len(members) == 1 and len(members) != len(args):
            return strip_annotated(members[0]), True
    return tp, False


def is_composite(tp: Any) -> bool:
    """A composite is a dataclass type; its fields are walked recursively."""
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def type_hints(cls: type) -> dict[str, Any]:
    """Resolve the annotations of a dataclass, keeping ``Annotated`` extras.

    Raises:
        InvalidSpecError: If an annotation refers to a name that cannot be resolved
    """
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise InvalidSpecError(
            f"cannot resolve annotations of {cls.__name__}: {e}"
        ) from e


def type_name(tp: Any) -> str:
    """Readable name of a type hint for error messages."""
    if isinstance(tp, type) and get_origin(tp) is None:
        return tp.__name__
    return str(tp).replace("typing.", "")


def new_composite(cls: type) -> Any:
    """Allocate a zero-value instance of a dataclass.

    The no-argument constructor is used when it works. Dataclasses with
    required constructor arguments are allocated directly and every field is
    filled with its declared default, default factory, or zero value.
    """
    try:
        return cls()
    except TypeError:
        pass

    obj = cls.__new__(cls)
    hints = type_hints(cls)
    for f in dataclasses.fields(cls):
        if f.default is not dataclasses.MISSING:
            value = f.default
        elif f.default_factory is not dataclasses.MISSING:
            value = f.default_factory()
        else:
            value = zero_value(hints.get(f.name, Any))
        object.__setattr__(obj, f.name, value)
    return obj


def zero_value(tp: Any) -> Any:
    """Zero value for a type hint: ``0``, ``""``, empty containers, ``None``..."""
    tp = strip_annotated(tp)
    _, optional = unwrap_optional(tp)
    if optional:
        return None
    if is_composite(tp):
        return new_composite(tp)

    origin = get_origin(tp) or tp
    factory = _ZERO_FACTORIES.get(origin)
    if factory is not None:
        return factory()
    if isinstance(tp, type):
        try:
            return tp()
        except TypeError:
            return None
    return None


__all__ = [
    "NoneType",
    "is_composite",
    "new_composite",
    "strip_annotated",
    "type_hints",
    "type_name",
    "unwrap_optional",
    "zero_value",
]
