"""Duration strings such as ``300ms``, ``1.5h`` or ``2h45m10s``.

A duration is an optionally signed sequence of decimal numbers, each with an
optional fraction and a unit suffix. Valid units are ``ns``, ``us`` (or
``µs``), ``ms``, ``s``, ``m`` and ``h``. Values are held in
:class:`datetime.timedelta`, so anything finer than a microsecond is
truncated.
"""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal

# Microseconds per unit
_UNITS: dict[str, Decimal] = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ms": Decimal(1_000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE


def parse_duration(text: str) -> timedelta:
    """Parse a duration string into a timedelta.

    Args:
        text: e.g. ``"2m"``, ``"500ms"``, ``"-1h30m"`` or ``"0"``

    Returns:
        The parsed duration

    Raises:
        ValueError: If the string is not a valid duration
    """
    s = text.strip()
    sign = 1
    if s[:1] in ("+", "-"):
        sign = -1 if s[0] == "-" else 1
        s = s[1:]

    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(s):
        match = _COMPONENT.match(s, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        total += Decimal(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()

    return timedelta(microseconds=int(sign * total))


def format_duration(value: timedelta) -> str:
    """Format a timedelta in the same syntax :func:`parse_duration` accepts.

    Durations under one second use the largest fitting sub-second unit
    (``"500ms"``); longer ones are written as hours, minutes and seconds
    (``"1h30m0s"``).
    """
    us = value // timedelta(microseconds=1)
    if us == 0:
        return "0s"

    sign = "-" if us < 0 else ""
    us = abs(us)

    if us < 1_000:
        return f"{sign}{us}µs"
    if us < _US_PER_SECOND:
        return f"{sign}{_decimal_text(Decimal(us) / 1_000)}ms"

    hours, rem = divmod(us, _US_PER_HOUR)
    minutes, rem = divmod(rem, _US_PER_MINUTE)
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return out + f"{_decimal_text(Decimal(rem) / _US_PER_SECOND)}s"


def _decimal_text(value: Decimal) -> str:
    return format(value.normalize(), "f")


__all__ = [
    "format_duration",
    "parse_duration",
]
