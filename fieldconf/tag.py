"""Parsing of the ``conf`` annotation attached to dataclass fields.

An annotation is a comma-separated list of bare flags and ``key:value``
pairs::

    env:DB_PORT,default:5432,required
    default:list(a;b;c),no-print
    cli:log-level,cli-short:l,cli-usage:logging verbosity

The parser only normalises the string into a :class:`Tag`. The exclusion
sentinel ``-`` (whole annotation) is handled by the field discoverer.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from fieldconf.utils.errors import MalformedAnnotationError

logger = logging.getLogger(__name__)

# Metadata key under which dataclass fields carry their annotation
TAG_KEY = "conf"

# Annotation value that removes a field from discovery entirely
EXCLUDE = "-"

_FLAGS = frozenset({"required", "no-prefix", "no-print", "mask"})

_PAIR_ALIASES = {
    "cli-s": "cli-short",
    "cli-u": "cli-usage",
}

_PAREN_GROUP = re.compile(r"\((.*?)\)")


@dataclass
class Tag:
    """Normalised options parsed from a field annotation.

    Attributes:
        env_var: Explicit key override (``-`` means never read the keyed backend)
        default: Raw default value, already normalised
        is_default: Whether a default was declared
        no_print: Leave the field out of reports
        no_prefix: Drop ancestor prefixes from the key
        required: Fail when no source and no default provide a value
        mask: Hide the value in reports and logs
        pstore_var: Explicit parameter-store path
        cli_flag: Long command line flag name
        cli_short: One-letter command line shorthand
        cli_usage: Help text for the command line flag
    """

    env_var: str = ""
    default: str = ""
    is_default: bool = False
    no_print: bool = False
    no_prefix: bool = False
    required: bool = False
    mask: bool = False
    pstore_var: str = ""
    cli_flag: str = ""
    cli_short: str = ""
    cli_usage: str = ""


def parse_tag(raw: str) -> Tag:
    """Parse an annotation string into a Tag.

    Args:
        raw: The annotation, e.g. ``"env:PORT,default:8080,required"``

    Returns:
        The parsed Tag; an empty annotation yields ``Tag()``

    Raises:
        MalformedAnnotationError: If a ``key:value`` token has no value or a
            ``list(...)``/``map(...)`` default is not closed
    """
    tag = Tag()
    if raw == "":
        return tag

    for part in raw.split(","):
        prop, sep, value = part.partition(":")
        prop = prop.strip()

        if not sep:
            if prop in _FLAGS:
                _set_flag(tag, prop)
            elif prop:
                logger.debug(f"Ignoring unknown annotation flag '{prop}'")
            continue

        value = value.strip()
        if value == "":
            raise MalformedAnnotationError(f'tag ("{prop}") missing a value')

        prop = _PAIR_ALIASES.get(prop, prop)
        if prop == "default":
            tag.is_default = True
            if is_list_or_map_default(value):
                value = normalize_list_or_map_default(value)
            tag.default = value
        elif prop == "env":
            tag.env_var = value
        elif prop == "pstore":
            tag.pstore_var = value
        elif prop == "cli":
            tag.cli_flag = value
        elif prop == "cli-short":
            tag.cli_short = value
        elif prop == "cli-usage":
            tag.cli_usage = value
        else:
            logger.debug(f"Ignoring unknown annotation key '{prop}'")

    return tag


def _set_flag(tag: Tag, flag: str) -> None:
    if flag == "required":
        tag.required = True
    elif flag == "no-prefix":
        tag.no_prefix = True
    elif flag == "no-print":
        tag.no_print = True
    elif flag == "mask":
        tag.mask = True


def is_list_or_map_default(value: str) -> bool:
    """Check whether a default uses the ``list(...)``/``map(...)`` micro-syntax."""
    return "map(" in value or "list(" in value


def normalize_list_or_map_default(value: str) -> str:
    """Rewrite a list/map default into the canonical comma-separated form.

    ``list(a;b;c)`` becomes ``a,b,c`` and ``map(k1|v1;k2|v2)`` becomes
    ``k1:v1,k2:v2``. Spacing inside the parentheses is kept as written.

    Raises:
        MalformedAnnotationError: If the value does not end with ``)``
    """
    if not value.endswith(")"):
        raise MalformedAnnotationError("tag (default) invalid list or map syntax")

    groups = _PAREN_GROUP.findall(value)
    if groups:
        value = groups[-1]
    return value.replace("|", ":").replace(";", ",")


__all__ = [
    "EXCLUDE",
    "TAG_KEY",
    "Tag",
    "is_list_or_map_default",
    "normalize_list_or_map_default",
    "parse_tag",
]
