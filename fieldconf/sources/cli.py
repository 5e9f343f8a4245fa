"""Command line flags for CLI-eligible fields, built on click.

:func:`bind_cli` adds one ``click.Option`` per field annotated with
``cli:<flag>``; :class:`ClickFlagSource` reads the parsed values back and
reports which ones were given explicitly on the command line.

Example::

    @click.command()
    @click.pass_context
    def serve(ctx, **_):
        settings = Settings()
        process_cli(ctx, settings)

    bind_cli(serve, Settings())
"""

from __future__ import annotations

import logging
from typing import Any

import click
from click.core import ParameterSource

from fieldconf.decode import encode_value, parse_bool
from fieldconf.field import Field, fields
from fieldconf.typeinfo import unwrap_optional
from fieldconf.utils.errors import BackendError

logger = logging.getLogger(__name__)


def param_name(flag: str) -> str:
    """Click parameter name for a long flag, e.g. ``log-level`` -> ``log_level``."""
    return flag.replace("-", "_")


def build_option(field: Field) -> click.Option:
    """Build the click option for one CLI-eligible field.

    Boolean fields become ``--flag/--no-flag`` switches; everything else is a
    string option whose default is the field's tag default.

    Raises:
        BackendError: If a boolean field's default is not a boolean token
    """
    flag = field.cli_flag()
    name = param_name(flag)
    help_text = field.cli_usage() or None
    target, _ = unwrap_optional(field.declared_type)

    if target is bool:
        decls = [name, f"--{flag}/--no-{flag}"]
        if field.cli_short_flag():
            decls.append(f"-{field.cli_short_flag()}")
        default = False
        if field.is_default():
            try:
                default = parse_bool(field.default_value())
            except ValueError as e:
                raise BackendError(
                    f"invalid default for flag --{flag}: {e}", backend="cli"
                ) from e
        return click.Option(decls, default=default, show_default=True, help=help_text)

    decls = [name, f"--{flag}"]
    if field.cli_short_flag():
        decls.append(f"-{field.cli_short_flag()}")
    return click.Option(
        decls,
        type=str,
        default=field.default_value() if field.is_default() else None,
        show_default=field.is_default(),
        help=help_text,
    )


def bind_cli(command: click.Command, spec: Any, prefix: str = "") -> list[Field]:
    """Register a click option for every CLI-eligible field of a declaration.

    Args:
        command: The click command to extend
        spec: Dataclass instance describing the configuration
        prefix: Optional root prefix

    Returns:
        The fields that received an option

    Raises:
        BackendError: If a flag collides with an existing parameter
    """
    existing = {p.name for p in command.params}
    bound: list[Field] = []
    for field in fields(spec, prefix):
        if not field.is_cli():
            continue
        name = param_name(field.cli_flag())
        if name in existing:
            raise BackendError(
                f"flag --{field.cli_flag()} for field {field.name} is already defined",
                backend="cli",
            )
        command.params.append(build_option(field))
        existing.add(name)
        bound.append(field)
        logger.debug(f"Bound flag --{field.cli_flag()} to field {field.name}")
    return bound


class ClickFlagSource:
    """Flag source over a parsed click context."""

    def __init__(self, ctx: click.Context) -> None:
        self._ctx = ctx

    def lookup(self, flag: str) -> tuple[str, bool]:
        name = param_name(flag)
        if name not in self._ctx.params:
            return "", False
        changed = self._ctx.get_parameter_source(name) is ParameterSource.COMMANDLINE
        return encode_value(self._ctx.params[name]), changed


__all__ = [
    "ClickFlagSource",
    "bind_cli",
    "build_option",
    "param_name",
]
