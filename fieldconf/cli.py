"""CLI interface for fieldconf.

Inspect a configuration declaration from the shell. Targets are given as
``module:Class`` where ``Class`` is a dataclass::

    fieldconf names myapp.settings:Settings --prefix myapp
    fieldconf report myapp.settings:Settings
    fieldconf params myapp.settings:Settings --app billing
    fieldconf check myapp.settings:Settings --file config.yaml
"""

import dataclasses
import importlib
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.table import Table

from fieldconf.conf import env_names, env_names_no_defaults, env_report, param_names
from fieldconf.decode import encode_value
from fieldconf.resolver import ResolveMode, Resolver
from fieldconf.sources.env import EnvSource
from fieldconf.sources.files import ConfigFileSource
from fieldconf.typeinfo import new_composite
from fieldconf.utils.console import (
    console,
    print_error,
    print_info,
    print_success,
    show_version,
)
from fieldconf.utils.env_utils import is_sensitive_key, mask_value
from fieldconf.utils.errors import FieldConfError, InvalidSpecError, ResolutionErrors
from fieldconf.utils.logging import setup_logging

# Create Typer app
app = typer.Typer(
    name="fieldconf",
    help="fieldconf - Inspect and check dataclass-declared configuration",
    add_completion=False,
    no_args_is_help=True,
)

TargetArg = Annotated[
    str,
    typer.Argument(help="Declaration to inspect, as module:Class"),
]
PrefixOpt = Annotated[
    str,
    typer.Option("--prefix", "-p", help="Root prefix for variable names"),
]


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        show_version()
        raise typer.Exit()


def load_target(target: str) -> Any:
    """Import ``module:Class`` and return a zero-value instance of it.

    Raises:
        InvalidSpecError: If the target cannot be imported or is not a dataclass
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise InvalidSpecError(f"Invalid target '{target}'. Expected module:Class")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidSpecError(f"Cannot import module '{module_name}': {e}") from e

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise InvalidSpecError(f"'{attr}' not found in module '{module_name}'") from e

    if not (isinstance(obj, type) and dataclasses.is_dataclass(obj)):
        raise InvalidSpecError(f"'{target}' is not a dataclass")
    return new_composite(obj)


def _fail(error: FieldConfError) -> typer.Exit:
    if isinstance(error, ResolutionErrors):
        print_error(f"{len(error.errors)} field(s) failed to resolve")
        for item in error.errors:
            console.print(f"  [error]-[/error] {item}", highlight=False)
    else:
        print_error(str(error))
    return typer.Exit(int(error.exit_code))


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version information",
        ),
    ] = None,
) -> None:
    """fieldconf - Inspect and check dataclass-declared configuration."""
    setup_logging()


@app.command()
def names(
    target: TargetArg,
    prefix: PrefixOpt = "",
    no_defaults: Annotated[
        bool,
        typer.Option("--no-defaults", help="Only list variables without a default"),
    ] = False,
) -> None:
    """List the environment variables a declaration reads."""
    try:
        spec = load_target(target)
        result = env_names_no_defaults(spec, prefix) if no_defaults else env_names(spec, prefix)
    except FieldConfError as e:
        raise _fail(e) from e

    if not result:
        print_info("No variables found")
    for name in result:
        console.print(name, highlight=False)


@app.command()
def report(
    target: TargetArg,
    prefix: PrefixOpt = "",
) -> None:
    """Show the current value of every variable, masking secrets."""
    try:
        spec = load_target(target)
        values = env_report(spec, prefix)
    except FieldConfError as e:
        raise _fail(e) from e

    table = Table(title=f"Configuration: {target}")
    table.add_column("Variable", style="key")
    table.add_column("Value")
    for key, value in values.items():
        table.add_row(key, value or "[dim](unset)[/dim]")
    console.print(table)


@app.command()
def params(
    target: TargetArg,
    app_title: Annotated[
        str,
        typer.Option("--app", "-a", help="Application title used in parameter paths"),
    ],
    prefix: PrefixOpt = "",
    include_defaults: Annotated[
        bool,
        typer.Option("--include-defaults", help="Also list fields that declare a default"),
    ] = False,
) -> None:
    """List the parameter-store paths a declaration reads."""
    try:
        spec = load_target(target)
        result = param_names(app_title, spec, skip_defaults=not include_defaults, prefix=prefix)
    except FieldConfError as e:
        raise _fail(e) from e

    if not result:
        print_info("No parameters found")
    for path in result:
        console.print(path, highlight=False)


@app.command()
def check(
    target: TargetArg,
    prefix: PrefixOpt = "",
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", help="YAML or JSON config file to layer under the environment"),
    ] = None,
) -> None:
    """Resolve a declaration and report every field that fails."""
    try:
        spec = load_target(target)
        files = ConfigFileSource.from_path(file, expand_env=True) if file else None
        resolver = Resolver(env=EnvSource(), files=files, mode=ResolveMode.AGGREGATE)
        resolutions = resolver.resolve(spec, prefix)
    except FieldConfError as e:
        raise _fail(e) from e

    table = Table(title=f"Resolved: {target}")
    table.add_column("Field", style="key")
    table.add_column("Source")
    table.add_column("Value")
    for resolution in resolutions:
        field = resolution.field
        if not field.is_printable():
            continue
        value = encode_value(field.ref.get()) if field.ref is not None else ""
        if field.is_masked() or is_sensitive_key(field.env_variable):
            value = f"[masked]{mask_value(value)}[/masked]"
        source = resolution.source.value if resolution.source is not None else "-"
        table.add_row(field.bind_name, source, value)
    console.print(table)
    print_success(f"{len(resolutions)} field(s) resolved")


__all__ = [
    "app",
    "load_target",
    "main",
]
