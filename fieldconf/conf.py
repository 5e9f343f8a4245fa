"""First-class configuration operations.

These functions are the public entry points built on the discoverer and the
resolver: populate a declaration from the environment or the command line,
list the variables it reads, report their current values, and map fields
to parameter-store paths.

Example::

    @dataclass
    class Settings:
        port: int = conf("default:8080")
        db_password: str = conf("required,mask")

    settings = Settings()
    process_env(settings, prefix="billing")
    env_names(settings, prefix="billing")
    # -> ['BILLING_PORT', 'BILLING_DB_PASSWORD']
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

import click

from fieldconf.field import GLOBAL_PARAM_STORE_KEY, Field, fields
from fieldconf.resolver import Resolution, ResolveMode, Resolver
from fieldconf.sources.base import ParameterStore, StructuredSource
from fieldconf.sources.cli import ClickFlagSource
from fieldconf.sources.cli import bind_cli as _bind_cli
from fieldconf.sources.env import EnvSource
from fieldconf.tag import EXCLUDE
from fieldconf.utils.env_utils import mask_value
from fieldconf.utils.errors import (
    BackendError,
    FieldConfError,
    MissingRequiredValueError,
    NotFoundError,
    ResolutionErrors,
)
from fieldconf.utils.logging import log_message

# Process-level variables that are never listed or collected as parameters
APP_NAME = "APP_NAME"
AWS_PROFILE = "AWS_PROFILE"
AWS_REGION = "AWS_REGION"
AWS_LAMBDA_FUNCTION_NAME = "AWS_LAMBDA_FUNCTION_NAME"

EXCLUDED_VARS = frozenset({APP_NAME, AWS_PROFILE, AWS_REGION, AWS_LAMBDA_FUNCTION_NAME})


def _listed(field: Field) -> bool:
    key = field.env_variable
    return key != EXCLUDE and key not in EXCLUDED_VARS


def _env_value(field: Field, env: EnvSource) -> tuple[str, bool]:
    """Current value of a field's variable, falling back to its default.

    Returns:
        ``(value, found)``; ``found`` is False when neither the variable nor
        a default is set
    """
    value, present = env.lookup(field.env_variable)
    if present and value != "":
        return value, True
    if field.is_default():
        return field.default_value(), True
    return "", False


def _check_app_title(app_title: str) -> None:
    if app_title == "":
        raise FieldConfError("app_title is empty")


def process_env(
    spec: Any,
    prefix: str = "",
    *,
    environ: Mapping[str, str] | None = None,
    mode: ResolveMode = ResolveMode.FAIL_FAST,
) -> list[Resolution]:
    """Populate a declaration from environment variables and defaults.

    Args:
        spec: Dataclass instance to populate in place
        prefix: Optional root prefix for variable names
        environ: Mapping to read instead of ``os.environ``
        mode: Fail on the first field error or collect them all

    Returns:
        One resolution per discovered field

    Raises:
        FieldConfError: On discovery, missing-value or decode failures
    """
    resolver = Resolver(env=EnvSource(environ), mode=mode)
    return resolver.resolve(spec, prefix)


def bind_cli(command: click.Command, spec: Any, prefix: str = "") -> list[Field]:
    """Register a click option for every field annotated with ``cli:``.

    Raises:
        MalformedAnnotationError: If an annotation cannot be parsed
        BackendError: If a flag collides with an existing parameter
    """
    return _bind_cli(command, spec, prefix)


def process_cli(
    ctx: click.Context,
    spec: Any,
    prefix: str = "",
    *,
    files: StructuredSource | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[Resolution]:
    """Populate a declaration from flags, environment, config files and defaults.

    Flags given on the command line win, then environment variables, then
    ``files``, then annotation defaults. Every field is attempted and all
    failures are reported together.

    Args:
        ctx: Parsed click context of a command prepared with :func:`bind_cli`
        spec: Dataclass instance to populate in place
        prefix: Optional root prefix for variable names
        files: Optional structured source, e.g. a loaded config file
        environ: Mapping to read instead of ``os.environ``

    Raises:
        ResolutionErrors: If any field failed to resolve
    """
    resolver = Resolver(
        env=EnvSource(environ),
        files=files,
        flags=ClickFlagSource(ctx),
        mode=ResolveMode.AGGREGATE,
    )
    return resolver.resolve(spec, prefix)


def pstore_key(field: Field, app_title: str, env: str) -> str:
    """Parameter-store path of a field.

    An explicit ``pstore:<path>`` wins; ``pstore:global`` maps to
    ``/global/<ENV>``; anything else lives under ``/<app_title>/<ENV>``.
    """
    explicit = field.param_store_key()
    if explicit:
        return explicit
    if field.is_global_param_store():
        return f"/{GLOBAL_PARAM_STORE_KEY}/{env}"
    return f"/{app_title}/{env}"


def _param_fields(spec: Any, app_title: str, skip_defaults: bool, prefix: str) -> list[Field]:
    _check_app_title(app_title)
    result = []
    for field in fields(spec, prefix):
        if not _listed(field):
            continue
        if pstore_key(field, app_title, field.env_variable) == EXCLUDE:
            continue
        if skip_defaults and field.is_default():
            continue
        result.append(field)
    return result


def collect_params_from_env(
    app_title: str,
    spec: Any,
    skip_defaults: bool = True,
    prefix: str = "",
    *,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Map parameter-store paths to the values currently in the environment.

    When ``skip_defaults`` is set, fields with a default are left out unless
    their variable is set. Use this to seed a parameter store from a working
    environment.

    Returns:
        ``{path: value}``

    Raises:
        FieldConfError: If ``app_title`` is empty
        MissingRequiredValueError: If a required variable is not set
    """
    env = EnvSource(environ)
    result: dict[str, str] = {}
    for field in _param_fields(spec, app_title, False, prefix):
        if skip_defaults and field.is_default() and not env.lookup(field.env_variable)[1]:
            continue
        path, value = param_env_field(app_title, field.env_variable, field, environ=environ)
        result[path] = value
    return result


def param_env_field(
    app_title: str,
    env: str,
    field: Field,
    *,
    environ: Mapping[str, str] | None = None,
) -> tuple[str, str]:
    """Parameter path and current value of a single field.

    Args:
        app_title: Application name used in the path
        env: The field's variable name
        field: The field
        environ: Mapping to read instead of ``os.environ``

    Returns:
        ``(path, value)``; the value falls back to the field's default

    Raises:
        MissingRequiredValueError: If the field is required and unset
    """
    path = pstore_key(field, app_title, env)
    value, present = EnvSource(environ).lookup(env)
    if present and value != "":
        return path, value
    if field.is_default():
        return path, field.default_value()
    if field.is_required():
        raise MissingRequiredValueError(field.name, env)
    return path, ""


def param_names(
    app_title: str,
    spec: Any,
    skip_defaults: bool = True,
    prefix: str = "",
) -> list[str]:
    """Parameter-store paths a declaration reads.

    Raises:
        FieldConfError: If ``app_title`` is empty
    """
    return [
        pstore_key(field, app_title, field.env_variable)
        for field in _param_fields(spec, app_title, skip_defaults, prefix)
    ]


def fetch_params(
    app_title: str,
    spec: Any,
    store: ParameterStore,
    prefix: str = "",
    *,
    skip_defaults: bool = True,
    mode: ResolveMode = ResolveMode.FAIL_FAST,
) -> dict[str, str]:
    """Read a declaration's parameters from a remote parameter store.

    Args:
        app_title: Application name used in the paths
        spec: Dataclass instance describing the configuration
        store: The parameter store to read
        prefix: Optional root prefix
        skip_defaults: Leave out fields that declare a default
        mode: Fail on the first unreadable parameter or collect them all

    Returns:
        ``{path: value}``

    Raises:
        BackendError: In fail-fast mode, the first failed read
        ResolutionErrors: In aggregate mode, if any read failed
    """
    result: dict[str, str] = {}
    errors: list[FieldConfError] = []
    for field in _param_fields(spec, app_title, skip_defaults, prefix):
        path = pstore_key(field, app_title, field.env_variable)
        try:
            result[path] = store.get_parameter(path)
        except BackendError as e:
            if mode is ResolveMode.FAIL_FAST:
                raise
            errors.append(e)

    if errors:
        raise ResolutionErrors(errors)
    log_message(f"Fetched {len(result)} parameter(s) for {app_title}")
    return result


def env_names(spec: Any, prefix: str = "") -> list[str]:
    """Variable names a declaration reads, in declaration order."""
    return [field.env_variable for field in fields(spec, prefix) if _listed(field)]


def env_names_no_defaults(spec: Any, prefix: str = "") -> list[str]:
    """Variable names of fields without a default."""
    return [
        field.env_variable
        for field in fields(spec, prefix)
        if _listed(field) and not field.is_default()
    ]


def env_to_map(
    spec: Any,
    prefix: str = "",
    *,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Map every variable name to its current value or default.

    Raises:
        MissingRequiredValueError: If a required variable is not set
    """
    env = EnvSource(environ)
    result: dict[str, str] = {}
    for field in fields(spec, prefix):
        if not _listed(field):
            continue
        value, found = _env_value(field, env)
        if not found and field.is_required():
            raise MissingRequiredValueError(field.name, field.env_variable)
        result[field.env_variable] = value
    return result


def env_report(
    spec: Any,
    prefix: str = "",
    *,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Current values for display.

    Like :func:`env_to_map`, but missing required values are reported as
    empty, ``no-print`` fields are left out and ``mask`` fields are masked.
    """
    env = EnvSource(environ)
    result: dict[str, str] = {}
    for field in fields(spec, prefix):
        if not _listed(field) or not field.is_printable():
            continue
        value, _ = _env_value(field, env)
        result[field.env_variable] = mask_value(value) if field.is_masked() else value
    return result


def env_var(key: str, *, environ: Mapping[str, str] | None = None) -> str:
    """Value of a variable that must be set.

    Raises:
        NotFoundError: If the variable is not set
    """
    value, present = EnvSource(environ).lookup(key)
    if not present:
        raise NotFoundError(f"env var ({key}) is not set")
    return value


def env_var_strict(key: str, *, environ: Mapping[str, str] | None = None) -> str:
    """Value of a variable that must be set and non-empty.

    Raises:
        NotFoundError: If the variable is not set
        FieldConfError: If the variable is empty
    """
    value = env_var(key, environ=environ)
    if value == "":
        raise FieldConfError(f"env var ({key}) is empty")
    return value


def env_var_optional(key: str, *, environ: Mapping[str, str] | None = None) -> str:
    """Value of a variable, or an empty string when it is not set."""
    source = os.environ if environ is None else environ
    return source.get(key, "")


class Config:
    """A declaration bundled with its prefix and parameter options.

    Args:
        data: Dataclass instance describing the configuration
        prefix: Optional root prefix
        skip_defaults: Leave fields with defaults out of parameter listings
        environ: Mapping to read instead of ``os.environ``
    """

    def __init__(
        self,
        data: Any,
        prefix: str = "",
        skip_defaults: bool = True,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.data = data
        self.prefix = prefix
        self.skip_defaults = skip_defaults
        self.environ = environ

    @property
    def is_prefix_enabled(self) -> bool:
        return self.prefix != ""

    def mark_defaults_as_excluded(self) -> None:
        self.skip_defaults = True

    def mark_defaults_as_included(self) -> None:
        self.skip_defaults = False

    def process_env(self, mode: ResolveMode = ResolveMode.FAIL_FAST) -> list[Resolution]:
        return process_env(self.data, self.prefix, environ=self.environ, mode=mode)

    def bind_cli(self, command: click.Command) -> list[Field]:
        return bind_cli(command, self.data, self.prefix)

    def process_cli(
        self, ctx: click.Context, files: StructuredSource | None = None
    ) -> list[Resolution]:
        return process_cli(ctx, self.data, self.prefix, files=files, environ=self.environ)

    def collect_params_from_env(self, app_title: str) -> dict[str, str]:
        return collect_params_from_env(
            app_title, self.data, self.skip_defaults, self.prefix, environ=self.environ
        )

    def param_names(self, app_title: str) -> list[str]:
        return param_names(app_title, self.data, self.skip_defaults, self.prefix)

    def fetch_params(
        self,
        app_title: str,
        store: ParameterStore,
        mode: ResolveMode = ResolveMode.FAIL_FAST,
    ) -> dict[str, str]:
        return fetch_params(
            app_title,
            self.data,
            store,
            self.prefix,
            skip_defaults=self.skip_defaults,
            mode=mode,
        )

    def env_names(self) -> list[str]:
        return env_names(self.data, self.prefix)

    def env_names_no_defaults(self) -> list[str]:
        return env_names_no_defaults(self.data, self.prefix)

    def env_to_map(self) -> dict[str, str]:
        return env_to_map(self.data, self.prefix, environ=self.environ)

    def env_report(self) -> dict[str, str]:
        return env_report(self.data, self.prefix, environ=self.environ)


__all__ = [
    "APP_NAME",
    "AWS_LAMBDA_FUNCTION_NAME",
    "AWS_PROFILE",
    "AWS_REGION",
    "Config",
    "EXCLUDED_VARS",
    "bind_cli",
    "collect_params_from_env",
    "env_names",
    "env_names_no_defaults",
    "env_report",
    "env_to_map",
    "env_var",
    "env_var_optional",
    "env_var_strict",
    "fetch_params",
    "param_env_field",
    "param_names",
    "process_cli",
    "process_env",
    "pstore_key",
]
