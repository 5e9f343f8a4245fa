"""fieldconf - Configuration for annotated dataclasses.

Declare configuration as a dataclass whose fields carry ``conf``
annotations, then resolve it from command line flags, environment
variables, config files and defaults.
"""

__version__ = "0.1.0"

from fieldconf.conf import (
    Config,
    bind_cli,
    collect_params_from_env,
    env_names,
    env_names_no_defaults,
    env_report,
    env_to_map,
    env_var,
    env_var_optional,
    env_var_strict,
    fetch_params,
    param_env_field,
    param_names,
    process_cli,
    process_env,
    pstore_key,
)
from fieldconf.decode import decode_value, encode_value, process_field
from fieldconf.field import Field, FieldRef, conf, fields
from fieldconf.keys import camel_split, env_name
from fieldconf.resolver import Resolution, ResolveMode, Resolver
from fieldconf.tag import Tag, parse_tag
from fieldconf.utils.errors import (
    BackendError,
    DecodeError,
    ExitCode,
    FieldConfError,
    InvalidSpecError,
    MalformedAnnotationError,
    MissingRequiredValueError,
    NotFoundError,
    ResolutionErrors,
)

__all__ = [
    "__version__",
    # Declaration
    "conf",
    "Field",
    "FieldRef",
    "Tag",
    "fields",
    "parse_tag",
    "camel_split",
    "env_name",
    # Resolution
    "Resolution",
    "ResolveMode",
    "Resolver",
    "decode_value",
    "encode_value",
    "process_field",
    # Operations
    "Config",
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
    # Errors
    "BackendError",
    "DecodeError",
    "ExitCode",
    "FieldConfError",
    "InvalidSpecError",
    "MalformedAnnotationError",
    "MissingRequiredValueError",
    "NotFoundError",
    "ResolutionErrors",
]
