"""Utility modules for fieldconf.

This package contains:
- console: Rich-based terminal output utilities
- env_utils: Environment variable expansion and secret masking
- errors: Custom exceptions and exit codes
- logging: Logging configuration
"""

from fieldconf.utils.env_utils import (
    SENSITIVE_KEY_PATTERNS,
    EnvVarExpansionError,
    expand_env_vars,
    is_sensitive_key,
    mask_value,
)
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
from fieldconf.utils.logging import get_logger, log_message, setup_logging

__all__ = [
    # Env Utils
    "EnvVarExpansionError",
    "SENSITIVE_KEY_PATTERNS",
    "expand_env_vars",
    "is_sensitive_key",
    "mask_value",
    # Errors
    "ExitCode",
    "FieldConfError",
    "InvalidSpecError",
    "MalformedAnnotationError",
    "MissingRequiredValueError",
    "DecodeError",
    "BackendError",
    "NotFoundError",
    "ResolutionErrors",
    # Logging
    "setup_logging",
    "get_logger",
    "log_message",
]
