"""Environment variable utilities for fieldconf.

This module provides ``${VAR}`` expansion for values loaded from config
files, plus the sensitive-key heuristics used to keep secrets out of logs
and reports.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from typing import Any

from fieldconf.keys import camel_split

# Key words that mark a key as sensitive wherever they appear in it
SENSITIVE_KEY_PATTERNS = (
    "TOKEN",
    "SECRET",
    "PASSWORD",
    "PASSWD",
    "CREDENTIAL",
    "CREDENTIALS",
    "APIKEY",
)

# Key words that mark a key as sensitive only as its last word (API_KEY, GITHUB_PAT)
SENSITIVE_KEY_SUFFIXES = ("KEY", "PAT")

MASK = "********"

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

logger = logging.getLogger(__name__)


class EnvVarExpansionError(Exception):
    """Raised when environment variable expansion fails in strict mode."""


def is_sensitive_key(key: str) -> bool:
    """Check if a configuration key names sensitive data.

    The key is split into words (``db.password``, ``apiKey`` and
    ``API_KEY`` all work) and matched word by word, so ``DB_PATH`` or
    ``KEY_PREFIX`` are not sensitive.

    Args:
        key: The configuration key name or dotted context

    Returns:
        True if the key is considered sensitive
    """
    words = [word.upper() for word in camel_split(key)]
    if not words:
        return False
    return words[-1] in SENSITIVE_KEY_SUFFIXES or any(
        word in SENSITIVE_KEY_PATTERNS for word in words
    )


def mask_value(value: str) -> str:
    """Replace a secret with a fixed-width mask, keeping emptiness visible."""
    if value == "":
        return ""
    return MASK


def _describe(missing: list[str], context: str) -> str:
    names = ", ".join(missing)
    if context and not is_sensitive_key(context):
        return f"{names} in {context}"
    return names


def _expand_str(value: str, strict: bool, context: str, env: Mapping[str, str]) -> str:
    missing: list[str] = []

    def replace(match: re.Match[str]) -> str:
        name, fallback = match.group(1), match.group(2)
        found = env.get(name)
        if found is not None:
            return found
        if fallback is not None:
            return fallback
        missing.append(name)
        return match.group(0)

    result = _ENV_REF.sub(replace, value)
    if missing:
        if strict:
            raise EnvVarExpansionError(
                f"Missing environment variable(s): {_describe(missing, context)}"
            )
        logger.warning(f"Environment variable(s) not set: {_describe(missing, context)}")
    return result


def expand_env_vars(
    value: Any,
    strict: bool = False,
    context: str = "",
    environ: Mapping[str, str] | None = None,
) -> Any:
    """Recursively expand ``${VAR}`` references in loaded config data.

    ``${VAR:-fallback}`` substitutes ``fallback`` when ``VAR`` is unset.
    Dict keys and list positions extend ``context`` so errors point at the
    offending entry, unless the entry looks sensitive.

    Args:
        value: Parsed config data (string, dict, list, or scalar)
        strict: Raise on unset variables instead of leaving ``${VAR}`` in place
        context: Dotted location of ``value`` for messages
        environ: Mapping to read variables from (defaults to os.environ)

    Raises:
        EnvVarExpansionError: If strict and a variable without fallback is unset
    """
    env = os.environ if environ is None else environ

    if isinstance(value, str):
        return _expand_str(value, strict, context, env)
    if isinstance(value, dict):
        return {
            k: expand_env_vars(v, strict, f"{context}.{k}" if context else str(k), env)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [
            expand_env_vars(v, strict, f"{context}[{i}]", env) for i, v in enumerate(value)
        ]
    return value


__all__ = [
    "EnvVarExpansionError",
    "MASK",
    "SENSITIVE_KEY_PATTERNS",
    "expand_env_vars",
    "is_sensitive_key",
    "mask_value",
]
