"""Custom exceptions and exit codes for fieldconf.

This module defines the exit codes and exception hierarchy used by the
resolution engine and the command line. Every error names the offending
field (and, where one exists, its resolved key) so that a failed pass can
be traced back to the declaration that caused it.
"""

from __future__ import annotations

from enum import IntEnum
from typing import ClassVar


class ExitCode(IntEnum):
    """Exit codes reported by the fieldconf command line.

    These codes are used for consistent error reporting and can be
    checked by calling scripts or CI systems.
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    INVALID_SPEC = 2
    MALFORMED_ANNOTATION = 3
    MISSING_VALUE = 4
    DECODE_FAILURE = 5
    BACKEND_FAILURE = 6


class FieldConfError(Exception):
    """Base exception for fieldconf errors.

    All custom exceptions in this package inherit from this class.
    Each exception type has an associated exit code for proper error reporting.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, exit_code: ExitCode | None = None) -> None:
        """Initialize the exception."""
        super().__init__(message)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> ExitCode:
        """Get the exit code for this exception."""
        if self._exit_code is not None:
            return self._exit_code
        return self.__class__._default_exit_code


class InvalidSpecError(FieldConfError):
    """The configuration target is not a dataclass instance.

    Raised when:
    - A dataclass type is passed instead of an instance
    - A non-dataclass object (dict, str, None, ...) is passed
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.INVALID_SPEC


class MalformedAnnotationError(FieldConfError):
    """A field annotation does not follow the tag grammar.

    Raised when:
    - A ``key:value`` token has an empty value
    - A ``list(...)``/``map(...)`` default is not closed
    - A nested dataclass contains a malformed annotation
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.MALFORMED_ANNOTATION

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        exit_code: ExitCode | None = None,
    ) -> None:
        super().__init__(message, exit_code)
        self.field_name = field_name


class MissingRequiredValueError(FieldConfError):
    """No source produced a value for a required field.

    Attributes:
        field_name: Declared attribute name of the field
        key: Resolved lookup key of the field
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.MISSING_VALUE

    def __init__(
        self,
        field_name: str,
        key: str,
        message: str | None = None,
        exit_code: ExitCode | None = None,
    ) -> None:
        if message is None:
            message = f"required key ({field_name},{key}) missing value"
        super().__init__(message, exit_code)
        self.field_name = field_name
        self.key = key


class DecodeError(FieldConfError):
    """A raw value could not be converted into the field's type.

    Attributes:
        field_name: Declared attribute name of the destination
        value: The offending raw string
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.DECODE_FAILURE

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        value: str | None = None,
        exit_code: ExitCode | None = None,
    ) -> None:
        super().__init__(message, exit_code)
        self.field_name = field_name
        self.value = value


class BackendError(FieldConfError):
    """An external collaborator (file, flag set, parameter store) failed.

    Attributes:
        backend: Short name of the failing backend
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.BACKEND_FAILURE

    def __init__(
        self,
        message: str,
        backend: str = "",
        exit_code: ExitCode | None = None,
    ) -> None:
        super().__init__(message, exit_code)
        self.backend = backend


class NotFoundError(FieldConfError):
    """A directly requested environment variable is not set."""

    _default_exit_code: ClassVar[ExitCode] = ExitCode.MISSING_VALUE


class ResolutionErrors(FieldConfError):
    """Every field failure collected by an aggregating resolution pass.

    Attributes:
        errors: The individual field errors, in declaration order
    """

    def __init__(self, errors: list[FieldConfError]) -> None:
        lines = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"{len(errors)} field(s) failed to resolve:\n{lines}")
        self.errors = errors

    @property
    def exit_code(self) -> ExitCode:
        """Exit code of the first collected error."""
        if self.errors:
            return self.errors[0].exit_code
        return ExitCode.GENERAL_ERROR


__all__ = [
    "ExitCode",
    "FieldConfError",
    "InvalidSpecError",
    "MalformedAnnotationError",
    "MissingRequiredValueError",
    "DecodeError",
    "BackendError",
    "NotFoundError",
    "ResolutionErrors",
]
