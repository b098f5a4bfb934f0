"""Exception hierarchy for oasvalidator.

All exceptions inherit from :class:`OASValidatorError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`oasvalidator.exit_codes`.
The top-level error handler in :func:`oasvalidator.app.main` catches
``OASValidatorError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    OASValidatorError (exit 1)
    +-- InvalidUsageError            (exit 2)
    +-- ConfigError                  (exit 1)
    +-- SpecParseError               (exit 7)
    +-- StructuralError              (exit 8)
    |   +-- ReferenceError_
    |   +-- DuplicateOperationIdError
    +-- ReferenceResolutionError     (exit 8)
    +-- RequestValidationError       (exit 9)
        +-- UndefinedPathError
        +-- UnsupportedMethodError
        +-- OperationNotAllowedError
        +-- RequestCheckError
"""

from __future__ import annotations

from typing import Optional

from oasvalidator.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_REQUEST_INVALID,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_STRUCTURAL_ERROR,
)


class OASValidatorError(Exception):
    """Base exception for all oasvalidator errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`oasvalidator.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(OASValidatorError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(OASValidatorError):
    """Raised for configuration problems (invalid JSON, failed model validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecParseError(OASValidatorError):
    """Raised when an OpenAPI document cannot be read, parsed or deserialised."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class StructuralError(OASValidatorError):
    """Raised when a loaded document violates a structural invariant.

    Composite entities re-raise a failing child's error through
    :meth:`within`, which prefixes the message with the child's field name
    and records it in :attr:`location`, producing messages such as
    ``invalid Info: title is required``.

    Args:
        message: Description of the violation.
        location: Field trail from the outermost entity to the failing one.
    """

    exit_code = EXIT_STRUCTURAL_ERROR

    def __init__(self, message: str, location: Optional[list[str]] = None):
        super().__init__(message)
        self.location: list[str] = list(location or [])

    def within(self, field: str) -> StructuralError:
        """Return a copy of this error nested under *field*."""
        return type(self)(f"invalid {field}: {self}", [field, *self.location])


class ReferenceError_(StructuralError):
    """Raised when a Reference Object has no ``$ref`` value.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ReferenceError``.
    """


class DuplicateOperationIdError(StructuralError):
    """Raised when two operations in one document share an ``operationId``."""


class ReferenceResolutionError(OASValidatorError):
    """Raised when an internal ``$ref`` cannot be followed, or the ref is external."""

    exit_code = EXIT_STRUCTURAL_ERROR


class RequestValidationError(OASValidatorError):
    """Base class for requests that the document does not permit."""

    exit_code = EXIT_REQUEST_INVALID


class UndefinedPathError(RequestValidationError):
    """Raised when no path template matches the request path."""

    def __init__(self, path: str):
        super().__init__(f"undefined path: {path!r}")
        self.path = path


class UnsupportedMethodError(RequestValidationError):
    """Raised when a method token is not one of the eight OpenAPI verbs.

    When *path* is given the message names the path being resolved.
    """

    def __init__(self, method: str, path: Optional[str] = None):
        message = f"unsupported method {method!r}"
        if path is not None:
            message = f"get operation for path {path!r}: {message}"
        super().__init__(message)
        self.method = method
        self.path = path


class OperationNotAllowedError(RequestValidationError):
    """Raised when the verb is recognised but the path item declares no operation for it."""

    def __init__(self, method: str, path: str):
        super().__init__(f"unsupported method {method!r} for path {path!r}")
        self.method = method
        self.path = path


class RequestCheckError(RequestValidationError):
    """Raised by a :class:`~oasvalidator.validator.RequestCheck` that rejects a request."""
