"""Decide whether an HTTP request is permitted by an OpenAPI document.

:class:`RequestValidator` resolves a ``(method, path)`` pair in three steps:

1. Match the concrete path against the document's path templates
   (:meth:`~oasvalidator.openapi.Paths.match`).
2. Follow a ``$ref`` on the matched Path Item, if any, to the Path Item that
   holds the operations.
3. Locate the operation for the method
   (:meth:`~oasvalidator.openapi.PathItem.get_operation`).

The outcome is a :class:`RequestContext`, which is then handed to each
configured :class:`RequestCheck` in order. A check rejects a request by
raising :class:`~oasvalidator.exceptions.RequestCheckError`.

Two calling conventions are offered:

* :meth:`RequestValidator.validate_request` raises on rejection.
* :meth:`RequestValidator.check` never raises for a rejected request and
  returns a :class:`ValidationResult` instead.

Example::

    validator = RequestValidator(load_document("petstore.yaml"))
    context = validator.validate_request("GET", "/pets/42")
    context.template          # "/pets/{petId}"
    context.path_parameters   # {"petId": "42"}
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from oasvalidator.exceptions import (
    OASValidatorError,
    OperationNotAllowedError,
    ReferenceResolutionError,
    RequestCheckError,
    RequestValidationError,
    UndefinedPathError,
    UnsupportedMethodError,
)
from oasvalidator.models import ParameterLocation
from oasvalidator.openapi import EntityKind, OpenAPI, Operation, Parameter, PathItem
from oasvalidator.parser.resolver import resolve_path_item, resolve_reference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Everything known about a request once its operation has been located.

    Attributes:
        method: The request method, upper-cased (e.g. ``"GET"``).
        path: The concrete request path (e.g. ``"/pets/42"``).
        template: The path template that matched (e.g. ``"/pets/{petId}"``).
        path_parameters: Placeholder values extracted from *path*.
        path_item: The Path Item serving the template, after ``$ref``
            resolution.
        operation: The operation bound to *method*.
        parameters: Path-level and operation-level parameters merged, with
            operation-level entries overriding on ``(name, in)``.
    """

    method: str
    path: str
    template: str
    path_parameters: dict[str, str]
    path_item: PathItem
    operation: Operation
    parameters: list[Parameter] = field(default_factory=list)

    @property
    def operation_id(self) -> Optional[str]:
        """The ``operationId`` of the located operation, if declared."""
        return self.operation.operation_id


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :meth:`RequestValidator.check`.

    Attributes:
        is_valid: ``True`` when the request is permitted.
        error: The rejection, or ``None`` when the request is permitted.
        context: The resolved request, when resolution got far enough to
            locate an operation.
    """

    is_valid: bool
    error: Optional[OASValidatorError] = None
    context: Optional[RequestContext] = None

    @property
    def message(self) -> str:
        """The rejection message, or an empty string for a valid request."""
        return str(self.error) if self.error is not None else ""


class RequestCheck(ABC):
    """Base class for checks run against a resolved request.

    Subclasses implement :attr:`name` and :meth:`check`. Checks run in the
    order they were given to :class:`RequestValidator`; the first one to
    raise stops the chain.

    Example::

        class RequireOperationId(RequestCheck):
            @property
            def name(self) -> str:
                return "operation-id"

            def check(self, context):
                if not context.operation_id:
                    raise RequestCheckError("operation has no operationId")
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a short identifier used in log lines."""
        ...

    @abstractmethod
    def check(self, context: RequestContext) -> None:
        """Inspect *context* and raise to reject the request.

        Raises:
            RequestCheckError: If the request is not acceptable.
        """
        ...


class PathParametersCheck(RequestCheck):
    """Require a non-empty value for every declared path parameter."""

    @property
    def name(self) -> str:
        return "path-parameters"

    def check(self, context: RequestContext) -> None:
        for param in context.parameters:
            if param.location != ParameterLocation.PATH.value:
                continue
            if not context.path_parameters.get(param.name):
                raise RequestCheckError(
                    f"path parameter {param.name!r} has no value in "
                    f"{context.path!r} (template {context.template!r})"
                )


DEFAULT_CHECKS: tuple[type[RequestCheck], ...] = (PathParametersCheck,)


class RequestValidator:
    """Validate request method and path pairs against one document.

    The validator holds no per-request state, so a single instance may be
    shared between threads.

    Args:
        document: A loaded document. It is not re-validated here; run
            :meth:`~oasvalidator.openapi.OpenAPI.validate` first if the
            source is untrusted.
        checks: Checks to run after the operation has been located.
            Defaults to one instance of each class in :data:`DEFAULT_CHECKS`.
    """

    def __init__(
        self,
        document: OpenAPI,
        checks: Optional[Iterable[RequestCheck]] = None,
    ) -> None:
        self.document = document
        if checks is None:
            checks = [check_cls() for check_cls in DEFAULT_CHECKS]
        self.checks: list[RequestCheck] = list(checks)

    def validate_request(self, method: str, path: str) -> RequestContext:
        """Resolve *method* and *path* and run every check.

        Args:
            method: HTTP method token, case-insensitive.
            path: The request path without query string.

        Returns:
            The resolved :class:`RequestContext`.

        Raises:
            UndefinedPathError: If no path template matches *path*.
            UnsupportedMethodError: If *method* is not an OpenAPI verb.
            OperationNotAllowedError: If the matched Path Item declares no
                operation for *method*.
            RequestCheckError: If a check rejects the request.
            ReferenceResolutionError: If the Path Item or one of its
                parameters is a ``$ref`` that cannot be followed.
        """
        if self.document.paths is None:
            raise UndefinedPathError(path)
        match = self.document.paths.match(path)
        path_item = resolve_path_item(self.document, match.path_item)

        try:
            operation = path_item.get_operation(method)
        except UnsupportedMethodError:
            raise UnsupportedMethodError(method, path) from None
        if operation is None:
            raise OperationNotAllowedError(method, path)

        context = RequestContext(
            method=method.upper(),
            path=path,
            template=match.template,
            path_parameters=dict(match.parameters),
            path_item=path_item,
            operation=operation,
            parameters=self._merge_parameters(
                path_item.parameters or [], operation.parameters or []
            ),
        )
        for request_check in self.checks:
            logger.debug("Running check %s on %s %s", request_check.name, context.method, path)
            request_check.check(context)
        return context

    def check(self, method: str, path: str) -> ValidationResult:
        """Like :meth:`validate_request`, but report rejection as a value.

        Errors in the document itself (an unresolvable ``$ref``) still
        surface as an invalid result rather than an exception.
        """
        try:
            context = self.validate_request(method, path)
        except (RequestValidationError, ReferenceResolutionError) as exc:
            logger.debug("Rejected %s %s: %s", method, path, exc)
            return ValidationResult(is_valid=False, error=exc)
        return ValidationResult(is_valid=True, context=context)

    def _merge_parameters(
        self,
        path_params: Sequence[Parameter],
        op_params: Sequence[Parameter],
    ) -> list[Parameter]:
        """Merge path-level and operation-level parameters.

        Operation-level parameters override path-level parameters with the
        same name and location (``in`` field). ``$ref`` entries are
        resolved first so that they take part in the override.
        """
        resolved_path = [self._resolve_parameter(param) for param in path_params]
        resolved_op = [self._resolve_parameter(param) for param in op_params]

        op_keys = {(param.name, param.location) for param in resolved_op}
        merged = [
            param for param in resolved_path
            if (param.name, param.location) not in op_keys
        ]
        merged.extend(resolved_op)
        return merged

    def _resolve_parameter(self, param: Parameter) -> Parameter:
        seen: set[str] = set()
        current = param
        while current.kind is EntityKind.REFERENCE and current.ref is not None:
            if current.ref in seen:
                raise ReferenceResolutionError(f"Circular $ref: {current.ref}")
            seen.add(current.ref)
            target = resolve_reference(self.document, current.ref)
            if not isinstance(target, Parameter):
                raise ReferenceResolutionError(
                    f"$ref {current.ref} does not point to a Parameter "
                    f"(got {type(target).__name__})"
                )
            current = target
        return current
