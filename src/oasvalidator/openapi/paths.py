"""Paths, Path Items, Operations and everything an Operation owns.

This module holds the two pieces of request-time logic in the graph:

* :meth:`Paths.match` / :meth:`Paths.get` -- the path resolver. An exact
  key wins outright; otherwise every template is compared segment by
  segment (see :mod:`oasvalidator.openapi.templates`) and the best
  candidate is picked deterministically.
* :meth:`PathItem.get_operation` -- the operation locator. An unknown verb
  is an error; a known verb without an operation is ``None``.

Operation, PathItem and Callback are mutually recursive and therefore live
in one module.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import Field, field_validator

from oasvalidator.exceptions import StructuralError, UndefinedPathError, UnsupportedMethodError
from oasvalidator.models import HTTPMethod
from oasvalidator.openapi.base import (
    EntityKind,
    ExtensibleMap,
    ExternalDocumentation,
    OpenAPIObject,
    classify,
    mutually_exclusive,
    require_single_shape,
    validate_child,
    validate_each,
    validate_reference,
)
from oasvalidator.openapi.content import Header, MediaType, Parameter, name_headers
from oasvalidator.openapi.security import SecurityRequirement
from oasvalidator.openapi.servers import Server
from oasvalidator.openapi.templates import compile_template, find_ambiguous_templates

logger = logging.getLogger(__name__)

_STATUS_KEY_RE = re.compile(r"^(default|[1-5](\d\d|XX))$")


def check_unique_parameters(parameters: Optional[list[Parameter]]) -> None:
    """Raise when two inline parameters share both ``name`` and ``in``."""
    seen: set[tuple[str, str]] = set()
    for parameter in parameters or []:
        if parameter.kind is not EntityKind.OBJECT:
            continue
        key = (parameter.name, parameter.location)
        if key in seen:
            raise StructuralError(
                f"duplicate parameter {parameter.name!r} in {parameter.location}"
            )
        seen.add(key)


class Link(OpenAPIObject):
    """A design-time link from a response to another operation, or a reference."""

    ref: Optional[str] = Field(default=None, alias="$ref")
    operation_ref: Optional[str] = None
    operation_id: Optional[str] = None
    parameters: Optional[dict[str, Any]] = None
    request_body: Any = None
    description: Optional[str] = None
    server: Optional[Server] = None

    @property
    def kind(self) -> EntityKind:
        is_object = (
            bool(self.operation_ref)
            or bool(self.operation_id)
            or self.parameters is not None
            or self.request_body is not None
            or self.server is not None
        )
        return classify(is_object, self.ref is not None)

    def validate(self) -> None:  # type: ignore[override]
        kind = self.kind
        require_single_shape(kind, "link")
        if kind is EntityKind.REFERENCE:
            validate_reference(self.ref)
            return
        mutually_exclusive(
            "operationRef", bool(self.operation_ref),
            "operationId", bool(self.operation_id),
        )
        if not self.operation_ref and not self.operation_id:
            raise StructuralError("operationRef or operationId is required")
        validate_child("server", self.server)


class Response(OpenAPIObject):
    """A single response of an operation, or a reference to one."""

    ref: Optional[str] = Field(default=None, alias="$ref")
    summary: Optional[str] = None
    description: str = ""
    headers: Optional[dict[str, Header]] = None
    content: Optional[dict[str, MediaType]] = None
    links: Optional[dict[str, Link]] = None

    @field_validator("headers", mode="before")
    @classmethod
    def name_header_entries(cls, value: Any) -> Any:
        return name_headers(value)

    @property
    def kind(self) -> EntityKind:
        is_object = (
            bool(self.description)
            or self.headers is not None
            or self.content is not None
            or self.links is not None
        )
        return classify(is_object, self.ref is not None)

    def validate(self) -> None:  # type: ignore[override]
        kind = self.kind
        if kind is EntityKind.REFERENCE:
            validate_reference(self.ref)
            return
        if kind is EntityKind.AMBIGUOUS:
            require_single_shape(kind, "response")
        if not self.description:
            raise StructuralError("description is required")
        validate_each("header", self.headers)
        validate_each("mediaType", self.content)
        validate_each("link", self.links)


class Responses(ExtensibleMap):
    """Status code (``"200"``, ``"4XX"`` or ``"default"``) mapped to a Response."""

    root: dict[str, Response]

    def __getitem__(self, status: str) -> Response:
        return self.root[status]

    def validate(self) -> None:  # type: ignore[override]
        for status, response in self.root.items():
            if not _STATUS_KEY_RE.match(status):
                raise StructuralError(
                    f"invalid response key {status!r}: expected a status code, "
                    "a range such as 4XX, or default"
                )
            validate_child(f"response {status!r}", response)


class RequestBody(OpenAPIObject):
    """A request body description, or a reference to one."""

    ref: Optional[str] = Field(default=None, alias="$ref")
    summary: Optional[str] = None
    description: Optional[str] = None
    content: Optional[dict[str, MediaType]] = None
    required: Optional[bool] = None

    @property
    def kind(self) -> EntityKind:
        is_object = self.content is not None or self.required is not None
        return classify(is_object, self.ref is not None)

    def validate(self) -> None:  # type: ignore[override]
        kind = self.kind
        if kind is EntityKind.REFERENCE:
            validate_reference(self.ref)
            return
        if kind is EntityKind.AMBIGUOUS:
            require_single_shape(kind, "request body")
        if not self.content:
            raise StructuralError("content is required")
        validate_each("mediaType", self.content)


class Operation(OpenAPIObject):
    """A single API operation on a path."""

    tags: Optional[list[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    external_docs: Optional[ExternalDocumentation] = None
    operation_id: Optional[str] = None
    parameters: Optional[list[Parameter]] = None
    request_body: Optional[RequestBody] = None
    responses: Optional[Responses] = None
    callbacks: Optional[dict[str, Callback]] = None
    deprecated: Optional[bool] = None
    security: Optional[list[SecurityRequirement]] = None
    servers: Optional[list[Server]] = None

    def validate(self) -> None:  # type: ignore[override]
        validate_child("externalDocs", self.external_docs)
        validate_each("parameter", self.parameters)
        check_unique_parameters(self.parameters)
        validate_child("request body", self.request_body)
        validate_child("responses", self.responses)
        validate_each("callback", self.callbacks)
        validate_each("server", self.servers)


class PathItem(OpenAPIObject):
    """The operations available on a single path, or a reference to a Path Item.

    ``parameters`` and ``servers`` apply to every operation of the item
    unless an operation overrides them.
    """

    ref: Optional[str] = Field(default=None, alias="$ref")
    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    servers: Optional[list[Server]] = None
    parameters: Optional[list[Parameter]] = None

    @property
    def operations(self) -> list[tuple[HTTPMethod, Operation]]:
        """The declared ``(method, operation)`` pairs, in OpenAPI field order."""
        declared = []
        for method in HTTPMethod:
            operation = getattr(self, method.value)
            if operation is not None:
                declared.append((method, operation))
        return declared

    @property
    def kind(self) -> EntityKind:
        return classify(bool(self.operations), self.ref is not None)

    def get_operation(self, method: str) -> Optional[Operation]:
        """Return the operation bound to *method*.

        Args:
            method: An HTTP method token, case-insensitive (``"GET"``,
                ``"post"``).

        Returns:
            The operation, or ``None`` when the method is a recognised
            OpenAPI verb that this path item does not declare.

        Raises:
            UnsupportedMethodError: If *method* is not one of the eight
                OpenAPI verbs.
        """
        try:
            verb = HTTPMethod(method.lower())
        except (AttributeError, ValueError):
            raise UnsupportedMethodError(method) from None
        return getattr(self, verb.value)

    def validate(self) -> None:  # type: ignore[override]
        if self.ref is not None:
            validate_reference(self.ref)
            if self.kind is EntityKind.AMBIGUOUS:
                raise StructuralError("path item ref and operations are mutually exclusive")
        for method, operation in self.operations:
            validate_child(method.value.capitalize(), operation)
        validate_each("parameter", self.parameters)
        check_unique_parameters(self.parameters)
        validate_each("server", self.servers)


class Callback(ExtensibleMap):
    """Runtime expression (``{$request.body#/url}``) mapped to a Path Item."""

    root: dict[str, PathItem]

    def __getitem__(self, expression: str) -> PathItem:
        return self.root[expression]

    def validate(self) -> None:  # type: ignore[override]
        validate_each("path item", self.root)


@dataclass(frozen=True)
class PathMatch:
    """Outcome of resolving a request path against :class:`Paths`."""

    template: str
    path_item: PathItem
    parameters: dict[str, str] = field(default_factory=dict)


class Paths(ExtensibleMap):
    """Path template mapped to the Path Item that serves it."""

    root: dict[str, PathItem]

    def __getitem__(self, template: str) -> PathItem:
        return self.root[template]

    def items(self):
        return self.root.items()

    def match(self, path: str) -> PathMatch:
        """Resolve a concrete request path to its template and Path Item.

        Concrete templates are matched before templated ones: an exact key
        is returned immediately. Otherwise every template is compared
        segment by segment and, when several match, the one with the
        smallest :attr:`~oasvalidator.openapi.templates.PathTemplate.sort_key`
        wins.

        Args:
            path: The request path, without query string (``/pets/0``).

        Returns:
            A :class:`PathMatch` holding the template, its Path Item and the
            extracted path-parameter values.

        Raises:
            UndefinedPathError: If no template matches *path*.
        """
        exact = self.root.get(path)
        if exact is not None:
            # A request for the literal "/pets/{petId}" binds petId to "{petId}".
            params = compile_template(path).match(path) or {}
            return PathMatch(template=path, path_item=exact, parameters=params)

        candidates = []
        for template, path_item in self.root.items():
            compiled = compile_template(template)
            params = compiled.match(path)
            if params is not None:
                candidates.append((compiled.sort_key, template, path_item, params))

        if not candidates:
            raise UndefinedPathError(path)

        candidates.sort(key=lambda candidate: candidate[0])
        _, template, path_item, params = candidates[0]
        if len(candidates) > 1:
            logger.debug(
                "Path %r matches %d templates, chose %r",
                path, len(candidates), template,
            )
        return PathMatch(template=template, path_item=path_item, parameters=params)

    def get(self, path: str) -> PathItem:
        """Return the Path Item whose template matches *path*.

        Unlike ``dict.get`` this never returns ``None``.

        Raises:
            UndefinedPathError: If no template matches *path*.
        """
        return self.match(path).path_item

    def validate(self) -> None:  # type: ignore[override]
        for template, path_item in self.root.items():
            if not template.startswith("/"):
                raise StructuralError(f"path {template!r} must begin with '/'")
            validate_child(f"path item {template!r}", path_item)
        for group in find_ambiguous_templates(list(self.root)):
            logger.warning("Ambiguous path templates: %s", ", ".join(group))


Operation.model_rebuild()
PathItem.model_rebuild()
Callback.model_rebuild()
Paths.model_rebuild()
