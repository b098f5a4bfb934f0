"""Parameters, headers and payload descriptions.

Parameter, Header, MediaType, Encoding and Example are defined together
because they are mutually recursive: a Parameter may describe its value
through ``content`` (MediaType), a MediaType's Encoding carries Headers, and a
Header is a Parameter restricted to the ``header`` location.

Parameter and Example are *object-or-reference* entities. Their
:attr:`kind` property tests each shape independently; validation accepts
exactly one.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator

from oasvalidator.exceptions import StructuralError
from oasvalidator.models import ParameterLocation
from oasvalidator.openapi.base import (
    EntityKind,
    OpenAPIObject,
    classify,
    mutually_exclusive,
    require_single_shape,
    validate_child,
    validate_each,
    validate_reference,
)
from oasvalidator.openapi.schema import Schema

_LOCATIONS_MESSAGE = 'possible values of in are "query", "header", "path" or "cookie"'


def name_headers(headers: Any) -> Any:
    """Copy each header map key into the entry's ``name`` when it has none.

    Header objects do not carry their own name in a document; the enclosing
    map key supplies it. Reference entries are left untouched.
    """
    if not isinstance(headers, dict):
        return headers
    named = {}
    for key, value in headers.items():
        if isinstance(value, dict) and "$ref" not in value and not value.get("name"):
            value = {**value, "name": key}
        named[key] = value
    return named


class Example(OpenAPIObject):
    """An Example Object or a reference to one.

    The object shape carries ``value`` or ``externalValue`` (never both).
    """

    ref: Optional[str] = Field(default=None, alias="$ref")
    summary: Optional[str] = None
    description: Optional[str] = None
    value: Any = None
    external_value: Optional[str] = None

    @property
    def kind(self) -> EntityKind:
        return classify(
            self.value is not None or bool(self.external_value),
            self.ref is not None,
        )

    def validate(self) -> None:  # type: ignore[override]
        kind = self.kind
        require_single_shape(kind, "example")
        if kind is EntityKind.REFERENCE:
            validate_reference(self.ref)
            return
        mutually_exclusive(
            "value", self.value is not None, "externalValue", bool(self.external_value)
        )


class Encoding(OpenAPIObject):
    """Serialisation rules for one property of a multipart or form body."""

    content_type: Optional[str] = None
    headers: Optional[dict[str, Header]] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    allow_reserved: Optional[bool] = None

    @field_validator("headers", mode="before")
    @classmethod
    def name_header_entries(cls, value: Any) -> Any:
        return name_headers(value)

    def validate(self) -> None:  # type: ignore[override]
        validate_each("header", self.headers)


class MediaType(OpenAPIObject):
    """Schema and examples for one media type of a body or parameter."""

    schema_: Optional[Schema] = Field(default=None, alias="schema")
    example: Any = None
    examples: Optional[dict[str, Example]] = None
    encoding: Optional[dict[str, Encoding]] = None

    def validate(self) -> None:  # type: ignore[override]
        validate_child("schema", self.schema_)
        mutually_exclusive(
            "example", self.example is not None, "examples", self.examples is not None
        )
        validate_each("example", self.examples)
        validate_each("encoding", self.encoding)


class Parameter(OpenAPIObject):
    """A Parameter Object or a reference to one.

    The object shape is recognised by any of ``name``, ``in``, ``required``,
    ``deprecated`` or ``allowEmptyValue``; the reference shape by ``$ref`` or
    a reference ``summary``.
    """

    ref: Optional[str] = Field(default=None, alias="$ref")
    summary: Optional[str] = None
    name: str = ""
    location: str = Field(default="", alias="in")
    description: Optional[str] = None
    required: Optional[bool] = None
    deprecated: Optional[bool] = None
    allow_empty_value: Optional[bool] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    allow_reserved: Optional[bool] = None
    schema_: Optional[Schema] = Field(default=None, alias="schema")
    example: Any = None
    examples: Optional[dict[str, Example]] = None
    content: Optional[dict[str, MediaType]] = None

    @property
    def kind(self) -> EntityKind:
        is_object = (
            bool(self.name)
            or bool(self.location)
            or self.required is not None
            or bool(self.deprecated)
            or bool(self.allow_empty_value)
        )
        is_reference = self.ref is not None or self.summary is not None
        return classify(is_object, is_reference)

    @property
    def is_required(self) -> bool:
        """Effective requiredness: path parameters are always required."""
        return bool(self.required) or self.location == ParameterLocation.PATH.value

    def validate(self) -> None:  # type: ignore[override]
        kind = self.kind
        require_single_shape(kind, "parameter")
        if kind is EntityKind.REFERENCE:
            validate_reference(self.ref)
            return
        if self.location not in {loc.value for loc in ParameterLocation}:
            raise StructuralError(_LOCATIONS_MESSAGE)
        if not self.name:
            raise StructuralError("name is required")
        self._validate_value_description()

    def _validate_value_description(self) -> None:
        """Rules shared by parameters and headers: schema, examples and content."""
        validate_child("schema", self.schema_)
        mutually_exclusive(
            "example", self.example is not None, "examples", self.examples is not None
        )
        validate_each("example", self.examples)
        mutually_exclusive(
            "schema", self.schema_ is not None, "content", self.content is not None
        )
        if self.content is not None:
            if len(self.content) != 1:
                raise StructuralError("content must contain exactly one media type")
            validate_each("content", self.content)


class Header(Parameter):
    """A Header Object: a Parameter whose location is fixed to ``header``.

    ``name`` comes from the enclosing map key (see :func:`name_headers`) but
    is still required on the entity itself.
    """

    @property
    def kind(self) -> EntityKind:
        is_object = (
            bool(self.name)
            or self.schema_ is not None
            or self.content is not None
        )
        return classify(is_object, self.ref is not None)

    def validate(self) -> None:  # type: ignore[override]
        kind = self.kind
        if kind is EntityKind.REFERENCE:
            validate_reference(self.ref)
            return
        if kind is EntityKind.AMBIGUOUS:
            require_single_shape(kind, "header")
        # An empty header is reported as a missing name.
        if not self.name:
            raise StructuralError("name is required")
        if self.location and self.location != ParameterLocation.HEADER.value:
            raise StructuralError(f'in must be "header", got {self.location!r}')
        self._validate_value_description()


Encoding.model_rebuild()
MediaType.model_rebuild()
Parameter.model_rebuild()
Header.model_rebuild()
