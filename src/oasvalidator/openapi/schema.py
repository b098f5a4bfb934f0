"""The Schema object and its OpenAPI-specific companions.

OpenAPI carries JSON-Schema-like content in a single :class:`Schema` model.
The commonly used JSON Schema keywords (``type``, ``format``,
``properties``, ``items``, ``required``, ``maximum``, ``maxItems``, ``$ref``,
composition keywords, ...) live next to the OpenAPI additions
(``discriminator``, ``xml``, ``externalDocs`` and the deprecated inline
``example``). Any other keyword is preserved in ``model_extra``.

:attr:`Schema.kind` tells callers which shape a schema takes so that code
generating or matching payloads can branch on one value rather than probing
individual keywords. Full JSON Schema validation of payloads is not
performed anywhere in this package.
"""

from __future__ import annotations

import enum
from typing import Any, Optional, Union

from pydantic import Field

from oasvalidator.exceptions import StructuralError
from oasvalidator.openapi.base import (
    ExternalDocumentation,
    OpenAPIObject,
    validate_child,
    validate_each,
    validate_reference,
)


class Discriminator(OpenAPIObject):
    """Hint for polymorphic payloads; ``propertyName`` is required."""

    property_name: str = ""
    mapping: Optional[dict[str, str]] = None

    def validate(self) -> None:  # type: ignore[override]
        if not self.property_name:
            raise StructuralError("propertyName is required")


class XML(OpenAPIObject):
    """Fine-tuning for XML serialisation. No field is required."""

    name: Optional[str] = None
    namespace: Optional[str] = None
    prefix: Optional[str] = None
    attribute: Optional[bool] = None
    wrapped: Optional[bool] = None


class SchemaKind(str, enum.Enum):
    """The shape a :class:`Schema` takes, in order of precedence."""

    REFERENCE = "reference"
    COMPOSITION = "composition"
    ARRAY = "array"
    OBJECT = "object"
    PRIMITIVE = "primitive"
    ANY = "any"


_COMPOSITION_KEYWORDS = ("allOf", "anyOf", "oneOf")


class Schema(OpenAPIObject):
    """A Schema Object."""

    ref: Optional[str] = Field(default=None, alias="$ref")
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[Union[str, list[str]]] = None
    format: Optional[str] = None
    enum: Optional[list[Any]] = None
    default: Any = None
    nullable: Optional[bool] = None
    read_only: Optional[bool] = None
    write_only: Optional[bool] = None
    deprecated: Optional[bool] = None

    # Objects
    properties: Optional[dict[str, Union[bool, Schema]]] = None
    required: Optional[list[str]] = None
    additional_properties: Optional[Union[bool, Schema]] = None

    # Arrays
    items: Optional[Union[bool, Schema]] = None
    max_items: Optional[int] = None
    min_items: Optional[int] = None

    # Numbers and strings
    maximum: Optional[float] = None
    minimum: Optional[float] = None
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    pattern: Optional[str] = None

    # Composition
    all_of: Optional[list[Union[bool, Schema]]] = None
    any_of: Optional[list[Union[bool, Schema]]] = None
    one_of: Optional[list[Union[bool, Schema]]] = None
    not_: Optional[Union[bool, Schema]] = Field(default=None, alias="not")

    # OpenAPI additions
    discriminator: Optional[Discriminator] = None
    xml: Optional[XML] = None
    external_docs: Optional[ExternalDocumentation] = None
    example: Any = None

    @property
    def types(self) -> list[str]:
        """``type`` normalised to a list (3.1 allows ``["string", "null"]``)."""
        if self.type is None:
            return []
        if isinstance(self.type, str):
            return [self.type]
        return list(self.type)

    @property
    def kind(self) -> SchemaKind:
        """Classify this schema; see :class:`SchemaKind`."""
        if self.ref is not None:
            return SchemaKind.REFERENCE
        if self.all_of or self.any_of or self.one_of or self.not_ is not None:
            return SchemaKind.COMPOSITION
        types = self.types
        if "array" in types or (not types and self.items is not None):
            return SchemaKind.ARRAY
        if "object" in types or (
            not types
            and (self.properties is not None or self.additional_properties is not None)
        ):
            return SchemaKind.OBJECT
        if types:
            return SchemaKind.PRIMITIVE
        return SchemaKind.ANY

    def validate(self) -> None:  # type: ignore[override]
        if self.ref is not None:
            validate_reference(self.ref)
        validate_child("externalDocs", self.external_docs)
        validate_child("discriminator", self.discriminator)

        for keyword, members in self.compositions:
            if len(members) == 0:
                raise StructuralError(f"{keyword} must be a non-empty list")

        if self.required is not None and len(set(self.required)) != len(self.required):
            raise StructuralError("required contains duplicate property names")

        validate_each("property", self.properties)
        validate_child("items", self.items)
        validate_child("additionalProperties", self.additional_properties)
        for keyword, members in self.compositions:
            validate_each(keyword, members)
        validate_child("not", self.not_)

    @property
    def compositions(self) -> list[tuple[str, list[Union[bool, Schema]]]]:
        """``(keyword, members)`` for each of allOf/anyOf/oneOf that is set."""
        return [
            (keyword, members)
            for keyword, members in zip(
                _COMPOSITION_KEYWORDS, (self.all_of, self.any_of, self.one_of)
            )
            if members is not None
        ]


Schema.model_rebuild()
