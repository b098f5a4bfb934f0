"""Shared building blocks for the OpenAPI entity graph.

Every OpenAPI object is a frozen Pydantic model deriving from
:class:`OpenAPIObject`. Models are deliberately lenient at construction time:
fields that OpenAPI marks as required default to an empty value so that a
malformed document still loads and :meth:`OpenAPIObject.validate` can report
*what* is wrong, instead of the loader failing on the first missing key.

Composite entities validate their children through :func:`validate_child`
and :func:`validate_each`, which re-raise a child's
:class:`~oasvalidator.exceptions.StructuralError` nested under the child's
field name (``invalid Info: title is required``).

Object-or-reference entities (Parameter, Example, Link, PathItem, Response,
RequestBody, ...) classify themselves with :func:`classify` into an
:class:`EntityKind`; :func:`require_single_shape` turns the two failing kinds
into errors.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, RootModel, model_validator
from pydantic.alias_generators import to_camel
from pydantic.functional_validators import ModelWrapValidatorHandler

from oasvalidator.exceptions import ReferenceError_, StructuralError


class OpenAPIObject(BaseModel):
    """Base class for every entity in the document graph.

    Field names are snake_case; camelCase document keys are accepted through
    the alias generator, and ``$ref``/``in``/``schema``/``not`` through
    explicit aliases. Unknown keys (``x-`` specification extensions) are kept
    in ``model_extra``. Numbers are accepted where strings are expected
    because unquoted YAML versions (``version: 1.0``) are common.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="allow",
        alias_generator=to_camel,
        coerce_numbers_to_str=True,
    )

    def validate(self) -> None:  # type: ignore[override]
        """Check this entity's structural invariants.

        The default implementation accepts everything; entities with rules
        override it.

        Raises:
            StructuralError: On the first violated invariant.
        """


class ExtensibleMap(RootModel[dict[str, Any]]):
    """Base class for the OpenAPI objects that are maps with patterned keys.

    Paths, Responses and Callback are keyed by path templates, status codes
    and runtime expressions, but may also carry ``x-`` specification
    extensions. Those keys are set aside before the entries are validated
    and are available from :attr:`extensions`; ``root`` holds the entries
    only. Subclasses narrow ``root`` to their entry type.
    """

    model_config = ConfigDict(frozen=True)

    _extensions: dict[str, Any] = PrivateAttr(default_factory=dict)

    @model_validator(mode="wrap")
    @classmethod
    def set_aside_extensions(
        cls, value: Any, handler: ModelWrapValidatorHandler[ExtensibleMap]
    ) -> ExtensibleMap:
        if not isinstance(value, dict):
            return handler(value)
        entries: dict[str, Any] = {}
        extensions: dict[str, Any] = {}
        for key, item in value.items():
            # Unquoted YAML status codes arrive as integers.
            key = str(key)
            if key.startswith("x-"):
                extensions[key] = item
            else:
                entries[key] = item
        instance = handler(entries)
        instance._extensions = extensions
        return instance

    @property
    def extensions(self) -> dict[str, Any]:
        """The ``x-`` keys of the map, with their raw values."""
        return dict(self._extensions)

    def __getitem__(self, key: str) -> Any:
        return self.root[key]

    def __contains__(self, key: object) -> bool:
        return key in self.root

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)


class EntityKind(str, enum.Enum):
    """Which shape an object-or-reference entity takes."""

    OBJECT = "object"
    REFERENCE = "reference"
    EMPTY = "empty"
    AMBIGUOUS = "ambiguous"


def classify(is_object: bool, is_reference: bool) -> EntityKind:
    """Combine two independent presence tests into an :class:`EntityKind`."""
    if is_object and is_reference:
        return EntityKind.AMBIGUOUS
    if is_reference:
        return EntityKind.REFERENCE
    if is_object:
        return EntityKind.OBJECT
    return EntityKind.EMPTY


def require_single_shape(kind: EntityKind, entity: str) -> None:
    """Raise unless *kind* is exactly one of object or reference.

    Args:
        kind: The classified shape.
        entity: Lower-case entity name used in the message (``"parameter"``).

    Raises:
        StructuralError: For :attr:`EntityKind.EMPTY` or
            :attr:`EntityKind.AMBIGUOUS`.
    """
    if kind is EntityKind.EMPTY:
        article = "an" if entity[0] in "aeiou" else "a"
        raise StructuralError(f"must be {article} {entity} object or reference")
    if kind is EntityKind.AMBIGUOUS:
        raise StructuralError(f"{entity} ref and object are mutually exclusive")


def mutually_exclusive(first: str, first_set: bool, second: str, second_set: bool) -> None:
    """Raise when both sides of a mutually-exclusive pair are present."""
    if first_set and second_set:
        raise StructuralError(f"{first} and {second} are mutually exclusive")


def validate_child(field: str, child: Union[OpenAPIObject, ExtensibleMap, bool, None]) -> None:
    """Validate *child* and nest any failure under *field*.

    ``None`` is skipped, and so are boolean schemas (``true``/``false``),
    which have no structure of their own.
    """
    if child is None or isinstance(child, bool):
        return
    try:
        child.validate()
    except StructuralError as exc:
        raise exc.within(field) from exc


def validate_each(
    field: str,
    children: Union[Mapping[str, Any], Iterable[Any], None],
) -> None:
    """Validate every entry of a mapping or sequence of entities.

    Mapping entries are labelled with their key (``invalid server variable
    'port': ...``); sequence entries with their index.
    """
    if not children:
        return
    if isinstance(children, Mapping):
        for key, child in children.items():
            validate_child(f"{field} {key!r}", child)
    else:
        for index, child in enumerate(children):
            validate_child(f"{field} [{index}]", child)


class Reference(OpenAPIObject):
    """A Reference Object: a ``$ref`` URI plus optional summary/description overrides.

    Only presence of a non-empty ``$ref`` is checked. Well-formedness and
    resolvability of the URI are a separate concern handled by
    :func:`~oasvalidator.parser.resolver.resolve_reference`.
    """

    ref: str = Field(default="", alias="$ref")
    summary: Optional[str] = None
    description: Optional[str] = None

    def validate(self) -> None:  # type: ignore[override]
        if not self.ref:
            raise ReferenceError_("ref is required")


def validate_reference(ref: Optional[str]) -> None:
    """Validate the ``$ref`` carried inline by an object-or-reference entity."""
    Reference(ref=ref or "").validate()


class ExternalDocumentation(OpenAPIObject):
    """Pointer to external documentation; ``url`` is required."""

    description: Optional[str] = None
    url: str = ""

    def validate(self) -> None:  # type: ignore[override]
        if not self.url:
            raise StructuralError("url is required")
