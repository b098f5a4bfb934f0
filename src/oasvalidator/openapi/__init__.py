"""The OpenAPI v3 entity graph.

One frozen Pydantic model per OpenAPI object kind, each with a
``validate()`` method that raises
:class:`~oasvalidator.exceptions.StructuralError` on the first broken
invariant. Build a graph from a raw document with
``OpenAPI.model_validate(raw)`` or
:func:`~oasvalidator.parser.loader.load_document`.

Sub-modules:

* :mod:`~oasvalidator.openapi.base` -- shared base class, shape
  classification and child-validation helpers.
* :mod:`~oasvalidator.openapi.info`, :mod:`~oasvalidator.openapi.servers`,
  :mod:`~oasvalidator.openapi.schema`, :mod:`~oasvalidator.openapi.content`,
  :mod:`~oasvalidator.openapi.security`,
  :mod:`~oasvalidator.openapi.components` -- the leaf and mid-level objects.
* :mod:`~oasvalidator.openapi.paths` -- Paths, PathItem, Operation and the
  request-time path/operation lookups.
* :mod:`~oasvalidator.openapi.templates` -- path-template compilation and
  matching.
* :mod:`~oasvalidator.openapi.document` -- the root object.
"""

from oasvalidator.openapi.base import (
    EntityKind,
    ExternalDocumentation,
    OpenAPIObject,
    Reference,
)
from oasvalidator.openapi.components import Components
from oasvalidator.openapi.content import Encoding, Example, Header, MediaType, Parameter
from oasvalidator.openapi.document import OpenAPI
from oasvalidator.openapi.info import Contact, Info, License, Tag
from oasvalidator.openapi.paths import (
    Callback,
    Link,
    Operation,
    PathItem,
    PathMatch,
    Paths,
    RequestBody,
    Response,
    Responses,
)
from oasvalidator.openapi.schema import XML, Discriminator, Schema, SchemaKind
from oasvalidator.openapi.security import (
    OAuthFlow,
    OAuthFlows,
    SecurityRequirement,
    SecurityScheme,
)
from oasvalidator.openapi.servers import Server, ServerVariable

__all__ = [
    "Callback",
    "Components",
    "Contact",
    "Discriminator",
    "Encoding",
    "EntityKind",
    "Example",
    "ExternalDocumentation",
    "Header",
    "Info",
    "License",
    "Link",
    "MediaType",
    "OAuthFlow",
    "OAuthFlows",
    "OpenAPI",
    "OpenAPIObject",
    "Operation",
    "Parameter",
    "PathItem",
    "PathMatch",
    "Paths",
    "Reference",
    "RequestBody",
    "Response",
    "Responses",
    "Schema",
    "SchemaKind",
    "SecurityRequirement",
    "SecurityScheme",
    "Server",
    "ServerVariable",
    "Tag",
    "XML",
]
