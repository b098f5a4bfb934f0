"""The Components object: reusable definitions referenced from the rest of the document."""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import field_validator

from oasvalidator.exceptions import StructuralError
from oasvalidator.openapi.base import OpenAPIObject, validate_each
from oasvalidator.openapi.content import Example, Header, Parameter, name_headers
from oasvalidator.openapi.paths import Callback, Link, PathItem, RequestBody, Response
from oasvalidator.openapi.schema import Schema
from oasvalidator.openapi.security import SecurityScheme

_COMPONENT_KEY_RE = re.compile(r"^[a-zA-Z0-9.\-_]+$")

# (field, label) in the order the sections are validated.
_SECTIONS = (
    ("schemas", "schema"),
    ("responses", "response"),
    ("parameters", "parameter"),
    ("examples", "example"),
    ("request_bodies", "request body"),
    ("headers", "header"),
    ("security_schemes", "security scheme"),
    ("links", "link"),
    ("callbacks", "callback"),
    ("path_items", "path item"),
)


class Components(OpenAPIObject):
    """Named, reusable objects. Keys must match ``^[a-zA-Z0-9.\\-_]+$``."""

    schemas: Optional[dict[str, Schema]] = None
    responses: Optional[dict[str, Response]] = None
    parameters: Optional[dict[str, Parameter]] = None
    examples: Optional[dict[str, Example]] = None
    request_bodies: Optional[dict[str, RequestBody]] = None
    headers: Optional[dict[str, Header]] = None
    security_schemes: Optional[dict[str, SecurityScheme]] = None
    links: Optional[dict[str, Link]] = None
    callbacks: Optional[dict[str, Callback]] = None
    path_items: Optional[dict[str, PathItem]] = None

    @field_validator("headers", mode="before")
    @classmethod
    def name_header_entries(cls, value: Any) -> Any:
        return name_headers(value)

    def validate(self) -> None:  # type: ignore[override]
        for attr, label in _SECTIONS:
            section = getattr(self, attr)
            if not section:
                continue
            for key in section:
                if not _COMPONENT_KEY_RE.match(key):
                    raise StructuralError(
                        f"invalid {label} key {key!r}: "
                        "keys may only contain letters, digits, '.', '-' and '_'"
                    )
            validate_each(label, section)
