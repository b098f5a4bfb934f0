"""Document metadata: Info, Contact, License and Tag objects."""

from __future__ import annotations

from typing import Optional

from oasvalidator.exceptions import StructuralError
from oasvalidator.openapi.base import (
    ExternalDocumentation,
    OpenAPIObject,
    mutually_exclusive,
    validate_child,
)


class Contact(OpenAPIObject):
    """Contact information for the exposed API. No field is required."""

    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None


class License(OpenAPIObject):
    """License information; ``identifier`` (SPDX) and ``url`` are mutually exclusive."""

    name: str = ""
    identifier: Optional[str] = None
    url: Optional[str] = None

    def validate(self) -> None:  # type: ignore[override]
        if not self.name:
            raise StructuralError("name is required")
        mutually_exclusive("identifier", bool(self.identifier), "URL", bool(self.url))


class Info(OpenAPIObject):
    """Metadata about the API. ``title`` and ``version`` are required."""

    title: str = ""
    summary: Optional[str] = None
    description: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact: Optional[Contact] = None
    license: Optional[License] = None
    version: str = ""

    def validate(self) -> None:  # type: ignore[override]
        if not self.title:
            raise StructuralError("title is required")
        if not self.version:
            raise StructuralError("version is required")
        validate_child("License", self.license)


class Tag(OpenAPIObject):
    """A tag used to group operations."""

    name: str = ""
    description: Optional[str] = None
    external_docs: Optional[ExternalDocumentation] = None

    def validate(self) -> None:  # type: ignore[override]
        if not self.name:
            raise StructuralError("name is required")
        validate_child("externalDocs", self.external_docs)
