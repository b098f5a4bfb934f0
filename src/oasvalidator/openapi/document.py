"""The root OpenAPI object and whole-document checks."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional

from pydantic import Field

from oasvalidator.exceptions import DuplicateOperationIdError, StructuralError
from oasvalidator.openapi.base import (
    ExternalDocumentation,
    OpenAPIObject,
    validate_child,
    validate_each,
)
from oasvalidator.openapi.components import Components
from oasvalidator.openapi.info import Info, Tag
from oasvalidator.openapi.paths import Operation, PathItem, Paths
from oasvalidator.openapi.security import SecurityRequirement
from oasvalidator.openapi.servers import Server


def _walk_path_item(location: str, path_item: PathItem) -> Iterator[tuple[str, Operation]]:
    """Yield every operation of *path_item*, descending into callbacks."""
    for method, operation in path_item.operations:
        operation_location = f"{location} {method.value}"
        yield operation_location, operation
        for name, callback in (operation.callbacks or {}).items():
            for expression, callback_item in callback.root.items():
                yield from _walk_path_item(
                    f"{operation_location} callback {name} {expression}", callback_item
                )


class OpenAPI(OpenAPIObject):
    """The root of an OpenAPI v3 document.

    Build instances with :func:`~oasvalidator.parser.loader.load_document`
    or ``OpenAPI.model_validate(raw_dict)``. The graph is immutable once
    built and may be shared between threads.

    Example::

        doc = OpenAPI.model_validate(
            {"openapi": "3.1.0", "info": {"title": "Pets", "version": "1.0"}}
        )
        doc.validate()
        doc.check_operation_ids()
    """

    openapi: str = ""
    info: Info = Field(default_factory=Info)
    json_schema_dialect: Optional[str] = None
    servers: Optional[list[Server]] = None
    paths: Optional[Paths] = None
    webhooks: Optional[dict[str, PathItem]] = None
    components: Optional[Components] = None
    security: Optional[list[SecurityRequirement]] = None
    tags: Optional[list[Tag]] = None
    external_docs: Optional[ExternalDocumentation] = None

    def validate(self) -> None:  # type: ignore[override]
        """Check every structural invariant, stopping at the first violation.

        Traversal order: version, Info, servers, paths, webhooks,
        components, tags, external docs.

        Raises:
            StructuralError: Describing the first violation, prefixed with
                the chain of fields leading to it.
        """
        if not self.openapi:
            raise StructuralError("openapi is required")
        validate_child("Info", self.info)
        validate_each("server", self.servers)
        validate_child("paths", self.paths)
        validate_each("webhook", self.webhooks)
        validate_child("components", self.components)
        validate_each("tag", self.tags)
        names = [tag.name for tag in self.tags or []]
        if len(set(names)) != len(names):
            raise StructuralError("tag names must be unique")
        validate_child("externalDocs", self.external_docs)

    def iter_operations(self) -> Iterator[tuple[str, Operation]]:
        """Yield ``(location, operation)`` for every operation in the document.

        Covers paths, webhooks, component path items and, recursively, the
        callbacks of each operation. ``location`` is a readable trail such
        as ``"paths /pets get"``.
        """
        sources: list[tuple[str, dict[str, PathItem]]] = [
            ("paths", dict(self.paths.items()) if self.paths else {}),
            ("webhooks", self.webhooks or {}),
            ("components.pathItems", (self.components.path_items or {}) if self.components else {}),
        ]
        for section, items in sources:
            for key, path_item in items.items():
                yield from _walk_path_item(f"{section} {key}", path_item)

    def check_operation_ids(self) -> None:
        """Fail when two operations share an ``operationId``.

        Raises:
            DuplicateOperationIdError: Naming the identifier and both
                locations.
        """
        seen: dict[str, str] = {}
        for location, operation in self.iter_operations():
            operation_id = operation.operation_id
            if not operation_id:
                continue
            if operation_id in seen:
                raise DuplicateOperationIdError(
                    f"duplicate operationId {operation_id!r} at {location} "
                    f"(first declared at {seen[operation_id]})"
                )
            seen[operation_id] = location
