"""Follow internal ``$ref`` JSON Pointers through a loaded document graph.

OpenAPI documents use ``$ref`` pointers (e.g.
``{"$ref": "#/components/pathItems/Pets"}``) to avoid repetition. Structural
validation only checks that a reference is non-empty; this module is what
actually follows one, walking the typed :class:`~oasvalidator.openapi.OpenAPI`
graph rather than the raw dictionary:

* Model fields are matched by their document key (``pathItems``) or their
  Python name (``path_items``); unknown keys fall back to ``model_extra``.
* Mapping entries are matched by key, list entries by index.
* RFC 6901 escaping is honoured (``~1`` for ``/``, ``~0`` for ``~``).

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~oasvalidator.exceptions.ReferenceResolutionError`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, RootModel

from oasvalidator.exceptions import ReferenceResolutionError
from oasvalidator.openapi import OpenAPI, PathItem


def resolve_reference(document: OpenAPI, ref: str) -> Any:
    """Return the entity an internal ``$ref`` points to.

    Args:
        document: The document the reference belongs to.
        ref: The ``$ref`` string (e.g., ``"#/components/schemas/Pet"``).

    Returns:
        The referenced entity (a model, mapping, list or scalar).

    Raises:
        ReferenceResolutionError: If the reference is external (does not
            start with ``#/``), or a pointer segment does not exist.
    """
    if not ref.startswith("#/"):
        raise ReferenceResolutionError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = document
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")
        current = _step(current, segment, ref)
    return current


def resolve_path_item(document: OpenAPI, path_item: PathItem) -> PathItem:
    """Follow a Path Item's ``$ref`` chain to the Path Item that holds operations.

    A Path Item without ``$ref`` is returned unchanged.

    Raises:
        ReferenceResolutionError: If a reference cannot be followed, points
            at something other than a Path Item, or the chain loops.
    """
    seen: set[str] = set()
    current = path_item
    while current.ref is not None:
        if current.ref in seen:
            raise ReferenceResolutionError(f"Circular $ref: {current.ref}")
        seen.add(current.ref)
        target = resolve_reference(document, current.ref)
        if not isinstance(target, PathItem):
            raise ReferenceResolutionError(
                f"$ref {current.ref} does not point to a Path Item "
                f"(got {type(target).__name__})"
            )
        current = target
    return current


def _step(current: Any, segment: str, ref: str) -> Any:
    """Descend one pointer segment from *current*."""
    if isinstance(current, RootModel):
        current = current.root

    if isinstance(current, BaseModel):
        for name, info in type(current).model_fields.items():
            if segment in (info.alias, name):
                value = getattr(current, name)
                if value is None:
                    break
                return value
        else:
            extra = current.model_extra or {}
            if segment in extra:
                return extra[segment]
        raise ReferenceResolutionError(
            f"Cannot resolve $ref '{ref}': key '{segment}' not found at path"
        )

    if isinstance(current, dict):
        if segment not in current:
            raise ReferenceResolutionError(
                f"Cannot resolve $ref '{ref}': key '{segment}' not found at path"
            )
        return current[segment]

    if isinstance(current, list):
        try:
            return current[int(segment)]
        except (ValueError, IndexError) as exc:
            raise ReferenceResolutionError(
                f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
            ) from exc

    raise ReferenceResolutionError(
        f"Cannot resolve $ref '{ref}': cannot navigate into {type(current).__name__}"
    )
