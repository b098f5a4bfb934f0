"""Document loading and reference resolution.

Typical usage::

    from oasvalidator.parser import load_document

    document = load_document("petstore.yaml")
    document.validate()

Sub-modules:

* :mod:`~oasvalidator.parser.loader` -- I/O layer (URL, file, stdin) plus
  format dispatch, OpenAPI version check and deserialisation into the
  entity graph.
* :mod:`~oasvalidator.parser.resolver` -- Following internal ``$ref``
  pointers through a loaded graph.
"""

from oasvalidator.parser.loader import (
    build_document,
    load_document,
    load_raw,
    validate_openapi_version,
)
from oasvalidator.parser.resolver import resolve_path_item, resolve_reference

__all__ = [
    "build_document",
    "load_document",
    "load_raw",
    "resolve_path_item",
    "resolve_reference",
    "validate_openapi_version",
]
