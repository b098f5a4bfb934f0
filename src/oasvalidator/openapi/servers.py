"""Server and ServerVariable objects."""

from __future__ import annotations

from typing import Optional

from oasvalidator.exceptions import StructuralError
from oasvalidator.openapi.base import OpenAPIObject, validate_each


class ServerVariable(OpenAPIObject):
    """A substitution variable for a server URL template.

    ``default`` is required. ``enum``, when given, must be non-empty and
    contain the default.
    """

    enum: Optional[list[str]] = None
    default: str = ""
    description: Optional[str] = None

    def validate(self) -> None:  # type: ignore[override]
        if not self.default:
            raise StructuralError("default is required")
        if self.enum is not None:
            if len(self.enum) == 0:
                raise StructuralError("non empty enum is required")
            if self.default not in self.enum:
                raise StructuralError(
                    f"default {self.default!r} is not one of the enum values"
                )


class Server(OpenAPIObject):
    """A server hosting the API, optionally templated with ``{variables}``."""

    url: str = ""
    description: Optional[str] = None
    variables: Optional[dict[str, ServerVariable]] = None

    def validate(self) -> None:  # type: ignore[override]
        if not self.url:
            raise StructuralError("url is required")
        validate_each("server variable", self.variables)
