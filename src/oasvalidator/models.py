"""Pydantic models and enumerations shared across oasvalidator.

The OpenAPI entity graph itself lives in :mod:`oasvalidator.openapi`; this
module holds the small set of types used *around* it:

**Enumerations** -- :class:`HTTPMethod` (the eight operation slots of a Path
Item) and :class:`ParameterLocation` (the closed set of ``in`` values).

**Configuration models** -- serialised as JSON in the user's config directory
or in a project-local ``oasvalidator.json``: :class:`OutputConfig` and
:class:`ValidatorConfig`. See :func:`oasvalidator.config.resolve_config` for
the precedence chain.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects.

    Values are the lower-case field names used on
    :class:`~oasvalidator.openapi.paths.PathItem`.
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`ValidatorConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ValidatorConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/oasvalidator/config.json``.

    Loaded and saved by :func:`~oasvalidator.config.load_global_config` and
    :func:`~oasvalidator.config.save_global_config`. A project-local
    ``oasvalidator.json`` uses the same shape; its keys override these.
    """

    check_operation_ids: bool = Field(
        default=True,
        description="Fail document validation on duplicate operationId values",
    )
    enforce: bool = Field(
        default=False,
        description="Reject invalid requests instead of only reporting them",
    )
    rejection_status: int = Field(
        default=400,
        ge=400,
        le=599,
        description="HTTP status returned for rejected requests in enforce mode",
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
