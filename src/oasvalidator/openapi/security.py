"""Security scheme declarations.

These models describe the schemes a document declares; enforcing them on
requests is out of scope. Validation checks only that each scheme carries
the fields its ``type`` needs.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from oasvalidator.exceptions import StructuralError
from oasvalidator.openapi.base import (
    EntityKind,
    OpenAPIObject,
    classify,
    require_single_shape,
    validate_child,
    validate_reference,
)

SecurityRequirement = dict[str, list[str]]
"""Scheme name mapped to the scopes (or roles) the operation needs."""

SCHEME_TYPES = ("apiKey", "http", "mutualTLS", "oauth2", "openIdConnect")
API_KEY_LOCATIONS = ("query", "header", "cookie")


class OAuthFlow(OpenAPIObject):
    """Configuration of one OAuth 2.0 flow.

    Which URLs are required depends on the flow; the owning
    :class:`OAuthFlows` checks that, since the flow does not know its own name.
    """

    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    refresh_url: Optional[str] = None
    scopes: Optional[dict[str, str]] = None

    def validate(self) -> None:  # type: ignore[override]
        if self.scopes is None:
            raise StructuralError("scopes is required")


_FLOW_REQUIREMENTS = {
    "implicit": ("authorization_url",),
    "password": ("token_url",),
    "client_credentials": ("token_url",),
    "authorization_code": ("authorization_url", "token_url"),
}


class OAuthFlows(OpenAPIObject):
    """The OAuth flows supported by an ``oauth2`` scheme."""

    implicit: Optional[OAuthFlow] = None
    password: Optional[OAuthFlow] = None
    client_credentials: Optional[OAuthFlow] = None
    authorization_code: Optional[OAuthFlow] = None

    def validate(self) -> None:  # type: ignore[override]
        for flow_name, required in _FLOW_REQUIREMENTS.items():
            flow: Optional[OAuthFlow] = getattr(self, flow_name)
            if flow is None:
                continue
            label = OAuthFlows.model_fields[flow_name].alias or flow_name
            for attr in required:
                if not getattr(flow, attr):
                    alias = OAuthFlow.model_fields[attr].alias or attr
                    raise StructuralError(f"{alias} is required").within(label)
            validate_child(label, flow)


class SecurityScheme(OpenAPIObject):
    """A Security Scheme Object or a reference to one."""

    ref: Optional[str] = Field(default=None, alias="$ref")
    type: str = ""
    description: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = Field(default=None, alias="in")
    scheme: Optional[str] = None
    bearer_format: Optional[str] = None
    flows: Optional[OAuthFlows] = None
    open_id_connect_url: Optional[str] = None

    @property
    def kind(self) -> EntityKind:
        return classify(bool(self.type), self.ref is not None)

    def validate(self) -> None:  # type: ignore[override]
        kind = self.kind
        require_single_shape(kind, "security scheme")
        if kind is EntityKind.REFERENCE:
            validate_reference(self.ref)
            return
        if self.type not in SCHEME_TYPES:
            raise StructuralError(
                f"type must be one of {', '.join(SCHEME_TYPES)}, got {self.type!r}"
            )
        if self.type == "apiKey":
            if not self.name:
                raise StructuralError("name is required for apiKey schemes")
            if self.location not in API_KEY_LOCATIONS:
                raise StructuralError(
                    'possible values of in are "query", "header" or "cookie"'
                )
        elif self.type == "http":
            if not self.scheme:
                raise StructuralError("scheme is required for http schemes")
        elif self.type == "oauth2":
            if self.flows is None:
                raise StructuralError("flows is required for oauth2 schemes")
            validate_child("flows", self.flows)
        elif self.type == "openIdConnect":
            if not self.open_id_connect_url:
                raise StructuralError(
                    "openIdConnectUrl is required for openIdConnect schemes"
                )
