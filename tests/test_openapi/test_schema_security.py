"""Tests for Schema, SecurityScheme and Components."""

from __future__ import annotations

from typing import Any

import pytest

from oasvalidator.exceptions import StructuralError
from oasvalidator.openapi import Components, Schema, SchemaKind, SecurityScheme


def _schema(raw: dict[str, Any]) -> Schema:
    return Schema.model_validate(raw)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class TestSchemaKind:
    """Classification of schema shapes."""

    def test_reference(self) -> None:
        assert _schema({"$ref": "#/components/schemas/Pet"}).kind is SchemaKind.REFERENCE

    def test_composition(self) -> None:
        assert _schema({"oneOf": [{"type": "string"}]}).kind is SchemaKind.COMPOSITION

    def test_array_from_items_alone(self) -> None:
        assert _schema({"items": {"type": "string"}}).kind is SchemaKind.ARRAY

    def test_object_from_properties_alone(self) -> None:
        assert _schema({"properties": {"id": {}}}).kind is SchemaKind.OBJECT

    def test_primitive(self) -> None:
        assert _schema({"type": "integer"}).kind is SchemaKind.PRIMITIVE

    def test_type_list(self) -> None:
        schema = _schema({"type": ["string", "null"]})
        assert schema.types == ["string", "null"]
        assert schema.kind is SchemaKind.PRIMITIVE

    def test_any(self) -> None:
        assert _schema({}).kind is SchemaKind.ANY


class TestSchemaValidate:
    """Structural rules on schemas, including recursion."""

    def test_nested_schema_is_valid(self) -> None:
        _schema({
            "type": "object",
            "required": ["id"],
            "properties": {
                "id": {"type": "integer"},
                "tags": {"type": "array", "items": {"type": "string"}},
            },
            "additionalProperties": False,
        }).validate()

    def test_empty_composition(self) -> None:
        with pytest.raises(StructuralError, match="allOf must be a non-empty list"):
            _schema({"allOf": []}).validate()

    def test_duplicate_required(self) -> None:
        with pytest.raises(StructuralError, match="duplicate property names"):
            _schema({"required": ["id", "id"]}).validate()

    def test_discriminator_property_name_required(self) -> None:
        schema = _schema({"oneOf": [{"type": "string"}], "discriminator": {"mapping": {}}})
        with pytest.raises(StructuralError, match="invalid discriminator: propertyName is required"):
            schema.validate()

    def test_error_inside_property(self) -> None:
        schema = _schema({"properties": {"owner": {"externalDocs": {}}}})
        with pytest.raises(StructuralError) as exc_info:
            schema.validate()
        assert str(exc_info.value) == (
            "invalid property 'owner': invalid externalDocs: url is required"
        )

    def test_error_inside_composition_member(self) -> None:
        schema = _schema({"anyOf": [{"type": "string"}, {"$ref": ""}]})
        with pytest.raises(StructuralError, match=r"invalid anyOf \[1\]: ref is required"):
            schema.validate()

    def test_error_inside_additional_properties(self) -> None:
        schema = _schema({"additionalProperties": {"required": ["a", "a"]}})
        with pytest.raises(StructuralError, match="invalid additionalProperties"):
            schema.validate()

    def test_not_keyword(self) -> None:
        schema = _schema({"not": {"allOf": []}})
        with pytest.raises(StructuralError, match="invalid not: allOf must be a non-empty list"):
            schema.validate()


class TestBooleanSubschemas:
    """JSON Schema 2020-12 allows `true` and `false` wherever a subschema goes."""

    def test_properties_and_items(self) -> None:
        schema = _schema({"properties": {"a": True, "b": {"type": "string"}}, "items": False})
        assert schema.properties is not None
        assert schema.properties["a"] is True
        assert isinstance(schema.properties["b"], Schema)
        assert schema.items is False
        assert schema.kind is SchemaKind.ARRAY
        schema.validate()

    def test_compositions_and_not(self) -> None:
        schema = _schema({"anyOf": [True, {"type": "integer"}], "not": False})
        assert schema.any_of is not None
        assert schema.any_of[0] is True
        assert schema.not_ is False
        assert schema.kind is SchemaKind.COMPOSITION
        schema.validate()

    def test_member_index_kept_after_boolean(self) -> None:
        schema = _schema({"oneOf": [False, {"$ref": ""}]})
        with pytest.raises(StructuralError, match=r"invalid oneOf \[1\]: ref is required"):
            schema.validate()

    def test_in_components(self) -> None:
        components = Components.model_validate({
            "schemas": {"Any": {"properties": {"a": True}, "items": False}},
        })
        components.validate()


# ---------------------------------------------------------------------------
# SecurityScheme
# ---------------------------------------------------------------------------


class TestSecurityScheme:
    """Per-type security scheme rules."""

    def test_api_key(self) -> None:
        SecurityScheme.model_validate({"type": "apiKey", "name": "X-API-Key", "in": "header"}).validate()

    def test_api_key_requires_name(self) -> None:
        scheme = SecurityScheme.model_validate({"type": "apiKey", "in": "header"})
        with pytest.raises(StructuralError, match="name is required for apiKey schemes"):
            scheme.validate()

    def test_api_key_location_cannot_be_path(self) -> None:
        scheme = SecurityScheme.model_validate({"type": "apiKey", "name": "k", "in": "path"})
        with pytest.raises(StructuralError, match="possible values of in"):
            scheme.validate()

    def test_http_requires_scheme(self) -> None:
        with pytest.raises(StructuralError, match="scheme is required"):
            SecurityScheme.model_validate({"type": "http"}).validate()

    def test_unknown_type(self) -> None:
        with pytest.raises(StructuralError, match="type must be one of"):
            SecurityScheme.model_validate({"type": "kerberos"}).validate()

    def test_oauth2_flow_urls(self) -> None:
        scheme = SecurityScheme.model_validate({
            "type": "oauth2",
            "flows": {"authorizationCode": {"tokenUrl": "https://t", "scopes": {}}},
        })
        with pytest.raises(StructuralError) as exc_info:
            scheme.validate()
        assert str(exc_info.value) == (
            "invalid flows: invalid authorizationCode: authorizationUrl is required"
        )

    def test_oauth2_flow_scopes_required(self) -> None:
        scheme = SecurityScheme.model_validate({
            "type": "oauth2",
            "flows": {"clientCredentials": {"tokenUrl": "https://t"}},
        })
        with pytest.raises(StructuralError, match="scopes is required"):
            scheme.validate()

    def test_open_id_connect(self) -> None:
        scheme = SecurityScheme.model_validate({"type": "openIdConnect"})
        with pytest.raises(StructuralError, match="openIdConnectUrl is required"):
            scheme.validate()

    def test_reference(self) -> None:
        SecurityScheme.model_validate({"$ref": "#/components/securitySchemes/key"}).validate()


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


class TestComponents:
    """Component key pattern and per-section validation."""

    def test_valid_keys(self) -> None:
        Components.model_validate({
            "schemas": {"Pet.v1": {}, "pet-list_2": {}},
        }).validate()

    def test_invalid_key(self) -> None:
        components = Components.model_validate({"parameters": {"pet id": {"name": "id", "in": "path"}}})
        with pytest.raises(StructuralError, match="invalid parameter key 'pet id'"):
            components.validate()

    def test_entries_are_validated(self) -> None:
        components = Components.model_validate({"responses": {"NotFound": {}}})
        with pytest.raises(StructuralError, match="invalid response 'NotFound': description is required"):
            components.validate()

    def test_header_names_come_from_keys(self) -> None:
        components = Components.model_validate({"headers": {"X-Trace": {"schema": {"type": "string"}}}})
        assert components.headers is not None
        assert components.headers["X-Trace"].name == "X-Trace"
        components.validate()
