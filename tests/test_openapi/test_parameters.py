"""Tests for parameters, headers, examples and media types."""

from __future__ import annotations

from typing import Any

import pytest

from oasvalidator.exceptions import ReferenceError_, StructuralError
from oasvalidator.openapi import EntityKind, Example, Header, MediaType, Parameter, Response


def _parameter(raw: dict[str, Any]) -> Parameter:
    return Parameter.model_validate(raw)


# ---------------------------------------------------------------------------
# Parameter
# ---------------------------------------------------------------------------


class TestParameterValid:
    """Parameters that pass validation."""

    def test_full_object(self) -> None:
        param = _parameter({
            "name": "petId",
            "in": "path",
            "description": "ID of pet that needs to be updated",
            "required": True,
            "schema": {"type": "string", "externalDocs": {"url": "https://foo"}},
            "examples": {"foo": {"summary": "A foo example", "value": {"bar": "baz"}}},
        })
        assert param.kind is EntityKind.OBJECT
        param.validate()

    def test_reference(self) -> None:
        param = _parameter({"$ref": "#/components/parameters/PetId", "summary": "a Pet"})
        assert param.kind is EntityKind.REFERENCE
        param.validate()

    def test_content_with_single_media_type(self) -> None:
        param = _parameter({
            "name": "filter",
            "in": "query",
            "content": {"application/json": {"schema": {"type": "object"}}},
        })
        param.validate()

    @pytest.mark.parametrize("location", ["query", "header", "path", "cookie"])
    def test_every_location_accepted(self, location: str) -> None:
        _parameter({"name": "p", "in": location}).validate()


class TestParameterInvalid:
    """Parameters that fail validation, with the reported message."""

    def test_empty_ref_with_empty_object_fields(self) -> None:
        param = _parameter({"$ref": "", "name": "", "in": ""})
        with pytest.raises(ReferenceError_, match="ref is required"):
            param.validate()

    def test_ref_and_object_together(self) -> None:
        param = _parameter({
            "$ref": "#/components/schemas/Pet",
            "name": "petId",
            "in": "path",
            "required": True,
            "schema": {"type": "string"},
        })
        assert param.kind is EntityKind.AMBIGUOUS
        with pytest.raises(StructuralError, match="parameter ref and object are mutually exclusive"):
            param.validate()

    def test_reference_with_empty_ref(self) -> None:
        param = _parameter({"$ref": "", "summary": "a Pet"})
        with pytest.raises(StructuralError, match="ref is required"):
            param.validate()

    def test_neither_shape(self) -> None:
        param = _parameter({"description": "orphan"})
        assert param.kind is EntityKind.EMPTY
        with pytest.raises(StructuralError, match="must be a parameter object or reference"):
            param.validate()

    def test_unknown_location(self) -> None:
        param = _parameter({"name": "petId", "in": "unknown", "required": True})
        with pytest.raises(StructuralError) as exc_info:
            param.validate()
        assert str(exc_info.value) == (
            'possible values of in are "query", "header", "path" or "cookie"'
        )

    def test_missing_name(self) -> None:
        param = _parameter({"in": "query"})
        with pytest.raises(StructuralError, match="name is required"):
            param.validate()

    def test_schema_external_docs_without_url(self) -> None:
        param = _parameter({
            "name": "petId",
            "in": "path",
            "required": True,
            "schema": {"externalDocs": {"url": ""}},
        })
        with pytest.raises(StructuralError) as exc_info:
            param.validate()
        assert str(exc_info.value) == "invalid schema: invalid externalDocs: url is required"

    def test_example_with_ref_and_value(self) -> None:
        param = _parameter({
            "name": "petId",
            "in": "path",
            "required": True,
            "examples": {"foo": {"$ref": "foo", "summary": "A foo example", "value": {"bar": "baz"}}},
        })
        with pytest.raises(StructuralError, match="example ref and object are mutually exclusive"):
            param.validate()

    def test_empty_example(self) -> None:
        param = _parameter({
            "name": "petId",
            "in": "path",
            "required": True,
            "examples": {"foo": {}},
        })
        with pytest.raises(StructuralError, match="invalid example 'foo': must be an example"):
            param.validate()

    def test_example_reference_with_empty_ref(self) -> None:
        param = _parameter({
            "name": "petId",
            "in": "path",
            "required": True,
            "examples": {"foo": {"$ref": "", "summary": "A foo example"}},
        })
        with pytest.raises(StructuralError, match="ref is required"):
            param.validate()

    def test_example_and_examples_exclusive(self) -> None:
        param = _parameter({
            "name": "q",
            "in": "query",
            "example": "x",
            "examples": {"a": {"value": "y"}},
        })
        with pytest.raises(StructuralError, match="example and examples are mutually exclusive"):
            param.validate()

    def test_schema_and_content_exclusive(self) -> None:
        param = _parameter({
            "name": "q",
            "in": "query",
            "schema": {"type": "string"},
            "content": {"text/plain": {}},
        })
        with pytest.raises(StructuralError, match="schema and content are mutually exclusive"):
            param.validate()

    def test_content_with_two_media_types(self) -> None:
        param = _parameter({
            "name": "q",
            "in": "query",
            "content": {"text/plain": {}, "application/json": {}},
        })
        with pytest.raises(StructuralError, match="exactly one media type"):
            param.validate()


class TestParameterRequiredness:
    """The effective ``required`` flag."""

    def test_path_parameters_are_always_required(self) -> None:
        assert _parameter({"name": "id", "in": "path"}).is_required

    def test_query_parameters_default_to_optional(self) -> None:
        assert not _parameter({"name": "q", "in": "query"}).is_required

    def test_explicit_false_is_kept_distinct_from_absent(self) -> None:
        explicit = _parameter({"name": "q", "in": "query", "required": False})
        absent = _parameter({"name": "q", "in": "query"})
        assert explicit.required is False
        assert absent.required is None


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------


class TestHeader:
    """Headers take their name from the enclosing map key."""

    def test_name_injected_from_map_key(self) -> None:
        response = Response.model_validate({
            "description": "ok",
            "headers": {"X-Rate-Limit": {"schema": {"type": "integer"}}},
        })
        assert response.headers is not None
        assert response.headers["X-Rate-Limit"].name == "X-Rate-Limit"
        response.validate()

    def test_reference_entries_are_not_named(self) -> None:
        response = Response.model_validate({
            "description": "ok",
            "headers": {"X-Trace": {"$ref": "#/components/headers/Trace"}},
        })
        assert response.headers is not None
        header = response.headers["X-Trace"]
        assert header.name == ""
        assert header.kind is EntityKind.REFERENCE
        response.validate()

    def test_header_without_name(self) -> None:
        with pytest.raises(StructuralError, match="name is required"):
            Header.model_validate({"description": "anonymous"}).validate()

    def test_header_must_not_declare_another_location(self) -> None:
        header = Header.model_validate({"name": "X-Id", "in": "query"})
        with pytest.raises(StructuralError, match='in must be "header"'):
            header.validate()


# ---------------------------------------------------------------------------
# Example and MediaType
# ---------------------------------------------------------------------------


class TestExampleAndMediaType:
    """Leaf payload description rules."""

    def test_value_and_external_value_exclusive(self) -> None:
        example = Example.model_validate({"value": 1, "externalValue": "https://x/1.json"})
        with pytest.raises(StructuralError, match="value and externalValue are mutually exclusive"):
            example.validate()

    def test_external_value_alone_is_valid(self) -> None:
        Example.model_validate({"externalValue": "https://x/1.json"}).validate()

    def test_media_type_example_and_examples_exclusive(self) -> None:
        media = MediaType.model_validate({"example": {}, "examples": {}})
        with pytest.raises(StructuralError, match="example and examples are mutually exclusive"):
            media.validate()

    def test_media_type_encoding_headers_are_validated(self) -> None:
        media = MediaType.model_validate({
            "schema": {"type": "object"},
            "encoding": {"file": {"headers": {"X-Bad": {"in": "path", "schema": {}}}}},
        })
        with pytest.raises(StructuralError, match="invalid encoding 'file'"):
            media.validate()
