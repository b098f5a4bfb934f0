"""Tests for Paths, PathItem, Operation and their children."""

from __future__ import annotations

from typing import Any

import pytest

from oasvalidator.exceptions import StructuralError, UndefinedPathError, UnsupportedMethodError
from oasvalidator.models import HTTPMethod
from oasvalidator.openapi import (
    Callback,
    Link,
    OpenAPI,
    PathItem,
    Paths,
    RequestBody,
    Response,
    Responses,
)


def _paths(raw: dict[str, Any]) -> Paths:
    return Paths.model_validate(raw)


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


class TestPathsMatch:
    """Resolving concrete request paths to templates."""

    def test_templated_match(self) -> None:
        paths = _paths({
            "/pets": {"get": {"operationId": "listPets"}},
            "/pets/{petId}": {"get": {"operationId": "showPetById"}},
        })
        path_item = paths.get("/pets/0")
        assert path_item is paths["/pets/{petId}"]

    def test_exact_match(self) -> None:
        paths = _paths({
            "/pets": {"get": {"operationId": "listPets"}},
            "/pets/{petId}": {"get": {"operationId": "showPetById"}},
        })
        match = paths.match("/pets")
        assert match.template == "/pets"
        assert match.parameters == {}

    def test_exact_match_on_template_key_binds_placeholders(self) -> None:
        paths = _paths({"/pets/{petId}": {"get": {"operationId": "showPetById"}}})
        match = paths.match("/pets/{petId}")
        assert match.template == "/pets/{petId}"
        assert match.parameters == {"petId": "{petId}"}

    def test_extracts_parameters(self) -> None:
        paths = _paths({"/users/{userId}/posts/{postId}": {}})
        match = paths.match("/users/7/posts/abc")
        assert match.template == "/users/{userId}/posts/{postId}"
        assert match.parameters == {"userId": "7", "postId": "abc"}

    def test_literal_template_beats_placeholder(self, petstore: OpenAPI) -> None:
        assert petstore.paths is not None
        match = petstore.paths.match("/pets/mine")
        assert match.template == "/pets/mine"

    def test_placeholder_still_matches_other_values(self, petstore: OpenAPI) -> None:
        assert petstore.paths is not None
        assert petstore.paths.match("/pets/42").template == "/pets/{petId}"

    def test_intermediate_literal_must_match(self, petstore: OpenAPI) -> None:
        assert petstore.paths is not None
        with pytest.raises(UndefinedPathError):
            petstore.paths.match("/pets/0/owners")

    def test_intermediate_placeholder_is_checked(self) -> None:
        paths = _paths({"/a/{x}/c": {}})
        assert paths.match("/a/b/c").parameters == {"x": "b"}
        with pytest.raises(UndefinedPathError):
            paths.match("/a//c")

    def test_partial_segment_placeholder(self) -> None:
        paths = _paths({"/files/{name}.json": {}})
        assert paths.match("/files/report.json").parameters == {"name": "report"}
        with pytest.raises(UndefinedPathError):
            paths.match("/files/report.xml")

    def test_more_leading_literals_preferred(self) -> None:
        paths = _paths({
            "/{kind}/{id}/edit": {},
            "/pets/{id}/{action}": {},
        })
        # Both have two placeholder segments; the longer literal prefix wins.
        assert paths.match("/pets/1/edit").template == "/pets/{id}/{action}"

    def test_fewer_placeholders_preferred(self) -> None:
        paths = _paths({
            "/{a}/{b}": {},
            "/pets/{b}": {},
        })
        assert paths.match("/pets/1").template == "/pets/{b}"

    def test_root_path(self) -> None:
        paths = _paths({"/": {}, "/{anything}": {}})
        assert paths.match("/").template == "/"

    def test_trailing_slash_is_significant(self) -> None:
        paths = _paths({"/pets": {}})
        with pytest.raises(UndefinedPathError):
            paths.match("/pets/")

    def test_undefined_path_message(self) -> None:
        paths = _paths({"/pets": {}})
        with pytest.raises(UndefinedPathError) as exc_info:
            paths.get("/owners")
        assert str(exc_info.value) == "undefined path: '/owners'"
        assert exc_info.value.path == "/owners"

    def test_mapping_protocol(self) -> None:
        paths = _paths({"/a": {}, "/b": {}})
        assert len(paths) == 2
        assert "/a" in paths
        assert list(paths) == ["/a", "/b"]


class TestPathsValidate:
    """Structural rules on the Paths map."""

    def test_key_must_start_with_slash(self) -> None:
        with pytest.raises(StructuralError, match="path 'pets' must begin with '/'"):
            _paths({"pets": {}}).validate()

    def test_path_item_errors_are_labelled(self) -> None:
        paths = _paths({"/pets": {"get": {"responses": {"200": {}}}}})
        with pytest.raises(StructuralError) as exc_info:
            paths.validate()
        assert str(exc_info.value) == (
            "invalid path item '/pets': invalid Get: invalid responses: "
            "invalid response '200': description is required"
        )


# ---------------------------------------------------------------------------
# Operation lookup
# ---------------------------------------------------------------------------


class TestPathItemGetOperation:
    """Locating the operation bound to a method."""

    @pytest.fixture
    def path_item(self) -> PathItem:
        return PathItem.model_validate({
            "get": {"operationId": "listPets"},
            "post": {"operationId": "createPet"},
        })

    def test_get(self, path_item: PathItem) -> None:
        operation = path_item.get_operation("GET")
        assert operation is path_item.get

    def test_method_is_case_insensitive(self, path_item: PathItem) -> None:
        assert path_item.get_operation("Post") is path_item.post

    def test_unknown_method(self, path_item: PathItem) -> None:
        with pytest.raises(UnsupportedMethodError, match="unsupported method 'unknown'"):
            path_item.get_operation("unknown")

    def test_connect_is_not_an_openapi_verb(self, path_item: PathItem) -> None:
        with pytest.raises(UnsupportedMethodError):
            path_item.get_operation("CONNECT")

    def test_known_method_without_operation(self) -> None:
        path_item = PathItem.model_validate({"post": {"operationId": "createPet"}})
        assert path_item.get_operation("GET") is None

    def test_operations_in_field_order(self, path_item: PathItem) -> None:
        methods = [method for method, _ in path_item.operations]
        assert methods == [HTTPMethod.GET, HTTPMethod.POST]


class TestPathItemValidate:
    """Path Item shape rules."""

    def test_reference_alone_is_valid(self) -> None:
        PathItem.model_validate({"$ref": "#/components/pathItems/Owner"}).validate()

    def test_empty_reference(self) -> None:
        with pytest.raises(StructuralError, match="ref is required"):
            PathItem.model_validate({"$ref": ""}).validate()

    def test_reference_and_operations_exclusive(self) -> None:
        path_item = PathItem.model_validate({
            "$ref": "#/components/pathItems/Owner",
            "get": {"operationId": "x"},
        })
        with pytest.raises(StructuralError, match="mutually exclusive"):
            path_item.validate()

    def test_duplicate_parameters(self) -> None:
        path_item = PathItem.model_validate({
            "parameters": [
                {"name": "id", "in": "path", "required": True},
                {"name": "id", "in": "path", "required": True},
            ]
        })
        with pytest.raises(StructuralError, match="duplicate parameter 'id' in path"):
            path_item.validate()

    def test_same_name_in_different_locations_is_allowed(self) -> None:
        PathItem.model_validate({
            "parameters": [
                {"name": "id", "in": "path", "required": True},
                {"name": "id", "in": "query"},
            ]
        }).validate()


# ---------------------------------------------------------------------------
# Responses, request bodies and links
# ---------------------------------------------------------------------------


class TestResponses:
    """Response map keys and Response objects."""

    @pytest.mark.parametrize("key", ["200", "404", "2XX", "default"])
    def test_valid_keys(self, key: str) -> None:
        Responses.model_validate({key: {"description": "ok"}}).validate()

    @pytest.mark.parametrize("key", ["600", "2xx", "20", "ok"])
    def test_invalid_keys(self, key: str) -> None:
        with pytest.raises(StructuralError, match="invalid response key"):
            Responses.model_validate({key: {"description": "ok"}}).validate()

    def test_integer_keys_from_yaml(self) -> None:
        responses = Responses.model_validate({200: {"description": "ok"}})
        assert list(responses) == ["200"]
        responses.validate()

    def test_response_reference(self) -> None:
        Response.model_validate({"$ref": "#/components/responses/NotFound"}).validate()


class TestMapExtensions:
    """x- keys on Paths, Responses and Callback objects."""

    def test_paths_extensions_set_aside(self) -> None:
        paths = _paths({
            "x-internal": True,
            "x-owner": {"team": "pets"},
            "/pets": {"get": {"operationId": "listPets"}},
        })
        assert list(paths) == ["/pets"]
        assert len(paths) == 1
        assert "x-internal" not in paths
        assert paths.extensions == {"x-internal": True, "x-owner": {"team": "pets"}}
        paths.validate()

    def test_responses_extensions_set_aside(self) -> None:
        responses = Responses.model_validate({200: {"description": "ok"}, "x-note": "hi"})
        assert list(responses) == ["200"]
        assert responses.extensions == {"x-note": "hi"}
        responses.validate()

    def test_callback_extensions_set_aside(self) -> None:
        callback = Callback.model_validate({
            "{$request.body#/url}": {"post": {"operationId": "notify"}},
            "x-retries": 3,
        })
        assert list(callback) == ["{$request.body#/url}"]
        assert callback.extensions == {"x-retries": 3}
        callback.validate()

    def test_no_extensions(self) -> None:
        assert _paths({"/pets": {}}).extensions == {}

    def test_document_with_map_extensions_is_valid(self, minimal_raw: dict[str, Any]) -> None:
        minimal_raw["paths"] = {
            "x-internal": True,
            "/pets": {
                "get": {"responses": {"200": {"description": "ok"}, "x-note": "hi"}},
            },
        }
        doc = OpenAPI.model_validate(minimal_raw)
        doc.validate()
        assert doc.paths is not None
        assert doc.paths.extensions == {"x-internal": True}
        operation = doc.paths["/pets"].get
        assert operation is not None and operation.responses is not None
        assert operation.responses.extensions == {"x-note": "hi"}


class TestRequestBody:
    """Request Body rules."""

    def test_content_required(self) -> None:
        with pytest.raises(StructuralError, match="content is required"):
            RequestBody.model_validate({"required": True}).validate()

    def test_reference(self) -> None:
        RequestBody.model_validate({"$ref": "#/components/requestBodies/Pet"}).validate()


class TestLink:
    """Link rules."""

    def test_operation_id(self) -> None:
        Link.model_validate({"operationId": "getPet"}).validate()

    def test_operation_ref_and_id_exclusive(self) -> None:
        link = Link.model_validate({"operationId": "getPet", "operationRef": "#/paths/~1pets/get"})
        with pytest.raises(StructuralError, match="operationRef and operationId are mutually exclusive"):
            link.validate()

    def test_one_target_required(self) -> None:
        link = Link.model_validate({"parameters": {"id": "$response.body#/id"}})
        with pytest.raises(StructuralError, match="operationRef or operationId is required"):
            link.validate()
