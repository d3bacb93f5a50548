"""OpenAPI Document: verifies declared document generation and the route audit.

Tests:
    - build_openapi lists every flattened route exactly once
    - Response schemas come from response_schema or response_model
    - audit_openapi flags missing, orphan and duplicate operations
"""

import pytest
from pydantic import BaseModel

from apidoc_examples.core.errors import DocsDriftError, DuplicateRouteError
from apidoc_examples.core.openapi_document import (
    OPENAPI_VERSION, audit_openapi, build_openapi, documented_operations,
    object_schema, table_tags,
)
from apidoc_examples.core.route_tree import Operation, RouteTable


class Names(BaseModel):
    names: list[str]


async def list_names():
    """List all names."""
    return Names(names=[])


async def count_names():
    return {"count": 0}


def _table() -> RouteTable:
    names = RouteTable(
        description="Name access.", tags=("names",),
    ).route(Operation(
        path="", endpoint=list_names, summary="List names", response_model=Names,
        response_description="Names found",
    )).route(Operation(
        path="/count", endpoint=count_names, summary="Count names",
        response_schema=object_schema("Count", {"count": {"type": "integer"}}),
    ))
    return RouteTable().nest("/names", names)


def _document() -> dict:
    return build_openapi(
        _table(), title="Names", version="1.2.3", description="Demo", prefix="/api",
    )


def test_document_header():
    doc = _document()
    assert doc["openapi"] == OPENAPI_VERSION
    assert doc["info"] == {"title": "Names", "version": "1.2.3", "description": "Demo"}


def test_document_paths_match_flattened_routes():
    doc = _document()
    assert sorted(documented_operations(doc)) == [
        ("GET", "/api/names"), ("GET", "/api/names/count"),
    ]


def test_operation_object_carries_route_metadata():
    op = _document()["paths"]["/api/names"]["get"]
    assert op["summary"] == "List names"
    assert op["operationId"] == "list_names"
    assert op["description"] == "List all names."
    assert op["tags"] == ["names"]
    response = op["responses"]["200"]
    assert response["description"] == "Names found"
    schema = response["content"]["application/json"]["schema"]
    assert schema["properties"]["names"]["type"] == "array"


def test_operation_without_docstring_has_no_description():
    op = _document()["paths"]["/api/names/count"]["get"]
    assert "description" not in op
    schema = op["responses"]["200"]["content"]["application/json"]["schema"]
    assert schema == {
        "title": "Count", "type": "object", "required": ["count"],
        "properties": {"count": {"type": "integer"}},
    }


def test_document_tags_come_from_described_tables():
    assert _document()["tags"] == [{"name": "names", "description": "Name access."}]
    assert table_tags(RouteTable(tags=("bare",))) == []


def test_build_openapi_propagates_duplicates():
    table = _table().nest("/names", RouteTable().route(
        Operation(path="", endpoint=list_names, summary="Again"),
    ))
    with pytest.raises(DuplicateRouteError):
        build_openapi(table, title="t", version="1")


def test_audit_passes_when_routes_match():
    audit_openapi(_document(), [("GET", "/api/names"), ("get", "/api/names/count")])


def test_audit_reports_undocumented_route():
    with pytest.raises(DocsDriftError) as info:
        audit_openapi(_document(), [
            ("GET", "/api/names"), ("GET", "/api/names/count"), ("GET", "/api/extra"),
        ])
    assert info.value.missing == ["GET /api/extra"]
    assert info.value.orphans == []


def test_audit_reports_orphan_document_entry():
    with pytest.raises(DocsDriftError) as info:
        audit_openapi(_document(), [("GET", "/api/names")])
    assert info.value.orphans == ["GET /api/names/count"]


def test_audit_reports_duplicate_registration():
    with pytest.raises(DuplicateRouteError):
        audit_openapi(_document(), [
            ("GET", "/api/names"), ("GET", "/api/names"), ("GET", "/api/names/count"),
        ])


def test_documented_operations_ignores_non_method_keys():
    doc = {"paths": {"/a": {"get": {}, "parameters": [], "summary": "x"}}}
    assert documented_operations(doc) == [("GET", "/a")]
