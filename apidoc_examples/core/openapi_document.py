"""OpenAPI Document: declared document generation and route/document consistency audit.

Invariants:
    - build_openapi() derives every path item from RouteTable.flatten(), so a
      declared document lists each operation exactly once
    - audit_openapi() passes only when routed and documented (method, path)
      pairs are identical sets and no route is registered twice
    - Service routes (index, docs UI, document) are never passed to the audit

Design Decisions:
    - Each example uses one DocsStrategy; the audit runs for both so a
      mismatch fails at app creation instead of in the docs UI
"""

from collections import Counter
from enum import Enum
from typing import Any, Iterable

from apidoc_examples.core.errors import DocsDriftError, DuplicateRouteError
from apidoc_examples.core.route_tree import ResolvedRoute, RouteTable

OPENAPI_VERSION = "3.1.0"

HTTP_METHODS = frozenset({
    "get", "put", "post", "delete", "options", "head", "patch", "trace",
})


class DocsStrategy(str, Enum):
    """Where the API document comes from."""
    REGISTRATION = "registration"   # FastAPI collects route metadata
    DECLARED = "declared"           # build_openapi() over the route table


def object_schema(title: str, properties: dict[str, Any]) -> dict[str, Any]:
    """Closed object schema with every property required."""
    return {
        "title": title,
        "type": "object",
        "required": list(properties),
        "properties": properties,
    }


def response_schema(route: ResolvedRoute) -> dict[str, Any]:
    operation = route.operation
    if operation.response_schema is not None:
        return operation.response_schema
    if operation.response_model is not None:
        return operation.response_model.model_json_schema()
    return {}


def table_tags(table: RouteTable) -> list[dict[str, str]]:
    """Tag metadata for every described table, first declaration wins."""
    tags: dict[str, dict[str, str]] = {}
    for node in table.walk_tables():
        for name in node.tags:
            if name not in tags and node.description:
                tags[name] = {"name": name, "description": node.description}
    return list(tags.values())


def build_openapi(
    table: RouteTable,
    *,
    title: str,
    version: str,
    description: str = "",
    prefix: str = "",
) -> dict[str, Any]:
    """Build the API document from route-table declarations."""
    info: dict[str, Any] = {"title": title, "version": version}
    if description:
        info["description"] = description

    paths: dict[str, dict[str, Any]] = {}
    for route in table.flatten(prefix):
        paths.setdefault(route.path, {})[route.method.lower()] = _operation_object(route)

    document: dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": info,
        "paths": paths,
    }
    tags = table_tags(table)
    if tags:
        document["tags"] = tags
    return document


def _operation_object(route: ResolvedRoute) -> dict[str, Any]:
    operation = route.operation
    item: dict[str, Any] = {
        "summary": operation.summary,
        "operationId": operation.resolved_operation_id,
        "responses": {
            "200": {
                "description": operation.response_description,
                "content": {
                    "application/json": {"schema": response_schema(route)},
                },
            },
        },
    }
    if route.tags:
        item["tags"] = list(route.tags)
    if operation.resolved_description:
        item["description"] = operation.resolved_description
    return item


def documented_operations(document: dict[str, Any]) -> list[tuple[str, str]]:
    """(METHOD, path) pairs present in a document."""
    return [
        (method.upper(), path)
        for path, item in document.get("paths", {}).items()
        for method in item
        if method in HTTP_METHODS
    ]


def audit_openapi(
    document: dict[str, Any], routes: Iterable[tuple[str, str]],
) -> None:
    """Check that routes and document describe the same operations."""
    counts = Counter((method.upper(), path) for method, path in routes)
    for (method, path), count in counts.items():
        if count > 1:
            raise DuplicateRouteError(method, path)

    documented = set(documented_operations(document))
    routed = set(counts)
    missing = sorted(f"{m} {p}" for m, p in routed - documented)
    orphans = sorted(f"{m} {p}" for m, p in documented - routed)
    if missing or orphans:
        raise DocsDriftError(missing, orphans)
