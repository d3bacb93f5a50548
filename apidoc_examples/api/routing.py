"""Routing: mount route tables on FastAPI apps under one of the two docs strategies.

Invariants:
    - Registration mounting nests one APIRouter per RouteTable and leaves the
      document to FastAPI; declared mounting registers flattened routes hidden
      from FastAPI's generator
    - Both return the (METHOD, path) of every registration they make, in
      registration order and with repeats kept, for the startup audit
    - On a duplicate-free table both produce RouteTable.flatten(prefix)

Design Decisions:
    - Registrations are recorded while routers are built, not read back from
      app.routes, whose layout after include_router varies across FastAPI releases
"""

from typing import Any

from fastapi import APIRouter, FastAPI

from apidoc_examples.core.route_tree import (
    ROOT, Operation, RouteTable, join_path, normalize_segment,
)

Registration = tuple[str, str]


def route_options(operation: Operation, include_in_schema: bool) -> dict[str, Any]:
    """Keyword arguments for add_api_route() describing one operation."""
    options: dict[str, Any] = {
        "methods": [operation.method.upper()],
        "summary": operation.summary,
        "description": operation.resolved_description,
        "response_description": operation.response_description,
        # Explicit None keeps FastAPI from inferring a model from annotations.
        "response_model": operation.response_model,
        "operation_id": operation.resolved_operation_id,
        "name": operation.resolved_operation_id,
        "include_in_schema": include_in_schema,
    }
    if operation.response_schema is not None:
        options["responses"] = {
            200: {"content": {"application/json": {"schema": operation.response_schema}}},
        }
    return options


def build_router(
    table: RouteTable,
    prefix: str = "",
    registered: list[Registration] | None = None,
    parent: str = "",
) -> APIRouter:
    """One APIRouter per table, children included under their own prefixes.

    Every route added is appended to `registered` with its absolute path;
    `parent` is the absolute prefix the router will be included under.
    """
    if registered is None:
        registered = []
    router = APIRouter(prefix=normalize_segment(prefix), tags=list(table.tags))
    base = parent + router.prefix
    for operation in table.operations:
        path = normalize_segment(operation.path)
        if not router.prefix and not path:
            path = ROOT
        router.add_api_route(
            path, operation.endpoint,
            **route_options(operation, include_in_schema=True),
        )
        registered.append((operation.method.upper(), join_path(base, path)))
    for sub_prefix, child in table.nested:
        router.include_router(build_router(child, sub_prefix, registered, base))
    return router


def mount_registered(app: FastAPI, table: RouteTable, prefix: str) -> list[Registration]:
    registered: list[Registration] = []
    app.include_router(build_router(table, prefix, registered))
    return registered


def mount_declared(app: FastAPI, table: RouteTable, prefix: str) -> list[Registration]:
    registered: list[Registration] = []
    for route in table.flatten(prefix):
        app.add_api_route(
            route.path, route.operation.endpoint, tags=list(route.tags),
            **route_options(route.operation, include_in_schema=False),
        )
        registered.append((route.method, route.path))
    return registered
