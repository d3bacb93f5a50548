"""Route Tree: immutable route tables nested under path prefixes.

Invariants:
    - Canonical paths start with "/" and never end with "/", except the root "/"
    - A nested table's index operation is declared at "" ("/" is accepted and
      normalized to ""), and is served at exactly the nesting prefix
    - flatten() yields every (method, path) at most once, else DuplicateRouteError
    - Tables are frozen; route() and nest() return new tables

Design Decisions:
    - One declarative tree feeds both the router (api/routing.py) and the
      declared API document (core/openapi_document.py)
"""

import inspect
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterator

from apidoc_examples.core.errors import DuplicateRouteError, InvalidRoutePathError

INDEX = ""
ROOT = "/"


def normalize_segment(path: str) -> str:
    """Normalize a prefix or relative path: "" or "/x/y", never a trailing slash."""
    if path in ("", ROOT):
        return INDEX
    if not path.startswith("/"):
        raise InvalidRoutePathError(path, "must start with '/'")
    if "//" in path:
        raise InvalidRoutePathError(path, "empty path segment")
    return path.rstrip("/")


def join_path(prefix: str, subpath: str) -> str:
    """Join a prefix and a relative path into a canonical absolute path."""
    joined = normalize_segment(prefix) + normalize_segment(subpath)
    return joined or ROOT


@dataclass(frozen=True)
class Operation:
    """One documented endpoint of a route table."""
    path: str
    endpoint: Callable[..., Any]
    summary: str
    method: str = "GET"
    description: str = ""
    response_description: str = "Successful Response"
    response_model: type | None = None
    response_schema: dict[str, Any] | None = None
    operation_id: str | None = None

    @property
    def resolved_operation_id(self) -> str:
        return self.operation_id or self.endpoint.__name__

    @property
    def resolved_description(self) -> str:
        # Same fallback FastAPI applies when registering a route.
        if self.description:
            return self.description
        return inspect.cleandoc(self.endpoint.__doc__ or "").split("\f")[0]


@dataclass(frozen=True)
class ResolvedRoute:
    """An operation with its absolute path and inherited tags."""
    path: str
    method: str
    operation: Operation
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class RouteTable:
    """A node of the route tree: own operations plus nested tables."""
    description: str = ""
    tags: tuple[str, ...] = ()
    operations: tuple[Operation, ...] = ()
    nested: tuple[tuple[str, "RouteTable"], ...] = field(default=())

    def route(self, operation: Operation) -> "RouteTable":
        normalize_segment(operation.path)
        return replace(self, operations=self.operations + (operation,))

    def nest(self, prefix: str, table: "RouteTable") -> "RouteTable":
        normalized = normalize_segment(prefix)
        if not normalized:
            raise InvalidRoutePathError(prefix, "nested tables need a non-root prefix")
        return replace(self, nested=self.nested + ((normalized, table),))

    def flatten(self, prefix: str = "") -> list[ResolvedRoute]:
        """All operations with absolute paths, in declaration order."""
        routes = list(self._walk(normalize_segment(prefix), ()))
        seen: set[tuple[str, str]] = set()
        for route in routes:
            key = (route.method, route.path)
            if key in seen:
                raise DuplicateRouteError(route.method, route.path)
            seen.add(key)
        return routes

    def walk_tables(self) -> Iterator["RouteTable"]:
        yield self
        for _, table in self.nested:
            yield from table.walk_tables()

    def _walk(
        self, prefix: str, inherited_tags: tuple[str, ...],
    ) -> Iterator[ResolvedRoute]:
        tags = inherited_tags + self.tags
        for operation in self.operations:
            yield ResolvedRoute(
                path=join_path(prefix, operation.path),
                method=operation.method.upper(),
                operation=operation,
                tags=tags,
            )
        for sub_prefix, table in self.nested:
            yield from table._walk(prefix + sub_prefix, tags)
