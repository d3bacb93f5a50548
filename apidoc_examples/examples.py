"""Example Registry: the four example servers, in port order.

Invariants:
    - EXAMPLES order is the port order of the combined run (base_port + index)
    - Each example uses exactly one DocsStrategy
    - build_table() receives the server's ExampleContext; tables that need it
      capture it, others ignore it
"""

from dataclasses import dataclass
from typing import Callable, Sequence

from apidoc_examples.api.routes.enums import enum_mapping_table, simple_types_table
from apidoc_examples.api.routes.widgets import widgets_table
from apidoc_examples.core.context import ExampleContext
from apidoc_examples.core.errors import UnknownExampleError
from apidoc_examples.core.openapi_document import DocsStrategy
from apidoc_examples.core.route_tree import RouteTable


@dataclass(frozen=True)
class ExampleDefinition:
    name: str
    title: str
    description: str
    strategy: DocsStrategy
    build_table: Callable[[ExampleContext], RouteTable]


def _nesting_with_declared_docs(context: ExampleContext) -> RouteTable:
    return RouteTable().nest("/widgets", widgets_table([context.name]))


def _nesting_with_routers(context: ExampleContext) -> RouteTable:
    return RouteTable().nest(
        "/widgets", widgets_table(["FastAPI", "Starlette", context.name]),
    )


def _enum_of_js_simple_types(context: ExampleContext) -> RouteTable:
    return simple_types_table()


def _enum_mapping(context: ExampleContext) -> RouteTable:
    return enum_mapping_table()


EXAMPLES: dict[str, ExampleDefinition] = {
    definition.name: definition
    for definition in (
        ExampleDefinition(
            name="nesting-with-declared-docs",
            title="Nesting with declared docs",
            description="The API document is built from the route-table declarations.",
            strategy=DocsStrategy.DECLARED,
            build_table=_nesting_with_declared_docs,
        ),
        ExampleDefinition(
            name="nesting-with-routers",
            title="Nesting with nested routers",
            description="The API document is collected from nested FastAPI routers.",
            strategy=DocsStrategy.REGISTRATION,
            build_table=_nesting_with_routers,
        ),
        ExampleDefinition(
            name="enum-of-js-simple-types",
            title="Enums to JavaScript simple types",
            description="Enum values serialized as tagged and untagged JSON primitives.",
            strategy=DocsStrategy.REGISTRATION,
            build_table=_enum_of_js_simple_types,
        ),
        ExampleDefinition(
            name="enum-mapping",
            title="Enums to JavaScript simple types API",
            description="API demonstrating enums under every tagging policy.",
            strategy=DocsStrategy.DECLARED,
            build_table=_enum_mapping,
        ),
    )
}


def get_example(name: str) -> ExampleDefinition:
    try:
        return EXAMPLES[name]
    except KeyError:
        raise UnknownExampleError(name, list(EXAMPLES)) from None


def select_examples(names: Sequence[str] | None = None) -> list[ExampleDefinition]:
    """Definitions for `names` in the given order, or all examples."""
    if not names:
        return list(EXAMPLES.values())
    return [get_example(name) for name in names]
