"""Example Context: read-only values shared by the handlers of one server."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExampleContext:
    """Created once per server and captured by handlers when tables are built."""
    name: str = "Foo"
