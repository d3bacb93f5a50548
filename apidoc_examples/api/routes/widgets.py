"""Widgets: a nested table serving a fixed list of widget names.

Invariants:
    - The index operation is declared at INDEX, so nesting the table at
      "/widgets" under "/api" serves GET /api/widgets (no trailing slash)
    - Names are frozen when the table is built
"""

from typing import Sequence

from pydantic import BaseModel

from apidoc_examples.core.route_tree import INDEX, Operation, RouteTable


class Widgets(BaseModel):
    """Widget names."""
    names: list[str]


def widgets_table(names: Sequence[str]) -> RouteTable:
    """Route table for the widgets resource, serving `names`."""
    frozen = tuple(names)

    async def get_widgets():
        """Return the names of all widgets."""
        return Widgets(names=list(frozen))

    return RouteTable(
        description="Provide access to Widget instances.",
        tags=("widgets",),
    ).route(Operation(
        path=INDEX,
        endpoint=get_widgets,
        summary="List widgets",
        response_model=Widgets,
        response_description="Widgets found successfully",
    ))
