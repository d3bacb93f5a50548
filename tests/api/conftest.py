"""API test fixtures: in-process clients for each example app.

Invariants:
    - Every client talks to a freshly built app over httpx ASGITransport
    - Apps use a fixed context name so responses are predictable
"""

import pytest
from httpx import ASGITransport, AsyncClient

from apidoc_examples.api.app_factory import create_example_app
from apidoc_examples.config import Settings
from apidoc_examples.examples import get_example


@pytest.fixture
def settings():
    return Settings(context_name="Foo", access_log=True)


@pytest.fixture
async def example_client(settings):
    """Factory: example name -> AsyncClient bound to that example's app."""
    clients = []

    async def _open(name: str) -> AsyncClient:
        app = create_example_app(get_example(name), settings)
        client = AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        )
        clients.append(client)
        return client

    yield _open

    for client in clients:
        await client.aclose()
