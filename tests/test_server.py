"""Server Bootstrap: verifies port assignment, bind failures and concurrent serving.

Tests:
    - build_servers assigns base_port + index in selection order
    - A taken port raises ServerBindError naming host:port
    - All four examples serve concurrently on distinct OS-assigned ports,
      each with its own route set
"""

import asyncio
import socket

import httpx
import pytest

from apidoc_examples.api.app_factory import OPENAPI_PATH, create_example_app
from apidoc_examples.config import Settings
from apidoc_examples.core.errors import ServerBindError, UnknownExampleError
from apidoc_examples.core.openapi_document import documented_operations
from apidoc_examples.examples import EXAMPLES
from apidoc_examples.server import ExampleServer, build_servers, serve_all


@pytest.fixture
def settings():
    return Settings(base_port=0, access_log=False)


@pytest.fixture
def blocker():
    """A listening socket holding a local port."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen()
    yield sock
    sock.close()


async def _wait_until_started(servers, task, timeout: float = 10.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not all(server.started for server in servers):
        if task.done():
            task.result()
        assert loop.time() < deadline, "servers did not start in time"
        await asyncio.sleep(0.05)


def test_build_servers_assigns_consecutive_ports():
    servers = build_servers(Settings(base_port=10000))
    assert [s.name for s in servers] == list(EXAMPLES)
    assert [s.port for s in servers] == [10000, 10001, 10002, 10003]
    assert servers[0].url == "http://127.0.0.1:10000"


def test_single_example_uses_base_port():
    servers = build_servers(Settings(base_port=10000), ["enum-mapping"])
    assert [(s.name, s.port) for s in servers] == [("enum-mapping", 10000)]


def test_build_servers_rejects_unknown_example():
    with pytest.raises(UnknownExampleError):
        build_servers(Settings(), ["nope"])


def test_ipv6_address_is_bracketed(settings):
    app = create_example_app(EXAMPLES["enum-mapping"], settings)
    assert ExampleServer("enum-mapping", app, "::1", 10000).address == "[::1]:10000"


def test_bind_failure_names_address(settings, blocker):
    port = blocker.getsockname()[1]
    app = create_example_app(EXAMPLES["enum-mapping"], settings)
    server = ExampleServer("enum-mapping", app, "127.0.0.1", port)
    with pytest.raises(ServerBindError) as info:
        server.bind()
    assert f"127.0.0.1:{port}" in info.value.message


def test_bind_resolves_os_assigned_port(settings):
    app = create_example_app(EXAMPLES["enum-mapping"], settings)
    server = ExampleServer("enum-mapping", app, "127.0.0.1", 0)
    server.bind()
    try:
        assert server.port != 0
    finally:
        server.close()


async def test_serve_all_closes_bound_sockets_on_bind_failure(settings, blocker):
    app = create_example_app(EXAMPLES["enum-mapping"], settings)
    first = ExampleServer("first", app, "127.0.0.1", 0)
    second = ExampleServer("second", app, "127.0.0.1", blocker.getsockname()[1])
    with pytest.raises(ServerBindError):
        await serve_all([first, second])
    assert first._socket is None


async def test_all_examples_serve_concurrently(settings):
    servers = build_servers(settings)
    task = asyncio.create_task(serve_all(servers))
    try:
        await _wait_until_started(servers, task)
        assert len({server.port for server in servers}) == len(EXAMPLES)

        async with httpx.AsyncClient(timeout=5.0) as client:
            for server in servers:
                index = await client.get(f"{server.url}/")
                assert index.text == "Hello, World"
                doc = (await client.get(f"{server.url}{OPENAPI_PATH}")).json()
                routed = [path for _, path in documented_operations(doc)]
                for path in routed:
                    res = await client.get(f"{server.url}{path}")
                    assert res.status_code == 200

            widgets = await client.get(f"{servers[1].url}/api/widgets")
            assert widgets.json()["names"][-1] == settings.context_name
            missing = await client.get(f"{servers[0].url}/api/enums")
            assert missing.status_code == 404
    finally:
        for server in servers:
            server.stop()
        await asyncio.wait_for(task, timeout=10.0)
