"""Server Bootstrap: one uvicorn listener per example, all served concurrently.

Invariants:
    - Every listener is bound before any starts serving; a bind failure closes
      the sockets already bound and raises ServerBindError naming the address
    - Each server logs its listening URL and its docs URL before serving
    - serve_all() returns only when every server has exited; a failing server
      stops the others and its ServeError propagates

Design Decisions:
    - Sockets are bound here and handed to uvicorn, so bind errors carry the
      address and port 0 resolves to the real port before the startup lines
    - uvicorn's logging config is disabled; its loggers use the root handler
"""

import asyncio
import logging
import socket
from typing import Sequence

import uvicorn
from fastapi import FastAPI

from apidoc_examples.api.app_factory import SWAGGER_UI_PATH, create_example_app
from apidoc_examples.config import Settings
from apidoc_examples.core.errors import ExampleError, ServeError, ServerBindError
from apidoc_examples.examples import select_examples

logger = logging.getLogger(__name__)


class ExampleServer:
    """A FastAPI app bound to one local address."""

    def __init__(self, name: str, app: FastAPI, host: str, port: int):
        self.name = name
        self.app = app
        self.host = host
        self.port = port
        self._socket: socket.socket | None = None
        self._server = uvicorn.Server(uvicorn.Config(
            app, host=host, port=port, log_config=None, access_log=False,
        ))

    @property
    def address(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @property
    def url(self) -> str:
        return f"http://{self.address}"

    @property
    def started(self) -> bool:
        return self._server.started

    def bind(self) -> None:
        """Bind the listening socket; port 0 is replaced by the assigned port."""
        if self._socket is not None:
            return
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, self.port))
        except (OSError, OverflowError) as exc:
            sock.close()
            reason = getattr(exc, "strerror", None) or str(exc)
            raise ServerBindError(self.address, reason) from exc
        self.port = sock.getsockname()[1]
        self._socket = sock

    def close(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def stop(self) -> None:
        self._server.should_exit = True

    async def serve(self) -> None:
        """Serve until stopped."""
        self.bind()
        extra = {"example": self.name, "address": self.address}
        logger.info("Starting server at %s", self.url, extra=extra)
        logger.info("Explore the API at %s%s", self.url, SWAGGER_UI_PATH, extra=extra)
        try:
            await self._server.serve(sockets=[self._socket])
        except Exception as exc:
            raise ServeError(self.address, str(exc) or type(exc).__name__) from exc
        finally:
            self.close()


def build_servers(
    settings: Settings, names: Sequence[str] | None = None,
) -> list[ExampleServer]:
    """One server per selected example, ports assigned in selection order."""
    servers = []
    for index, definition in enumerate(select_examples(names)):
        app = create_example_app(definition, settings)
        servers.append(ExampleServer(
            definition.name, app, settings.host, settings.port_for(index),
        ))
    return servers


async def serve_all(servers: Sequence[ExampleServer]) -> None:
    """Bind every server, then serve them concurrently until all exit."""
    try:
        for server in servers:
            server.bind()
    except ServerBindError:
        for server in servers:
            server.close()
        raise

    try:
        await asyncio.gather(*(server.serve() for server in servers))
    except ExampleError:
        for server in servers:
            server.stop()
        raise
