"""App Factory: build the FastAPI app of one example.

Invariants:
    - Every app serves GET / (plain text), the Swagger UI at SWAGGER_UI_PATH,
      the document at OPENAPI_PATH, and its route table under API_PREFIX
    - redirect_slashes is off: only canonical paths resolve
    - The document is audited against the registered API routes before the
      app is returned; DocsDriftError or DuplicateRouteError aborts creation

Design Decisions:
    - A declared document replaces app.openapi rather than seeding
      app.openapi_schema, which FastAPI may regenerate when routes change
"""

import logging

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from apidoc_examples.api.error_handlers import register_error_handlers
from apidoc_examples.api.request_logging import RequestLoggingMiddleware
from apidoc_examples.api.routing import mount_declared, mount_registered
from apidoc_examples.config import Settings, get_settings
from apidoc_examples.core.context import ExampleContext
from apidoc_examples.core.openapi_document import (
    DocsStrategy, audit_openapi, build_openapi, table_tags,
)
from apidoc_examples.examples import ExampleDefinition

logger = logging.getLogger(__name__)

INDEX_TEXT = "Hello, World"
SWAGGER_UI_PATH = "/swagger-ui"
OPENAPI_PATH = "/api-docs/openapi.json"
API_PREFIX = "/api"


async def index():
    return INDEX_TEXT


def create_example_app(
    definition: ExampleDefinition,
    settings: Settings | None = None,
    context: ExampleContext | None = None,
) -> FastAPI:
    """Assemble routes, docs, logging and error handlers for one example."""
    settings = settings or get_settings()
    context = context or ExampleContext(name=settings.context_name)
    table = definition.build_table(context)

    app = FastAPI(
        title=definition.title,
        description=definition.description,
        version=settings.api_version,
        docs_url=SWAGGER_UI_PATH,
        openapi_url=OPENAPI_PATH,
        redoc_url=None,
        openapi_tags=table_tags(table) or None,
        redirect_slashes=False,
    )
    app.state.example = definition.name
    app.state.context = context

    app.add_api_route(
        "/", index, methods=["GET"], name="index",
        response_class=PlainTextResponse, include_in_schema=False,
    )

    if definition.strategy is DocsStrategy.REGISTRATION:
        registered = mount_registered(app, table, API_PREFIX)
    else:
        registered = mount_declared(app, table, API_PREFIX)
        document = build_openapi(
            table,
            title=definition.title,
            version=settings.api_version,
            description=definition.description,
            prefix=API_PREFIX,
        )

        def declared_openapi() -> dict:
            return document

        app.openapi = declared_openapi

    audit_openapi(app.openapi(), registered)

    if settings.access_log:
        app.add_middleware(RequestLoggingMiddleware, example=definition.name)
    register_error_handlers(app)

    logger.debug(
        f"Built {definition.name} ({definition.strategy.value} docs)",
        extra={"example": definition.name},
    )
    return app
