"""Command line entry point: run all example servers, or a selection of them.

Usage:
    apidoc-examples                          # all four, ports 10000-10003
    apidoc-examples --only enum-mapping      # one server on the base port
    apidoc-examples --list
"""

import argparse
import asyncio
import logging
from typing import Sequence

from pydantic import ValidationError

from apidoc_examples.config import Settings, get_settings
from apidoc_examples.core.errors import ExampleError
from apidoc_examples.examples import select_examples
from apidoc_examples.infrastructure.observability import setup_logging
from apidoc_examples.server import build_servers, serve_all

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apidoc-examples",
        description="Run FastAPI example servers with generated API docs.",
    )
    parser.add_argument(
        "--only", action="append", metavar="NAME",
        help="run only this example (repeatable, ports follow the given order)",
    )
    parser.add_argument(
        "--list", action="store_true", help="list the examples and exit",
    )
    parser.add_argument("--host", help="listen address")
    parser.add_argument("--base-port", type=int, help="port of the first server")
    parser.add_argument("--log-level", help="root log level")
    parser.add_argument("--log-format", choices=("text", "json"))
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    overrides = {
        key: value
        for key, value in {
            "host": args.host,
            "base_port": args.base_port,
            "log_level": args.log_level,
            "log_format": args.log_format,
        }.items()
        if value is not None
    }
    if not overrides:
        return get_settings()
    return Settings(**overrides)


def print_examples(settings: Settings, names: Sequence[str] | None = None) -> None:
    """One line per selected example, with the port it would be served on."""
    for index, definition in enumerate(select_examples(names)):
        port = settings.port_for(index) or "auto"
        print(f"{definition.name:<28} {port!s:<6} {definition.strategy.value}")


def _describe_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        ".".join(str(part) for part in error["loc"]) + ": " + error["msg"]
        for error in exc.errors()
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = resolve_settings(args)
    except ValidationError as exc:
        setup_logging()
        logger.critical(
            f"Invalid settings: {_describe_validation_error(exc)}",
            extra={"error_code": "INVALID_SETTINGS"},
        )
        return 1
    setup_logging(settings.log_level, settings.log_format)

    try:
        if args.list:
            print_examples(settings, args.only)
            return 0
        servers = build_servers(settings, args.only)
        asyncio.run(serve_all(servers))
    except ExampleError as exc:
        logger.critical(exc.message, extra={"error_code": exc.code})
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, servers stopped")
    return 0
