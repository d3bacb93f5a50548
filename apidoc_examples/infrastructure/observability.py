"""Structured Logging: JSON formatter and setup shared by every server in the process.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (example, address, method, path, status_code, duration_ms,
      error_code) surfaced when present
    - setup_logging() installs exactly one handler, however often it is called
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "example", "address", "method", "path", "status_code", "duration_ms",
    "error_code",
)

_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text") -> logging.Handler:
    """Configure root logging for the process."""
    global _handler
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    if _handler is not None:
        logging.root.removeHandler(_handler)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _handler = handler
    return handler
