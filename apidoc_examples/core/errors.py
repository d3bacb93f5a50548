"""Error Hierarchy: typed, categorized exceptions for every apidoc-examples failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Encoding errors (400-level) describe bad variant input; configuration and
      server errors (500-level) stop an app or a listener from starting
    - to_response() produces the REST envelope shared by every error handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ExampleError base: one FastAPI handler catches all
    - Server errors always carry the failed address so fatal exits name it
"""

from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    RESOURCE_NOT_FOUND = "resource_not_found"
    SERVER = "server"
    INTERNAL = "internal"


class ExampleError(Exception):
    """Base exception for all apidoc-examples errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.timestamp = datetime.now(timezone.utc)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.timestamp.isoformat(),
            }
        }


# ─── Encoding Errors (400-level) ────────────────────────────────

class UnknownVariantError(ExampleError):
    """Variant kind (or serialized tag) is not declared on the union."""
    def __init__(self, union: str, kind: str):
        super().__init__(
            f"Union '{union}' has no variant '{kind}'",
            "UNKNOWN_VARIANT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, 400,
        )
        self.union = union
        self.kind = kind


class InvalidPayloadError(ExampleError):
    """Payload does not fit the variant or the tagging policy."""
    def __init__(self, message: str, kind: str):
        super().__init__(
            message, "INVALID_PAYLOAD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, 400,
        )
        self.kind = kind


class VariantDecodeError(ExampleError):
    """Encoded data matches no variant of the union."""
    def __init__(self, union: str, reason: str):
        super().__init__(
            f"Cannot decode '{union}': {reason}",
            "VARIANT_DECODE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, 400,
        )
        self.union = union


# ─── Configuration Errors (500-level) ───────────────────────────

class InvalidRoutePathError(ExampleError):
    """Route path or prefix cannot be mounted."""
    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Invalid route path '{path}': {reason}",
            "INVALID_ROUTE_PATH", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, 500,
        )
        self.path = path


class DuplicateRouteError(ExampleError):
    """Two registrations resolve to the same method and path."""
    def __init__(self, method: str, path: str):
        super().__init__(
            f"Route {method.upper()} {path} is registered more than once",
            "DUPLICATE_ROUTE", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, 500,
        )
        self.method = method.upper()
        self.path = path


class DocsDriftError(ExampleError):
    """API document and route table disagree."""
    def __init__(
        self, missing: list[str], orphans: list[str],
    ):
        parts = []
        if missing:
            parts.append(f"undocumented routes: {', '.join(missing)}")
        if orphans:
            parts.append(f"documented but not routed: {', '.join(orphans)}")
        super().__init__(
            f"API document out of sync with routes ({'; '.join(parts)})",
            "DOCS_DRIFT", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, 500,
        )
        self.missing = missing
        self.orphans = orphans


class UnknownExampleError(ExampleError):
    """Requested example name is not registered."""
    def __init__(self, name: str, available: list[str]):
        super().__init__(
            f"Unknown example '{name}' (available: {', '.join(available)})",
            "UNKNOWN_EXAMPLE", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, 500,
        )
        self.name = name


# ─── Server Errors (fatal) ──────────────────────────────────────

class ServerBindError(ExampleError):
    """Listener could not bind its address."""
    def __init__(self, address: str, reason: str):
        super().__init__(
            f"Cannot bind {address}: {reason}",
            "SERVER_BIND_FAILED", ErrorCategory.SERVER,
            ErrorSeverity.CRITICAL, 500,
        )
        self.address = address


class ServeError(ExampleError):
    """Listener failed while serving."""
    def __init__(self, address: str, reason: str):
        super().__init__(
            f"Server at {address} failed: {reason}",
            "SERVE_FAILED", ErrorCategory.SERVER,
            ErrorSeverity.CRITICAL, 500,
        )
        self.address = address
