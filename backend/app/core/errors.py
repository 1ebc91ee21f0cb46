"""Error Hierarchy — typed, categorized exceptions for all Orders API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation and not-found errors (400-level) are raised before any mutation
    - Store errors (500-level) carry no internal details in their user-facing message
    - CacheUnavailableError is never surfaced to a caller (logged and degraded)

Design Decisions:
    - Single hierarchy with OrdersError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - TransactionError subclasses DatabaseError: a failed write is a store failure
      with a stricter contract (rolled back, reported as internal)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    CACHE = "cache"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    order_id: int | None = None
    user_id: int | None = None
    debug_info: dict[str, Any] | None = None


class OrdersError(Exception):
    """Base exception for all Orders API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def details(self) -> list[dict] | None:
        """Field-level details, overridden by errors that carry them."""
        return None

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        details = self.details()
        if details is not None:
            body["details"] = details
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

@dataclass(frozen=True)
class FieldIssue:
    """One invalid input field."""
    field: str
    message: str


class ValidationError(OrdersError):
    """Malformed or missing required input — user-correctable."""
    def __init__(
        self, issues: list[FieldIssue], context: ErrorContext | None = None,
    ):
        fields = ", ".join(issue.field for issue in issues)
        super().__init__(
            f"Invalid request data: {fields}",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.issues = issues

    def details(self) -> list[dict]:
        return [
            {"field": issue.field, "message": issue.message}
            for issue in self.issues
        ]


class NotFoundError(OrdersError):
    """Referenced user and/or products do not exist."""
    def __init__(
        self,
        user_id: int | None = None,
        product_ids: list[int] | None = None,
        context: ErrorContext | None = None,
    ):
        self.user_id = user_id
        self.product_ids = sorted(product_ids or [])
        parts = []
        if user_id is not None:
            parts.append(f"user {user_id}")
        if self.product_ids:
            label = "product" if len(self.product_ids) == 1 else "products"
            parts.append(
                f"{label} {', '.join(str(p) for p in self.product_ids)}",
            )
        super().__init__(
            f"Not found: {'; '.join(parts)}",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )

    def details(self) -> list[dict]:
        details = []
        if self.user_id is not None:
            details.append({
                "field": "user_id",
                "message": f"user {self.user_id} does not exist",
            })
        for product_id in self.product_ids:
            details.append({
                "field": "items.product_id",
                "message": f"product {product_id} does not exist",
            })
        return details


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(OrdersError):
    """Database operation failed."""
    def __init__(
        self,
        message: str,
        operation: str,
        context: ErrorContext | None = None,
        code: str = "DATABASE_ERROR",
        http_status: int = 503,
    ):
        super().__init__(
            f"Database {operation} failed: {message}",
            code, ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, http_status,
        )
        self.operation = operation


class TransactionError(DatabaseError):
    """Order write failed mid-transaction and was rolled back."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "order could not be created", "transaction", context,
            code="TRANSACTION_FAILED", http_status=500,
        )


class CacheUnavailableError(OrdersError):
    """Cache substrate unreachable — callers degrade to the store."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cache {operation} failed: {message}",
            "CACHE_UNAVAILABLE", ErrorCategory.CACHE,
            ErrorSeverity.WARNING, context, 503,
        )
        self.operation = operation
