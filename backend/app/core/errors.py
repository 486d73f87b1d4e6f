"""Error Hierarchy — HTTP-classified exceptions raised by services and routes.

Invariants:
    - Every ApiError carries a message (str), code (str) and http_status (int)
    - detail, when present, is one of the two structured validation shapes:
      {"message": [str, ...]} or {"errors": [{field?, property?, message?, constraints?, code?}]}
    - to_envelope() produces the same envelope the global error handler writes
    - NormalizationError is internal to the normalizer and never reaches a client

Design Decisions:
    - Single hierarchy with ApiError base: one FastAPI handler catches all
      declared HTTP errors; anything outside it is an unclassified fault (500)
"""

from typing import Any

from app.core.envelope import build_error_envelope


class ApiError(Exception):
    """Base exception for all declared HTTP errors."""

    def __init__(
        self,
        message: str,
        http_status: int = 500,
        code: str = "API_ERROR",
        detail: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.code = code
        self.detail = detail

    def to_envelope(self) -> dict:
        """Convert to the standard error envelope."""
        return build_error_envelope(self.http_status, self.message, self.detail)


# ─── Client Errors (400-level) ──────────────────────────────────

class BadRequestError(ApiError):
    """Request is well-formed but semantically unusable."""
    def __init__(self, message: str, detail: dict[str, Any] | None = None):
        super().__init__(message, 400, "BAD_REQUEST", detail)


class ValidationFailedError(ApiError):
    """One or more field checks failed after schema validation.

    Messages use the "<field> <message>" form, e.g. "price must be a number".
    """
    def __init__(self, messages: list[str]):
        super().__init__(
            "Validation failed", 400, "VALIDATION_ERROR",
            {"message": list(messages), "error": "Bad Request"},
        )
        self.messages = list(messages)


class InvalidIdentifierError(ApiError):
    """Path identifier is not a 24-character hex document id."""
    def __init__(self, value: str):
        super().__init__(
            f"'{value}' is not a valid identifier", 400, "INVALID_IDENTIFIER",
        )
        self.value = value


class ResourceNotFoundError(ApiError):
    """Requested document does not exist."""
    def __init__(self, resource_type: str):
        super().__init__(
            f"{resource_type} not found", 404, "RESOURCE_NOT_FOUND",
        )
        self.resource_type = resource_type


class ConflictError(ApiError):
    """Write would violate a uniqueness rule."""
    def __init__(self, message: str):
        super().__init__(message, 409, "CONFLICT")


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(ApiError):
    """Document store operation failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}", 503, "DATABASE_ERROR",
        )
        self.operation = operation


class NormalizationError(Exception):
    """Value tree could not be normalized (e.g. nesting deeper than the cap)."""
