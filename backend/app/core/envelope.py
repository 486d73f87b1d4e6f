"""Envelope Builder — wraps success payloads and errors into the fixed response shape.

Invariants:
    - Every envelope has exactly six keys: status, code, message, data, timestamp, errors
    - Exactly one of data/errors is populated on error; errors is None on success
    - errors is non-empty whenever code >= 400
    - timestamp is ISO-8601 UTC with millisecond precision
    - All functions are PURE apart from reading the clock

Design Decisions:
    - Two status-word tables: the success table defaults to "unknown", the
      error table to "error" (the error path never sees 2xx codes)
    - Error entries omit absent field/code keys instead of emitting nulls
"""

import json
import re
from datetime import datetime, timezone
from typing import Any

SUCCESS_STATUS_WORDS: dict[int, str] = {
    200: "success",
    201: "created",
    202: "accepted",
    204: "no_content",
    304: "not_modified",
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    422: "unprocessable_entity",
    500: "internal_server_error",
    503: "service_unavailable",
}

ERROR_STATUS_WORDS: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    422: "unprocessable_entity",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}

METHOD_MESSAGES: dict[str, str] = {
    "GET": "Resource retrieved successfully",
    "POST": "Resource created successfully",
    "PUT": "Resource updated successfully",
    "PATCH": "Resource updated successfully",
    "DELETE": "Resource deleted successfully",
}

DEFAULT_METHOD_MESSAGE = "Request processed successfully"
NO_CONTENT_MESSAGE = "Request processed successfully with no content"
GENERIC_SUCCESS_MESSAGE = "Request processed"
VALIDATION_FAILED_MESSAGE = "Validation failed"
INTERNAL_ERROR_MESSAGE = "Internal server error"
DEFAULT_ERROR_MESSAGE = "An error occurred"

_FIRST_WHITESPACE = re.compile(r"\s+")


def utc_timestamp() -> str:
    """Current UTC time, e.g. 2025-12-01T08:30:00.123Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def success_status_word(status_code: int) -> str:
    return SUCCESS_STATUS_WORDS.get(status_code, "unknown")


def error_status_word(status_code: int) -> str:
    return ERROR_STATUS_WORDS.get(status_code, "error")


def success_message(status_code: int, method: str | None) -> str:
    """Human message for a successful response, chosen by code then method."""
    if status_code in (200, 201):
        return METHOD_MESSAGES.get((method or "").upper(), DEFAULT_METHOD_MESSAGE)
    if status_code == 204:
        return NO_CONTENT_MESSAGE
    return GENERIC_SUCCESS_MESSAGE


def split_validation_message(text: str) -> dict[str, str]:
    """Split a legacy "<field> <message>" string on its first whitespace run.

    A string with no whitespace is a field-less message.
    """
    parts = _FIRST_WHITESPACE.split(text.strip(), maxsplit=1)
    if len(parts) > 1:
        return {"field": parts[0], "message": parts[1]}
    return {"message": text}


def _error_record(raw: Any) -> dict[str, str]:
    """Map one rich error record to {field?, message, code?}."""
    if not isinstance(raw, dict):
        return {"message": str(raw)}
    record: dict[str, str] = {}
    field = raw.get("field") or raw.get("property")
    if field:
        record["field"] = str(field)
    message = raw.get("message")
    if not message:
        message = json.dumps(raw.get("constraints"), default=str)
    record["message"] = str(message)
    if raw.get("code"):
        record["code"] = str(raw["code"])
    return record


def build_success_envelope(
    data: Any, status_code: int = 200, method: str | None = None,
) -> dict:
    """Wrap an already-normalized payload."""
    return {
        "status": success_status_word(status_code),
        "code": status_code,
        "message": success_message(status_code, method),
        "data": data,
        "timestamp": utc_timestamp(),
        "errors": None,
    }


def build_error_envelope(
    status_code: int,
    message: str | None = None,
    detail: Any = None,
) -> dict:
    """Wrap a declared HTTP error.

    detail shapes, checked in order:
        {"message": [str, ...]} — field-validation strings, split per entry
        {"errors": [record, ...]} — rich records, mapped to {field, message, code}
        {"error": str} — replaces the top-level message
        anything else — the error's own message becomes the sole entry
    """
    errors: list[dict[str, str]] = []
    message = message or DEFAULT_ERROR_MESSAGE

    if isinstance(detail, dict):
        detail_message = detail.get("message")
        if isinstance(detail_message, list):
            errors = [split_validation_message(str(m)) for m in detail_message]
            message = VALIDATION_FAILED_MESSAGE
        elif isinstance(detail.get("error"), str) and detail["error"]:
            message = detail["error"]
        elif isinstance(detail_message, str) and detail_message:
            message = detail_message

        records = detail.get("errors")
        if isinstance(records, list):
            errors = [_error_record(r) for r in records]

    if not errors:
        errors.append({"message": message})

    return {
        "status": error_status_word(status_code),
        "code": status_code,
        "message": message,
        "data": None,
        "timestamp": utc_timestamp(),
        "errors": errors,
    }


def build_internal_error_envelope() -> dict:
    """500 envelope for unclassified faults — fixed text, no internal detail."""
    return {
        "status": "internal_server_error",
        "code": 500,
        "message": INTERNAL_ERROR_MESSAGE,
        "data": None,
        "timestamp": utc_timestamp(),
        "errors": [{"message": INTERNAL_ERROR_MESSAGE}],
    }
