"""Request Logging — JSON log lines for the catalog service.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Timestamps use the envelope clock format (UTC, milliseconds, Z suffix),
      so a log line and the error envelope it produced can be matched by time
    - Request context (path, method, status_code, error_code, document_id)
      appears only when the call site passed it via extra=
    - fmt="json" in deployed environments; anything else gives plain text

Design Decisions:
    - stdlib logging only; the error handlers and services attach context
      through extra= rather than a bound logger
    - setup_logging is invoked once from the app lifespan and replaces any
      handler it installed earlier, so repeated app startups in one process
      do not duplicate lines
"""

import json
import logging

from app.core.envelope import utc_timestamp

REQUEST_CONTEXT_KEYS = ("path", "method", "status_code", "error_code", "document_id")
_HANDLER_NAME = "catalog-api"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, request context included when present."""

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "timestamp": utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update(
            (key, record.__dict__[key])
            for key in REQUEST_CONTEXT_KEYS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the service's root handler at the given level."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
