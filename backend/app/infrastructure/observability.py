"""Structured Logging — JSON formatter, setup, and per-request access logging.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Request context (method, path, status_code, duration_ms) and error context
      (error_code, user_id, operation) surfaced when present
    - One access record per request, emitted by log_requests
    - setup_logging is idempotent: repeated calls replace, never stack, handlers
"""

import logging
import json
import time
from datetime import datetime, timezone

from fastapi import Request

logger = logging.getLogger(__name__)

_EXTRA_FIELDS = (
    "method", "path", "status_code", "duration_ms",
    "error_code", "user_id", "operation",
)
_HANDLER_NAME = "user-service"


class JSONFormatter(logging.Formatter):
    """One JSON object per record; timestamp taken from the record itself."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update({
            key: record.__dict__[key]
            for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


async def log_requests(request: Request, call_next):
    """HTTP middleware: access log line carrying the request context."""
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(
        f"{request.method} {request.url.path} {response.status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure the root logger for the application."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
