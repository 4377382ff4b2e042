"""
Logging setup: readable lines in development, one JSON object per line in
production.
"""

import json
import logging
import sys
import time
import traceback
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from backend.core.config import settings

logger = logging.getLogger("edusafe")

_RESERVED = {
    "name", "msg", "args", "created", "filename", "funcName", "levelname", "levelno",
    "lineno", "module", "msecs", "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName", "message", "taskName",
}


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0]:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                log_data[key] = value
        return json.dumps(log_data, default=str)


def setup_logging() -> logging.Logger:
    """Configure the ``edusafe`` logger tree once, based on ENVIRONMENT."""
    root = logging.getLogger("backend")
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if settings.ENVIRONMENT == "production":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s"))

    for log in (logger, root):
        log.setLevel(level)
        log.handlers.clear()
        log.addHandler(handler)
        log.propagate = False
    return logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request as ``METHOD path -> status (ms)``."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %s (%.2fms)", request.method, request.url.path, response.status_code, duration_ms,
            extra={"http_method": request.method, "http_path": request.url.path,
                   "http_status": response.status_code, "duration_ms": round(duration_ms, 2)},
        )
        return response
