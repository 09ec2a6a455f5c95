"""
Name: Structured Logger Configuration

Responsibilities:
  - Configure JSON-structured logging for production readiness
  - Automatically include request/ingestion context (request_id, order_uid)
  - Include stack traces for exceptions
  - Redact sensitive keys passed as extra fields

Collaborators:
  - context.py: Request-scoped context vars
  - config.py: log_level / log_json
  - Python logging module (stdlib)

Constraints:
  - JSON format for log aggregation compatibility
  - Never log secrets (passwords, DSNs with credentials)

Notes:
  - Import as: from order_service.logger import logger
"""

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

# R: LogRecord attributes that are not user-supplied extras
_INTERNAL_LOGRECORD_KEYS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
}


class JSONFormatter(logging.Formatter):
    """
    R: Format logs as JSON with automatic context enrichment.

    Includes:
      - timestamp (ISO 8601)
      - level, logger, module, function, line, pid
      - request_id / method / path / order_uid (from context)
      - extra fields from log call
      - exception stack trace (if present)
    """

    # R: Fields that should never be logged (security)
    SENSITIVE_KEYS = {
        "password",
        "secret",
        "token",
        "authorization",
        "database_url",
        "dsn",
    }

    # R: Raw payloads can be large; keep log lines bounded
    MAX_STR = 4_000

    def _sanitize(self, key: str, value: Any) -> Any:
        if key.lower() in self.SENSITIVE_KEYS:
            return "***REDACTED***"
        if isinstance(value, (bytes, bytearray)):
            return f"<bytes {len(value)}B>"
        if isinstance(value, str) and len(value) > self.MAX_STR:
            return value[: self.MAX_STR] + "...(truncated)"
        return value

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        # R: Add request context (imported lazily to avoid circular imports)
        from .context import get_context_dict

        ctx = get_context_dict()
        if ctx:
            log_obj.update(ctx)

        for key, value in record.__dict__.items():
            if key not in _INTERNAL_LOGRECORD_KEYS:
                log_obj[key] = self._sanitize(key, value)

        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_obj, default=str, ensure_ascii=False)


def setup_logger(name: str = "order-service") -> logging.Logger:
    """
    R: Configure and return structured logger.

    Respects LOG_LEVEL / LOG_JSON from Settings when they can be loaded;
    falls back to INFO + JSON (e.g. at import time in tests without env).
    """
    log = logging.getLogger(name)

    level = "INFO"
    use_json = True
    try:
        from .config import get_settings

        settings = get_settings()
        level = settings.log_level
        use_json = settings.log_json
    except ValidationError:
        # Settings need DATABASE_URL; logging must work without it
        pass

    log.setLevel(getattr(logging, level, logging.INFO))

    # R: Avoid duplicate handlers on reimport
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(asctime)s %(levelname)s %(message)s")
        )
        log.addHandler(handler)

    return log


# R: Global logger instance
logger = setup_logger()
