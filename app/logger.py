"""
JSON-structured logging.

Import as ``from app.logger import logger``. Extra fields passed through
``extra=`` end up as top-level keys; sensitive keys are dropped.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from app.config import settings

_RESERVED = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
}

class JSONFormatter(logging.Formatter):
    SENSITIVE_KEYS = {"password", "secret", "token", "authorization", "code"}

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED or key.lower() in self.SENSITIVE_KEYS:
                continue
            log_obj[key] = value

        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_obj, default=str)

def setup_logger(name: str = "workspace-access-api") -> logging.Logger:
    log = logging.getLogger(name)
    log.setLevel(settings.log_level.upper())

    # reimport must not stack handlers
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        log.addHandler(handler)

    return log

logger = setup_logger()
