"""Logging setup: one stdout handler, JSON lines by default.

Modules log through ``logging.getLogger(__name__)`` and attach request or
document context as ``extra`` keys prefixed ``ctx_``. The JSON formatter
gathers those under ``context`` so drift and sync events can be filtered by
owner or document id downstream.
"""

import logging
import sys
from datetime import UTC, datetime
from typing import Any

import orjson

SERVICE_NAME = "quillsync"
CONTEXT_PREFIX = "ctx_"

# Per-request lines from the semantic index client; failures are logged by the reconciler.
_QUIET_LOGGERS = ("httpx", "httpcore")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, stamped with service and environment."""

    def __init__(self, environment: str = "development") -> None:
        super().__init__()
        self._environment = environment

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC)
        payload: dict[str, Any] = {
            "timestamp": timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": SERVICE_NAME,
            "environment": self._environment,
        }
        context = {
            key[len(CONTEXT_PREFIX) :]: value
            for key, value in record.__dict__.items()
            if key.startswith(CONTEXT_PREFIX)
        }
        if context:
            payload["context"] = context
        if record.exc_info and record.exc_info[0] is not None:
            payload["error"] = {
                "type": record.exc_info[0].__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return orjson.dumps(payload, default=str).decode("utf-8")


def configure_logging(
    level: str | int = "INFO", use_json: bool = True, environment: str = "development"
) -> None:
    """Install a single stdout handler on the root logger."""
    logging.captureWarnings(True)
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    if use_json:
        handler.setFormatter(JsonFormatter(environment))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.handlers = [handler]
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
