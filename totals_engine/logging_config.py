"""Logging setup for the CLI and HTTP entrypoints.

Engine modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by whichever entrypoint is running.
"""
import json
import logging
import sys
from datetime import datetime, timezone

# Per-document context the calculator attaches via ``extra=``.
DOCUMENT_FIELDS = ("document_id", "document_kind", "error_codes")

PLAIN_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

NOISY_LOGGERS = ("uvicorn.access", "httpx")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, carrying document context when present."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        for field in DOCUMENT_FIELDS:
            value = getattr(record, field, None)
            if value:
                log_entry[field] = value
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", json_output: bool = False, stream=None) -> logging.Handler:
    """Install a single stream handler on the root logger and return it."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    root.handlers = [handler]

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
