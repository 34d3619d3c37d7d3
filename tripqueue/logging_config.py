# tripqueue/logging_config.py
"""
JSON-lines logging on stderr.

The MCP surface speaks over stdout, so nothing may log there. The HTTP and
CLI entry points use the same setup so every process emits one format.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Attributes passed through ``extra=`` that become top-level JSON keys
EXTRA_FIELDS = ("job_id",)

# Loggers that install their own handlers unless redirected
ROUTED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastmcp")

# Per-request chatter
QUIET_LOGGERS = ("httpx", "httpcore")


class JsonFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for name in EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value:
                entry[name] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry)


def configure_logging(level: int = logging.INFO) -> None:
    """
    Install the stderr JSON handler on the root logger.

    Call before importing modules that log at import time. Existing root
    handlers are removed.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in ROUTED_LOGGERS:
        routed = logging.getLogger(name)
        routed.handlers.clear()
        routed.addHandler(handler)
        routed.setLevel(level)
        routed.propagate = False

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
