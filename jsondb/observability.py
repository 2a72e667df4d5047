"""Logging setup for applications embedding jsondb.

The library only creates module loggers under the "jsondb" namespace; it
never installs handlers on import. Call setup_logging() once at startup.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from .settings import Settings

LOGGER_NAME = "jsondb"

_EXTRA_FIELDS = ("path", "table")


class JSONFormatter(logging.Formatter):
    """Format records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text") -> logging.Handler:
    """Attach a single stream handler to the jsondb logger and return it."""
    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, "_jsondb_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._jsondb_handler = True  # type: ignore[attr-defined]
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


def setup_logging_from_settings(settings: Settings) -> logging.Handler:
    return setup_logging(settings.log_level, settings.log_format)
