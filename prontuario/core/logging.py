"""Centralized logging configuration.

- Structured logs (JSON), one object per line, written to stderr so they never
  interleave with the tables the console prints on stdout
- Names and national ids are never logged; records carry ids and error classes only
- Extra fields are optional; the formatter must never raise due to missing keys
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
from datetime import UTC, datetime
from typing import Any


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class JsonFormatter(logging.Formatter):
    """Emit JSON logs while safely handling missing `extra` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            # Data-access metadata (may not exist on all records)
            "operation": getattr(record, "operation", None),
            "record_id": getattr(record, "record_id", None),
            "error": getattr(record, "error", None),
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str | int | None = None) -> None:
    """Configure application logging (JSON to stderr).

    Accepts a level name or a numeric level; the CLI may hand over either.
    """
    root_level = level or LOG_LEVEL
    if isinstance(root_level, str):
        root_level = root_level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": "prontuario.core.logging.JsonFormatter",
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stderr",
                }
            },
            "root": {
                "level": root_level,
                "handlers": ["default"],
            },
        }
    )
