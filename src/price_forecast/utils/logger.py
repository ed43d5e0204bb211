"""Structured JSON logging used by every pipeline component."""

from __future__ import annotations

import json
import logging
import os
import sys

# Attributes present on every LogRecord; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render a record as a single-line JSON object, including `extra` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logger(name: str, level: str | None = None) -> logging.Logger:
    """
    Return a logger under the ``price_forecast`` namespace.

    The stream handler is attached once to the namespace root, so repeated calls
    (one per module) never duplicate output.
    """
    root = logging.getLogger("price_forecast")
    if not any(isinstance(h.formatter, JsonFormatter) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        root.addHandler(handler)
        root.propagate = False
    resolved = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, resolved, logging.INFO))
    return logging.getLogger(f"price_forecast.{name}")
