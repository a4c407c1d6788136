"""Structured Logging — JSON and text formatters carrying marketplace ids.

Invariants:
    - Every line has timestamp, level, logger, service and message
    - Marketplace ids (user_id, order_id, product_id) and error_code are
      surfaced whenever the caller passed them in extra={}
    - setup_logging is idempotent: calling it twice never duplicates output

Design Decisions:
    - setup_logging called once on startup via lifespan
    - SQLAlchemy engine and uvicorn access logs held at WARNING unless the
      app itself runs at DEBUG
"""

import logging
import json
from datetime import datetime, timezone

SERVICE_NAME = "creditmart-api"

EXTRA_FIELDS = (
    "user_id", "order_id", "product_id", "error_code", "path",
    "status", "delta",
)

NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines for local runs; ids appended as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if extras:
            line += " [" + " ".join(f"{k}={v}" for k, v in extras.items()) + "]"
        return line


class _CreditMartHandler(logging.StreamHandler):
    """Marker type so setup_logging can find and replace its own handler."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the app's stream handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _CreditMartHandler)]:
        root.removeHandler(existing)

    handler = _CreditMartHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)

    app_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(app_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            app_level if app_level <= logging.DEBUG else logging.WARNING,
        )
