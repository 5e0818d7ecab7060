"""Structured logging for the autoresponder service.

Records are written to stdout as one JSON object per line. Per-request fields
(sender, account) travel in ``extra={"context": {...}}`` or through a
``ContextLogger`` bound once per webhook call.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping, Optional

SERVICE_NAME = "autoresponder"

_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "twilio.http_client")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Route every logger through a single JSON stdout handler."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{SERVICE_NAME}.{name}")


def mask_identity(identity: Optional[str]) -> str:
    """Keep only the last four characters of a phone-like sender id."""
    if not identity:
        return ""
    if len(identity) <= 4:
        return "*" * len(identity)
    return "*" * (len(identity) - 4) + identity[-4:]


class ContextLogger(logging.LoggerAdapter):
    """Adapter that merges bound fields with per-call ``context=`` into the record."""

    def bind(self, **fields: Any) -> "ContextLogger":
        return ContextLogger(self.logger, {**self.extra, **fields})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        context = kwargs.pop("context", None)
        combined = {**self.extra, **(context or {})}
        if combined:
            kwargs["extra"] = {**kwargs.get("extra", {}), "context": combined}
        return msg, kwargs
