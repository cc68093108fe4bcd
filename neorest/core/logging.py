"""Structured logging for neorest.

Library modules log under the ``neorest`` namespace: one debug record per
REST request from the transport, and a warning for every failed remote
outcome the Client records in ``last_error``. Both attach request fields
to the record through ``extra``; JSONFormatter lifts them into the
JSON document so a failed ``save_node`` can be matched to its
``PUT /node/123/properties``.

This module provides:
- JSONFormatter with timestamp, level, service, correlation_id, module,
  message and any REQUEST_FIELDS present on the record
- CorrelationIdFilter, whose id is also forwarded as X-Request-ID
- RotatingFileHandler for optional on-disk JSON logs
- Log level configurable via NEOREST_LOG_LEVEL env var
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any


# Record attributes set via ``extra`` by the transport and the Client.
REQUEST_FIELDS = ("operation", "method", "path", "status", "duration_ms")

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_correlation_id(correlation_id: str) -> None:
    """Set the id forwarded as X-Request-ID by requests in this context."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class JSONFormatter(logging.Formatter):
    """Render records as one JSON object per line.

    Request fields are only emitted when the record carries them, so
    application records keep the short form.
    """

    def __init__(self, service_name: str = "neorest", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "correlation_id": getattr(record, "correlation_id", "-"),
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }

        for name in REQUEST_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the context's correlation id ("-" if unset)."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        record.correlation_id = correlation_id if correlation_id else "-"
        return True


def get_log_level_from_env(service_prefix: str = "NEOREST") -> int:
    """Read ``<prefix>_LOG_LEVEL``; unknown names fall back to INFO."""
    level_str = os.environ.get(f"{service_prefix}_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_str, None)
    return level if isinstance(level, int) else logging.INFO


def create_file_handler(
    log_file_path: str,
    service_name: str = "neorest",
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> RotatingFileHandler:
    Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=log_file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(JSONFormatter(service_name=service_name))
    handler.addFilter(CorrelationIdFilter())
    return handler


def setup_structured_logging(
    service_name: str = "neorest",
    log_file_path: str | None = None,
    log_level: int | None = None,
) -> logging.Logger:
    """Attach JSON handlers to the ``neorest`` logger tree.

    The library itself never calls this; applications call it once to
    get JSON output on stdout and, optionally, on disk.
    """
    if log_level is None:
        log_level = get_log_level_from_env()

    logger = logging.getLogger(service_name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter(service_name=service_name))
    console_handler.addFilter(CorrelationIdFilter())
    logger.addHandler(console_handler)

    if log_file_path:
        try:
            file_handler = create_file_handler(log_file_path, service_name)
            file_handler.setLevel(log_level)
            logger.addHandler(file_handler)
        except PermissionError:
            logger.warning(f"Cannot write to {log_file_path}, file logging disabled")

    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or "neorest")
