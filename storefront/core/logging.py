"""
Logging setup.

Everything goes to stdout through one root handler, either as one JSON
object per line or as a plain text line. The handler stamps each record with
the correlation id of the request being served and, once the bearer token is
verified, the user id.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from storefront.core.config import get_settings

# Request context, set by the request middleware and the auth dependency
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
user_id: ContextVar[str] = ContextVar("user_id", default="")

_CONTEXT_ATTRS = ("correlation_id", "user_id")
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}

# Chatty at INFO
_QUIET_LOGGERS = ("uvicorn.access", "pymongo", "httpx", "httpcore")


class RequestContextFilter(logging.Filter):
    """Copies the request context onto every record passing the handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get() or "-"
        if not getattr(record, "user_id", None):
            record.user_id = user_id.get() or "-"
        return True


def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Values a caller passed through ``extra=``."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and key not in _CONTEXT_ATTRS and not key.startswith("_")
    }


class StructuredLogFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` values become top-level keys."""

    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        for attr in _CONTEXT_ATTRS:
            value = getattr(record, attr, "-")
            if value and value != "-":
                entry[attr] = value

        entry.update(extra_fields(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging() -> None:
    """
    Install the stdout handler on the root logger at ``LOG_LEVEL``.

    JSON output unless ``ENABLE_STRUCTURED_LOGGING`` is off. Safe to call more
    than once; the previous handlers are replaced.
    """
    settings = get_settings()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    if settings.ENABLE_STRUCTURED_LOGGING:
        handler.setFormatter(StructuredLogFormatter(settings.PROJECT_NAME))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s [%(correlation_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_correlation_id(corr_id: Optional[str] = None) -> str:
    """
    Set the correlation id of the current request.

    Args:
        corr_id: Incoming id; a new UUID4 is generated when empty

    Returns:
        The id in effect
    """
    corr_id = corr_id or str(uuid.uuid4())
    correlation_id.set(corr_id)
    return corr_id


def set_user_id(u_id: str) -> None:
    user_id.set(u_id)
