"""
Logging for the user management service.

Every record carries the request id set by ``RequestIdMiddleware``.
Production writes one JSON object per line; development writes short
human-readable lines. Credentials never reach a log line: any ``extra=``
key naming a password, hash, token or secret is replaced with a marker.

Usage:
    from user_accounts.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Registered user", extra={"user_id": str(uid)})
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

SERVICE_NAME = "user-accounts"
REDACTED = "[REDACTED]"

# extra= keys whose values are never written out
SENSITIVE_KEYS = frozenset((
    "password",
    "password_hash",
    "token",
    "authorization",
    "jwt_secret",
))

# LogRecord attributes that are not user-supplied extras
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "request_id"}

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


def get_request_id() -> Optional[str]:
    """Request id of the request being served, if any."""
    return request_id_var.get()


def redact(key: str, value: Any) -> Any:
    """Mask ``value`` when ``key`` names a credential."""
    return REDACTED if key.lower() in SENSITIVE_KEYS else value


class RequestIdFilter(logging.Filter):
    """Stamp ``record.request_id`` from the request context ('-' outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"  # type: ignore[attr-defined]
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, extras included and credentials masked."""

    def __init__(self, service: str = SERVICE_NAME):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "service": self.service,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None)
        if request_id and request_id != "-":
            entry["request_id"] = request_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or value is None:
                continue
            value = redact(key, value)
            try:
                json.dumps(value)
            except (TypeError, ValueError):
                value = str(value)
            entry[key] = value

        return json.dumps(entry)


def _dev_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s %(message)s",
        datefmt="%H:%M:%S",
    )


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
) -> None:
    """
    Install the service's single stderr handler on the root logger.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR)
        environment: 'production' selects JSON output
        debug: Force DEBUG regardless of ``log_level``
    """
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JsonFormatter() if environment == "production" else _dev_formatter())

    root = logging.getLogger()
    root.setLevel(level)
    # replace rather than stack handlers on reload
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
