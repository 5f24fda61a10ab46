"""
Structured logging configuration for Pollguard.

JSON logs for aggregation outside development, plain text locally.
Credentials that end up in log extras are replaced before a record
is written.
"""
import logging
import sys
from typing import Any, Optional

from pythonjsonlogger import jsonlogger

REDACTED = "[REDACTED]"

# Extra attributes copied onto JSON records when present
CONTEXT_FIELDS = ("trace_id", "client", "path", "policy", "poll_id", "user_id", "field")

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "access_token",
        "refresh_token",
        "token",
        "authorization",
        "cookie",
        "apikey",
        "api_key",
        "secret",
    }
)


def redact(value: Any) -> Any:
    """Return a copy of value with sensitive keys masked, at any depth."""
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


class PollguardJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding service metadata and masking credentials."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.pop("asctime", None)
        log_record["level"] = log_record.pop("levelname", record.levelname)
        log_record["logger"] = record.name
        log_record["service"] = "pollguard"

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                log_record[name] = getattr(record, name)

        for key in list(log_record):
            if key.lower() in SENSITIVE_KEYS:
                log_record[key] = REDACTED
            else:
                log_record[key] = redact(log_record[key])


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name, case-insensitive
        json_format: JSON output (True) or plain text (False)
        log_file: Also write to this file when set
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    root_logger.handlers.clear()

    if json_format:
        formatter = PollguardJsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    # Per-request access lines duplicate MetricsMiddleware
    for name in ("uvicorn.access", "sqlalchemy.engine", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)
