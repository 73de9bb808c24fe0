"""Logging setup: text or JSON output, correlation IDs, secret redaction."""

from __future__ import annotations

import json
import logging
import re
from datetime import UTC, datetime
from typing import Any

REDACTED = "***REDACTED***"

# Keys whose values are never written to logs
SENSITIVE_KEY = re.compile(r"password|pass$|secret|token|authorization|api[_-]?key", re.IGNORECASE)

# Inline patterns: (regex, replacement)
_INLINE_SECRETS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(Authorization:\s*Bearer\s+)\S+", re.IGNORECASE), r"\1" + REDACTED),
    (re.compile(r"(password[\s=:]+)\S+", re.IGNORECASE), r"\1" + REDACTED),
    # Mollie API keys: live_xxx / test_xxx
    (re.compile(r"\b(live|test)_[A-Za-z0-9]{20,}\b"), REDACTED),
]

# Attributes present on every LogRecord; anything else came in via ``extra=``
_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "correlation_id",
}


def redact_string(text: str) -> str:
    """Mask API keys, bearer tokens and passwords in freeform text."""
    for pattern, replacement in _INLINE_SECRETS:
        text = pattern.sub(replacement, text)
    return text


def redact_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively mask values stored under sensitive keys."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if SENSITIVE_KEY.search(key):
            result[key] = REDACTED
        elif isinstance(value, dict):
            result[key] = redact_dict(value)
        else:
            result[key] = value
    return result


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_string(record.getMessage()),
        }
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            entry["correlation_id"] = correlation_id

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": redact_string(str(record.exc_info[1])),
            }

        extras = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}
        if extras:
            entry["extra"] = redact_dict(extras)

        return json.dumps(entry, default=str)


class RedactingFormatter(logging.Formatter):
    """Human-readable formatter that includes the correlation ID."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s [%(correlation_id)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = "-"
        return redact_string(super().format(record))


class CorrelationFilter(logging.Filter):
    """Attach the current correlation ID to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        from lotterypay.core.context import get_correlation_id

        record.correlation_id = get_correlation_id()
        return True


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """Configure the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        log_format: ``"json"`` for structured output, ``"text"`` otherwise.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if log_format == "json" else RedactingFormatter())
    handler.addFilter(CorrelationFilter())
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
