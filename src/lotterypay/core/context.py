"""Correlation IDs for request and background-job log lines."""

from __future__ import annotations

import uuid
from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def new_correlation_id(prefix: str = "") -> str:
    """Generate a short correlation ID, optionally prefixed (e.g. ``"wh-"``)."""
    return f"{prefix}{uuid.uuid4().hex[:12]}"


def set_correlation_id(value: str | None) -> None:
    _correlation_id.set(value)


def get_correlation_id() -> str | None:
    return _correlation_id.get()
