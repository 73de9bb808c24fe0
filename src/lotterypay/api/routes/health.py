"""Health check routes: liveness, readiness, and general health."""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/health")
def health_check(request: Request) -> dict[str, Any]:
    """Application health check endpoint."""
    settings = getattr(request.app.state, "settings", None)
    database = getattr(request.app.state, "database", None)
    return {
        "status": "ok",
        "environment": settings.app_env if settings else "unknown",
        "database": "connected" if database is not None and database.is_open else "disconnected",
    }


@router.get("/health/live")
def liveness_probe() -> dict[str, Any]:
    """Liveness probe: the process is up and answering."""
    return {"status": "alive"}


@router.get("/health/ready")
def readiness_probe(request: Request) -> Any:
    """Readiness probe: database reachable and SMTP accepting connections."""
    checks: dict[str, Any] = {}
    overall_ready = True

    database = getattr(request.app.state, "database", None)
    if database is not None and database.is_open:
        try:
            start = time.perf_counter()
            database.ping()
            checks["database"] = {
                "status": "ok",
                "response_time_ms": round((time.perf_counter() - start) * 1000, 1),
            }
        except Exception as exc:
            checks["database"] = {"status": "error", "detail": str(exc)}
            overall_ready = False
    else:
        checks["database"] = {"status": "not_configured"}
        settings = getattr(request.app.state, "settings", None)
        if settings and settings.is_production:
            overall_ready = False

    email_service = getattr(request.app.state, "email_service", None)
    if email_service is not None:
        if email_service.verify_connection():
            checks["smtp"] = {"status": "ok"}
        else:
            checks["smtp"] = {"status": "error"}
            overall_ready = False

    body = {"status": "ready" if overall_ready else "not_ready", "checks": checks}
    if not overall_ready:
        return JSONResponse(content=body, status_code=503)
    return body
