"""API middleware: CORS, security headers, request logging, error handlers."""

from __future__ import annotations

import logging
import time
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lotterypay.core.context import new_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

HSTS_HEADER = "max-age=31536000; includeSubDomains"


def setup_middleware(app: FastAPI) -> None:
    """Attach middleware and exception handlers to the app."""
    settings = getattr(app.state, "settings", None)
    is_prod = settings.is_production if settings else False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list if settings else ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def correlation_and_logging(  # type: ignore[no-untyped-def]
        request: Request, call_next
    ):
        correlation_id = request.headers.get("x-correlation-id") or new_correlation_id()
        set_correlation_id(correlation_id)

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = correlation_id
        response.headers["X-Response-Time"] = f"{elapsed:.1f}ms"
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        if is_prod:
            response.headers["Strict-Transport-Security"] = HSTS_HEADER

        logger.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response

    app.add_exception_handler(StarletteHTTPException, _http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Service errors raised as HTTPException keep their detail, in problem form."""
    try:
        title = HTTPStatus(exc.status_code).phrase
    except ValueError:
        title = "Error"
    response = rfc7807_error_response(
        status=exc.status_code,
        title=title,
        detail=str(exc.detail),
        instance=request.url.path,
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors: 400, not 422."""
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return rfc7807_error_response(
        status=400,
        title="Bad Request",
        detail="Request validation failed",
        instance=request.url.path,
        extra={"errors": errors},
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return rfc7807_error_response(
        status=500,
        title="Internal Server Error",
        detail="Internal server error",
        instance=request.url.path,
    )


def rfc7807_error_response(
    status: int,
    title: str,
    detail: str,
    type_uri: str = "about:blank",
    instance: str | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build an RFC 7807 Problem Details JSON response."""
    body: dict[str, Any] = {
        "type": type_uri,
        "title": title,
        "status": status,
        "detail": detail,
    }
    if instance:
        body["instance"] = instance
    if extra:
        body.update(extra)
    return JSONResponse(status_code=status, content=body)
