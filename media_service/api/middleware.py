"""API middleware -- CORS, request logging, and error handling.

Middleware is a stack (last added, first executed).  ``main.py`` adds
``ErrorHandlingMiddleware`` before ``RequestLoggingMiddleware``, so:

    Client -> RequestLogging -> ErrorHandling -> route handler

and the request log line records the *final* status code, including the
ones produced by error mapping.
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from media_service.api.schemas import ErrorResponse
from media_service.utils.errors import InvalidInputError, MediaServiceError, UpstreamError
from media_service.utils.logging import bind_request_context, clear_request_context, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_GENERIC_FAILURE_DETAIL = "An error occurred while processing your request."


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Parameters
    ----------
    app:
        The FastAPI application instance.
    allowed_origins:
        Explicit list of allowed origins.  Defaults to ``["*"]`` for
        development; override with specific origins in production.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration.

    A request id is bound into the structlog context for the lifetime of the
    request, so service and provider log lines can be correlated.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        bind_request_context(request_id=request_id)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                query=str(request.url.query),
                status=status_code,
                duration_ms=duration_ms,
            )
            clear_request_context()


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


def status_for_error(exc: MediaServiceError) -> int:
    """Map an application error to its HTTP status code.

    Invalid caller input is a 400; every other application error (upstream
    transient, permanent, malformed, configuration) is a 500.
    """
    if isinstance(exc, InvalidInputError):
        return 400
    return 500


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert ``MediaServiceError`` subclasses into structured JSON errors.

    Input errors echo their message to the client.  Server-side failures
    return a generic detail; the provider, endpoint, and cause stay in the
    server log.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except MediaServiceError as exc:
            status_code = status_for_error(exc)
            log_fields = {
                "error_type": type(exc).__name__,
                "message": exc.message,
                "provider": exc.provider_name,
                "path": str(request.url.path),
                "status": status_code,
            }
            if isinstance(exc, UpstreamError):
                log_fields.update(
                    resource=exc.resource,
                    endpoint=exc.endpoint,
                    upstream_status=exc.status_code,
                )

            if status_code >= 500:
                _logger.error("application_error", **log_fields)
                detail = _GENERIC_FAILURE_DETAIL
            else:
                _logger.info("client_error", **log_fields)
                detail = exc.message

            body = ErrorResponse(error=type(exc).__name__, detail=detail)
            return JSONResponse(status_code=status_code, content=body.model_dump())
