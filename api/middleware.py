"""
Request middleware for the Tempest API.

- RequestContextMiddleware: assigns a request ID (reusing X-Request-ID when
  the caller sends one), echoes it back and writes one JSON access log line
- ErrorHandlingMiddleware: turns anything unhandled into a JSON 500 that
  carries the request ID
"""
import json
import logging
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """ID of the request being served, None outside a request."""
    return request_id_ctx.get()


class StructuredLogger:
    """
    Writes each record as a single JSON object.

    Records carry the service name and the current request ID; keyword
    arguments are added as fields and None values are left out.
    """

    def __init__(self, name: str, service: str = "tempest-api"):
        self.logger = logging.getLogger(name)
        self.service = service

    def _emit(self, level: int, message: str, **fields):
        if not self.logger.isEnabledFor(level):
            return
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "service": self.service,
            "request_id": get_request_id(),
            "message": message,
            **fields,
        }
        self.logger.log(level, json.dumps({k: v for k, v in record.items() if v is not None}))

    def info(self, message: str, **fields):
        self._emit(logging.INFO, message, **fields)

    def warning(self, message: str, **fields):
        self._emit(logging.WARNING, message, **fields)

    def error(self, message: str, **fields):
        self._emit(logging.ERROR, message, **fields)


structured_logger = StructuredLogger("tempest.api")


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request ID propagation plus an access log line per request."""

    QUIET_PATHS = {"/api/health"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_ctx.set(request_id)
        started = time.perf_counter()
        log_fields = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
        }
        quiet = request.url.path in self.QUIET_PATHS

        try:
            response = await call_next(request)
        except Exception as e:
            structured_logger.error(
                "Request failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(started),
                **log_fields,
            )
            raise
        finally:
            request_id_ctx.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        if not quiet:
            structured_logger.info(
                "Request completed",
                status_code=response.status_code,
                query=str(request.query_params) or None,
                duration_ms=_elapsed_ms(started),
                request_id=request_id,
                **log_fields,
            )
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """JSON 500 for unhandled exceptions; the exception text only in debug mode."""

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            request_id = get_request_id()
            logging.getLogger(__name__).exception(f"Unhandled error on {request.method} {request.url.path}")
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal Server Error",
                    "detail": str(e) if self.debug else "Unexpected server error, quote the request ID when reporting it.",
                    "request_id": request_id,
                },
                headers={REQUEST_ID_HEADER: request_id} if request_id else {},
            )


def setup_middleware(app: FastAPI, debug: bool = False):
    """
    Install request middleware.

    The last one added runs first, so the request context wraps the error
    handler and 500 responses still carry the request ID.
    """
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
    app.add_middleware(RequestContextMiddleware)
