"""Request logging and exception handling for the Cherry API."""
from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from cherry_core.exceptions import CherryException, InvocationAborted
from cherry_core.logging_config import (
    clear_context,
    generate_correlation_id,
    generate_request_id,
    set_correlation_id,
    set_request_id,
)

logger = logging.getLogger("cherry.api")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns request/correlation IDs and logs each request with timing."""

    def __init__(self, app, exclude_paths: list[str] | None = None):
        super().__init__(app)
        self.exclude_paths = set(exclude_paths or [])

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        request.state.request_id = request_id
        set_request_id(request_id)
        set_correlation_id(generate_correlation_id())

        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            clear_context()

        duration_ms = (time.perf_counter() - start) * 1000
        if request.url.path not in self.exclude_paths:
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({duration_ms:.1f}ms)",
                extra={"request_id": request_id, "duration_ms": round(duration_ms, 2)},
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def get_request_id(request: Request) -> str:
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get(REQUEST_ID_HEADER, "unknown")


async def cherry_exception_handler(request: Request, exc: CherryException) -> JSONResponse:
    body = exc.to_dict()
    body["request_id"] = get_request_id(request)
    body["recoverable"] = not isinstance(exc, InvocationAborted)

    if isinstance(exc, InvocationAborted):
        logger.error(f"{request.method} {request.url.path} aborted: {exc.error_code} {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} refused: {exc.error_code} {exc.message}")

    return JSONResponse(status_code=exc.http_status, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CherryException, cherry_exception_handler)
