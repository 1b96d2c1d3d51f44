"""Request logging middleware."""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every API request with its outcome and duration.

    Each request gets a request id (taken from the incoming ``X-Request-ID``
    header when the caller supplies one) which is echoed back on the response
    so a failed allocation or holding write can be matched to its log lines.

    Health and documentation endpoints are not logged.
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self._quiet_paths = {"/health", "/health/db", "/docs", "/openapi.json", "/redoc"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self._quiet_paths:
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        client_host = request.client.host if request.client else "unknown"

        logger.info(f"[{request_id}] → {request.method} {request.url.path} from {client_host}")
        start_time = time.perf_counter()

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"[{request_id}] ← {request.method} {request.url.path} - "
            f"{response.status_code} ({duration:.3f}s)",
        )

        response.headers["X-Process-Time"] = f"{duration:.3f}"
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
