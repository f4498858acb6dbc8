"""
Logging Middleware

Provides request/response logging for monitoring and debugging.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log HTTP requests and responses.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        method = request.method
        path = request.url.path
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id

        logger.info(
            f"Request started: {method} {path}",
            extra={"request_id": request_id, "event_type": "request_start"},
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {method} {path} in {process_time:.3f}s - {exc}",
                extra={
                    "request_id": request_id,
                    "process_time": process_time,
                    "error": str(exc),
                    "event_type": "request_error",
                },
            )
            # Re-raise so the registered exception handlers decide the response
            raise

        process_time = time.time() - start_time
        logger.info(
            f"Request completed: {method} {path} - {response.status_code} in {process_time:.3f}s",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "process_time": process_time,
                "event_type": "request_complete",
            },
        )

        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id
        return response
