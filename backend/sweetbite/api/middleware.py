"""API middleware for request processing."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from sweetbite.utils.helpers import generate_uuid

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its outcome, timing and a correlation id.

    The id is taken from the incoming ``X-Request-ID`` header when the UI
    client sends one, and echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_uuid()
        started = time.monotonic()
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = time.monotonic() - started
            logger.error(
                "%s %s failed after %.3fs: %s",
                request.method,
                request.url.path,
                elapsed,
                e,
                extra={**context, "process_time_s": round(elapsed, 3)},
            )
            raise

        elapsed = time.monotonic() - started
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s -> %s in %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
            extra={
                **context,
                "status_code": response.status_code,
                "process_time_s": round(elapsed, 3),
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.3f}"
        return response
