"""
Request logging and metrics middleware for the Image Store Sync HTTP trigger.

Health checks and Prometheus scrapes hit the service every few seconds, so
they are logged at debug level; audit requests are logged at info.
"""

import time
import uuid
from typing import Callable, FrozenSet

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from imagesync.utils.metrics import REQUEST_COUNT, REQUEST_LATENCY

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATHS: FrozenSet[str] = frozenset({"/api/health", "/metrics"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware binding a request ID to the log context and timing each request.

    A caller-supplied ``X-Request-ID`` is kept so an audit triggered by the web
    application can be traced across both services.
    """

    async def dispatch(
            self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """
        Process a request, log it and record its metrics.

        Args:
            request: The incoming request
            call_next: The next middleware or route handler

        Returns:
            The response from the next middleware or route handler
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        path = request.url.path
        log = logger.debug if path in QUIET_PATHS else logger.info

        structlog.contextvars.bind_contextvars(request_id=request_id, method=request.method, path=path)
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception("Request failed", exc_info=e, process_time=f"{time.time() - start_time:.4f}s")
            raise
        else:
            duration = time.time() - start_time
            response.headers[REQUEST_ID_HEADER] = request_id

            REQUEST_LATENCY.labels(method=request.method, endpoint=path).observe(duration)
            REQUEST_COUNT.labels(method=request.method, endpoint=path, status=response.status_code).inc()

            log("Request completed", status_code=response.status_code, process_time=f"{duration:.4f}s")
            return response
        finally:
            structlog.contextvars.clear_contextvars()
