"""
Observability middleware.

Tags every request with a correlation id, reports its duration and writes
one access log line per request.
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("carsawa.access")

CORRELATION_HEADER = "X-Correlation-ID"


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers["X-Process-Time"] = str(elapsed_ms)

        # Set by the authorization gate on authenticated routes
        dealer = getattr(request.state, "dealer", None)

        logger.log(
            _level_for(response.status_code),
            "%s %s -> %d (%.2f ms) [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            correlation_id,
            extra={
                "correlation_id": correlation_id,
                "dealer_id": dealer.id if dealer is not None else None,
                "query": str(request.url.query),
                "ip": request.client.host if request.client else "unknown",
            },
        )
        return response
