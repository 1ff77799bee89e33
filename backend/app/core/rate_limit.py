"""
Rate limiting middleware.

Fixed-window request counters per client IP, stored in Redis. When Redis
is unavailable the limiter lets requests through and logs a warning.
"""

import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from backend.app.core import redis_client as redis_client_module
from backend.app.core.exceptions import RateLimitExceededError, error_body

logger = logging.getLogger("carsawa.rate_limit")


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limit: int = 100, window_seconds: int = 900, path_prefix: str = "/api"):
        super().__init__(app)
        self.limit = limit
        self.window_seconds = window_seconds
        self.path_prefix = path_prefix

    def _key(self, request: Request) -> str:
        client_ip = request.client.host if request.client else "unknown"
        return f"ratelimit:{client_ip}"

    async def _hit(self, key: str) -> int:
        # Module attribute lookup so the client can be swapped at runtime
        client = redis_client_module.redis_client
        # The window key is created with its expiry and bumped in one transaction
        async with client.pipeline(transaction=True) as pipe:
            _, count = await (
                pipe.set(key, 0, ex=self.window_seconds, nx=True)
                .incr(key)
                .execute()
            )
        return int(count)

    async def dispatch(self, request: Request, call_next) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        try:
            count = await self._hit(self._key(request))
        except Exception as exc:
            logger.warning("Rate limiter unavailable, allowing request: %s", exc)
            return await call_next(request)

        if count > self.limit:
            exc = RateLimitExceededError()
            return JSONResponse(status_code=exc.status_code, content=error_body(exc))

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limit)
        response.headers["X-RateLimit-Remaining"] = str(max(self.limit - count, 0))
        return response
