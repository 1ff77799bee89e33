"""
Redis connection used by the request rate limiter.

The client connects lazily; short socket timeouts keep a dead Redis from
stalling requests (the limiter then lets traffic through).
"""

import redis.asyncio as redis
from redis.exceptions import RedisError
from backend.app.core.config import settings

redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
    socket_connect_timeout=2,
    socket_timeout=2,
)


async def ping_redis() -> bool:
    """Health probe: True when Redis answers a PING."""
    try:
        return bool(await redis_client.ping())
    except (RedisError, OSError):
        return False
