"""Redis client connection.

The client is created in the application lifespan and kept on ``app.state``;
there is no module-level instance.
"""

from redis.asyncio import Redis

from tickrtime.core.exceptions import StorageError
from tickrtime.core.logging import get_logger

logger = get_logger(__name__)


async def init_redis(redis_url: str) -> Redis:
    """Create a Redis client and verify the connection."""
    redis = Redis.from_url(redis_url, decode_responses=True)
    try:
        pong = redis.ping()
        if hasattr(pong, "__await__"):
            await pong
    except Exception as e:
        await redis.aclose()
        raise StorageError(f"Redis connection failed: {e}") from e
    logger.info("Redis connected")
    return redis


async def close_redis(redis: Redis | None) -> None:
    """Close a Redis client created by ``init_redis``."""
    if redis is not None:
        await redis.aclose()
        logger.info("Redis disconnected")
