from __future__ import annotations

import json
import logging
from typing import Any

import redis
from ..core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def _get_redis() -> redis.Redis:
    """
    Create a fresh Redis client per call so Celery workers and API
    processes never share a connection across forks.
    """
    return redis.from_url(
        str(settings.REDIS_URL),
        decode_responses=True,
        socket_timeout=2,
        socket_connect_timeout=2,
    )


def cached_get(
    key: str,
    set_value: Any | None = None,
    ttl: int | None = None,
) -> Any:
    """
    TTL cache backed by Redis.

    Usage:

        value = cached_get("k")                  # read
        cached_get("k", set_value=value, ttl=60) # write with TTL

    - On read: returns cached value (deserialized JSON) or None if missing/expired.
    - On write: stores value (serialized JSON) with optional TTL and returns it.
    - Redis being down behaves like a cache miss.
    """
    client = _get_redis()
    try:
        if set_value is None:
            # Read path
            val = client.get(key)
            if val is not None:
                return json.loads(val)
            return None

        # Write path
        serialized = json.dumps(set_value)
        if ttl is not None:
            client.set(key, serialized, ex=ttl)
        else:
            client.set(key, serialized)
        return set_value

    except redis.RedisError as e:
        logger.debug("Redis cache unavailable for %s: %s", key, e)
        return None
    finally:
        client.close()
