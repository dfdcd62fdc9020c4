import json
import redis
from redis.exceptions import RedisError

from tablebook.core.config import config
from tablebook.core.logging_config import get_logger

logger = get_logger()

_redis_client = None


def get_redis_client():
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    redis_url = config.REDIS_URL

    if not redis_url:
        return None

    try:
        client = redis.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        client.ping()
        logger.info("Redis connected")
        _redis_client = client
        return _redis_client
    except RedisError as e:
        logger.warning(f"Redis unavailable: {e}")
        return None


def slots_cache_key(restaurant_id, day, version: int = 0) -> str:
    return f"slots:{restaurant_id}:{day.isoformat()}:v{version}"


def _slots_version_key(restaurant_id, day) -> str:
    return f"slots-version:{restaurant_id}:{day.isoformat()}"


def get_slots_version(restaurant_id, day) -> int:
    """Current generation of the cached slot list for one restaurant day.

    Readers cache under the version they saw before computing, so a list
    computed before a booking change lands under a key nobody reads again.
    """
    client = get_redis_client()
    if not client:
        return 0
    try:
        return int(client.get(_slots_version_key(restaurant_id, day)) or 0)
    except RedisError as e:
        logger.warning(f"Cache version read failed for restaurant {restaurant_id} on {day}: {e}")
        return 0


def bump_slots_version(restaurant_id, day):
    client = get_redis_client()
    if not client:
        return
    try:
        client.incr(_slots_version_key(restaurant_id, day))
    except RedisError as e:
        logger.warning(f"Cache invalidation failed for restaurant {restaurant_id} on {day}: {e}")


def get_cache(key: str):
    client = get_redis_client()
    if not client:
        return None
    try:
        data = client.get(key)
        return json.loads(data) if data else None
    except RedisError as e:
        logger.warning(f"Cache read failed for {key}: {e}")
        return None


def set_cache(key: str, value, ttl: int = None):
    client = get_redis_client()
    if not client:
        return
    try:
        client.setex(key, ttl or config.SLOT_CACHE_TTL, json.dumps(value))
    except RedisError as e:
        logger.warning(f"Cache write failed for {key}: {e}")
