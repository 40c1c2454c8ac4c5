import json
import redis
from typing import Optional, Any
from ..config import settings

_redis_client: Optional[redis.Redis] = None

def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True
        )
    return _redis_client

def flag_cache_key(name: str) -> str:
    return f"flags:single:{name}"

def get_cache(key: str) -> Optional[Any]:
    """Cached JSON value or None; an unreachable Redis counts as a miss."""
    try:
        value = get_redis().get(key)
        if value:
            return json.loads(value)
    except (redis.RedisError, ValueError):
        pass
    return None

def set_cache(key: str, value: Any, ttl: int = None) -> bool:
    try:
        get_redis().setex(key, ttl or settings.CACHE_TTL, json.dumps(value, ensure_ascii=False))
        return True
    except redis.RedisError:
        return False

def close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        _redis_client.close()
        _redis_client = None
