import json
import logging

import redis

from fleet_monitor.config import REDIS_URL

logger = logging.getLogger(__name__)

SNAPSHOT_CACHE_KEY = "solar:snapshot"

redis_client = redis.Redis.from_url(REDIS_URL, decode_responses=True)

def set_cache(key: str, value, ex: int = 3600):
    try:
        redis_client.set(key, json.dumps(value, default=str), ex=ex)
    except redis.RedisError as e:
        logger.warning("Redis set failed for %s: %s", key, e)

def get_cache(key: str):
    try:
        v = redis_client.get(key)
    except redis.RedisError as e:
        logger.warning("Redis get failed for %s: %s", key, e)
        return None
    if v is None:
        return None
    try:
        return json.loads(v)
    except ValueError:
        return None

def invalidate_cache(key: str):
    try:
        redis_client.delete(key)
    except redis.RedisError as e:
        logger.warning("Redis delete failed for %s: %s", key, e)
