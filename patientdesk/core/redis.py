# patientdesk/core/redis.py
"""
Report cache on Redis.

Reports are rebuilt from the database on every miss, so Redis is optional:
without PATIENTDESK_REDIS_URL, or when the server is unreachable, every
helper here turns into a no-op and the API keeps working uncached.
"""

import logging
from functools import lru_cache
from typing import Any, Callable, Optional

import redis

from patientdesk.core.config import get_settings

logger = logging.getLogger(__name__)

REPORT_KEY_PREFIX = "patientdesk:report:"


@lru_cache
def get_redis_client() -> Optional[redis.Redis]:
    """Connected client, or None when caching is off. Resolved once per process."""
    url = get_settings().redis_url
    if not url:
        logger.info("No Redis URL configured; report caching disabled.")
        return None

    client = redis.from_url(url, decode_responses=True, socket_connect_timeout=2, socket_timeout=2)
    try:
        client.ping()
    except redis.RedisError as e:
        logger.warning("Redis at %s unreachable (%s); report caching disabled.", url, e)
        return None
    return client


def _run(action: str, default: Any, command: Callable[[redis.Redis], Any]) -> Any:
    client = get_redis_client()
    if client is None:
        return default
    try:
        return command(client)
    except redis.RedisError as e:
        logger.warning("Redis %s failed: %s", action, e)
        return default


def cache_get(key: str) -> Optional[str]:
    return _run(f"GET {key}", None, lambda client: client.get(key))


def cache_set(key: str, value: str, ttl: int = 60) -> bool:
    return _run(f"SETEX {key}", False, lambda client: bool(client.setex(key, ttl, value)))


def invalidate_reports() -> int:
    """Drop every cached report; returns how many keys went."""

    def _drop(client: redis.Redis) -> int:
        keys = list(client.scan_iter(match=f"{REPORT_KEY_PREFIX}*"))
        if keys:
            client.delete(*keys)
        return len(keys)

    return _run("report invalidation", 0, _drop)
