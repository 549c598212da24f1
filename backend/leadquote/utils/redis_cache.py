"""Redis access for the distance lookup cache.

Entries are stored as ``"<miles>,<minutes>"`` under
``dist:miles:<origin>::<destination>`` with both addresses lower-cased.
When ``REDIS_URL`` is empty or one of ``none``/``disabled``/``false``/``0``,
or the client cannot be created, a no-op client is used and every lookup
misses.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

import redis

from leadquote.core.config import settings

logger = logging.getLogger(__name__)

DISTANCE_KEY_PREFIX = "dist:miles"
_DISABLED = {"none", "disabled", "false", "0"}

_redis_client: Optional[redis.Redis] = None


class _NullRedis:
    """Stands in for Redis when caching is off; reads miss, writes vanish."""

    def get(self, key: str):
        return None

    def setex(self, key: str, expire: int, value: str):
        return None

    def close(self):
        return None


def get_redis_client() -> redis.Redis:
    global _redis_client
    if _redis_client is not None:
        return _redis_client
    url = (settings.REDIS_URL or "").strip()
    if not url or url.lower() in _DISABLED:
        _redis_client = _NullRedis()  # type: ignore[assignment]
        return _redis_client
    try:
        _redis_client = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        )
    except Exception as exc:
        logger.warning("Redis unavailable, distance cache disabled: %s", exc)
        _redis_client = _NullRedis()  # type: ignore[assignment]
    return _redis_client


def close_redis_client() -> None:
    global _redis_client
    if _redis_client is not None:
        try:
            _redis_client.close()
        finally:
            _redis_client = None


def distance_cache_key(origin: str, destination: str) -> str:
    return f"{DISTANCE_KEY_PREFIX}:{origin.strip().lower()}::{destination.strip().lower()}"


def get_cached_distance(key: str) -> Optional[Tuple[Decimal, Decimal]]:
    """Return ``(miles, minutes)`` for ``key`` or ``None`` on a miss.

    Connection errors and malformed entries count as misses.
    """
    try:
        raw = get_redis_client().get(key)
    except redis.RedisError as exc:
        logger.debug("Distance cache read failed: %s", exc)
        return None
    if not raw:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    try:
        miles, minutes = raw.split(",")
        return Decimal(miles), Decimal(minutes)
    except (ValueError, InvalidOperation):
        return None


def cache_distance(key: str, miles: Decimal, minutes: Decimal, ttl: int) -> None:
    try:
        get_redis_client().setex(key, ttl, f"{miles},{minutes}")
    except redis.RedisError as exc:
        logger.debug("Distance cache write failed: %s", exc)
