"""
Per-client request throttling for the /api/v1 routers.

Fixed windows are counted in process memory and mirrored to Redis every few
seconds, so several API workers converge on one count without a Redis round
trip per request.
"""

import logging
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request, status

from .config import (
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_MAX,
    RATE_LIMIT_WINDOW_SECONDS,
    REDIS_DB,
    REDIS_HOST,
    REDIS_PASSWORD,
    REDIS_PORT,
    REDIS_SSL,
    REDIS_URL,
)

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None

# {key: {"count": int, "reset_time": int, "last_redis_sync": int}}
memory_cache: dict[str, dict] = {}
cache_lock = Lock()

SYNC_INTERVAL_SECONDS = 10
CLEANUP_INTERVAL_SECONDS = 60
last_cleanup_time = 0

REDIS_OPTIONS = {
    "decode_responses": True,
    "socket_connect_timeout": 5,
    "socket_timeout": 5,
    "retry_on_timeout": True,
    "health_check_interval": 30,
}


def get_redis_client() -> redis.Redis:
    """Connect lazily; REDIS_URL wins over the host/port settings"""
    global redis_client

    if redis_client is not None:
        return redis_client

    try:
        if REDIS_URL:
            client = redis.from_url(REDIS_URL, **REDIS_OPTIONS)
        else:
            client = redis.Redis(
                host=REDIS_HOST,
                port=REDIS_PORT,
                password=REDIS_PASSWORD,
                db=REDIS_DB,
                ssl=REDIS_SSL,
                **REDIS_OPTIONS,
            )
        client.ping()
    except redis.RedisError as e:
        logger.error(f"❌ Rate limiter could not reach Redis: {str(e)}")
        raise

    logger.info(f"📡 Rate limiter connected to Redis ({'url' if REDIS_URL else REDIS_HOST})")
    redis_client = client
    return redis_client


def _drop_expired_windows(now: int) -> None:
    global last_cleanup_time

    if now - last_cleanup_time < CLEANUP_INTERVAL_SECONDS:
        return
    last_cleanup_time = now

    expired = [key for key, window in memory_cache.items() if now >= window["reset_time"]]
    for key in expired:
        del memory_cache[key]
    if expired:
        logger.debug(f"🧹 Dropped {len(expired)} expired rate limit windows")


def _load_window(key: str, now: int, window_seconds: int, client: redis.Redis) -> dict:
    """Seed a window from Redis so a fresh worker continues another worker's count"""
    try:
        count = client.get(key)
        ttl = client.ttl(key)
    except Exception as e:
        logger.warning(f"⚠️ Rate limit window {key} not loaded from Redis: {e}")
        count, ttl = None, 0

    if count and ttl > 0:
        return {"count": int(count), "reset_time": now + ttl, "last_redis_sync": now}
    return {"count": 0, "reset_time": now + window_seconds, "last_redis_sync": now}


def _sync_window(
    key: str, window: dict, now: int, window_seconds: int, client: redis.Redis
) -> None:
    if now - window["last_redis_sync"] < SYNC_INTERVAL_SECONDS:
        return
    try:
        pipe = client.pipeline()
        pipe.set(key, window["count"], ex=window_seconds)
        pipe.execute()
        window["last_redis_sync"] = now
    except Exception as e:
        logger.warning(f"⚠️ Rate limit window {key} not synced to Redis: {e}")


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: redis.Redis
) -> tuple[bool, int, int]:
    """
    Count one request against key.

    Returns:
        Tuple of (is_allowed, current_count, seconds_until_reset). Any unexpected
        failure denies the request.
    """
    try:
        now = int(time.time())
        with cache_lock:
            _drop_expired_windows(now)

            window = memory_cache.get(key)
            if window is None:
                window = memory_cache[key] = _load_window(key, now, window_seconds, client)

            if now >= window["reset_time"]:
                window.update(count=0, reset_time=now + window_seconds, last_redis_sync=0)

            allowed = window["count"] < limit
            if allowed:
                window["count"] += 1

            _sync_window(key, window, now, window_seconds, client)
            return allowed, window["count"], max(0, window["reset_time"] - now)

    except Exception as e:
        logger.error(f"❌ Rate limit check failed for {key}, denying request: {str(e)}")
        return False, limit, 0


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def rate_limit_dependency(
    request: Request, limit: int, window_seconds: int, key_prefix: str = "api"
):
    """Throttle per client IP; 429 once the window is spent, 503 if the limiter is down"""
    try:
        client = get_redis_client()
        key = f"{key_prefix}:{client_ip(request)}"
        allowed, count, retry_after = check_rate_limit(key, limit, window_seconds, client)
    except Exception as e:
        logger.error(f"🔒 Rate limiter unavailable, refusing {request.url.path}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Rate limiting service temporarily unavailable",
        ) from e

    if not allowed:
        logger.warning(f"🚫 Rate limit exceeded for {key} ({count}/{limit})")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after": retry_after,
                "limit": limit,
                "window_seconds": window_seconds,
            },
            headers={"Retry-After": str(retry_after)},
        )

    request.state.rate_limit_remaining = limit - count


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "api"):
    """
    Build a FastAPI dependency enforcing limit requests per window_seconds.

    Example:
        lead_import_limiter = create_rate_limiter(5, 60, key_prefix="lead_import")

        @router.post("/import", dependencies=[Depends(lead_import_limiter)])
    """

    async def rate_limiter(request: Request):
        if not RATE_LIMIT_ENABLED:
            return
        await rate_limit_dependency(request, limit, window_seconds, key_prefix)

    return rate_limiter


api_rate_limiter = create_rate_limiter(RATE_LIMIT_MAX, RATE_LIMIT_WINDOW_SECONDS)

# Bulk imports write up to 100 rows per call
lead_import_limiter = create_rate_limiter(5, 60, key_prefix="lead_import")
