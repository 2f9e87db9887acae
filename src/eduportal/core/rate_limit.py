"""
Rate Limiting Module

Per-client request limits for the authentication endpoints (login,
registration) to slow down credential stuffing and signup spam.

Uses a sliding window kept in Redis sorted sets; falls back to an
in-memory window when Redis is unavailable.
"""

import logging
import time
from collections.abc import Callable

from fastapi import Request

from eduportal.core.config import settings
from eduportal.core.exceptions import RateLimitExceeded
from eduportal.core.redis import get_redis

logger = logging.getLogger(__name__)

# In-memory fallback: {key: [timestamp, ...]} and {key: window_seconds}
_memory_store: dict[str, list[float]] = {}
_memory_windows: dict[str, int] = {}

# Idle keys are swept at most this often
MEMORY_SWEEP_INTERVAL = 60.0
_last_sweep = 0.0


async def _check_rate_limit_redis(client, key: str, limit: int, window_seconds: int) -> bool:
    """
    Check rate limit using Redis.

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, window_start)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)

    results = await pipe.execute()
    current_count = results[1]

    return current_count < limit


def _sweep_memory_store(now: float) -> None:
    """Drop keys with no hits left inside their own window."""
    global _last_sweep
    if now - _last_sweep < MEMORY_SWEEP_INTERVAL:
        return
    _last_sweep = now

    for key in list(_memory_store):
        window_start = now - _memory_windows.get(key, 0)
        hits = [ts for ts in _memory_store[key] if ts > window_start]
        if hits:
            _memory_store[key] = hits
        else:
            del _memory_store[key]
            _memory_windows.pop(key, None)


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check rate limit using in-memory storage.

    Only limits within this process; used when Redis is unavailable.
    Keys whose hits have all aged out of their window are dropped.
    """
    now = time.time()
    window_start = now - window_seconds

    _sweep_memory_store(now)
    _memory_windows[key] = window_seconds

    hits = [ts for ts in _memory_store.get(key, []) if ts > window_start]
    if len(hits) >= limit:
        _memory_store[key] = hits
        return False

    hits.append(now)
    _memory_store[key] = hits
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check if a request is within rate limits.

    Tries Redis first, falls back to in-memory storage.

    Args:
        key: Unique key for this rate limit (e.g., "rate_limit:login:10.0.0.1")
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    client = get_redis()

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


def client_ip_key(scope: str) -> Callable[[Request], str]:
    """Build a key function limiting by client IP within a named scope."""

    def key_func(request: Request) -> str:
        client_ip = request.client.host if request.client else "unknown"
        return f"rate_limit:{scope}:{client_ip}"

    return key_func


def rate_limit(
    limit: int = 10,
    window_seconds: int = 60,
    key_func: Callable[[Request], str] | None = None,
):
    """
    Build a FastAPI dependency enforcing a request limit.

    Usage:
        @router.post("/login", dependencies=[Depends(rate_limit(limit=5))])
        async def login(...):
            ...

    Args:
        limit: Maximum requests allowed in the window (default: 10)
        window_seconds: Time window in seconds (default: 60)
        key_func: Optional function to generate the key from the request.
                  Default uses client IP + endpoint path.

    Raises:
        RateLimitExceeded: When rate limit is exceeded (HTTP 429)
    """

    async def dependency(request: Request) -> None:
        if not settings.rate_limit_enabled:
            return

        if key_func:
            key = key_func(request)
        else:
            client_ip = request.client.host if request.client else "unknown"
            key = f"rate_limit:{client_ip}:{request.url.path}"

        if not await check_rate_limit(key, limit, window_seconds):
            logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
            raise RateLimitExceeded(limit, window_seconds)

    return dependency


__all__ = [
    "rate_limit",
    "check_rate_limit",
    "client_ip_key",
    "RateLimitExceeded",
]
