"""Per-shop rate limiting and idempotency keys backed by Redis."""
from __future__ import annotations

import time
from typing import Optional

import redis.asyncio as redis
from fastapi import HTTPException, status

from src.core.config import settings

_redis_client: redis.Redis | None = None


async def _get_client() -> redis.Redis:
    """Return a cached Redis client instance."""

    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(str(settings.REDIS_URI), decode_responses=True)
    return _redis_client


async def close_client() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


async def check_rate_limit(shop: str) -> None:
    """Fixed one-minute window of ``settings.limits.rate_limit_rpm`` calls per shop."""

    client = await _get_client()
    window = int(time.time() // 60)
    key = f"rl:{shop}:{window}"
    current = await client.incr(key)
    if current == 1:
        await client.expire(key, 60)
    if current > settings.RATE_LIMIT_RPM:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded",
        )


async def ensure_idempotent(shop: str, key: Optional[str]) -> None:
    """Reject a write that reuses an ``Idempotency-Key`` seen for this shop."""

    if not key:
        return
    client = await _get_client()
    was_set = await client.set(
        f"idemp:{shop}:{key}",
        "1",
        ex=settings.limits.idempotency_ttl_seconds,
        nx=True,
    )
    if not was_set:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Duplicate request (idempotency)",
        )
