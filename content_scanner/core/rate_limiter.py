"""
Per-IP rate limiting for /api/* routes: Redis-backed (preferred) with an
in-memory sliding-window fallback.

The Redis client is accessed at call-time via the integration module
so it picks up the instance initialized during the FastAPI lifespan.
"""

import math
import time
import logging
from typing import Dict, List

from fastapi import HTTPException, Request

from content_scanner.config import settings
from content_scanner.core.client import get_client_ip
from content_scanner.integrations import redis_client as redis_module

logger = logging.getLogger(__name__)

# In-memory store: {ip: [timestamp, ...]}
_rate_limits: Dict[str, List[float]] = {}

RATE_LIMIT_WINDOW = settings.rate_limit_window_sec
MAX_REQUESTS_PER_WINDOW = settings.rate_limit_max_requests


def _too_many_requests(retry_after: int) -> HTTPException:
    retry_after = max(1, retry_after)
    return HTTPException(
        status_code=429,
        detail={
            "code": "RATE_LIMITED",
            "message": f"Too many requests. Try again in {retry_after} seconds.",
        },
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(MAX_REQUESTS_PER_WINDOW),
            "X-RateLimit-Remaining": "0",
        },
    )


def check_rate_limit(identifier: str) -> None:
    """Rate limiting using Redis (preferred) or Memory (fallback)."""
    rc = redis_module.client
    if rc:
        _check_rate_limit_redis(rc, identifier)
    else:
        _check_rate_limit_memory(identifier)


def _check_rate_limit_redis(rc, identifier: str) -> None:
    key = f"rate_limit:{identifier}"
    try:
        current_count = rc.incr(key)
        if current_count == 1:
            rc.expire(key, RATE_LIMIT_WINDOW)

        if current_count > MAX_REQUESTS_PER_WINDOW:
            logger.warning(f"[RATE] Redis limit exceeded for {identifier}")
            raise _too_many_requests(RATE_LIMIT_WINDOW)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[RATE] Redis rate limit error: {e}. Falling back to memory.")
        _check_rate_limit_memory(identifier)


def _check_rate_limit_memory(identifier: str) -> None:
    """Sliding-window in-memory rate limiting."""
    now = time.time()

    if len(_rate_limits) > settings.rate_limit_memory_limit:
        _cleanup_all_limits(now)

    hits = [t for t in _rate_limits.get(identifier, []) if now - t < RATE_LIMIT_WINDOW]

    if len(hits) >= MAX_REQUESTS_PER_WINDOW:
        _rate_limits[identifier] = hits
        retry_after = math.ceil(RATE_LIMIT_WINDOW - (now - hits[0]))
        logger.warning(f"[RATE] Memory limit exceeded for {identifier}")
        raise _too_many_requests(retry_after)

    hits.append(now)
    _rate_limits[identifier] = hits


def _cleanup_all_limits(now: float) -> None:
    """Remove all identifiers that have been idle for the full window."""
    expired_keys = [
        k for k, v in _rate_limits.items()
        if not v or now - v[-1] > RATE_LIMIT_WINDOW
    ]
    for k in expired_keys:
        del _rate_limits[k]
    logger.info(f"[RATE] Cleanup removed {len(expired_keys)} idle clients.")


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency applied to the /api router."""
    check_rate_limit(get_client_ip(request))
