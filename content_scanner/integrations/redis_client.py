"""
Upstash Redis integration: shared counters for per-IP rate limiting.

Serverless instances do not share memory, so counters kept in Redis give one
limit across all of them. Without credentials the limiter falls back to its
per-process memory window.

`client` starts as None. `initialize()` runs inside the FastAPI lifespan;
consumers read `redis_client.client` at call time instead of importing it.
"""

import logging
from typing import Optional

from upstash_redis import Redis

from content_scanner.config import settings

logger = logging.getLogger(__name__)

client: Optional[Redis] = None


def initialize() -> None:
    global client

    if not (settings.upstash_redis_host and settings.upstash_redis_password):
        logger.warning("[STARTUP] Redis credentials not set; rate limiting uses process memory.")
        return

    try:
        client = Redis(url=settings.upstash_redis_host, token=settings.upstash_redis_password)
        logger.info("[STARTUP] Upstash Redis client ready for rate-limit counters")
    except Exception as e:
        client = None
        logger.error(f"[STARTUP] Upstash Redis init failed, using memory limiter: {e}")


def shutdown() -> None:
    global client
    client = None
