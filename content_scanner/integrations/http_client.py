"""
Shared aiohttp ClientSession for remote media fetches: opened in the FastAPI lifespan.

One pooled session serves single URL scans and batch fan-out. The pool is
sized to the batch limit so a full /api/scan-batch request fetches every
item concurrently; a per-host cap keeps one CDN from taking the whole pool.

Usage:
    async with http_client.request_session() as sess:
        async with sess.get(url, timeout=...) as response:
            ...

Before initialize() (tests, scripts) request_session() hands out a
short-lived session that is closed on exit.
"""

import logging
from contextlib import asynccontextmanager

import aiohttp

from content_scanner.config import settings

logger = logging.getLogger(__name__)

PER_HOST_LIMIT = 10

session: aiohttp.ClientSession | None = None


def _new_session() -> aiohttp.ClientSession:
    connector = aiohttp.TCPConnector(
        limit=settings.batch_max_urls,
        limit_per_host=PER_HOST_LIMIT,
    )
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=settings.http_session_timeout_sec),
        headers={"User-Agent": settings.fetch_user_agent},
    )


async def initialize() -> None:
    global session
    session = _new_session()
    logger.info(
        f"[STARTUP] HTTP session ready (pool={settings.batch_max_urls}, per_host={PER_HOST_LIMIT})"
    )


async def close() -> None:
    global session
    if session is None:
        return
    if not session.closed:
        await session.close()
        logger.info("[SHUTDOWN] HTTP session closed")
    session = None


@asynccontextmanager
async def request_session():
    """Yield the pooled session, or a temporary one that is closed afterwards."""
    if session is not None and not session.closed:
        yield session
        return

    tmp = _new_session()
    try:
        yield tmp
    finally:
        await tmp.close()
