"""
Byte retrieval for remote scans: streamed URL prefixes and base64 data URIs.

Only the head of a remote asset is read (300 KB by default): provenance
boxes, APP1 segments and XMP packets live there. Reads run under a hard timeout.
"""

import asyncio
import base64
import binascii
import logging

import aiohttp
from fastapi import HTTPException

from content_scanner.config import settings
from content_scanner.core.file_validator import invalid_input, sanitize_log_message
from content_scanner.integrations import http_client as http_module

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def fetch_failed(message: str = "Could not fetch image from the provided URL.") -> HTTPException:
    return HTTPException(status_code=422, detail={"code": "FETCH_FAILED", "message": message})


def decode_data_uri(url: str, max_bytes: int) -> bytes:
    """Decode a base64 data URI, keeping at most `max_bytes` bytes."""
    try:
        header, data_str = url.split(",", 1)
    except ValueError:
        raise invalid_input("Invalid data URI")
    if ";base64" not in header:
        raise invalid_input("Only base64 data URIs are supported")
    try:
        content = base64.b64decode(data_str)
    except (binascii.Error, ValueError):
        raise invalid_input("Invalid data URI")
    return content[:max_bytes]


async def fetch_media_head(url: str, max_bytes: int = settings.max_fetch_bytes) -> bytes:
    """
    Return the first `max_bytes` bytes of a remote asset.

    Raises HTTP 422 FETCH_FAILED on non-2xx status, network errors or
    timeout. An empty body is a failure too: there is nothing to scan.
    """
    if url.startswith("data:"):
        return decode_data_uri(url, max_bytes)

    timeout = aiohttp.ClientTimeout(total=settings.fetch_timeout_sec)
    safe_url = sanitize_log_message(url)

    async with http_module.request_session() as session:
        try:
            async with session.get(url, timeout=timeout) as response:
                if not 200 <= response.status < 300:
                    logger.info(f"[FETCH] {safe_url} -> HTTP {response.status}")
                    raise fetch_failed()

                buf = bytearray()
                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    buf.extend(chunk)
                    if len(buf) >= max_bytes:
                        break
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.info(f"[FETCH] {safe_url} failed: {type(e).__name__}")
            raise fetch_failed()

    if not buf:
        raise fetch_failed()

    logger.debug(f"[FETCH] {safe_url}: read {len(buf)} bytes")
    return bytes(buf[:max_bytes])
