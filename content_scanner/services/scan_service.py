"""
Scan orchestration for routes: single remote scans and batch fan-out.

Parsing and scoring are synchronous and CPU-bound, so they run in a worker
thread. Batch items are independent: a fetch failure for one URL becomes a
`no_metadata` result for that item and never affects the others.
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import HTTPException

from content_scanner.core.file_validator import sanitize_log_message
from content_scanner.detection.pipeline import scan_media, unreadable_result
from content_scanner.detection.verdict import Verdict
from content_scanner.schemas.scan import ScanResult
from content_scanner.services.fetch_service import fetch_media_head

logger = logging.getLogger(__name__)


async def scan_bytes(
    data: bytes,
    source_url: Optional[str] = None,
    context_text: Optional[str] = None,
    kind: str = "image",
) -> ScanResult:
    return await asyncio.to_thread(scan_media, data, source_url, context_text, kind)


async def scan_remote(url: str, context_text: Optional[str] = None, kind: str = "image") -> ScanResult:
    """Fetch the head of `url` and scan it. Fetch errors propagate as HTTPException."""
    data = await fetch_media_head(url)
    return await scan_bytes(data, source_url=url, context_text=context_text, kind=kind)


async def _scan_isolated(url: str, kind: str) -> ScanResult:
    try:
        return await scan_remote(url, kind=kind)
    except HTTPException as e:
        logger.info(f"[BATCH] {sanitize_log_message(url)} unreadable ({e.status_code})")
        return unreadable_result(url)


async def scan_urls(urls: List[str], kind: str = "image") -> List[ScanResult]:
    """Scan every URL concurrently; results come back in input order."""
    return list(await asyncio.gather(*(_scan_isolated(url, kind) for url in urls)))


def count_ai(results: List[ScanResult]) -> int:
    """Items at or above `likely_ai` severity (badge count)."""
    return sum(1 for r in results if r.verdict.severity >= Verdict.LIKELY_AI.severity)
