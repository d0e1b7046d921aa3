"""
Unit tests for content_scanner/services/scan_service.py.

fetch_media_head is mocked; the detection core runs for real.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from content_scanner.detection.pipeline import unreadable_result
from content_scanner.detection.verdict import Verdict
from content_scanner.services.fetch_service import fetch_failed
from content_scanner.services.scan_service import count_ai, scan_remote, scan_urls

from tests.conftest import make_exif_jpeg, make_tiny_jpeg

AI_URL = "https://cdn.example.com/ai.jpg"
PLAIN_URL = "https://cdn.example.com/plain.jpg"
DEAD_URL = "https://cdn.example.com/dead.jpg"


def _fake_fetch(url, *args, **kwargs):
    if url == AI_URL:
        return make_exif_jpeg("Midjourney v6")
    if url == PLAIN_URL:
        return make_tiny_jpeg()
    raise fetch_failed()


def _patch_fetch():
    return patch(
        "content_scanner.services.scan_service.fetch_media_head",
        new_callable=AsyncMock,
        side_effect=_fake_fetch,
    )


async def test_scan_remote_uses_url_and_context():
    with _patch_fetch():
        result = await scan_remote(PLAIN_URL, context_text="made with AI")

    assert result.verdict is Verdict.LIKELY_AI
    assert result.metadata["src"] == PLAIN_URL


async def test_scan_remote_propagates_fetch_failure():
    with _patch_fetch():
        with pytest.raises(HTTPException) as exc:
            await scan_remote(DEAD_URL)
    assert exc.value.status_code == 422


async def test_scan_urls_keeps_input_order_and_isolates_failures():
    with _patch_fetch():
        results = await scan_urls([DEAD_URL, AI_URL, PLAIN_URL])

    assert [r.verdict for r in results] == [
        Verdict.NO_METADATA,
        Verdict.AI_DETECTED,
        Verdict.NO_METADATA,
    ]
    assert results[0] == unreadable_result(DEAD_URL)
    assert results[1].source == "Midjourney"
    assert results[2].reasons == ["No AI signals detected in metadata."]


async def test_scan_urls_all_failures():
    with _patch_fetch():
        results = await scan_urls([DEAD_URL, DEAD_URL])
    assert all(r.reasons == ["Could not fetch image data."] for r in results)


def test_count_ai_counts_likely_ai_and_above():
    results = [
        unreadable_result(None).model_copy(update={"verdict": v})
        for v in Verdict
    ]
    assert count_ai(results) == 2
