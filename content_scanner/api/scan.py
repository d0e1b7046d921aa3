"""
Scan routes: /api/scan and /api/scan-batch

/api/scan accepts multipart/form-data with a 'file' field (plus optional
'context' / 'kind'), or a JSON payload { "url": "https://...", "context": ..., "kind": ... }.
Only the head of a remote URL is fetched; uploads are read whole (≤ 4 MB).
"""

import json
import logging
import time

from fastapi import APIRouter, Request
from pydantic import ValidationError

from content_scanner.config import settings
from content_scanner.core.file_validator import (
    invalid_input,
    sanitize_log_message,
    validate_remote_url,
    validate_upload,
)
from content_scanner.schemas.scan import (
    BatchScanRequest,
    BatchScanResponse,
    ScanResponse,
    ScanUrlRequest,
)
from content_scanner.services.scan_service import count_ai, scan_bytes, scan_remote, scan_urls

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Scan"])


async def _read_json(request: Request) -> dict:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise invalid_input("Invalid JSON body.")
    if not isinstance(payload, dict):
        raise invalid_input("JSON body must be an object.")
    return payload


@router.post("/scan", response_model=ScanResponse)
async def scan(request: Request):
    """
    Scan one image or video for AI-generation evidence.
    """
    start_time = time.time()
    content_type = request.headers.get("content-type", "")

    if "multipart/form-data" in content_type:
        form = await request.form()
        file_obj = form.get("file")
        if file_obj is None or not hasattr(file_obj, "read"):
            raise invalid_input('No file provided. Upload an image as the "file" field.')

        content = await file_obj.read()
        filename = file_obj.filename or "upload"
        validate_upload(filename, content)

        kind = form.get("kind") or "image"
        if not isinstance(kind, str) or kind not in ("image", "video"):
            raise invalid_input('"kind" must be "image" or "video".')
        context = form.get("context") or None
        if context is not None and not isinstance(context, str):
            raise invalid_input('"context" must be a text field, not a file.')

        result = await scan_bytes(content, context_text=context, kind=kind)
        label = sanitize_log_message(filename)

    elif "application/json" in content_type:
        payload = await _read_json(request)
        if not payload.get("url"):
            raise invalid_input('JSON body must include a "url" field.')
        try:
            body = ScanUrlRequest(**payload)
        except ValidationError:
            raise invalid_input('Invalid scan request: "url" must be a string and "kind" image or video.')

        url = validate_remote_url(body.url)
        result = await scan_remote(url, context_text=body.context, kind=body.kind)
        label = sanitize_log_message(url)

    else:
        raise invalid_input("Send multipart/form-data with a file, or JSON with a url.")

    duration = round(time.time() - start_time, 3)
    logger.info(
        f"[SCAN] {label}: {result.verdict.value} ({result.confidence}%) in {duration}s"
    )
    return ScanResponse(result=result)


@router.post("/scan-batch", response_model=BatchScanResponse)
async def scan_batch(body: BatchScanRequest):
    """
    Scan up to `batch_max_urls` remote images in parallel.

    Results are returned in input order; unreachable items come back as
    `no_metadata` instead of failing the batch.
    """
    if len(body.urls) > settings.batch_max_urls:
        raise invalid_input(f"Too many URLs (max {settings.batch_max_urls}).")

    start_time = time.time()
    results = await scan_urls(body.urls, kind=body.kind)
    ai_count = count_ai(results)

    logger.info(
        f"[BATCH] {len(results)} items, {ai_count} flagged, "
        f"{round(time.time() - start_time, 3)}s"
    )
    return BatchScanResponse(results=results, aiCount=ai_count)
