"""
Input validation for scan requests and log sanitization utilities.

Uploads are checked for presence and size only: the scanner reads any byte
payload, so there is no format sniffing here.
"""

import re
import logging
from urllib.parse import urlsplit

from fastapi import HTTPException

from content_scanner.config import settings

logger = logging.getLogger(__name__)

ALLOWED_URL_SCHEMES = ("http", "https", "data")


def invalid_input(message: str) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": "INVALID_INPUT", "message": message})


def validate_upload(filename: str, content: bytes) -> bool:
    """Reject empty or oversized uploads."""
    if not content:
        raise invalid_input('No file provided. Upload an image as the "file" field.')

    if len(content) > settings.max_upload_bytes:
        logger.info(f"[UPLOAD] Rejected {sanitize_log_message(filename)}: {len(content)} bytes")
        raise HTTPException(
            status_code=413,
            detail={
                "code": "FILE_TOO_LARGE",
                "message": f"File exceeds the {settings.max_upload_mb} MB limit. Try using a URL instead.",
            },
        )
    return True


def validate_remote_url(url: str) -> str:
    """Accept absolute http(s) URLs and data URIs; anything else is a 400."""
    if not isinstance(url, str) or not url.strip():
        raise invalid_input('JSON body must include a "url" field.')

    url = url.strip()
    parts = urlsplit(url)
    if parts.scheme.lower() not in ALLOWED_URL_SCHEMES:
        raise invalid_input("Invalid URL.")
    if parts.scheme.lower() != "data" and not parts.netloc:
        raise invalid_input("Invalid URL.")
    return url


def sanitize_log_message(message: str) -> str:
    """Strip temp paths, query strings and inline data from log messages."""
    msg = re.sub(r'\/[^\s]+\/tmp[a-zA-Z0-9_]+', '[TEMP_FILE]', message)
    msg = re.sub(r'data:[^\s,]*,\S+', 'data:[INLINE]', msg)
    msg = re.sub(r'(https?://[^\s?#]+)[?#]\S*', r'\1?[...]', msg)
    return msg
