"""
Shared pytest fixtures and byte-level fixture builders for all test modules.

Media fixtures are tiny synthetic buffers: a JPEG SOI marker followed by an
APP1 segment, a JUMBF/C2PA manifest or an XMP packet. The detection core
only looks for those structures, so no real encoder output is needed except
where a test wants a genuine JPEG (Pillow).
"""

import io
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from tests.mocks.redis_mock import MockRedis

from content_scanner.main import app

SOI = b"\xff\xd8"
EOI = b"\xff\xd9"


# ---------------------------------------------------------------------------
# Core infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_redis(monkeypatch):
    """Replace redis_client.client with an in-memory MockRedis."""
    from content_scanner.integrations import redis_client as rc

    mock_rc = MockRedis()
    monkeypatch.setattr(rc, "client", mock_rc)
    return mock_rc


@pytest.fixture
def client(mock_redis):
    """
    FastAPI TestClient with mocked Redis.

    redis initialize() is patched to a no-op so it can't overwrite the mock
    during lifespan startup.
    """
    with patch("content_scanner.integrations.redis_client.initialize"):
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c


# ---------------------------------------------------------------------------
# Shared test-data helpers
# ---------------------------------------------------------------------------


def make_tiny_jpeg() -> bytes:
    """Create a minimal 10×10 JPEG in memory; fast and valid, no metadata."""
    buf = io.BytesIO()
    Image.new("RGB", (10, 10), color=(128, 128, 128)).save(buf, format="JPEG")
    return buf.getvalue()


def make_exif_jpeg(software: str) -> bytes:
    """A real Pillow JPEG whose EXIF Software tag (0x0131) is `software`."""
    buf = io.BytesIO()
    exif = Image.Exif()
    exif[0x0131] = software
    Image.new("RGB", (10, 10), color=(40, 90, 160)).save(buf, format="JPEG", exif=exif)
    return buf.getvalue()


def make_app1_jpeg(*strings: bytes, trailing: bytes = b"") -> bytes:
    """SOI + one APP1 segment holding NUL-separated strings, then EOI."""
    payload = b"Exif\x00\x00" + b"\x00".join(strings) + b"\x00"
    length = (len(payload) + 2).to_bytes(2, "big")
    return SOI + b"\xff\xe1" + length + payload + EOI + trailing


def make_c2pa_jpeg(claim_generator: bytes = None, extra: bytes = b"") -> bytes:
    """SOI + a JUMBF superbox labelled c2pa, with an optional claim_generator."""
    manifest = b"\x00\x00\x00\x40jumb\x00\x00\x00\x18jumdc2pa\x00"
    if claim_generator is not None:
        manifest += b'{"claim_generator": "' + claim_generator + b'"}'
    return SOI + manifest + extra + b"\x00" * 16 + EOI


def make_xmp_jpeg(xmp_body: str) -> bytes:
    """SOI + an XMP packet wrapped in <x:xmpmeta> tags."""
    packet = (
        '<x:xmpmeta xmlns:x="adobe:ns:meta/" x:xmptk="XMP Core 6.0.0">'
        + xmp_body
        + "</x:xmpmeta>"
    )
    return SOI + packet.encode("latin-1") + EOI
