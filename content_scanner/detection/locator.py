"""
Byte-level locators for provenance and metadata regions.

None of these functions parse a container format. They find the handful of
structures the scorer cares about (a JUMBF box type, the first JPEG APP1
segment, an XMP packet) and hand back raw slices or text for extraction.
A missing or malformed structure is reported as an absent result.
"""

import re
from bisect import bisect_right
from typing import List, Optional, Tuple

from content_scanner.detection.constants import (
    APP1_MARKER,
    JUMBF_BOX_TYPE,
    MIN_PRINTABLE_RUN,
    SEGMENT_SEARCH_BYTES,
    XMP_MAX_CHARS,
)

_XMP_OPEN_TAG = "<x:xmpmeta"
_XMP_CLOSE_TAG = "</x:xmpmeta>"
_PRINTABLE_RUN_RE = re.compile(rb"[\x20-\x7e]{%d,}" % MIN_PRINTABLE_RUN)

# A box header carries size + type; a type in the last few bytes has no payload.
_BOX_TAIL_BYTES = 5


def decode_prefix(data: bytes, limit: int) -> str:
    """Decode the first `limit` bytes one char per byte (latin-1 never fails)."""
    return data[:limit].decode("latin-1")


def locate_provenance_box(data: bytes) -> bool:
    """True if a JUMBF superbox type appears anywhere in the buffer."""
    end = len(data) - _BOX_TAIL_BYTES
    if end < len(JUMBF_BOX_TYPE):
        return False
    return data.find(JUMBF_BOX_TYPE, 0, end) != -1


def locate_first_metadata_segment(data: bytes) -> Optional[Tuple[int, int]]:
    """
    Find the first APP1 segment starting in the first 100 bytes.

    Returns (start, end) of the segment payload, clamped to the buffer so a
    truncated prefix still yields the bytes we have. Later APP1 segments are
    never inspected.
    """
    idx = data.find(APP1_MARKER, 0, SEGMENT_SEARCH_BYTES + 1)
    if idx == -1:
        return None

    length_at = idx + len(APP1_MARKER)
    if length_at + 2 > len(data):
        return None

    seg_len = int.from_bytes(data[length_at:length_at + 2], "big")
    start = length_at + 2
    end = min(start + seg_len, len(data))
    return start, end


def _find_all(haystack: str, needle: str) -> List[int]:
    positions = []
    pos = haystack.find(needle)
    while pos != -1:
        positions.append(pos)
        pos = haystack.find(needle, pos + 1)
    return positions


def locate_xml_metadata_packet(text: str) -> Optional[str]:
    """
    Return the first <x:xmpmeta> packet in decoded text, if any.

    The packet runs from the first open tag that has a close tag within
    XMP_MAX_CHARS of it, up to the last such close tag. Tags match
    case-insensitively. Each tag position is visited once, so a prefix
    stuffed with unclosed open tags costs O(n log n).
    """
    lowered = text.lower()
    if len(lowered) != len(text):
        # Only latin-1 decoded text is expected here; keep offsets aligned.
        lowered = "".join(ch if len(ch.lower()) != 1 else ch.lower() for ch in text)

    closes = _find_all(lowered, _XMP_CLOSE_TAG)
    if not closes:
        return None

    start = lowered.find(_XMP_OPEN_TAG)
    while start != -1:
        body_start = start + len(_XMP_OPEN_TAG)
        i = bisect_right(closes, body_start + XMP_MAX_CHARS) - 1
        if i >= 0 and closes[i] >= body_start:
            return text[start:closes[i] + len(_XMP_CLOSE_TAG)]
        start = lowered.find(_XMP_OPEN_TAG, start + 1)
    return None


def extract_printable_runs(data: bytes) -> List[str]:
    """Maximal runs of printable ASCII (0x20-0x7E) at least 4 bytes long."""
    return [run.decode("ascii") for run in _PRINTABLE_RUN_RE.findall(data)]
