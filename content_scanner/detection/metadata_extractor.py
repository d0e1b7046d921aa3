"""
Field extraction from located provenance / metadata regions.

Functions:
  - detect_provenance: C2PA presence plus claimed generator and signer.
  - extract_metadata_fields: named EXIF-ish and XMP fields for display.
  - detect_ai_signature: first AI-tool token, searched in priority order.
  - detect_digital_source_type: IPTC DigitalSourceType values for AI media.
  - detect_synthid_mention: textual SynthID reference.
  - parse_metadata: all of the metadata detectors over one buffer.

Extraction is pattern based. Every field is optional; a region that is
missing or malformed just leaves its fields out.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from content_scanner.detection.constants import (
    AI_DIGITAL_SOURCE_TYPES,
    AI_SOFTWARE_SIGNATURES,
    EDITOR_SOFTWARE_TOKENS,
    METADATA_PREFIX_BYTES,
    PROVENANCE_KEYWORDS_RE,
    PROVENANCE_PREFIX_BYTES,
)
from content_scanner.detection.locator import (
    decode_prefix,
    extract_printable_runs,
    locate_first_metadata_segment,
    locate_provenance_box,
    locate_xml_metadata_packet,
)
from content_scanner.detection.signatures import find_token

logger = logging.getLogger(__name__)

_PROVENANCE_KEYWORDS = re.compile(PROVENANCE_KEYWORDS_RE, re.IGNORECASE)
_CLAIM_GENERATOR_RE = re.compile(
    r'claim_generator["\s:=]+([^\x00-\x1f\x7f-\xff"<>]{4,80})', re.IGNORECASE
)
_SIGNER_RE = re.compile(
    r'(?:signer|issuer|CN=)([^\x00-\x1f\x7f-\xff"<>,]{4,80})', re.IGNORECASE
)
_EXIF_DATETIME_RE = re.compile(r"(\d{4}:\d{2}:\d{2} \d{2}:\d{2}:\d{2})")
_SYNTHID_RE = re.compile(r"synthid", re.IGNORECASE)
_SOURCE_TYPE_KEY = "digitalsourcetype"

# Each XMP field keeps its first match only; duplicate elements are ignored.
_XMP_FIELD_PATTERNS = (
    ("Creator Tool", re.compile(r'xmp:CreatorTool[>"]*>?\s*([^<]+)', re.IGNORECASE)),
    ("Creator", re.compile(r"dc:creator[^<]*<[^>]*>([^<]+)", re.IGNORECASE)),
    ("Description", re.compile(r"dc:description[^<]*<[^>]*>([^<]+)", re.IGNORECASE)),
    ("Rights", re.compile(r"dc:rights[^<]*<[^>]*>([^<]+)", re.IGNORECASE)),
    ("Title", re.compile(r"dc:title[^<]*<[^>]*>([^<]+)", re.IGNORECASE)),
    ("Credit", re.compile(r'photoshop:Credit[>"]*>?\s*([^<]+)', re.IGNORECASE)),
    ("Document ID", re.compile(r"""xmpMM:DocumentID[>"]*>?\s*["']?([^"'<]+)""", re.IGNORECASE)),
    ("Instance ID", re.compile(r"""xmpMM:InstanceID[>"]*>?\s*["']?([^"'<]+)""", re.IGNORECASE)),
    ("Original Document ID", re.compile(r"""xmpMM:OriginalDocumentID[>"]*>?\s*["']?([^"'<]+)""", re.IGNORECASE)),
    ("XMP Toolkit", re.compile(r"""x:xmptk[="]*["=]\s*["']?([^"'<>]+)""", re.IGNORECASE)),
    ("Digital Source Type", re.compile(r"""DigitalSourceType[>"]*>?\s*["']?([^"'<]+)""", re.IGNORECASE)),
    ("Create Date", re.compile(r"""xmp:CreateDate[>"]*>?\s*["']?([^"'<]+)""", re.IGNORECASE)),
    ("Modify Date", re.compile(r"""xmp:ModifyDate[>"]*>?\s*["']?([^"'<]+)""", re.IGNORECASE)),
    ("Format", re.compile(r'dc:format[>"]*>?\s*([^<]+)', re.IGNORECASE)),
    ("Color Space", re.compile(r'exif:ColorSpace[>"]*>?\s*([^<]+)', re.IGNORECASE)),
    ("Pixel X Dimension", re.compile(r'exif:PixelXDimension[>"]*>?\s*([^<]+)', re.IGNORECASE)),
    ("Pixel Y Dimension", re.compile(r'exif:PixelYDimension[>"]*>?\s*([^<]+)', re.IGNORECASE)),
)
_RDF_ABOUT_RE = re.compile(r"""rdf:about\s*=\s*["']([^"']+)""", re.IGNORECASE)


@dataclass(frozen=True)
class ProvenanceInfo:
    found: bool = False
    claim_generator: Optional[str] = None
    signer: Optional[str] = None
    decoded_text: Optional[str] = None


@dataclass(frozen=True)
class MetadataRegions:
    """The located regions of one buffer, decoded once and shared by detectors."""
    segment_runs: Tuple[str, ...]
    prefix_text: str
    xmp: Optional[str]


@dataclass
class MetadataScan:
    fields: Dict[str, str] = field(default_factory=dict)
    ai_signature: Optional[str] = None
    digital_source_type: Optional[str] = None


def _first_match(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def detect_provenance(data: bytes) -> ProvenanceInfo:
    """
    Detect C2PA / JUMBF content credentials.

    Found when the JUMBF box type is present anywhere in the buffer, or the
    decoded 200 KB prefix mentions a content-credentials keyword. The claimed
    generator and signer are read from the prefix text; their absence is
    not an error.
    """
    text = decode_prefix(data, PROVENANCE_PREFIX_BYTES)
    found = locate_provenance_box(data) or bool(_PROVENANCE_KEYWORDS.search(text))
    if not found:
        return ProvenanceInfo()

    return ProvenanceInfo(
        found=True,
        claim_generator=_first_match(_CLAIM_GENERATOR_RE, text),
        signer=_first_match(_SIGNER_RE, text),
        decoded_text=text,
    )


def locate_regions(data: bytes) -> MetadataRegions:
    segment_runs: Tuple[str, ...] = ()
    segment = locate_first_metadata_segment(data)
    if segment:
        start, end = segment
        segment_runs = tuple(extract_printable_runs(data[start:end]))

    prefix_text = decode_prefix(data, METADATA_PREFIX_BYTES)
    return MetadataRegions(
        segment_runs=segment_runs,
        prefix_text=prefix_text,
        xmp=locate_xml_metadata_packet(prefix_text),
    )


def _exif_fields_from_runs(runs: Tuple[str, ...]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for i, run in enumerate(runs):
        lower = run.lower()

        if "Software" not in fields and any(t in lower for t in EDITOR_SOFTWARE_TOKENS):
            fields["Software"] = run.strip()

        if "DateTime" not in fields:
            date_match = _EXIF_DATETIME_RE.search(run)
            if date_match:
                fields["DateTime"] = date_match.group(1)

        if "Camera Model" not in fields and i > 0 and "model" in runs[i - 1].lower():
            fields["Camera Model"] = run.strip()
    return fields


def _xmp_fields(xmp: str) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for key, pattern in _XMP_FIELD_PATTERNS:
        value = _first_match(pattern, xmp)
        if value:
            fields[key] = value

    about = _RDF_ABOUT_RE.search(xmp)
    if about:
        fields["RDF About"] = about.group(1)
    return fields


def _fields_from_regions(regions: MetadataRegions) -> Dict[str, str]:
    fields = _exif_fields_from_runs(regions.segment_runs)
    if regions.xmp:
        fields.update(_xmp_fields(regions.xmp))
    return fields


def extract_metadata_fields(data: bytes) -> Dict[str, str]:
    """Named fields from the first APP1 segment and the XMP packet."""
    return _fields_from_regions(locate_regions(data))


def _segment_text(regions: MetadataRegions) -> Optional[str]:
    return " ".join(regions.segment_runs) or None


def _xmp_text(regions: MetadataRegions) -> Optional[str]:
    return regions.xmp


def _prefix_text(regions: MetadataRegions) -> Optional[str]:
    return regions.prefix_text


# Search order for AI signatures: APP1 strings, then XMP, then the raw prefix.
SIGNATURE_SEARCH_ORDER: Tuple[Callable[[MetadataRegions], Optional[str]], ...] = (
    _segment_text,
    _xmp_text,
    _prefix_text,
)


def _signature_from_regions(regions: MetadataRegions) -> Optional[str]:
    for source in SIGNATURE_SEARCH_ORDER:
        token = find_token(source(regions), AI_SOFTWARE_SIGNATURES)
        if token:
            logger.debug(f"[META] AI signature '{token}' found via {source.__name__}")
            return token
    return None


def detect_ai_signature(data: bytes) -> Optional[str]:
    return _signature_from_regions(locate_regions(data))


def detect_digital_source_type(xmp: Optional[str]) -> Optional[str]:
    """
    Return the AI DigitalSourceType named in an XMP packet, if any.

    A value counts when it follows the DigitalSourceType key on the same line.
    """
    if not xmp:
        return None
    tails = []
    for line in xmp.lower().split("\n"):
        key_at = line.find(_SOURCE_TYPE_KEY)
        if key_at != -1:
            tails.append(line[key_at + len(_SOURCE_TYPE_KEY):])
    for value in AI_DIGITAL_SOURCE_TYPES:
        needle = value.lower()
        if any(needle in tail for tail in tails):
            return value
    return None


def detect_synthid_mention(text: Optional[str]) -> bool:
    return bool(text) and bool(_SYNTHID_RE.search(text))


def parse_metadata(data: bytes) -> MetadataScan:
    """Run every metadata detector over one buffer, locating regions once."""
    regions = locate_regions(data)
    return MetadataScan(
        fields=_fields_from_regions(regions),
        ai_signature=_signature_from_regions(regions),
        digital_source_type=detect_digital_source_type(regions.xmp),
    )
