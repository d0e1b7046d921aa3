"""
Top-level scanning entry points: the public core used by every route.

`scan_media` runs one raw buffer through:
  1. C2PA / JUMBF provenance (claimed generator classified camera vs AI)
  2. Metadata AI signature (APP1 strings → XMP → raw prefix)
  3. IPTC DigitalSourceType
  4. SynthID mention
  5. AI service URL pattern            (weak: only lifts no_metadata)
  6. Alt/title or surrounding-text AI mention (weak)
and folds the resulting evidence into one ScanResult.

`scan_text` runs the independent text heuristics.

Both are pure, synchronous and never raise on bytes/str input: missing or
malformed structures simply produce less evidence.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from content_scanner.detection.constants import (
    AI_ALT_TEXT_PATTERNS,
    AI_HOST_PATTERNS,
    AI_VIDEO_CONTEXT_PATTERNS,
    AI_VIDEO_URL_PATTERNS,
    PROVENANCE_PREFIX_BYTES,
    TEXT_MAX_CHARS,
)
from content_scanner.detection.locator import decode_prefix
from content_scanner.detection.metadata_extractor import (
    MetadataScan,
    ProvenanceInfo,
    detect_provenance,
    detect_synthid_mention,
    parse_metadata,
)
from content_scanner.detection.scoring import (
    CONFIDENCE_FLOOR,
    Signal,
    calculate_image_confidence,
)
from content_scanner.detection.signatures import (
    GeneratorClass,
    classify_claim_generator,
    find_manifest_ai_token,
    match_context_mention,
    match_url_pattern,
    normalize_display_name,
)
from content_scanner.detection.text_heuristics import analyze_text
from content_scanner.detection.verdict import Evidence, Policy, Verdict, resolve_verdict
from content_scanner.schemas.scan import ScanResult, TextResult

logger = logging.getLogger(__name__)

SYNTHID_SOURCE = "Google (SynthID)"


@dataclass(frozen=True)
class MediaEvidence:
    """Everything the evidence detectors read, extracted once per buffer."""
    provenance: ProvenanceInfo
    metadata: MetadataScan
    synthid: bool
    source_url: Optional[str] = None
    context_text: Optional[str] = None
    kind: str = "image"


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


# ---------------------------------------------------------------------------
# Evidence detectors (evaluated in this order)
# ---------------------------------------------------------------------------


def provenance_evidence(media: MediaEvidence) -> Optional[Evidence]:
    info = media.provenance
    if not info.found:
        return None

    fingerprint = {"c2pa": "C2PA / JUMBF manifest detected"}
    if info.claim_generator:
        fingerprint["claimGenerator"] = info.claim_generator
    if info.signer:
        fingerprint["signer"] = info.signer

    generator_class, _ = classify_claim_generator(info.claim_generator)

    if generator_class is GeneratorClass.AI:
        return Evidence(
            verdict=Verdict.AI_DETECTED,
            reason="C2PA Content Credentials found - provenance from an AI tool.",
            signal=Signal.C2PA_EVIDENCE,
            source=info.claim_generator,
            fingerprint=fingerprint,
        )

    if generator_class is GeneratorClass.CAMERA:
        return Evidence(
            verdict=Verdict.LIKELY_REAL,
            reason="C2PA Content Credentials from capture device (camera/phone) - not AI-generated.",
            source=info.claim_generator,
            fingerprint=fingerprint,
        )

    manifest_token = find_manifest_ai_token(info.decoded_text)
    if manifest_token:
        return Evidence(
            verdict=Verdict.AI_DETECTED,
            reason="C2PA Content Credentials found - AI tool name in manifest.",
            signal=Signal.C2PA_EVIDENCE,
            source=normalize_display_name(manifest_token),
            fingerprint=fingerprint,
        )

    if info.claim_generator:
        reason = "C2PA Content Credentials present; source unknown (not classified as AI)."
    else:
        reason = "C2PA Content Credentials present; no claim generator (not classified as AI)."
    return Evidence(
        verdict=Verdict.UNCERTAIN,
        reason=reason,
        source=info.claim_generator,
        fingerprint=fingerprint,
    )


def signature_evidence(media: MediaEvidence) -> Optional[Evidence]:
    token = media.metadata.ai_signature
    if not token:
        return None
    display_name = normalize_display_name(token)
    return Evidence(
        verdict=Verdict.AI_DETECTED,
        reason=f'AI tool signature in metadata: "{display_name}".',
        signal=Signal.EXIF_SIGNATURE,
        source=display_name,
        fingerprint={"software": token},
    )


def source_type_evidence(media: MediaEvidence) -> Optional[Evidence]:
    value = media.metadata.digital_source_type
    if not value:
        return None
    return Evidence(
        verdict=Verdict.AI_DETECTED,
        reason=f"IPTC DigitalSourceType: {value}",
        signal=Signal.IPTC_SOURCE,
        fingerprint={"iptcDigitalSource": value},
    )


def synthid_evidence(media: MediaEvidence) -> Optional[Evidence]:
    if not media.synthid:
        return None
    return Evidence(
        verdict=Verdict.AI_DETECTED,
        reason="Google SynthID marker reference found in metadata.",
        signal=Signal.SYNTHID_MARKER,
        source=SYNTHID_SOURCE,
        fingerprint={"synthid": "SynthID reference detected"},
    )


def url_evidence(media: MediaEvidence) -> Optional[Evidence]:
    if media.kind == "video":
        pattern = match_url_pattern(media.source_url, AI_VIDEO_URL_PATTERNS + AI_HOST_PATTERNS)
        reason = 'Video URL matches AI video tool: "{}".'
    else:
        pattern = match_url_pattern(media.source_url, AI_HOST_PATTERNS)
        reason = 'Image URL contains AI service pattern: "{}".'
    if not pattern:
        return None
    return Evidence(
        verdict=Verdict.LIKELY_AI,
        reason=reason.format(pattern),
        policy=Policy.UPGRADE_FROM_NONE,
        signal=Signal.URL_PATTERN,
        source=normalize_display_name(pattern),
        fingerprint={"urlPattern": pattern},
    )


def context_evidence(media: MediaEvidence) -> Optional[Evidence]:
    if media.kind == "video":
        mention = match_context_mention(media.context_text, AI_VIDEO_CONTEXT_PATTERNS)
        reason = 'Surrounding text mentions: "{}".'
    else:
        mention = match_context_mention(media.context_text, AI_ALT_TEXT_PATTERNS)
        reason = 'Alt/title text mentions AI: "{}".'
    if not mention:
        return None
    return Evidence(
        verdict=Verdict.LIKELY_AI,
        reason=reason.format(mention),
        policy=Policy.UPGRADE_FROM_NONE,
        signal=Signal.ALT_TEXT_MENTION,
        fingerprint={"contextMention": mention},
    )


EVIDENCE_DETECTORS: Tuple[Callable[[MediaEvidence], Optional[Evidence]], ...] = (
    provenance_evidence,
    signature_evidence,
    source_type_evidence,
    synthid_evidence,
    url_evidence,
    context_evidence,
)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def collect_media_evidence(
    data: bytes,
    source_url: Optional[str] = None,
    context_text: Optional[str] = None,
    kind: str = "image",
) -> MediaEvidence:
    return MediaEvidence(
        provenance=detect_provenance(data),
        metadata=parse_metadata(data),
        synthid=detect_synthid_mention(decode_prefix(data, PROVENANCE_PREFIX_BYTES)),
        source_url=source_url,
        context_text=context_text,
        kind=kind,
    )


def scan_media(
    data: bytes,
    source_url: Optional[str] = None,
    context_text: Optional[str] = None,
    kind: str = "image",
) -> ScanResult:
    """
    Scan one image/video buffer (possibly a truncated prefix).

    Args:
        data: Raw bytes of the asset, or its first N bytes.
        source_url: Where the bytes came from; searched for AI service names.
        context_text: Alt/title text (images) or surrounding text (videos).
        kind: "image" or "video"; selects the URL/context vocabularies.
    """
    media = collect_media_evidence(data, source_url, context_text, kind)
    entries = [e for e in (detector(media) for detector in EVIDENCE_DETECTORS) if e]
    resolution = resolve_verdict(entries)

    exif = dict(media.metadata.fields)
    if media.metadata.ai_signature:
        exif["AI Software"] = normalize_display_name(media.metadata.ai_signature)

    metadata = {"fileSize": format_bytes(len(data))}
    if source_url:
        metadata = {"src": source_url, **metadata}

    confidence = calculate_image_confidence(resolution.signals)
    logger.debug(
        f"[SCAN] verdict={resolution.verdict.value} confidence={confidence} "
        f"signals={sorted(s.value for s in resolution.signals)}"
    )

    return ScanResult(
        verdict=resolution.verdict,
        confidence=confidence,
        source=resolution.source,
        reasons=resolution.reasons,
        fingerprint=resolution.fingerprint,
        exif=exif,
        metadata=metadata,
    )


def unreadable_result(source_url: Optional[str], reason: str = "Could not fetch image data.") -> ScanResult:
    """Result for an item whose bytes could not be obtained; the core never ran."""
    metadata = {"src": source_url} if source_url else {}
    return ScanResult(
        verdict=Verdict.NO_METADATA,
        confidence=CONFIDENCE_FLOOR,
        reasons=[reason],
        metadata=metadata,
    )


def scan_text(text: str) -> Optional[TextResult]:
    """Text heuristics for 300-50,000 characters; None when not applicable."""
    if len(text) > TEXT_MAX_CHARS:
        return None
    return analyze_text(text)
