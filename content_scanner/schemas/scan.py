from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

from content_scanner.detection.verdict import Verdict


class ScanResult(BaseModel):
    """Verdict for one image or video payload."""
    verdict: Verdict
    confidence: int = Field(ge=0, le=99)
    source: Optional[str] = None
    reasons: List[str] = Field(min_length=1)
    fingerprint: Dict[str, str] = Field(default_factory=dict)
    exif: Dict[str, str] = Field(default_factory=dict)
    metadata: Dict[str, str] = Field(default_factory=dict)   # src, fileSize


class TextResult(BaseModel):
    """Verdict for one block of plain text."""
    verdict: Literal[Verdict.LIKELY_AI, Verdict.UNCERTAIN, Verdict.LIKELY_REAL]
    confidence: int = Field(ge=5, le=90)
    score: int = Field(ge=0, le=85)
    source: Optional[str] = None
    reasons: List[str] = Field(min_length=1)
    metadata: Dict[str, str] = Field(default_factory=dict)   # wordCount, sentenceCount
    fingerprint: Dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class ScanUrlRequest(BaseModel):
    url: str
    context: Optional[str] = None        # alt/title or surrounding page text
    kind: Literal["image", "video"] = "image"


class BatchScanRequest(BaseModel):
    urls: List[str] = Field(min_length=1)
    kind: Literal["image", "video"] = "image"


class AnalyzeTextRequest(BaseModel):
    text: str


# ---------------------------------------------------------------------------
# Responses ({ok, result} / {ok, error} envelope)
# ---------------------------------------------------------------------------


class ErrorBody(BaseModel):
    code: str       # e.g. "INVALID_INPUT", "FETCH_FAILED", "RATE_LIMITED"
    message: str


class ErrorResponse(BaseModel):
    ok: bool = False
    error: ErrorBody


class ScanResponse(BaseModel):
    ok: bool = True
    result: ScanResult


class TextResponse(BaseModel):
    ok: bool = True
    result: TextResult


class BatchScanResponse(BaseModel):
    ok: bool = True
    results: List[ScanResult]
    aiCount: int = 0
