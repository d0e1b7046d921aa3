"""
Text analysis route: /api/analyze-text

Statistical heuristics only; no model is called. The accepted length range
is fixed by the heuristics themselves and is not configurable.
"""

import asyncio
import logging

from fastapi import APIRouter

from content_scanner.core.file_validator import invalid_input
from content_scanner.detection.constants import TEXT_MAX_CHARS, TEXT_MAX_SCORE, TEXT_MIN_CHARS
from content_scanner.detection.pipeline import scan_text
from content_scanner.detection.text_heuristics import count_words, split_sentences
from content_scanner.detection.verdict import Verdict
from content_scanner.schemas.scan import AnalyzeTextRequest, TextResponse, TextResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Text"])


def no_signals_result(text: str) -> TextResult:
    """Answer for a text the heuristics found nothing in."""
    return TextResult(
        verdict=Verdict.LIKELY_REAL,
        confidence=5,
        score=0,
        reasons=["No AI signals detected."],
        metadata={
            "wordCount": str(count_words(text)),
            "sentenceCount": str(len(split_sentences(text))),
        },
        fingerprint={
            "method": "Statistical heuristics",
            "heuristicScore": f"0/{TEXT_MAX_SCORE}",
        },
    )


@router.post("/analyze-text", response_model=TextResponse)
async def analyze_text(body: AnalyzeTextRequest):
    text = body.text
    if len(text) < TEXT_MIN_CHARS:
        raise invalid_input(f"Text must be at least {TEXT_MIN_CHARS} characters.")
    if len(text) > TEXT_MAX_CHARS:
        raise invalid_input(f"Text must be at most {TEXT_MAX_CHARS:,} characters.")

    result = await asyncio.to_thread(scan_text, text)
    if result is None:
        result = await asyncio.to_thread(no_signals_result, text)

    logger.info(f"[TEXT] {len(text)} chars: {result.verdict.value} (score {result.score})")
    return TextResponse(result=result)
