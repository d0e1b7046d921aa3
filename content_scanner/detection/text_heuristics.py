"""
Statistical heuristics for AI-authored text.

Not a classifier: five independent checks add points to a score (max 85)
which maps to a verdict and a confidence.

  phrase density        >=3 LLM stock phrases +25, 1-2 phrases +10
  sentence uniformity   CV of words/sentence < 0.25 and mean > 12   +20
  paragraph uniformity  CV of paragraph lengths < 0.30              +15
  transition density    > 1.5% of words and at least 4              +15
  formality             no emoji/slang, >200 words, >=1 phrase      +10

Short texts (< 300 chars) and signal-free "likely real" texts produce no
result at all; the caller treats that as "not applicable".
"""

import math
import re
import logging
from typing import List, Optional, Sequence, Tuple

from content_scanner.detection.constants import (
    EMOJI_RANGES,
    INFORMAL_SLANG,
    LLM_PHRASES,
    TEXT_HEURISTIC_SOURCE,
    TEXT_MAX_SCORE,
    TEXT_MIN_CHARS,
    TRANSITION_WORDS,
)
from content_scanner.detection.scoring import calculate_text_confidence
from content_scanner.detection.verdict import Verdict
from content_scanner.schemas.scan import TextResult

logger = logging.getLogger(__name__)

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_TRANSITION_RE = re.compile(r"\b(?:" + "|".join(map(re.escape, TRANSITION_WORDS)) + r")\b")
_SLANG_RE = re.compile(r"\b(?:" + "|".join(map(re.escape, INFORMAL_SLANG)) + r")\b", re.IGNORECASE)
_EMOJI_RE = re.compile("[" + "".join(f"{lo}-{hi}" for lo, hi in EMOJI_RANGES) + "]")

PHRASE_STRONG_HITS = 3
SENTENCE_MIN_COUNT = 5
SENTENCE_MAX_CV = 0.25
SENTENCE_MIN_MEAN = 12
PARAGRAPH_MIN_CHARS = 50
PARAGRAPH_MIN_COUNT = 3
PARAGRAPH_MAX_CV = 0.30
TRANSITION_MIN_DENSITY = 0.015
TRANSITION_MIN_COUNT = 4
FORMAL_MIN_WORDS = 200

LIKELY_AI_THRESHOLD = 50
UNCERTAIN_THRESHOLD = 30


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population standard deviation over mean; 0.0 for empty or zero-mean input."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    if mean == 0:
        return 0.0
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / mean


def split_sentences(text: str) -> List[str]:
    return _SENTENCE_RE.findall(text)


def count_words(text: str) -> int:
    return len(text.split())


def phrase_hits(lower_text: str) -> Tuple[int, List[str]]:
    """Total phrase occurrences and the distinct phrases that occurred, in table order."""
    total = 0
    matched = []
    for phrase in LLM_PHRASES:
        count = lower_text.count(phrase)
        if count:
            total += count
            matched.append(phrase)
    return total, matched


def _phrase_density(lower_text: str) -> Tuple[int, Optional[str], int]:
    hits, matched = phrase_hits(lower_text)
    if hits >= PHRASE_STRONG_HITS:
        examples = ", ".join(matched[:3])
        return 25, f"Contains {hits} common LLM phrases ({examples}...)", hits
    if hits >= 1:
        return 10, None, hits
    return 0, None, hits


def _sentence_uniformity(sentences: List[str]) -> Tuple[int, Optional[str]]:
    if len(sentences) < SENTENCE_MIN_COUNT:
        return 0, None
    lengths = [count_words(s) for s in sentences]
    mean = sum(lengths) / len(lengths)
    cv = coefficient_of_variation(lengths)
    if cv < SENTENCE_MAX_CV and mean > SENTENCE_MIN_MEAN:
        return 20, (
            f"Very uniform sentence length (CV={cv:.2f}, avg {mean:.0f} words) "
            "- typical of LLM output."
        )
    return 0, None


def _paragraph_uniformity(text: str) -> Tuple[int, Optional[str]]:
    paragraphs = [p for p in _PARAGRAPH_SPLIT_RE.split(text) if len(p.strip()) > PARAGRAPH_MIN_CHARS]
    if len(paragraphs) < PARAGRAPH_MIN_COUNT:
        return 0, None
    cv = coefficient_of_variation([len(p) for p in paragraphs])
    if cv < PARAGRAPH_MAX_CV:
        return 15, f"Very uniform paragraph lengths (CV={cv:.2f}) - may indicate AI generation."
    return 0, None


def _transition_density(lower_text: str, word_count: int) -> Tuple[int, Optional[str]]:
    transitions = len(_TRANSITION_RE.findall(lower_text))
    density = transitions / word_count if word_count else 0.0
    if density > TRANSITION_MIN_DENSITY and transitions >= TRANSITION_MIN_COUNT:
        return 15, (
            f"High transition word density ({transitions} in {word_count} words) "
            "- common in AI text."
        )
    return 0, None


def _formality(text: str, word_count: int, hits: int) -> Tuple[int, Optional[str]]:
    informal = bool(_EMOJI_RE.search(text)) or bool(_SLANG_RE.search(text))
    if not informal and word_count > FORMAL_MIN_WORDS and hits >= 1:
        return 10, "Formal tone with no colloquialisms in long-form text."
    return 0, None


def verdict_for_score(score: int) -> Verdict:
    if score >= LIKELY_AI_THRESHOLD:
        return Verdict.LIKELY_AI
    if score >= UNCERTAIN_THRESHOLD:
        return Verdict.UNCERTAIN
    return Verdict.LIKELY_REAL


def analyze_text(text: str) -> Optional[TextResult]:
    if len(text) < TEXT_MIN_CHARS:
        return None

    lower_text = text.lower()
    word_count = count_words(text)
    sentences = split_sentences(text)

    phrase_points, phrase_reason, hits = _phrase_density(lower_text)
    checks = [
        (phrase_points, phrase_reason),
        _sentence_uniformity(sentences),
        _paragraph_uniformity(text),
        _transition_density(lower_text, word_count),
        _formality(text, word_count, hits),
    ]

    score = min(TEXT_MAX_SCORE, sum(points for points, _ in checks))
    reasons = [reason for _, reason in checks if reason]
    verdict = verdict_for_score(score)

    if verdict is Verdict.LIKELY_REAL and not reasons:
        logger.debug(f"[TEXT] Suppressed: score={score}, no signals")
        return None

    logger.debug(f"[TEXT] score={score} verdict={verdict.value} signals={len(reasons)}")
    return TextResult(
        verdict=verdict,
        confidence=calculate_text_confidence(score),
        score=score,
        source=TEXT_HEURISTIC_SOURCE if verdict is not Verdict.LIKELY_REAL else None,
        reasons=reasons or ["No strong AI signals detected."],
        metadata={
            "wordCount": str(word_count),
            "sentenceCount": str(len(sentences)),
        },
        fingerprint={
            "method": "Statistical heuristics",
            "heuristicScore": f"{score}/{TEXT_MAX_SCORE}",
        },
    )
