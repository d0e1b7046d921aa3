"""
Confidence scoring for image/video signals and text heuristic scores.

Image confidence combines independent signals with a noisy-OR over fixed
prior weights. It is a deterministic heuristic, not a calibrated
probability: it stays in [5, 99] and never drops when a signal is added.
"""

import math
from enum import Enum
from typing import Iterable


class Signal(str, Enum):
    C2PA_EVIDENCE = "c2pa_evidence"
    EXIF_SIGNATURE = "exif_signature"
    IPTC_SOURCE = "iptc_source"
    SYNTHID_MARKER = "synthid_marker"
    URL_PATTERN = "url_pattern"
    ALT_TEXT_MENTION = "alt_text_mention"

    @property
    def weight(self) -> float:
        return SIGNAL_WEIGHTS[self]


SIGNAL_WEIGHTS = {
    Signal.C2PA_EVIDENCE: 0.95,
    Signal.IPTC_SOURCE: 0.92,
    Signal.EXIF_SIGNATURE: 0.90,
    Signal.SYNTHID_MARKER: 0.90,
    Signal.URL_PATTERN: 0.65,
    Signal.ALT_TEXT_MENTION: 0.55,
}

CONFIDENCE_FLOOR = 5    # "no evidence found" is not proof of authenticity
CONFIDENCE_CAP = 99


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (round() is banker's)."""
    return int(math.floor(value + 0.5))


def calculate_image_confidence(signals: Iterable[Signal]) -> int:
    weights = [s.weight for s in set(signals)]
    if not weights:
        return CONFIDENCE_FLOOR

    miss = 1.0
    for w in weights:
        miss *= 1.0 - w
    combined = round_half_up((1.0 - miss) * 100)
    return max(CONFIDENCE_FLOOR, min(CONFIDENCE_CAP, combined))


def calculate_text_confidence(score: int) -> int:
    """Piecewise map from heuristic score (0-85) to confidence (5-90)."""
    if score >= 70:
        return 90
    if score >= 50:
        return 65 + round_half_up((score - 50) * 1.25)
    if score >= 30:
        return 40 + round_half_up((score - 30) * 1.25)
    return max(5, round_half_up(score * 1.3))
