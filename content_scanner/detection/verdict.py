"""
Verdict resolution for image/video scans.

Detectors contribute `Evidence` entries in a fixed priority order. The
verdict is a left fold over those entries:

  * OVERWRITE entries (hard evidence) replace whatever verdict is current,
    including an earlier `likely_real` from a camera manifest.
  * UPGRADE_FROM_NONE entries (weak evidence) only lift `no_metadata`.

Reasons are kept in evaluation order; the source is the first one offered.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from content_scanner.detection.scoring import Signal

NO_SIGNALS_REASON = "No AI signals detected in metadata."


class Verdict(str, Enum):
    AI_DETECTED = "ai_detected"
    LIKELY_AI = "likely_ai"
    UNCERTAIN = "uncertain"
    LIKELY_REAL = "likely_real"
    NO_METADATA = "no_metadata"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    Verdict.AI_DETECTED: 4,
    Verdict.LIKELY_AI: 3,
    Verdict.UNCERTAIN: 2,
    Verdict.LIKELY_REAL: 1,
    Verdict.NO_METADATA: 0,
}


class Policy(str, Enum):
    OVERWRITE = "overwrite"
    UPGRADE_FROM_NONE = "upgrade_from_none"


@dataclass(frozen=True)
class Evidence:
    verdict: Verdict
    reason: str
    policy: Policy = Policy.OVERWRITE
    signal: Optional[Signal] = None
    source: Optional[str] = None
    fingerprint: Dict[str, str] = field(default_factory=dict)


@dataclass
class Resolution:
    verdict: Verdict = Verdict.NO_METADATA
    source: Optional[str] = None
    reasons: List[str] = field(default_factory=list)
    signals: Set[Signal] = field(default_factory=set)
    fingerprint: Dict[str, str] = field(default_factory=dict)


def apply_evidence(state: Resolution, evidence: Evidence) -> Resolution:
    if evidence.policy is Policy.OVERWRITE:
        state.verdict = evidence.verdict
    elif state.verdict is Verdict.NO_METADATA:
        state.verdict = evidence.verdict

    state.reasons.append(evidence.reason)
    if evidence.signal is not None:
        state.signals.add(evidence.signal)
    if state.source is None and evidence.source:
        state.source = evidence.source
    state.fingerprint.update(evidence.fingerprint)
    return state


def resolve_verdict(entries: Iterable[Evidence]) -> Resolution:
    state = Resolution()
    for evidence in entries:
        state = apply_evidence(state, evidence)
    if not state.reasons:
        state.reasons.append(NO_SIGNALS_REASON)
    return state
