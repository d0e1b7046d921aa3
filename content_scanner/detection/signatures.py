"""
Vocabulary matching: AI-tool tokens, camera brands and AI service URLs.

Functions:
  - find_token: first vocabulary token contained in a text (case-insensitive).
  - normalize_display_name: token -> canonical display name.
  - classify_claim_generator: Camera / AI / Unknown for a C2PA claim_generator.
  - find_manifest_ai_token: AI tool named anywhere in a decoded manifest.
  - match_url_pattern: AI service fragment anywhere in a URL.
  - match_context_mention: AI mention in alt/title or surrounding text.
"""

from enum import Enum
from typing import Iterable, Optional, Tuple

from content_scanner.detection.constants import (
    AI_HOST_PATTERNS,
    AI_SOURCE_NAMES,
    AI_ALT_TEXT_PATTERNS,
    C2PA_CLAIM_AI,
    C2PA_CLAIM_CAMERA,
)


class GeneratorClass(str, Enum):
    CAMERA = "camera"
    AI = "ai"
    UNKNOWN = "unknown"


def find_token(text: Optional[str], vocabulary: Iterable[str]) -> Optional[str]:
    """Return the first token of `vocabulary` found in `text`, else None."""
    if not text:
        return None
    lowered = text.lower()
    for token in vocabulary:
        if token in lowered:
            return token
    return None


def normalize_display_name(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    return AI_SOURCE_NAMES.get(token.lower(), token)


def classify_claim_generator(generator: Optional[str]) -> Tuple[GeneratorClass, Optional[str]]:
    """
    Classify a claim_generator string against the AI and camera vocabularies.

    AI tokens are tested first, so a generator naming both is treated as AI.
    Returns the class and the token that decided it.
    """
    token = find_token(generator, C2PA_CLAIM_AI)
    if token:
        return GeneratorClass.AI, token

    token = find_token(generator, C2PA_CLAIM_CAMERA)
    if token:
        return GeneratorClass.CAMERA, token

    return GeneratorClass.UNKNOWN, None


def find_manifest_ai_token(manifest_text: Optional[str]) -> Optional[str]:
    """Fallback for UNKNOWN generators: any AI tool named in the manifest text."""
    return find_token(manifest_text, C2PA_CLAIM_AI)


def match_url_pattern(
    url: Optional[str], patterns: Iterable[str] = AI_HOST_PATTERNS
) -> Optional[str]:
    """Search the whole URL (host, path and query) for an AI service fragment."""
    return find_token(url, patterns)


def match_context_mention(
    text: Optional[str], patterns: Iterable[str] = AI_ALT_TEXT_PATTERNS
) -> Optional[str]:
    return find_token(text, patterns)
