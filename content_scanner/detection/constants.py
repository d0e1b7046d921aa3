"""
Fixed vocabularies and scan windows used by the detection core.

Everything here is read-only and built once at import time. Token lists are
lowercase and ordered: scans report the first token that matches, so earlier
entries take priority over later ones.
"""

from types import MappingProxyType

# ------------------------------------------------------------------ #
# Scan windows (algorithmic, not env-overridable)                     #
# ------------------------------------------------------------------ #
SEGMENT_SEARCH_BYTES = 100          # APP1 marker must start within this prefix
PROVENANCE_PREFIX_BYTES = 200_000   # decoded for C2PA keywords / SynthID
METADATA_PREFIX_BYTES = 300_000     # decoded for XMP + broad signature search
XMP_MAX_CHARS = 50_000              # max packet body between open/close tags
MIN_PRINTABLE_RUN = 4

JUMBF_BOX_TYPE = b"jumb"
APP1_MARKER = b"\xff\xe1"

PROVENANCE_KEYWORDS_RE = r"c2pa|c2cl|contentcredentials|content.credentials"

# ------------------------------------------------------------------ #
# AI tool signatures found in EXIF / XMP / IPTC metadata              #
# ------------------------------------------------------------------ #
AI_SOFTWARE_SIGNATURES = (
    # Image generators
    "dall-e", "dall·e", "openai", "chatgpt",
    "midjourney",
    "stable diffusion", "stability ai", "stabilityai", "stablediffusion",
    "adobe firefly", "firefly",
    "imagen", "google deepmind", "deepmind",
    "leonardo ai", "leonardo.ai",
    "ideogram", "playground ai",
    "flux", "black forest labs",
    "bing image creator", "microsoft designer",
    "canva ai", "canva magic",
    "nightcafe", "artbreeder",
    "copilot designer",
    "grok", "xai",
    "gemini",
    # Video generators
    "sora", "runway", "runwayml", "pika", "kling", "veo", "luma",
    "haiper", "minimax", "hailuo",
)

# Editor brands that fill the "Software" field; not AI evidence on their own.
EDITOR_SOFTWARE_TOKENS = ("adobe", "photoshop", "gimp", "lightroom")

# ------------------------------------------------------------------ #
# Canonical display names                                             #
# ------------------------------------------------------------------ #
AI_SOURCE_NAMES = MappingProxyType({
    "dall-e": "DALL-E", "dall·e": "DALL-E", "openai": "OpenAI", "chatgpt": "ChatGPT",
    "midjourney": "Midjourney",
    "stable diffusion": "Stable Diffusion", "stability ai": "Stability AI",
    "stabilityai": "Stability AI", "stablediffusion": "Stable Diffusion",
    "adobe firefly": "Adobe Firefly", "firefly": "Adobe Firefly",
    "imagen": "Google Imagen", "google deepmind": "Google DeepMind", "deepmind": "Google DeepMind",
    "leonardo ai": "Leonardo AI", "leonardo.ai": "Leonardo AI",
    "ideogram": "Ideogram", "playground ai": "Playground AI",
    "flux": "FLUX (Black Forest Labs)", "black forest labs": "Black Forest Labs",
    "bing image creator": "Bing Image Creator", "microsoft designer": "Microsoft Designer",
    "canva ai": "Canva AI", "canva magic": "Canva Magic",
    "nightcafe": "NightCafe", "artbreeder": "Artbreeder",
    "copilot designer": "Copilot Designer",
    "grok": "Grok (xAI)", "xai": "xAI",
    "gemini": "Google Gemini",
    "sora": "Sora (OpenAI)", "runway": "Runway", "runwayml": "Runway",
    "pika": "Pika", "kling": "Kling", "veo": "Veo (Google)", "luma": "Luma Dream Machine",
    "haiper": "Haiper", "minimax": "Minimax", "hailuo": "Hailuo AI",
    # URL-based sources
    "oaidalleapi": "DALL-E (OpenAI)", "dalle": "DALL-E",
    "mj-gallery": "Midjourney",
    "replicate.delivery": "Replicate", "replicate.com": "Replicate",
    "pika.art": "Pika", "fal.ai": "FAL.ai", "together.xyz": "Together AI",
})

# ------------------------------------------------------------------ #
# C2PA claim_generator: capture devices vs AI tools                   #
# ------------------------------------------------------------------ #
C2PA_CLAIM_CAMERA = (
    "leica", "sony", "canon", "nikon", "om system", "fujifilm",
    "iphone", "pixel", "phase one", "capture one", "camera",
    "pentax", "panasonic", "lumix", "olympus",
)

C2PA_CLAIM_AI = (
    "dall-e", "dall·e", "firefly", "midjourney", "openai", "stability",
    "imagen", "leonardo", "ideogram", "flux", "microsoft designer",
    "bing", "canva", "runway", "sora", "veo", "luma", "pika", "kling",
    "gemini", "replicate", "fal.ai", "playground",
)

# ------------------------------------------------------------------ #
# URL and surrounding-text patterns                                   #
# ------------------------------------------------------------------ #
AI_HOST_PATTERNS = (
    "oaidalleapi", "dalle", "openai",
    "midjourney", "mj-gallery",
    "replicate.delivery", "replicate.com",
    "stability.ai", "stablediffusion",
    "leonardo.ai", "firefly",
    "flux", "fal.ai", "together.xyz",
)

AI_VIDEO_URL_PATTERNS = (
    "sora", "runway", "runwayml", "pika.art", "pika",
    "kling", "luma", "haiper", "minimax", "hailuo",
    "replicate", "fal.ai",
)

AI_ALT_TEXT_PATTERNS = (
    "ai generated", "ai-generated", "generated by ai",
    "made with ai", "created with ai", "dall-e", "midjourney",
    "stable diffusion", "ai image", "ai art",
)

AI_VIDEO_CONTEXT_PATTERNS = (
    "ai generated", "ai-generated", "sora", "runway",
    "pika", "kling", "generated video", "synthetic video",
)

# ------------------------------------------------------------------ #
# IPTC DigitalSourceType values that mean "made by a trained model"    #
# ------------------------------------------------------------------ #
AI_DIGITAL_SOURCE_TYPES = (
    "compositeWithTrainedAlgorithmicMedia",
    "trainedAlgorithmicMedia",
)

# ------------------------------------------------------------------ #
# Text heuristics                                                     #
# ------------------------------------------------------------------ #
LLM_PHRASES = (
    "it's worth noting that", "it's important to note", "it is worth mentioning",
    "in today's world", "in the rapidly evolving",
    "dive into", "dive deep", "let's delve", "delve into",
    "the landscape of", "navigating the",
    "harness the power", "leverage the",
    "at the end of the day", "in conclusion,", "to summarize,",
    "overall,", "in summary,", "furthermore,", "moreover,", "additionally,",
    "it's crucial to", "plays a crucial role",
    "a testament to", "tapestry of", "multifaceted",
    "comprehensive guide", "step-by-step guide",
    "unlock the", "game-changer", "paradigm shift",
    "holistic approach", "foster a sense of", "embark on",
)

TRANSITION_WORDS = (
    "however", "therefore", "furthermore", "moreover", "additionally",
    "consequently", "nevertheless", "nonetheless", "in addition",
    "as a result", "on the other hand",
)

INFORMAL_SLANG = (
    "lol", "lmao", "tbh", "imo", "idk", "gonna", "wanna", "gotta",
    "ya'll", "y'all", "ngl", "fr", "bruh",
)

# Emoticons, misc symbols & pictographs, transport & map, regional indicators
EMOJI_RANGES = (
    ("\U0001F600", "\U0001F64F"),
    ("\U0001F300", "\U0001F5FF"),
    ("\U0001F680", "\U0001F6FF"),
    ("\U0001F1E0", "\U0001F1FF"),
)

TEXT_MIN_CHARS = 300
TEXT_MAX_CHARS = 50_000
TEXT_MAX_SCORE = 85
TEXT_HEURISTIC_SOURCE = "LLM (heuristic)"
