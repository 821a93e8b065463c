# core/constants.py
from __future__ import annotations

SUPPORTED_PROVIDERS = ("openai", "anthropic", "gemini")

PROVIDER_MODELS = {
    "openai": ("gpt-4o-mini", "gpt-4.1-mini", "gpt-4o"),
    "anthropic": (
        "claude-3-5-sonnet-20241022",
        "claude-3-5-haiku-20241022",
        "claude-3-7-sonnet-latest",
    ),
    "gemini": (
        "gemini-1.5-flash-002",
        "gemini-1.5-pro-002",
        "gemini-2.0-flash",
    ),
}

DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_CONTENT_MODEL = "gpt-4o"

MAX_QUERY_CHARS = 2_000
MAX_SESSION_TURNS = 10

# layout selection
HIGH_CONFIDENCE_THRESHOLD = 0.85

# brand voice
COMPLIANCE_MIN_SCORE = 70

# generation status record
STATE_TTL_SECS = 300
COMPLETE_TTL_SECS = 86_400

# SSE
SSE_RETRY_MS = 1500

# image providers
IMAGE_PROVIDERS = ("openai", "dalle")
DEFAULT_IMAGE_PROVIDER = "openai"
