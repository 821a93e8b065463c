# core/slug.py
from __future__ import annotations
import hashlib
import re
import time
from typing import Optional

MAX_SLUG_CHARS = 80
_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(n: int) -> str:
    out = ""
    while n:
        n, r = divmod(n, 36)
        out = _ALPHABET[r] + out
    return out or "0"


def short_hash(text: str, length: int = 6) -> str:
    digest = int(hashlib.sha1(text.encode("utf-8")).hexdigest()[:12], 16)
    return _base36(digest).rjust(length, "0")[:length]


def slugify(query: str) -> str:
    s = (query or "").lower().strip()
    s = re.sub(r"[^a-z0-9\s-]", "", s)
    s = re.sub(r"\s+", "-", s)
    s = re.sub(r"-+", "-", s)
    s = s.strip("-")
    return s[:MAX_SLUG_CHARS]


def generate_slug(query: str, now_ms: Optional[int] = None) -> str:
    ts = int(time.time() * 1000) if now_ms is None else now_ms
    base = slugify(query) or "page"
    return f"{base}-{short_hash(f'{query}{ts}')}"
