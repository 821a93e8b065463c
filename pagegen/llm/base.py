# llm/base.py
from __future__ import annotations
import os
from typing import Any, Dict, Optional

from pagegen.core.constants import DEFAULT_MODEL, DEFAULT_PROVIDER, PROVIDER_MODELS, SUPPORTED_PROVIDERS


class MissingKeyError(RuntimeError):
    pass


def require_env(name: str) -> None:
    if not os.getenv(name):
        raise MissingKeyError(f"Missing env var: {name}")


def normalize(provider: Optional[str], model: Optional[str]) -> tuple[str, str]:
    p = (provider or DEFAULT_PROVIDER).lower()
    if p not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unsupported provider: {p}")
    m = (model or DEFAULT_MODEL).strip()
    if not m:
        raise ValueError("Model cannot be empty")
    known = PROVIDER_MODELS.get(p, ())
    prefixes = {"openai": ("gpt-", "o", "chatgpt-"), "anthropic": ("claude-",), "gemini": ("gemini-",)}[p]
    if m not in known and not m.startswith(prefixes):
        raise ValueError(f"Model {m!r} does not belong to provider {p}")
    return p, m


def common_kwargs(temperature: float, timeout: Optional[float] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"temperature": temperature}
    if timeout:
        out["timeout"] = timeout
    return out
