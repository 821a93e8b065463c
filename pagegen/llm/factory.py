# llm/factory.py
from __future__ import annotations
from typing import List, Optional

from pagegen.core.constants import PROVIDER_MODELS
from pagegen.core.logging import get_logger
from pagegen.llm.anthropic_llm import build_anthropic
from pagegen.llm.base import MissingKeyError, normalize
from pagegen.llm.gemini_llm import build_gemini
from pagegen.llm.openai_llm import build_openai

logger = get_logger("pagegen.llm.factory")

PROVIDER_FALLBACK_MODELS = {
    "openai": ("gpt-4o-mini", "gpt-4.1-mini", "gpt-4o"),
    "anthropic": ("claude-3-5-haiku-latest", "claude-3-5-sonnet-latest"),
    "gemini": (
        "gemini-1.5-flash-002",
        "gemini-1.5-pro-002",
        "gemini-2.0-flash",
    ),
}

_BUILDERS = {"openai": build_openai, "anthropic": build_anthropic, "gemini": build_gemini}


def is_not_found_error(e: Exception) -> bool:
    s = str(e).lower()
    return "not_found" in s or "not found" in s or "404" in s


def model_candidates(provider: str, selected_model: str) -> List[str]:
    out: List[str] = []
    for m in (selected_model, *PROVIDER_MODELS.get(provider, ()), *PROVIDER_FALLBACK_MODELS.get(provider, ())):
        if m and m not in out:
            out.append(m)
    return out


def get_llm(
    provider: Optional[str],
    model: Optional[str],
    temperature: float = 0.2,
    timeout: Optional[float] = None,
    json_mode: bool = False,
):
    p, m = normalize(provider, model)
    try:
        return _BUILDERS[p](m, temperature, timeout, json_mode)
    except MissingKeyError as e:
        if p == "openai":
            raise
        logger.warning("LLM_PROVIDER_FALLBACK provider=%s model=%s error=%s", p, m, e)
        return build_openai("gpt-4o-mini", temperature, timeout, json_mode)


async def ainvoke_text(
    provider: Optional[str],
    model: Optional[str],
    prompt: str,
    temperature: float = 0.2,
    timeout: Optional[float] = None,
    json_mode: bool = False,
) -> str:
    """Invoke the first model that exists, walking the provider's candidates on 404s."""
    p, m = normalize(provider, model)
    candidates = model_candidates(p, m)
    for i, candidate in enumerate(candidates):
        llm = get_llm(p, candidate, temperature=temperature, timeout=timeout, json_mode=json_mode)
        try:
            out = await llm.ainvoke(prompt)
        except Exception as e:
            if i < len(candidates) - 1 and is_not_found_error(e):
                logger.warning("LLM_MODEL_NOT_FOUND provider=%s model=%s next=%s", p, candidate, candidates[i + 1])
                continue
            raise
        content = getattr(out, "content", out)
        if isinstance(content, list):
            content = "".join(part.get("text", "") if isinstance(part, dict) else str(part) for part in content)
        return (content or "").strip()
    raise RuntimeError(f"No usable model for provider {p}")
