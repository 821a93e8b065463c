# agents/intent_agent.py
from __future__ import annotations
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from pagegen.core.config import Settings
from pagegen.core.jsonx import extract_json
from pagegen.core.logging import get_logger
from pagegen.layouts.catalog import DEFAULT_CATALOG, LayoutCatalog
from pagegen.llm.factory import ainvoke_text
from pagegen.schemas.intent import (
    INTENT_TYPES,
    Entities,
    IntentClassification,
    MergedContext,
    UserContext,
    default_classification,
)

logger = get_logger("pagegen.agents.intent")

INTENT_SYSTEM_PROMPT = (
    "You are a query classifier for the Vitamix website. Analyze the user query and return a JSON classification.\n"
    "If session context is given, treat the conversation as cumulative: each query adds to earlier interests, "
    "even when the intent type changes. Keep earlier products and ingredients in the entities and fold earlier "
    "themes into the goals (a smoothie session plus 'what blender?' means 'blender for smoothies'). "
    "Only drop the session when the query explicitly resets it ('forget', 'actually', 'something different').\n"
    "Query types:\n"
    "- product_info: product features, specs, pricing, or browsing a product category\n"
    "- recipe: recipe requests, cooking instructions, ingredient questions\n"
    "- comparison: comparing products or choosing between them ('which', 'best', 'vs')\n"
    "- support: troubleshooting, noises, leaks, warranty problems\n"
    "- general: brand, lifestyle, nutrition, anything else\n"
)


def _layout_menu(catalog: LayoutCatalog) -> str:
    return "\n".join(f"- {t.id}: {t.description} (e.g. {'; '.join(t.use_cases[:3])})" for t in catalog)


def build_intent_prompt(query: str, merged: Optional[MergedContext], catalog: LayoutCatalog = DEFAULT_CATALOG) -> str:
    session = f"{merged.prompt_text}\n\n" if merged and merged.prompt_text else ""
    return (
        f"{INTENT_SYSTEM_PROMPT}\n"
        f"Available layouts:\n{_layout_menu(catalog)}\n\n"
        "Return ONLY valid JSON with exactly these keys:\n"
        "{\n"
        '  "intent_type": "product_info" | "recipe" | "comparison" | "support" | "general",\n'
        '  "confidence": number between 0 and 1,\n'
        '  "layout_id": one of the layout ids above,\n'
        '  "content_types": ["product" | "recipe" | "editorial" | "support"],\n'
        '  "entities": {"products": [], "ingredients": [], "goals": [], "userContext": {\n'
        '    "dietary": {"avoid": [], "preferences": []}, "health": {"conditions": [], "goals": [], "considerations": []},\n'
        '    "cultural": {"cuisine": [], "religious": [], "regional": null}, "audience": null, "occasion": null,\n'
        '    "constraints": [], "available": []}}\n'
        "}\n"
        "Omit userContext when the query carries no personal context. No prose.\n\n"
        f"{session}Query: \"{query}\"\n"
    )


def _str_list(v: Any) -> List[str]:
    if isinstance(v, str):
        v = [v]
    if not isinstance(v, list):
        return []
    return [str(x).strip() for x in v if str(x).strip()]


def _user_context(raw: Any) -> Optional[UserContext]:
    if not isinstance(raw, dict) or not raw:
        return None
    try:
        return UserContext.model_validate(raw)
    except ValidationError as e:
        logger.warning("INTENT_USER_CONTEXT_INVALID errors=%s", e.error_count())
        return None


def parse_classification(raw: str, query: str) -> IntentClassification:
    """Raises ValueError when the model output is not a usable classification."""
    data: Dict[str, Any] = extract_json(raw)
    intent_type = str(data.get("intent_type") or data.get("intentType") or "").strip().lower()
    if intent_type not in INTENT_TYPES:
        raise ValueError(f"Unknown intent_type: {intent_type!r}")
    try:
        confidence = float(data.get("confidence", 0.5))
    except (TypeError, ValueError) as e:
        raise ValueError("confidence is not a number") from e
    ents = data.get("entities") if isinstance(data.get("entities"), dict) else {}
    return IntentClassification(
        intent_type=intent_type,
        confidence=min(1.0, max(0.0, confidence)),
        layout_id=str(data.get("layout_id") or data.get("layoutId") or "").strip() or "lifestyle",
        content_types=_str_list(data.get("content_types") or data.get("contentTypes")) or ["editorial"],
        entities=Entities(
            products=_str_list(ents.get("products")),
            ingredients=_str_list(ents.get("ingredients")),
            goals=_str_list(ents.get("goals")) or [query],
            user_context=_user_context(ents.get("userContext") or ents.get("user_context")),
        ),
    )


async def classify_intent(
    query: str,
    merged: Optional[MergedContext],
    settings: Settings,
    catalog: LayoutCatalog = DEFAULT_CATALOG,
) -> IntentClassification:
    prompt = build_intent_prompt(query, merged, catalog)
    raw = await ainvoke_text(settings.intent_provider, settings.intent_model, prompt, temperature=0.0, json_mode=True)
    try:
        intent = parse_classification(raw, query)
    except ValueError as e:
        logger.warning("INTENT_PARSE_FAILED error=%s raw_len=%s -> default", e, len(raw or ""))
        return default_classification(query)
    logger.info(
        "INTENT_CLASSIFIED type=%s confidence=%.2f layout=%s products=%s",
        intent.intent_type,
        intent.confidence,
        intent.layout_id,
        len(intent.entities.products),
    )
    return intent
