# agents/entity_agent.py
from __future__ import annotations
from typing import Any, List

from pagegen.core.config import Settings
from pagegen.core.jsonx import extract_json
from pagegen.core.logging import get_logger
from pagegen.llm.factory import ainvoke_text
from pagegen.schemas.intent import ExtractedEntities

logger = get_logger("pagegen.agents.entity")

ENTITY_PROMPT = (
    "Extract search entities from this Vitamix website query.\n"
    "Return ONLY JSON: "
    '{"products": [], "ingredients": [], "goals": [], "keywords": []}\n'
    "products: Vitamix model names or series. ingredients: foods mentioned. "
    "goals: what the user wants to achieve. keywords: other retrieval terms.\n"
)


def _clean(v: Any) -> List[str]:
    if not isinstance(v, list):
        return []
    return [str(x).strip() for x in v if str(x).strip()]


async def extract_entities(query: str, settings: Settings) -> ExtractedEntities:
    """Never raises: any model or parse failure yields an empty extraction."""
    try:
        raw = await ainvoke_text(
            settings.intent_provider,
            settings.intent_model,
            f"{ENTITY_PROMPT}\nQuery: \"{query}\"\n",
            temperature=0.0,
            json_mode=True,
        )
        data = extract_json(raw)
    except Exception as e:
        logger.warning("ENTITY_EXTRACT_FAILED error=%s", e)
        return ExtractedEntities()
    out = ExtractedEntities(
        products=_clean(data.get("products")),
        ingredients=_clean(data.get("ingredients")),
        goals=_clean(data.get("goals")),
        keywords=_clean(data.get("keywords")),
    )
    logger.info(
        "ENTITY_EXTRACTED products=%s ingredients=%s goals=%s keywords=%s",
        len(out.products),
        len(out.ingredients),
        len(out.goals),
        len(out.keywords),
    )
    return out
