# agents/content_agent.py
"""Structured page content from the model.

The model is asked for one JSON object whose ``blocks`` follow the layout's
flattened slot order. Output that does not parse or does not validate against
``GeneratedContent`` raises ``ContentGenerationError``; there is no fallback
content.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from pagegen.core.config import Settings
from pagegen.core.errors import ContentGenerationError
from pagegen.core.jsonx import extract_json
from pagegen.core.logging import get_logger
from pagegen.layouts.catalog import flatten_slots, format_layout_for_prompt
from pagegen.llm.factory import ainvoke_text
from pagegen.schemas.content import GeneratedContent
from pagegen.schemas.intent import IntentClassification, MergedContext
from pagegen.schemas.layout import LayoutTemplate
from pagegen.schemas.retrieval import RetrievalContext

logger = get_logger("pagegen.agents.content")

BRAND_VOICE = (
    "You are a content writer for Vitamix, a premium blender company with over 100 years of heritage.\n"
    "Tone: professional yet accessible, confident without boasting, warm but premium.\n"
    "Lead with benefits, back claims with facts from the sources, inspire action.\n"
    "Avoid discount language (cheap, budget), minimizing words (just, simply, basically), "
    "hype (revolutionary, game-changing, epic, awesome, insane) and unsubstantiated health claims.\n"
)

_CTA = '{"headline", "text", "buttonText", "buttonUrl", "ctaType": "explore"|"shop"|"external", "generationHint"}'
_RECIPES = '{"headline", "recipes": [{"title", "description", "time", "difficulty", "url", "imagePrompt"}]}'

BLOCK_FIELDS: Dict[str, str] = {
    "hero": '{"headline", "subheadline", "ctaText", "ctaUrl", "imagePrompt"}',
    "cards": '{"cards": [{"title", "description", "imagePrompt", "linkText", "linkUrl"}]}',
    "columns": '{"columns": [{"headline", "text", "imagePrompt"}]}',
    "text": '{"headline", "body"}',
    "cta": _CTA,
    "support-cta": _CTA,
    "product-cta": _CTA,
    "comparison-cta": _CTA,
    "faq": '{"items": [{"question", "answer"}]}',
    "split-content": (
        '{"eyebrow", "headline", "body", "price", "priceNote", "primaryCtaText", "primaryCtaUrl", '
        '"secondaryCtaText", "secondaryCtaUrl", "imagePrompt"}'
    ),
    "benefits-grid": '{"headline", "items": [{"icon", "title", "description"}]}',
    "tips-banner": '{"headline", "tips": [{"title", "description"}]}',
    "product-cards": '{"headline", "products": [{"name", "price", "description", "url", "imagePrompt"}]}',
    "product-recommendation": '{"eyebrow", "headline", "productName", "body", "price", "ctaText", "ctaUrl", "imagePrompt"}',
    "recipe-cards": _RECIPES,
    "recipe-grid": _RECIPES,
    "recipe-filter-bar": '{"filters": [{"label", "options": []}]}',
    "ingredient-search": '{"headline", "placeholder", "suggestions": []}',
    "quick-view-modal": '{"buttonText"}',
    "technique-spotlight": '{"title", "description", "tips": [], "videoUrl", "linkText", "linkUrl", "imagePrompt"}',
    "recipe-hero": '{"title", "description", "prepTime", "cookTime", "servings", "difficulty", "imagePrompt"}',
    "recipe-hero-detail": '{"title", "description", "prepTime", "cookTime", "servings", "difficulty", "imagePrompt"}',
    "recipe-steps": '{"steps": [{"title", "instruction", "imagePrompt"}]}',
    "recipe-sidebar": '{"servings", "prepTime", "totalTime", "difficulty", "tags": []}',
    "ingredients-list": '{"headline", "items": [{"amount", "name", "note"}]}',
    "recipe-directions": '{"headline", "steps": [{"instruction"}]}',
    "recipe-tabs": '{"tabs": [{"label", "body"}]}',
    "nutrition-facts": '{"servingSize", "facts": [{"label", "value"}]}',
    "recipe-tips": '{"headline", "tips": []}',
    "product-hero": '{"productName", "productSku", "description", "price", "badges": [], "ctaText", "ctaUrl", "imagePrompt"}',
    "specs-table": '{"headline", "specs": [{"label", "value"}]}',
    "feature-highlights": '{"headline", "features": [{"title", "description", "imagePrompt"}]}',
    "included-accessories": '{"headline", "accessories": [{"name", "description", "imagePrompt"}]}',
    "comparison-table": '{"headline", "products": [], "rows": [{"label", "values": [], "winner": index or null}]}',
    "verdict-card": '{"headline", "summary", "recommendations": [{"product", "bestFor"}]}',
    "use-case-cards": '{"useCases": [{"title", "description"}]}',
    "support-hero": '{"headline", "subheadline", "issue"}',
    "diagnosis-card": '{"headline", "items": [{"symptom", "cause", "severity"}]}',
    "troubleshooting-steps": '{"headline", "steps": [{"title", "instruction", "imagePrompt"}]}',
    "countdown-timer": '{"headline", "text", "endDate"}',
    "testimonials": '{"headline", "testimonials": [{"quote", "name", "role", "imagePrompt"}]}',
    "timeline": '{"headline", "events": [{"year", "title", "description"}]}',
    "team-cards": '{"headline", "members": [{"name", "role", "bio", "imagePrompt"}]}',
}


def _sources(retrieval: RetrievalContext) -> str:
    if not retrieval.chunks:
        return "No specific content found. Use general Vitamix brand knowledge but avoid specific product claims."
    parts = []
    for i, chunk in enumerate(retrieval.chunks, start=1):
        m = chunk.metadata
        parts.append(
            f"### Source {i}: {m.page_title}\nURL: {m.source_url}\nType: {m.content_type}\n"
            f"Relevance: {chunk.score * 100:.0f}%\n\n{chunk.text}"
        )
    return "\n---\n".join(parts)


def _block_contract(layout: LayoutTemplate) -> str:
    lines = []
    for slot in flatten_slots(layout):
        fields = BLOCK_FIELDS.get(slot.block_type, "{}")
        count = f", {slot.config.item_count} items" if slot.config and slot.config.item_count else ""
        lines.append(f'{slot.position + 1}. type "{slot.block_type}" (variant {slot.variant}{count}): content {fields}')
    return "\n".join(lines)


def build_content_prompt(
    query: str,
    retrieval: RetrievalContext,
    intent: IntentClassification,
    layout: LayoutTemplate,
    merged: Optional[MergedContext] = None,
) -> str:
    ents = intent.entities
    constraints = ""
    if merged and merged.constraints:
        constraints = f"- Always respect: {', '.join(merged.constraints)}\n"
    session = f"\n## Session\n{merged.prompt_text}\n" if merged and merged.prompt_text else ""
    return (
        f"{BRAND_VOICE}\n"
        f"## User Query\n\"{query}\"\n\n"
        "## Intent Classification\n"
        f"- Type: {intent.intent_type}\n"
        f"- Confidence: {intent.confidence * 100:.0f}%\n"
        f"- Layout: {layout.id}\n"
        f"- Content focus: {', '.join(intent.content_types)}\n"
        f"- Products mentioned: {', '.join(ents.products) or 'none'}\n"
        f"- Ingredients mentioned: {', '.join(ents.ingredients) or 'none'}\n"
        f"- User goals: {', '.join(ents.goals) or 'general exploration'}\n"
        f"{constraints}{session}\n"
        f"## LAYOUT TEMPLATE (FOLLOW EXACTLY)\n{format_layout_for_prompt(layout)}\n\n"
        "## Blocks, in this exact order\n"
        f"{_block_contract(layout)}\n\n"
        f"## Sources\n{_sources(retrieval)}\n\n"
        "Return ONLY a JSON object:\n"
        '{"headline", "subheadline", "meta": {"title", "description"}, '
        '"citations": [{"text", "sourceUrl", "sourceTitle"}], '
        '"blocks": [{"id", "type", "variant", "sectionStyle", "content": {...}}]}\n'
        "Every block id must be unique. Write imagePrompt values as concrete photography briefs.\n"
    )


def _normalize_blocks(data: Dict[str, Any], layout: LayoutTemplate) -> Dict[str, Any]:
    """Fill ids and section styles the model left out, from slot order."""
    blocks = data.get("blocks")
    if not isinstance(blocks, list):
        return data
    slots = flatten_slots(layout)
    out: List[Any] = []
    for i, b in enumerate(blocks):
        if not isinstance(b, dict):
            out.append(b)
            continue
        b = dict(b)
        b.setdefault("id", f"{b.get('type', 'block')}-{i}")
        if i < len(slots) and not b.get("sectionStyle") and not b.get("section_style"):
            b["sectionStyle"] = slots[i].section_style
        if not isinstance(b.get("content"), dict):
            b["content"] = {}
        out.append(b)
    return {**data, "blocks": out}


def parse_content(raw: str, layout: LayoutTemplate) -> GeneratedContent:
    try:
        data = extract_json(raw)
        return GeneratedContent.model_validate(_normalize_blocks(data, layout))
    except ValidationError as e:
        raise ContentGenerationError(f"Generated content failed validation: {e.error_count()} error(s)") from e
    except ValueError as e:
        raise ContentGenerationError(f"Generated content is not valid JSON: {e}") from e


async def generate_content(
    query: str,
    retrieval: RetrievalContext,
    intent: IntentClassification,
    layout: LayoutTemplate,
    merged: Optional[MergedContext],
    settings: Settings,
) -> GeneratedContent:
    prompt = build_content_prompt(query, retrieval, intent, layout, merged)
    raw = await ainvoke_text(settings.content_provider, settings.content_model, prompt, temperature=0.7, json_mode=True)
    content = parse_content(raw, layout)
    logger.info("CONTENT_GENERATED layout=%s blocks=%s citations=%s", layout.id, len(content.blocks), len(content.citations))
    return content
