# render/strategy.py
from __future__ import annotations
from typing import Dict, Optional

from pagegen.core.logging import get_logger
from pagegen.render.images import IMAGE_SLOTS, prompt_text
from pagegen.schemas.content import ContentBlock, GeneratedContent
from pagegen.schemas.images import ImageDecision
from pagegen.schemas.retrieval import RetrievalContext

logger = get_logger("pagegen.render.strategy")

DEFAULT_IMAGE_PROMPT = "Modern kitchen scene with Vitamix blender and fresh ingredients"

# which retrieved content type can supply a picture for a block
BLOCK_SUBJECT = {
    "product-hero": "product",
    "product-cards": "product",
    "product-recommendation": "product",
    "recipe-hero": "recipe",
    "recipe-hero-detail": "recipe",
    "recipe-cards": "recipe",
    "recipe-grid": "recipe",
}


def _default_prompt(block: ContentBlock) -> str:
    c = block.content or {}
    subject = c.get("headline") or c.get("title") or c.get("productName")
    if subject:
        return f"Professional photography related to: {subject}"
    return DEFAULT_IMAGE_PROMPT


def _existing_for_sku(sku: str, retrieval: RetrievalContext) -> Optional[str]:
    for chunk in retrieval.chunks:
        if chunk.metadata.product_sku == sku and chunk.metadata.image_url:
            return chunk.metadata.image_url
    return None


def decide_image_strategy(block: ContentBlock, retrieval: Optional[RetrievalContext]) -> ImageDecision:
    retrieval = retrieval or RetrievalContext()
    c = block.content or {}

    sku = c.get("productSku")
    if sku:
        url = _existing_for_sku(str(sku), retrieval)
        if url:
            return ImageDecision(use_existing=True, existing_url=url, reason="official_product_image")

    subject = c.get("type") or BLOCK_SUBJECT.get(block.type)
    if subject:
        for chunk in retrieval.chunks:
            if chunk.metadata.image_url and chunk.metadata.content_type == subject:
                return ImageDecision(use_existing=True, existing_url=chunk.metadata.image_url, reason="retrieved_image")

    return ImageDecision(prompt=prompt_text(c.get("imagePrompt")) or _default_prompt(block), reason="generate")


def decide_images(content: GeneratedContent, retrieval: Optional[RetrievalContext]) -> Dict[str, ImageDecision]:
    """One decision per image-bearing block, keyed by block id."""
    out: Dict[str, ImageDecision] = {}
    for block in content.blocks:
        if block.type not in IMAGE_SLOTS:
            continue
        out[block.id] = decide_image_strategy(block, retrieval)
    reused = sum(1 for d in out.values() if d.use_existing)
    logger.info("IMAGE_STRATEGY blocks=%s reuse=%s generate=%s", len(out), reused, len(out) - reused)
    return out
