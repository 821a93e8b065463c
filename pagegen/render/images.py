# render/images.py
"""Image slot naming shared by the request builder and the block renderer.

Both sides call ``plan_block_images`` so the ids baked into markup as
``data-gen-image`` are exactly the ids that get requested.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from pagegen.schemas.content import ContentBlock
from pagegen.schemas.images import ImageDecision, ImageSize
from pagegen.tools.media.assets import safe_name

VIDEO_MARKERS = ("youtube.com", "youtu.be", "vimeo.com", "wistia.com", ".mp4", ".webm", ".mov", ".avi", ".m4v")


def image_url(page_slug: str, image_id: str, base_url: str = "") -> str:
    # same file name the image is saved under
    return f"{(base_url or '').rstrip('/')}/images/{safe_name(page_slug, 'page')}/{safe_name(image_id, 'image')}.png"


def prompt_text(value: Any) -> Optional[str]:
    """A usable image prompt, or None for blanks and non-strings."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def is_valid_video_url(url: Optional[str]) -> bool:
    u = (url or "").strip().lower()
    if not u or u.startswith("#") or u == "/#":
        return False
    if not u.startswith(("http://", "https://")):
        return False
    return any(m in u for m in VIDEO_MARKERS)


class ImagePlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    image_id: str
    block_id: str
    index: Optional[int] = None
    prompt: Optional[str] = None
    aspect_ratio: str = "4:3"
    size: ImageSize = "card"
    existing_url: Optional[str] = None

    @property
    def generate(self) -> bool:
        return self.existing_url is None and bool(self.prompt)


class ImageSlotRule(BaseModel):
    """How one block type names its images.

    ``items_key`` set means one image per entry of that content list, named
    by ``id_format`` with ``{block_id}`` and ``{i}``.
    """

    model_config = ConfigDict(frozen=True)

    id_format: str
    items_key: Optional[str] = None
    aspect_ratio: str = "4:3"
    size: ImageSize = "card"


IMAGE_SLOTS: Dict[str, ImageSlotRule] = {
    "hero": ImageSlotRule(id_format="hero", aspect_ratio="5:2", size="hero"),
    "cards": ImageSlotRule(id_format="card-{i}", items_key="cards"),
    "columns": ImageSlotRule(id_format="col-{i}", items_key="columns", aspect_ratio="3:2", size="column"),
    "split-content": ImageSlotRule(id_format="split-content-{block_id}"),
    "product-cards": ImageSlotRule(id_format="product-card-{block_id}-{i}", items_key="products", aspect_ratio="1:1"),
    "recipe-cards": ImageSlotRule(id_format="recipe-{i}", items_key="recipes"),
    "recipe-grid": ImageSlotRule(id_format="grid-recipe-{i}", items_key="recipes"),
    "product-recommendation": ImageSlotRule(id_format="product-rec-{block_id}"),
    "technique-spotlight": ImageSlotRule(id_format="technique-{block_id}"),
    "troubleshooting-steps": ImageSlotRule(id_format="step-{block_id}-{i}", items_key="steps"),
    "product-hero": ImageSlotRule(id_format="product-hero-{block_id}", aspect_ratio="1:1"),
    "feature-highlights": ImageSlotRule(id_format="feature-highlights-{block_id}-{i}", items_key="features", aspect_ratio="3:2"),
    "included-accessories": ImageSlotRule(
        id_format="included-accessories-{block_id}-{i}", items_key="accessories", aspect_ratio="1:1", size="thumbnail"
    ),
    "recipe-hero": ImageSlotRule(id_format="recipe-hero-{block_id}", aspect_ratio="16:9", size="hero"),
    "recipe-hero-detail": ImageSlotRule(id_format="recipe-hero-{block_id}", aspect_ratio="16:9", size="hero"),
    "recipe-steps": ImageSlotRule(id_format="recipe-step-{block_id}-{i}", items_key="steps"),
    "testimonials": ImageSlotRule(id_format="testimonial-{block_id}-{i}", items_key="testimonials", aspect_ratio="1:1"),
    "team-cards": ImageSlotRule(id_format="team-{block_id}-{i}", items_key="members", aspect_ratio="1:1"),
}


def _technique_fallback(content: Mapping[str, Any]) -> str:
    return f"Professional blending technique demonstration: {content.get('title') or 'blender technique'}"


# block types whose single image is required even without a prompt
FALLBACK_PROMPTS: Dict[str, Callable[[Mapping[str, Any]], str]] = {
    "technique-spotlight": _technique_fallback,
}


def _items(content: Mapping[str, Any], key: str) -> List[Any]:
    v = content.get(key)
    return list(v) if isinstance(v, list) else []


def plan_block_images(block: ContentBlock, decision: Optional[ImageDecision] = None) -> List[ImagePlan]:
    rule = IMAGE_SLOTS.get(block.type)
    if rule is None:
        return []
    content = block.content or {}
    reuse = decision is not None and decision.use_existing and bool(decision.existing_url)
    decided_prompt = decision.prompt if decision and not decision.use_existing else None

    if rule.items_key is None:
        if block.type == "technique-spotlight" and is_valid_video_url(content.get("videoUrl")):
            return []
        image_id = rule.id_format.format(block_id=block.id)
        if reuse:
            return [ImagePlan(image_id=image_id, block_id=block.id, existing_url=decision.existing_url)]
        prompt = decided_prompt or prompt_text(content.get("imagePrompt"))
        if not prompt and block.type in FALLBACK_PROMPTS:
            prompt = FALLBACK_PROMPTS[block.type](content)
        return [
            ImagePlan(
                image_id=image_id,
                block_id=block.id,
                prompt=prompt or None,
                aspect_ratio=rule.aspect_ratio,
                size=rule.size,
            )
        ]

    if reuse:
        # an existing image stands in for the block; items render without pictures
        return []
    plans: List[ImagePlan] = []
    for i, item in enumerate(_items(content, rule.items_key)):
        if not isinstance(item, Mapping):
            continue
        plans.append(
            ImagePlan(
                image_id=rule.id_format.format(block_id=block.id, i=i),
                block_id=block.id,
                index=i,
                prompt=prompt_text(item.get("imagePrompt")) or decided_prompt,
                aspect_ratio=rule.aspect_ratio,
                size=rule.size,
            )
        )
    return plans
