# render/blocks.py
"""Block renderer: ``(ContentBlock, LayoutSlot, page_slug) -> markup``.

Pure: no network or storage. Image URLs come from ``image_url`` so markup can
stream before the images exist.
"""
from __future__ import annotations
import re
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from jinja2 import DictLoader, Environment, Undefined, select_autoescape
from markupsafe import Markup

from pagegen.core.logging import get_logger
from pagegen.render.images import image_url, is_valid_video_url, plan_block_images
from pagegen.render.templates import BLOCK_TEMPLATES, MACROS, PAGE_TEMPLATE, WRAPPER
from pagegen.schemas.content import ContentBlock
from pagegen.schemas.images import ImageDecision
from pagegen.schemas.layout import BLOCK_TYPES, LayoutSlot

logger = get_logger("pagegen.render.blocks")

BLOCK_MARKUP_VERSION = 1


def _paragraphs(value: Any) -> List[str]:
    text = "" if isinstance(value, Undefined) or value is None else str(value)
    return [p.strip() for p in re.split(r"\n\s*\n", text) if p.strip()]


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _build_env() -> Environment:
    env = Environment(
        loader=DictLoader({"_macros.html": MACROS, "_wrapper.html": WRAPPER, "page.html": PAGE_TEMPLATE, **BLOCK_TEMPLATES}),
        autoescape=select_autoescape(default=True, default_for_string=True),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["paragraphs"] = _paragraphs
    env.filters["as_list"] = _as_list
    return env


ENV = _build_env()

Renderer = Callable[[Dict[str, Any]], str]


def _template(name: str, ctx: Dict[str, Any]) -> str:
    return ENV.get_template(name).render(**ctx).strip()


# block type -> renderer; shared templates where markup is identical
_TEMPLATE_FOR = {
    "recipe-grid": "recipe-cards.html",
    "recipe-hero-detail": "recipe-hero.html",
    "support-cta": "cta.html",
    "product-cta": "cta.html",
    "comparison-cta": "cta.html",
}
RENDERERS: Dict[str, Renderer] = {
    t: partial(_template, _TEMPLATE_FOR.get(t, f"{t}.html")) for t in BLOCK_TYPES
}


def block_classes(block: ContentBlock, slot: Optional[LayoutSlot]) -> str:
    variant = block.variant or (slot.variant if slot else None) or "default"
    return block.type if variant == "default" else f"{block.type} {variant}"


def render_block(
    block: ContentBlock,
    slot: Optional[LayoutSlot],
    page_slug: str,
    decision: Optional[ImageDecision] = None,
    base_url: str = "",
) -> str:
    renderer = RENDERERS.get(block.type)
    if renderer is None:
        logger.warning("BLOCK_RENDER_UNKNOWN block_id=%s type=%s", block.id, block.type)
        return ""

    img: Optional[Dict[str, Any]] = None
    item_img: Dict[int, Dict[str, Any]] = {}
    for plan in plan_block_images(block, decision):
        if plan.generate:
            ref = {"id": plan.image_id, "src": image_url(page_slug, plan.image_id, base_url), "generated": True}
        elif plan.existing_url:
            ref = {"id": plan.image_id, "src": plan.existing_url, "generated": False}
        else:
            continue
        if plan.index is None:
            img = ref
        else:
            item_img[plan.index] = ref

    content = block.content or {}
    inner = renderer(
        {
            "c": content,
            "block": block,
            "slot": slot,
            "img": img,
            "item_img": item_img,
            "video_ok": is_valid_video_url(content.get("videoUrl")),
        }
    )
    return ENV.get_template("_wrapper.html").render(
        classes=block_classes(block, slot),
        block_id=block.id,
        block_type=block.type,
        version=BLOCK_MARKUP_VERSION,
        inner=Markup(inner),
    )


GEN_IMAGE_RE = re.compile(r'data-gen-image="([^"]+)"')


def gen_image_ids(html: str) -> List[str]:
    return GEN_IMAGE_RE.findall(html or "")
