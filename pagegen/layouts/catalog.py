# layouts/catalog.py
"""Layout template catalog.

Templates are static reference data: validated once at import into frozen
models and handed to the selector and content generator through a
``LayoutCatalog`` so tests can substitute their own set.
"""
from __future__ import annotations
from typing import Any, Dict, Iterator, List, Optional, Sequence

from pagegen.schemas.layout import LayoutSlot, LayoutTemplate

DEFAULT_LAYOUT_ID = "lifestyle"


def _b(type_: str, variant: Optional[str] = None, width: Optional[str] = None, **config: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": type_}
    if variant:
        out["variant"] = variant
    if width:
        out["width"] = width
    if config:
        out["config"] = config
    return out


def _s(*blocks: Dict[str, Any], style: Optional[str] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"blocks": list(blocks)}
    if style:
        out["style"] = style
    return out


_RAW_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "product-detail",
        "name": "Product Detail",
        "description": "Detailed view of a single Vitamix product",
        "use_cases": ["Tell me about the A3500", "Vitamix Venturist features", "What can the Explorian do"],
        "sections": [
            _s(_b("product-hero")),
            _s(_b("specs-table", item_count=8), style="highlight"),
            _s(_b("feature-highlights", item_count=3, has_image=True)),
            _s(_b("included-accessories", item_count=4, has_image=True), style="highlight"),
            _s(_b("product-cta"), style="dark"),
        ],
    },
    {
        "id": "product-comparison",
        "name": "Product Comparison",
        "description": "Side-by-side comparison of 2-5 Vitamix products",
        "use_cases": [
            "A3500 vs A2500", "Compare Ascent models", "Which Vitamix should I buy",
            "Help me choose a blender", "Compare Vitamix blenders",
        ],
        "sections": [
            _s(_b("hero", "centered", has_image=False)),
            _s(_b("comparison-table", item_count=8), style="highlight"),
            _s(_b("verdict-card"), style="highlight"),
        ],
    },
    {
        "id": "recipe-collection",
        "name": "Recipe Collection",
        "description": "Interactive recipe collection with filtering",
        "use_cases": ["Soup recipes", "Smoothie ideas", "Healthy breakfast recipes", "Recipes with bananas", "Quick dinner ideas"],
        "sections": [
            _s(_b("hero", "full-width", "full", has_image=True)),
            _s(_b("recipe-filter-bar")),
            _s(_b("recipe-grid", item_count=6, has_image=True)),
            _s(_b("technique-spotlight", has_image=True), style="dark"),
            _s(_b("quick-view-modal")),
            _s(_b("cta"), style="highlight"),
        ],
    },
    {
        "id": "recipe-invention",
        "name": "Recipe Invention",
        "description": "Recipe creation from ingredients on hand",
        "use_cases": [
            "What can I make with bananas and spinach", "Invent a recipe with these ingredients",
            "I have carrots, apples and ginger - what can I blend", "Create a smoothie from what I have",
            "Make something with leftover vegetables",
        ],
        "sections": [
            _s(_b("hero", "centered")),
            _s(_b("ingredient-search"), style="highlight"),
            _s(_b("recipe-grid", item_count=4, has_image=True)),
            _s(_b("tips-banner", item_count=3), style="highlight"),
            _s(_b("quick-view-modal")),
            _s(_b("cta"), style="dark"),
        ],
    },
    {
        "id": "use-case-landing",
        "name": "Use Case Landing",
        "description": "Landing page for a specific use case with recipes, tips, and product",
        "use_cases": ["I want to make smoothies every morning", "Best smoothie for energy", "Making baby food at home", "Meal prep for the week"],
        "sections": [
            _s(_b("hero", "full-width", "full", has_image=True)),
            _s(_b("benefits-grid", item_count=3)),
            _s(_b("recipe-cards", item_count=3, has_image=True)),
            _s(_b("product-recommendation", "reverse", has_image=True), style="highlight"),
            _s(_b("tips-banner", item_count=3)),
            _s(_b("cta"), style="dark"),
        ],
    },
    {
        "id": "support",
        "name": "Support & Troubleshooting",
        "description": "Empathetic troubleshooting with step-by-step guidance",
        "use_cases": [
            "My Vitamix is making a grinding noise", "How to fix leaking", "Blender not turning on",
            "Vitamix smells like burning", "Container won't lock in place",
        ],
        "sections": [
            _s(_b("support-hero")),
            _s(_b("diagnosis-card", item_count=3), style="highlight"),
            _s(_b("troubleshooting-steps", item_count=3, has_image=True)),
            _s(_b("faq", item_count=4), style="highlight"),
            _s(_b("support-cta"), style="dark"),
        ],
    },
    {
        "id": "category-browse",
        "name": "Category Browse",
        "description": "Browse products in a category with product cards",
        "use_cases": ["Show me all blenders", "Vitamix accessories", "Container options"],
        "sections": [
            _s(_b("hero", "centered")),
            _s(_b("product-cards", item_count=4, has_image=True)),
            _s(_b("benefits-grid", item_count=3), style="highlight"),
            _s(_b("cta"), style="dark"),
        ],
    },
    {
        "id": "educational",
        "name": "Educational / How-To",
        "description": "Educational content with steps and tips",
        "use_cases": ["How to clean my Vitamix", "Blending techniques", "How to make nut butter"],
        "sections": [
            _s(_b("hero", "split", has_image=True)),
            _s(_b("text")),
            _s(_b("columns", item_count=3), style="highlight"),
            _s(_b("faq", item_count=4)),
            _s(_b("cta"), style="dark"),
        ],
    },
    {
        "id": "promotional",
        "name": "Promotional",
        "description": "Sales and promotional content",
        "use_cases": ["Vitamix deals", "Current promotions", "Best value blender"],
        "sections": [
            _s(_b("hero", "full-width", "full", has_image=True), style="dark"),
            _s(_b("cards", item_count=3, has_image=True)),
            _s(_b("split-content", has_image=True), style="highlight"),
            _s(_b("cta"), style="dark"),
        ],
    },
    {
        "id": "quick-answer",
        "name": "Quick Answer",
        "description": "Direct answer to a simple question",
        "use_cases": ["What is the warranty", "Vitamix return policy", "Where is Vitamix made"],
        "sections": [
            _s(_b("hero", "light")),
            _s(_b("text")),
            _s(_b("cta"), style="highlight"),
        ],
    },
    {
        "id": "lifestyle",
        "name": "Lifestyle & Inspiration",
        "description": "Inspirational content about healthy living with Vitamix",
        "use_cases": ["Healthy eating tips", "Whole food nutrition", "Kitchen wellness"],
        "sections": [
            _s(_b("hero", "full-width", "full", has_image=True)),
            _s(_b("cards", item_count=3, has_image=True)),
            _s(_b("split-content", "reverse", has_image=True), style="highlight"),
            _s(_b("columns", item_count=3)),
            _s(_b("cta"), style="dark"),
        ],
    },
    {
        "id": "single-recipe",
        "name": "Single Recipe",
        "description": "Detailed recipe page with sidebar, ingredients, directions, and nutrition",
        "use_cases": [
            "How to make tomato soup", "Green smoothie recipe", "Vitamix banana ice cream recipe",
            "Show me a hummus recipe", "Apple acorn squash soup recipe",
        ],
        "sections": [
            _s(_b("recipe-hero-detail", has_image=True)),
            _s(_b("recipe-sidebar"), _b("ingredients-list"), _b("recipe-directions", item_count=3)),
            _s(_b("cta"), style="dark"),
        ],
    },
    {
        "id": "campaign-landing",
        "name": "Campaign Landing",
        "description": "Seasonal or event-specific promotional campaigns",
        "use_cases": [
            "Mother's Day gifts", "Holiday blender deals", "Valentine's Day recipes",
            "Black Friday Vitamix", "Summer smoothie campaign",
        ],
        "sections": [
            _s(_b("hero", "full-width", "full", has_image=True), style="dark"),
            _s(_b("countdown-timer"), style="highlight"),
            _s(_b("product-cards", item_count=3, has_image=True)),
            _s(_b("testimonials", item_count=3, has_image=True), style="highlight"),
            _s(_b("cta"), style="dark"),
        ],
    },
    {
        "id": "about-story",
        "name": "About / Brand Story",
        "description": "Brand story, company history, values, and mission",
        "use_cases": ["Vitamix history", "About Vitamix", "Who makes Vitamix", "Vitamix company story", "Vitamix brand values"],
        "sections": [
            _s(_b("hero", "full-width", "full", has_image=True)),
            _s(_b("text")),
            _s(_b("timeline", item_count=5), style="highlight"),
            _s(_b("benefits-grid", item_count=4)),
            _s(_b("team-cards", item_count=4, has_image=True), style="highlight"),
            _s(_b("cta"), style="dark"),
        ],
    },
]


class LayoutCatalog:
    """Read-only id -> template lookup."""

    def __init__(self, templates: Sequence[LayoutTemplate], default_id: str = DEFAULT_LAYOUT_ID):
        self._by_id: Dict[str, LayoutTemplate] = {t.id: t for t in templates}
        if default_id not in self._by_id:
            raise ValueError(f"Default layout {default_id!r} missing from catalog")
        self.default_id = default_id

    def __contains__(self, layout_id: object) -> bool:
        return layout_id in self._by_id

    def __iter__(self) -> Iterator[LayoutTemplate]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    @property
    def ids(self) -> List[str]:
        return list(self._by_id)

    def find(self, layout_id: Optional[str]) -> Optional[LayoutTemplate]:
        return self._by_id.get(layout_id or "")

    def get(self, layout_id: Optional[str]) -> LayoutTemplate:
        """Resolve an id, falling back to the default template."""
        return self._by_id.get(layout_id or "") or self._by_id[self.default_id]


LAYOUTS: tuple[LayoutTemplate, ...] = tuple(LayoutTemplate.model_validate(t) for t in _RAW_TEMPLATES)
DEFAULT_CATALOG = LayoutCatalog(LAYOUTS)


def get_layout_by_id(layout_id: str, catalog: LayoutCatalog = DEFAULT_CATALOG) -> LayoutTemplate:
    return catalog.get(layout_id)


def flatten_slots(layout: LayoutTemplate) -> List[LayoutSlot]:
    slots: List[LayoutSlot] = []
    for section in layout.sections:
        for b in section.blocks:
            slots.append(
                LayoutSlot(
                    position=len(slots),
                    block_type=b.type,
                    variant=b.variant or "default",
                    width=b.width or "contained",
                    section_style=section.style,
                    config=b.config,
                )
            )
    return slots


def format_layout_for_prompt(layout: LayoutTemplate) -> str:
    parts: List[str] = []
    for i, section in enumerate(layout.sections):
        style = f" ({section.style} background)" if section.style else ""
        lines = []
        for b in section.blocks:
            desc = f"- {b.type}"
            if b.variant:
                desc += f" ({b.variant})"
            if b.config and b.config.item_count:
                desc += f" - {b.config.item_count} items"
            if b.config and b.config.has_image:
                desc += " - with image"
            lines.append(desc)
        parts.append(f"Section {i + 1}{style}:\n    " + "\n    ".join(lines))
    structure = "\n\n".join(parts)
    return f"Layout: {layout.name}\nID: {layout.id}\nDescription: {layout.description}\n\nStructure:\n{structure}"
