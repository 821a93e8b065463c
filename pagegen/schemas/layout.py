# schemas/layout.py
from __future__ import annotations
from typing import Annotated, List, Literal, Optional, Union, get_args

from pydantic import BaseModel, ConfigDict, Field

BlockType = Literal[
    # general
    "hero", "cards", "columns", "text", "cta", "faq", "split-content",
    "benefits-grid", "tips-banner", "product-cards", "product-recommendation",
    # recipes
    "recipe-cards", "recipe-grid", "recipe-filter-bar", "ingredient-search",
    "quick-view-modal", "technique-spotlight", "recipe-hero", "recipe-hero-detail",
    "recipe-steps", "recipe-sidebar", "ingredients-list", "recipe-directions",
    "recipe-tabs", "nutrition-facts", "recipe-tips",
    # products
    "product-hero", "specs-table", "feature-highlights", "included-accessories",
    "product-cta", "comparison-table", "verdict-card", "comparison-cta", "use-case-cards",
    # support
    "support-hero", "diagnosis-card", "troubleshooting-steps", "support-cta",
    # campaign / brand
    "countdown-timer", "testimonials", "timeline", "team-cards",
]
BLOCK_TYPES = get_args(BlockType)

SectionStyle = Literal["default", "highlight", "dark"]
BlockWidth = Literal["contained", "full"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class BlockConfig(_Frozen):
    item_count: Optional[int] = None
    has_image: Optional[bool] = None


class BlockSlot(_Frozen):
    type: BlockType
    variant: Optional[str] = None
    width: Optional[BlockWidth] = None
    config: Optional[BlockConfig] = None


class LayoutSection(_Frozen):
    style: Optional[SectionStyle] = None
    blocks: List[BlockSlot]


class LayoutTemplate(_Frozen):
    id: str
    name: str
    description: str = ""
    use_cases: List[str] = Field(default_factory=list)
    sections: List[LayoutSection]

    @property
    def block_types(self) -> List[str]:
        return [b.type for s in self.sections for b in s.blocks]


class LayoutSlot(_Frozen):
    """One flattened template position."""

    position: int
    block_type: BlockType
    variant: str = "default"
    width: BlockWidth = "contained"
    section_style: Optional[SectionStyle] = None
    config: Optional[BlockConfig] = None


class Override(_Frozen):
    kind: Literal["override"] = "override"
    layout: LayoutTemplate
    reason: str


class Trusted(_Frozen):
    kind: Literal["trusted"] = "trusted"
    layout: LayoutTemplate


class RuleBased(_Frozen):
    kind: Literal["rule_based"] = "rule_based"
    layout: LayoutTemplate
    reason: str


LayoutChoice = Annotated[Union[Override, Trusted, RuleBased], Field(discriminator="kind")]


class LayoutAdjustment(_Frozen):
    layout: LayoutTemplate
    changed: bool = False
    reason: str = "unchanged"


class SlotBinding(_Frozen):
    slot: LayoutSlot
    block_id: str
    content_index: int


class BlockMapping(_Frozen):
    bindings: List[SlotBinding]

    def block_ids(self) -> List[str]:
        return [b.block_id for b in self.bindings]
