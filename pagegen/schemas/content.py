# schemas/content.py
from __future__ import annotations
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pagegen.schemas.layout import SectionStyle


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# list-valued payload keys per block type; "objects" lists hold one dict per entry
OBJECTS, VALUES = "objects", "values"
PAYLOAD_LISTS: Dict[str, Dict[str, str]] = {
    "cards": {"cards": OBJECTS},
    "columns": {"columns": OBJECTS},
    "faq": {"items": OBJECTS},
    "benefits-grid": {"items": OBJECTS},
    "tips-banner": {"tips": OBJECTS},
    "product-cards": {"products": OBJECTS},
    "recipe-cards": {"recipes": OBJECTS},
    "recipe-grid": {"recipes": OBJECTS},
    "recipe-filter-bar": {"filters": OBJECTS},
    "ingredient-search": {"suggestions": VALUES},
    "technique-spotlight": {"tips": VALUES},
    "recipe-steps": {"steps": OBJECTS},
    "recipe-sidebar": {"tags": VALUES},
    "ingredients-list": {"items": OBJECTS},
    "recipe-directions": {"steps": VALUES},
    "recipe-tabs": {"tabs": OBJECTS},
    "nutrition-facts": {"facts": OBJECTS},
    "recipe-tips": {"tips": VALUES},
    "product-hero": {"badges": VALUES},
    "specs-table": {"specs": OBJECTS},
    "feature-highlights": {"features": OBJECTS},
    "included-accessories": {"accessories": OBJECTS},
    "comparison-table": {"products": VALUES, "rows": OBJECTS},
    "verdict-card": {"recommendations": OBJECTS},
    "use-case-cards": {"useCases": OBJECTS},
    "diagnosis-card": {"items": OBJECTS},
    "troubleshooting-steps": {"steps": OBJECTS},
    "testimonials": {"testimonials": OBJECTS},
    "timeline": {"events": OBJECTS},
    "team-cards": {"members": OBJECTS},
}


def _check_prompt(value: Any, where: str) -> None:
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{where}.imagePrompt must be a string")


def check_payload(block_type: str, content: Dict[str, Any]) -> None:
    """Raise ``ValueError`` when a payload does not have its block type's shape."""
    _check_prompt(content.get("imagePrompt"), block_type)
    for key, kind in PAYLOAD_LISTS.get(block_type, {}).items():
        value = content.get(key)
        if value is None:
            continue
        if not isinstance(value, list):
            raise ValueError(f"{block_type}.{key} must be a list")
        if kind != OBJECTS:
            continue
        for i, entry in enumerate(value):
            if not isinstance(entry, dict):
                raise ValueError(f"{block_type}.{key}[{i}] must be an object")
            _check_prompt(entry.get("imagePrompt"), f"{block_type}.{key}[{i}]")


class ContentBlock(_Frozen):
    id: str = Field(min_length=1)
    type: str
    variant: Optional[str] = None
    section_style: Optional[SectionStyle] = Field(default=None, alias="sectionStyle")
    content: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def _payload_shape(self) -> "ContentBlock":
        check_payload(self.type, self.content)
        return self


class PageMeta(_Frozen):
    title: str = ""
    description: str = ""


class Citation(_Frozen):
    text: str = ""
    source_url: str = Field(default="", alias="sourceUrl")
    source_title: str = Field(default="", alias="sourceTitle")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class GeneratedContent(_Frozen):
    headline: str
    subheadline: str = ""
    blocks: List[ContentBlock] = Field(min_length=1)
    meta: PageMeta = Field(default_factory=PageMeta)
    citations: List[Citation] = Field(default_factory=list)

    @field_validator("blocks")
    @classmethod
    def _unique_ids(cls, v: List[ContentBlock]) -> List[ContentBlock]:
        seen = set()
        for b in v:
            if b.id in seen:
                raise ValueError(f"duplicate block id: {b.id}")
            seen.add(b.id)
        return v

    def block(self, block_id: str) -> Optional[ContentBlock]:
        for b in self.blocks:
            if b.id == block_id:
                return b
        return None


class ComplianceResult(_Frozen):
    is_compliant: bool = True
    score: int = Field(default=85, ge=0, le=100)
    issues: List[str] = Field(default_factory=list)
