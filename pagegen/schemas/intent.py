# schemas/intent.py
from __future__ import annotations
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

IntentType = Literal["product_info", "recipe", "comparison", "support", "general"]
INTENT_TYPES = ("product_info", "recipe", "comparison", "support", "general")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class DietaryContext(_Frozen):
    avoid: List[str] = Field(default_factory=list)
    preferences: List[str] = Field(default_factory=list)


class HealthContext(_Frozen):
    conditions: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    considerations: List[str] = Field(default_factory=list)


class CulturalContext(_Frozen):
    cuisine: List[str] = Field(default_factory=list)
    religious: List[str] = Field(default_factory=list)
    regional: Optional[str] = None


class UserContext(_Frozen):
    """Personal context the classifier lifts out of the query ("I'm vegan", "for 6 kids")."""

    dietary: DietaryContext = Field(default_factory=DietaryContext)
    health: HealthContext = Field(default_factory=HealthContext)
    cultural: CulturalContext = Field(default_factory=CulturalContext)
    audience: Optional[str] = None
    occasion: Optional[str] = None
    constraints: List[str] = Field(default_factory=list)
    available: List[str] = Field(default_factory=list)

    def sticky_constraints(self) -> List[str]:
        out: List[str] = []
        for v in (*self.dietary.avoid, *self.dietary.preferences, *self.cultural.religious, *self.health.conditions):
            if v and v not in out:
                out.append(v)
        return out


class Entities(_Frozen):
    products: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    user_context: Optional[UserContext] = None


class ExtractedEntities(_Frozen):
    products: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)


class IntentClassification(_Frozen):
    intent_type: IntentType = "general"
    confidence: float = Field(default=0.3, ge=0.0, le=1.0)
    layout_id: str = "lifestyle"
    content_types: List[str] = Field(default_factory=lambda: ["editorial"])
    entities: Entities = Field(default_factory=Entities)


def default_classification(query: str) -> IntentClassification:
    return IntentClassification(
        intent_type="general",
        confidence=0.3,
        layout_id="lifestyle",
        content_types=["editorial"],
        entities=Entities(goals=[query] if query else []),
    )


class SessionTurn(_Frozen):
    query: str
    intent: str = "general"
    entities: Entities = Field(default_factory=Entities)


class SessionContext(_Frozen):
    turns: List[SessionTurn] = Field(default_factory=list)


class MergedContext(_Frozen):
    products: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)
    prior_intents: List[str] = Field(default_factory=list)
    prior_queries: List[str] = Field(default_factory=list)
    user_context: Optional[UserContext] = None
    reset: bool = False
    prompt_text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.prior_queries
