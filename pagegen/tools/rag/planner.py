# tools/rag/planner.py
"""Pick a retrieval strategy from the query wording and the classified intent."""
from __future__ import annotations
import re
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from pagegen.schemas.intent import IntentClassification

Strategy = Literal["semantic", "catalog", "comprehensive", "ingredient", "filtered"]
DedupeMode = Literal["similarity", "by-sku", "by-url"]


class RetrievalPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    strategy: Strategy = "semantic"
    semantic_query: str
    top_k: int = 10
    relevance_threshold: float = 0.7
    content_types: List[str] = Field(default_factory=list)
    dedupe: DedupeMode = "similarity"
    max_results: int = 5
    boost_terms: List[str] = Field(default_factory=list)
    reasoning: str = ""


COMMON_INGREDIENTS: Tuple[str, ...] = (
    "banana", "apple", "orange", "mango", "pineapple", "strawberry", "blueberry",
    "raspberry", "peach", "pear", "lemon", "lime", "avocado", "coconut", "cherry",
    "kiwi", "acai", "date", "spinach", "kale", "carrot", "celery", "cucumber",
    "tomato", "beet", "ginger", "garlic", "onion", "broccoli", "cauliflower",
    "zucchini", "squash", "sweet potato", "potato", "pumpkin", "corn", "yogurt",
    "almond milk", "oat milk", "protein", "tofu", "almond", "cashew", "walnut",
    "peanut", "chia", "flax", "hemp", "oat", "honey", "chocolate", "cocoa",
    "coffee", "matcha", "vanilla", "cinnamon", "turmeric",
)

PRODUCT_CATEGORIES = (
    ("accessor", "accessory"), ("attachment", "accessory"), ("blade", "accessory"),
    ("container", "container"), ("cup", "container"), ("bowl", "container"),
    ("blender", "blender"),
)

RECIPE_CATEGORIES = (
    ("smoothie", "smoothie"), ("shake", "smoothie"), ("soup", "soup"), ("sauce", "sauce"),
    ("pesto", "sauce"), ("salsa", "sauce"), ("hummus", "dip"), ("dip", "dip"),
    ("ice cream", "dessert"), ("sorbet", "dessert"), ("dessert", "dessert"),
    ("breakfast", "breakfast"), ("baby food", "baby food"), ("juice", "juice"),
    ("cocktail", "cocktail"), ("nut butter", "nut butter"), ("dough", "dough"),
    ("batter", "batter"),
)

CATALOG_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\ball\b\s+(?:the\s+)?(?:vitamix\s+)?(blenders?|products?|models?|containers?|accessories)",
        r"show\s+(?:me\s+)?(?:all\s+)?(?:the\s+)?(?:vitamix\s+)?(blenders?|products?|models?)",
        r"list\s+(?:of\s+)?(?:all\s+)?(?:vitamix\s+)?(blenders?|products?|models?)",
        r"what\s+(blenders?|products?|models?|options?)\s+(?:do\s+you\s+have|are\s+available)",
        r"browse\s+(?:all\s+)?(?:vitamix\s+)?(blenders?|products?)",
        r"see\s+all\s+(blenders?|products?|models?)",
    )
)

COMPARISON_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"best\s+(?:vitamix\s+)?(?:blender\s+)?(?:for\s+me|for\s+my)",
        r"which\s+(?:vitamix\s+)?(?:blender\s+)?(?:should|would|do\s+you)",
        r"help\s+me\s+(?:choose|pick|decide|select)",
        r"recommend\s+(?:a\s+)?(?:vitamix|blender)",
        r"compare\s+(?:vitamix\s+)?(?:blenders?|models?|all)",
        r"difference\s+between",
        r"\bvs\.?\s+|\bversus\b",
    )
)

SUPPORT_EXPANSIONS = (
    ("noise", "grinding noise loud sound troubleshooting"),
    ("leak", "leaking dripping seal gasket troubleshooting"),
    ("won't turn on", "not turning on power issue troubleshooting"),
    ("smoke", "smoking burning smell overheating troubleshooting"),
    ("smell", "burning smell odor troubleshooting"),
    ("stuck", "stuck jammed blade troubleshooting"),
    ("clean", "cleaning maintenance wash care"),
    ("warranty", "warranty coverage repair service"),
)


def _first(query: str, table) -> Optional[str]:
    return next((cat for term, cat in table if term in query), None)


def extract_ingredients(query: str) -> List[str]:
    q = (query or "").lower()
    return [i for i in COMMON_INGREDIENTS if re.search(rf"\b{re.escape(i)}s?\b", q)]


def is_catalog_query(query: str, intent: IntentClassification) -> bool:
    if any(p.search(query) for p in CATALOG_PATTERNS):
        return True
    return intent.layout_id == "category-browse" and not intent.entities.products


def is_comparison_query(query: str, intent: IntentClassification) -> bool:
    return intent.intent_type == "comparison" or any(p.search(query) for p in COMPARISON_PATTERNS)


def plan_retrieval(query: str, intent: IntentClassification) -> RetrievalPlan:
    q = (query or "").lower()
    ents = intent.entities

    if is_catalog_query(q, intent):
        category = _first(q, PRODUCT_CATEGORIES) or "blender"
        return RetrievalPlan(
            strategy="catalog",
            semantic_query=f"vitamix {category} products models",
            top_k=50,
            relevance_threshold=0.5,
            content_types=["product"],
            dedupe="by-sku",
            max_results=12,
            reasoning=f"catalog of {category} products",
        )

    if is_comparison_query(q, intent):
        if len(ents.products) >= 2:
            sq = f"compare {' vs '.join(ents.products)} vitamix blender features specifications"
        elif ents.goals:
            sq = f"best vitamix blender for {' '.join(ents.goals)}"
        else:
            sq = "vitamix blender comparison features specifications models"
        return RetrievalPlan(
            strategy="comprehensive", semantic_query=sq, top_k=30, relevance_threshold=0.5,
            content_types=["product"], dedupe="by-sku", max_results=10, reasoning="comparison",
        )

    if intent.intent_type == "recipe":
        category = _first(q, RECIPE_CATEGORIES)
        ingredients = extract_ingredients(q)
        if ingredients:
            return RetrievalPlan(
                strategy="ingredient",
                semantic_query=f"vitamix recipes with {' and '.join(ingredients)}{' ' + category if category else ''}",
                top_k=25,
                relevance_threshold=0.55,
                content_types=["recipe"],
                dedupe="by-url",
                max_results=8,
                boost_terms=ingredients,
                reasoning=f"ingredient recipes: {', '.join(ingredients)}",
            )
        return RetrievalPlan(
            strategy="filtered",
            semantic_query=f"vitamix {category} recipes {query}" if category else query,
            top_k=20, relevance_threshold=0.6, content_types=["recipe"], dedupe="by-url",
            max_results=8, reasoning=f"recipes ({category or 'any'})",
        )

    if intent.intent_type == "support":
        extra = " ".join(exp for term, exp in SUPPORT_EXPANSIONS if term in q)
        return RetrievalPlan(
            strategy="filtered", semantic_query=f"{query} {extra}".strip(), top_k=15,
            relevance_threshold=0.65, content_types=["support", "product"], dedupe="by-url",
            max_results=6, reasoning="support",
        )

    if intent.intent_type == "product_info" and len(ents.products) == 1:
        return RetrievalPlan(
            strategy="filtered",
            semantic_query=f"{ents.products[0]} vitamix blender features specifications",
            top_k=15, relevance_threshold=0.6, content_types=["product"], max_results=5,
            reasoning=f"single product {ents.products[0]}",
        )

    return RetrievalPlan(
        semantic_query=query,
        content_types=list(intent.content_types),
        reasoning="default semantic",
    )
