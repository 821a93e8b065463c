# layouts/selector.py
"""Two-pass layout selection.

``select_layout`` runs before retrieval on the classifier output and the raw
query. ``adjust_layout`` runs once retrieval has landed and corrects choices
that the available content cannot support. Both return new values and never
touch catalog entries.
"""
from __future__ import annotations
from typing import Optional, Sequence

from pagegen.core.constants import HIGH_CONFIDENCE_THRESHOLD
from pagegen.core.logging import get_logger
from pagegen.layouts.catalog import DEFAULT_CATALOG, LayoutCatalog
from pagegen.layouts.patterns import DEFAULT_RULES, SelectorRules, matches_any
from pagegen.schemas.intent import Entities, IntentClassification
from pagegen.schemas.layout import LayoutAdjustment, LayoutChoice, LayoutTemplate, Override, RuleBased, Trusted
from pagegen.schemas.retrieval import RetrievalContext

logger = get_logger("pagegen.layouts.selector")


def is_bare_product_query(query: Optional[str], rules: SelectorRules = DEFAULT_RULES) -> bool:
    q = (query or "").strip().lower()
    if not q:
        return False
    return any(q in (p, f"the {p}", f"vitamix {p}") for p in rules.known_products)


def _rule_based(
    intent_type: str,
    content_types: Sequence[str],
    entities: Entities,
    query: str,
    catalog: LayoutCatalog,
    rules: SelectorRules,
) -> RuleBased:
    def pick(layout_id: str, reason: str) -> RuleBased:
        return RuleBased(layout=catalog.get(layout_id), reason=reason)

    goals_text = " ".join(g.lower() for g in entities.goals)
    n_products = len(entities.products)

    if intent_type == "support":
        return pick("support", "support_intent")
    if intent_type == "comparison":
        if n_products == 1:
            return pick("product-detail", "comparison_single_product")
        return pick("product-comparison", "comparison_intent")
    if intent_type == "product_info" and n_products == 1:
        return pick("product-detail", "single_product")
    if intent_type == "product_info" and n_products == 0:
        return pick("category-browse", "no_product_named")

    if intent_type == "recipe":
        if matches_any(goals_text, rules.recipe_invention) or matches_any(query.lower(), rules.recipe_invention):
            return pick("recipe-invention", "invention_pattern")
        if matches_any(goals_text, rules.single_recipe) or len(entities.ingredients) >= 2:
            return pick("single-recipe", "single_recipe_pattern")
        if matches_any(goals_text, rules.use_case):
            return pick("use-case-landing", "routine_pattern")
        return pick("recipe-collection", "recipe_fallback")

    if matches_any(goals_text, rules.campaign):
        return pick("campaign-landing", "campaign_pattern")
    if intent_type == "general" and matches_any(goals_text, rules.about):
        return pick("about-story", "about_pattern")
    if "support" in content_types or "editorial" in content_types:
        return pick("educational", "editorial_content")
    return pick("lifestyle", "default")


def select_layout(
    intent_type: str,
    content_types: Sequence[str],
    entities: Entities,
    layout_id: Optional[str],
    confidence: Optional[float],
    query: str = "",
    catalog: LayoutCatalog = DEFAULT_CATALOG,
    rules: SelectorRules = DEFAULT_RULES,
    threshold: float = HIGH_CONFIDENCE_THRESHOLD,
) -> LayoutChoice:
    if is_bare_product_query(query, rules):
        logger.info("LAYOUT_OVERRIDE reason=bare_product query=%r layout=product-detail", query)
        return Override(layout=catalog.get("product-detail"), reason="bare_product")

    if len(entities.products) == 1 and (layout_id == "product-comparison" or intent_type == "comparison"):
        logger.info("LAYOUT_OVERRIDE reason=single_product_comparison layout=product-detail")
        return Override(layout=catalog.get("product-detail"), reason="single_product_comparison")

    if layout_id and confidence is not None and confidence >= threshold:
        found = catalog.find(layout_id)
        if found is not None:
            logger.info("LAYOUT_TRUSTED layout=%s confidence=%.2f", layout_id, confidence)
            return Trusted(layout=found)

    choice = _rule_based(intent_type, content_types, entities, query or "", catalog, rules)
    logger.info(
        "LAYOUT_RULE_BASED layout=%s reason=%s intent=%s confidence=%s",
        choice.layout.id,
        choice.reason,
        intent_type,
        confidence,
    )
    return choice


def select_layout_for_intent(
    intent: IntentClassification,
    query: str,
    catalog: LayoutCatalog = DEFAULT_CATALOG,
    rules: SelectorRules = DEFAULT_RULES,
    threshold: float = HIGH_CONFIDENCE_THRESHOLD,
) -> LayoutChoice:
    return select_layout(
        intent.intent_type,
        intent.content_types,
        intent.entities,
        intent.layout_id,
        intent.confidence,
        query=query,
        catalog=catalog,
        rules=rules,
        threshold=threshold,
    )


def adjust_layout(
    layout: LayoutTemplate,
    retrieval: RetrievalContext,
    query: str = "",
    catalog: LayoutCatalog = DEFAULT_CATALOG,
    rules: SelectorRules = DEFAULT_RULES,
) -> LayoutAdjustment:
    products = retrieval.count("product")
    recipes = retrieval.count("recipe")

    def to(layout_id: str, reason: str) -> LayoutAdjustment:
        logger.info("LAYOUT_ADJUSTED from=%s to=%s reason=%s", layout.id, layout_id, reason)
        return LayoutAdjustment(layout=catalog.get(layout_id), changed=True, reason=reason)

    if layout.id == "single-recipe" and recipes == 0:
        return to("educational", "no_recipes")
    if layout.id == "recipe-collection" and recipes == 0:
        return to("lifestyle", "no_recipes")
    if layout.id == "product-detail" and products > 1:
        if is_bare_product_query(query, rules):
            logger.info("LAYOUT_KEPT layout=product-detail reason=bare_product products=%s", products)
        else:
            return to("product-comparison", "multiple_products")
    if layout.id == "product-detail" and products == 0:
        return to("category-browse", "no_products")
    if layout.id == "category-browse" and products == 1:
        return to("product-detail", "single_product")
    return LayoutAdjustment(layout=layout, changed=False, reason="unchanged")
