# layouts/patterns.py
from __future__ import annotations
import re
from typing import Iterable, Tuple

from pydantic import BaseModel, ConfigDict

KNOWN_PRODUCTS: Tuple[str, ...] = (
    "a3500", "a2500", "a2300",          # Ascent
    "e310", "e320",                      # Explorian
    "pro 750", "pro750", "pro 500", "pro500",
    "5200", "5300", "7500",              # Legacy
    "immersion blender",
)

_I = re.IGNORECASE


def _compile(*patterns: str) -> Tuple[re.Pattern, ...]:
    return tuple(re.compile(p, _I) for p in patterns)


USE_CASE_PATTERNS = _compile(
    r"every\s+(morning|day|week|night|evening)",
    r"daily\s+(routine|habit|use|smoothie|juice)",
    r"(morning|evening|breakfast|lunch|dinner)\s+routine",
    r"meal\s+prep",
    r"for\s+(breakfast|lunch|dinner)\s+(every|daily|each)",
    r"\b(weekly|daily)\s+(meal|food|nutrition)",
    r"start\s+(my|the|your)\s+(day|morning)",
    r"each\s+(morning|day|week)",
)

SINGLE_RECIPE_PATTERNS = _compile(
    r"how\s+(do\s+i|to|can\s+i)\s+make",
    r"recipe\s+for\s+\w+",
    r"make\s+(a|me|some)\s+\w+",
    r"\w+\s+recipe$",
    r"show\s+me\s+(a|the)\s+\w+\s+recipe",
)

RECIPE_INVENTION_PATTERNS = _compile(
    r"what\s+can\s+i\s+(make|blend|create)\s+with",
    r"invent\s+(a|me)?\s*recipe",
    r"create\s+(a|me)?\s*(new|custom)?\s*(recipe|smoothie|soup|blend)",
    r"i\s+have\s+[\w\s,]+\s*([-–]|and)\s*what\s+can",
    r"(make|blend)\s+something\s+(with|from|using)",
    r"what\s+(recipes?|smoothies?|soups?)\s+can\s+i\s+(create|make|invent)\s+with",
    r"leftover\s+\w+.*what\s+can",
    r"using\s+(what\s+i\s+have|these\s+ingredients|my\s+ingredients)",
    r"from\s+(what\s+i\s+have|my\s+ingredients)",
)

CAMPAIGN_PATTERNS = _compile(
    r"mother'?s?\s*day",
    r"father'?s?\s*day",
    r"valentine'?s?\s*(day)?",
    r"black\s*friday",
    r"cyber\s*monday",
    r"(christmas|holiday|thanksgiving)\s*(gift|deal|sale|special)?",
    r"(summer|winter|spring|fall)\s+(sale|special|campaign|collection)",
    r"\b(gift\s+guide|gift\s+ideas?)\b",
    r"\bseasonal\s+(offer|deal|special)",
)

ABOUT_PATTERNS = _compile(
    r"\b(vitamix|company|brand)\s*(history|story|heritage)",
    r"\babout\s+(vitamix|the\s+company|us)\b",
    r"\b(who|what)\s+(makes?|is)\s+vitamix",
    r"\b(our|vitamix)\s+(values|mission|vision)\b",
    r"\bfounded|founder|origins?\b",
)


class SelectorRules(BaseModel):
    """Lexical tables the layout selector matches against."""

    model_config = ConfigDict(frozen=True)

    known_products: Tuple[str, ...] = KNOWN_PRODUCTS
    use_case: Tuple[re.Pattern, ...] = USE_CASE_PATTERNS
    single_recipe: Tuple[re.Pattern, ...] = SINGLE_RECIPE_PATTERNS
    recipe_invention: Tuple[re.Pattern, ...] = RECIPE_INVENTION_PATTERNS
    campaign: Tuple[re.Pattern, ...] = CAMPAIGN_PATTERNS
    about: Tuple[re.Pattern, ...] = ABOUT_PATTERNS


DEFAULT_RULES = SelectorRules()


def matches_any(text: str, patterns: Iterable[re.Pattern]) -> bool:
    return bool(text) and any(p.search(text) for p in patterns)
