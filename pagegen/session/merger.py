# session/merger.py
"""Cumulative session context.

Prior turns are folded forward: products, ingredients and goals are unioned
in order of first appearance and sticky constraints (diet, allergy, religion,
health) persist. Only an explicit reset phrase breaks inheritance; a reset in
an earlier turn hides every turn before it.
"""
from __future__ import annotations
import re
from typing import Iterable, List, Optional, Sequence

from pagegen.core.logging import get_logger
from pagegen.schemas.intent import (
    CulturalContext,
    DietaryContext,
    Entities,
    HealthContext,
    IntentClassification,
    MergedContext,
    SessionContext,
    SessionTurn,
    UserContext,
)

logger = get_logger("pagegen.session.merger")

RESET_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\bforget\b",
        r"\bactually\b",
        r"\bsomething\s+(completely\s+|totally\s+)?different\b",
        r"\bnow\s+tell\s+me\s+about\b",
        r"\bstart\s+over\b",
        r"\bnever\s*mind\b",
        r"\bnew\s+topic\b",
    )
)

PRODUCT_INTENTS = ("product_info", "comparison")
MAX_BLENDED_GOALS = 3


def has_reset(query: str) -> bool:
    return any(p.search(query or "") for p in RESET_PATTERNS)


def union(*groups: Iterable[str]) -> List[str]:
    out: List[str] = []
    seen = set()
    for g in groups:
        for v in g or ():
            s = str(v).strip()
            k = s.lower()
            if s and k not in seen:
                seen.add(k)
                out.append(s)
    return out


def merge_user_context(contexts: Sequence[Optional[UserContext]]) -> Optional[UserContext]:
    present = [c for c in contexts if c is not None]
    if not present:
        return None
    return UserContext(
        dietary=DietaryContext(
            avoid=union(*(c.dietary.avoid for c in present)),
            preferences=union(*(c.dietary.preferences for c in present)),
        ),
        health=HealthContext(
            conditions=union(*(c.health.conditions for c in present)),
            goals=union(*(c.health.goals for c in present)),
            considerations=union(*(c.health.considerations for c in present)),
        ),
        cultural=CulturalContext(
            cuisine=union(*(c.cultural.cuisine for c in present)),
            religious=union(*(c.cultural.religious for c in present)),
            regional=next((c.cultural.regional for c in reversed(present) if c.cultural.regional), None),
        ),
        audience=next((c.audience for c in reversed(present) if c.audience), None),
        occasion=next((c.occasion for c in reversed(present) if c.occasion), None),
        constraints=union(*(c.constraints for c in present)),
        available=union(*(c.available for c in present)),
    )


def active_turns(turns: Sequence[SessionTurn]) -> List[SessionTurn]:
    """Turns still in scope: everything from the most recent resetting turn on."""
    start = 0
    for i, t in enumerate(turns):
        if has_reset(t.query):
            start = i
    return list(turns[start:])


def _format_turn(t: SessionTurn) -> str:
    extras = union(t.entities.products, t.entities.ingredients, t.entities.goals)
    line = f'"{t.query}" ({t.intent})'
    return f"{line}: {', '.join(extras)}" if extras else line


def render_context(merged: MergedContext, turns: Sequence[SessionTurn]) -> str:
    if not turns:
        return ""
    lines = ["Session Context: Previous queries: [" + ", ".join(_format_turn(t) for t in turns) + "]"]
    if merged.products:
        lines.append("Products so far: " + ", ".join(merged.products))
    if merged.ingredients:
        lines.append("Ingredients so far: " + ", ".join(merged.ingredients))
    if merged.goals:
        lines.append("Interests so far: " + ", ".join(merged.goals))
    if merged.constraints:
        lines.append("Always respect: " + ", ".join(merged.constraints))
    return "\n".join(lines)


def merge_session(query: str, session: Optional[SessionContext]) -> MergedContext:
    turns = list(session.turns) if session else []
    if has_reset(query):
        if turns:
            logger.info("SESSION_RESET prior_turns=%s", len(turns))
        return MergedContext(reset=True)
    turns = active_turns(turns)
    if not turns:
        return MergedContext()

    user_context = merge_user_context([t.entities.user_context for t in turns])
    merged = MergedContext(
        products=union(*(t.entities.products for t in turns)),
        ingredients=union(*(t.entities.ingredients for t in turns)),
        goals=union(*(t.entities.goals for t in turns)),
        constraints=user_context.sticky_constraints() if user_context else [],
        prior_intents=[t.intent for t in turns],
        prior_queries=[t.query for t in turns],
        user_context=user_context,
    )
    merged = merged.model_copy(update={"prompt_text": render_context(merged, turns)})
    logger.info(
        "SESSION_MERGED turns=%s products=%s ingredients=%s goals=%s constraints=%s",
        len(turns),
        len(merged.products),
        len(merged.ingredients),
        len(merged.goals),
        len(merged.constraints),
    )
    return merged


def blended_goals(intent_type: str, merged: MergedContext) -> List[str]:
    """Goal phrases joining the new intent's subject with prior themes."""
    themes = union(merged.goals)
    if intent_type in PRODUCT_INTENTS:
        out = [f"best blender for {i} {g}" for i in merged.ingredients for g in themes]
        out += [f"blender for {t}" for t in union(themes, merged.ingredients)]
    elif intent_type == "recipe":
        out = [f"recipes for the {p}" for p in merged.products]
        out += [f"{t} recipes" for t in union(themes, merged.ingredients)]
    elif intent_type == "support":
        out = [f"{t} support" for t in union(merged.products, themes)]
    else:
        out = [f"{t} ideas" for t in union(themes, merged.ingredients, merged.products)]
    return union(out)[:MAX_BLENDED_GOALS]


def apply_session_to_intent(intent: IntentClassification, merged: MergedContext) -> IntentClassification:
    """Carry merged session themes into a fresh classification."""
    if merged.is_empty:
        return intent

    last_intent = merged.prior_intents[-1] if merged.prior_intents else intent.intent_type
    blended: List[str] = []
    if intent.intent_type != last_intent:
        blended = blended_goals(intent.intent_type, merged)
        logger.info("SESSION_CROSS_INTENT from=%s to=%s blended=%s", last_intent, intent.intent_type, blended)

    ents = intent.entities
    entities = Entities(
        products=union(ents.products, merged.products),
        ingredients=union(ents.ingredients, merged.ingredients),
        goals=union(ents.goals, blended, merged.goals),
        user_context=merge_user_context([merged.user_context, ents.user_context]),
    )
    return intent.model_copy(update={"entities": entities})
