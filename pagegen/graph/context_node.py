# graph/context_node.py
from __future__ import annotations
import asyncio
from typing import Any, Dict

from pagegen.core.logging import get_logger
from pagegen.graph.deps import Collaborators
from pagegen.graph.stage import stage
from pagegen.schemas.intent import Entities, ExtractedEntities, IntentClassification
from pagegen.session.merger import union

logger = get_logger("pagegen.graph.context")


def enrich_intent(intent: IntentClassification, extracted: ExtractedEntities) -> IntentClassification:
    """Union the extractor's entities into the classification."""
    ents = intent.entities
    entities = Entities(
        products=union(ents.products, extracted.products),
        ingredients=union(ents.ingredients, extracted.ingredients),
        goals=union(ents.goals, extracted.goals),
        user_context=ents.user_context,
    )
    return intent.model_copy(update={"entities": entities})


def context_node(collab: Collaborators):
    async def _entities(query: str) -> ExtractedEntities:
        try:
            return await collab.extract_entities(query)
        except Exception as e:
            logger.warning("ENTITY_EXTRACTION_FAILED error=%s -> empty", e)
            return ExtractedEntities()

    async def _run(state: Dict[str, Any]) -> Dict[str, Any]:
        with stage(state, "retrieving"):
            query, intent = state["query"], state["intent"]
            retrieval, extracted = await asyncio.gather(collab.retrieve(query, intent), _entities(query))
            logger.info(
                "CONTEXT_READY chunks=%s products=%s recipes=%s extracted_products=%s",
                len(retrieval.chunks),
                retrieval.count("product"),
                retrieval.count("recipe"),
                len(extracted.products),
            )
        return {
            "stage": "retrieving",
            "retrieval": retrieval,
            "entities": extracted,
            "intent": enrich_intent(intent, extracted),
        }

    return _run
