# graph/classify_node.py
from __future__ import annotations
from typing import Any, Dict

from pagegen.graph.deps import Collaborators
from pagegen.graph.stage import stage
from pagegen.schemas.intent import SessionContext
from pagegen.session.merger import apply_session_to_intent, merge_session


def classify_node(collab: Collaborators):
    async def _run(state: Dict[str, Any]) -> Dict[str, Any]:
        with stage(state, "classifying"):
            query = state["query"]
            merged = merge_session(query, state.get("session") or SessionContext())
            raw = await collab.classify(query, merged)
            intent = apply_session_to_intent(raw, merged)
        return {"stage": "classifying", "merged": merged, "intent": intent}

    return _run
