# graph/content_node.py
from __future__ import annotations
from typing import Any, Dict

from pagegen.graph.deps import Collaborators
from pagegen.graph.stage import stage


def content_node(collab: Collaborators):
    async def _run(state: Dict[str, Any]) -> Dict[str, Any]:
        with stage(state, "generating_content"):
            content = await collab.generate_content(
                state["query"], state["retrieval"], state["intent"], state["layout"], state.get("merged")
            )
        return {"stage": "generating_content", "content": content}

    return _run
