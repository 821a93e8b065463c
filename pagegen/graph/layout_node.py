# graph/layout_node.py
from __future__ import annotations
from typing import Any, Dict

from pagegen.core.config import Settings
from pagegen.graph.stage import stage
from pagegen.layouts.catalog import LayoutCatalog, flatten_slots
from pagegen.layouts.patterns import SelectorRules
from pagegen.layouts.selector import adjust_layout, select_layout_for_intent


def layout_node(settings: Settings, catalog: LayoutCatalog, rules: SelectorRules):
    async def _run(state: Dict[str, Any]) -> Dict[str, Any]:
        query = state["query"]
        with stage(state, "selecting_layout"):
            choice = select_layout_for_intent(
                state["intent"], query, catalog=catalog, rules=rules, threshold=settings.high_confidence_threshold
            )
        with stage(state, "adjusting_layout"):
            adj = adjust_layout(choice.layout, state["retrieval"], query, catalog=catalog, rules=rules)
        layout = adj.layout
        state["emitter"].layout([s.block_type for s in flatten_slots(layout)])
        return {
            "stage": "adjusting_layout",
            "layout": layout,
            "layout_path": "adjusted" if adj.changed else choice.kind,
        }

    return _run
