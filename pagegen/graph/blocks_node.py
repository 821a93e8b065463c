# graph/blocks_node.py
from __future__ import annotations
from typing import Any, Dict, List

from pagegen.core.config import Settings
from pagegen.graph.stage import stage
from pagegen.layouts.catalog import flatten_slots
from pagegen.render.blocks import render_block
from pagegen.render.mapping import derive_block_mapping
from pagegen.render.strategy import decide_images


def blocks_node(settings: Settings):
    async def _run(state: Dict[str, Any]) -> Dict[str, Any]:
        content = state["content"]
        with stage(state, "deriving_block_mapping"):
            mapping = derive_block_mapping(content, flatten_slots(state["layout"]))
            decisions = decide_images(content, state.get("retrieval"))

        em = state["emitter"]
        fragments: List[str] = []
        with stage(state, "streaming_blocks"):
            for binding in mapping.bindings:
                block = content.blocks[binding.content_index]
                html = render_block(block, binding.slot, state["slug"], decisions.get(block.id), settings.image_base_url)
                em.block_start(block.id, block.type, binding.slot.position)
                em.block_content(block.id, html, block.section_style or binding.slot.section_style)
                em.block_complete(block.id)
                fragments.append(html)
        return {"stage": "streaming_blocks", "mapping": mapping, "decisions": decisions, "html_blocks": fragments}

    return _run
