# graph/complete_node.py
from __future__ import annotations
import asyncio
from typing import Any, Dict

from pagegen.core.config import Settings
from pagegen.graph.stage import stage
from pagegen.render.page import assemble_page
from pagegen.tools.media.assets import save_page


def complete_node(settings: Settings):
    async def _run(state: Dict[str, Any]) -> Dict[str, Any]:
        slug = state["slug"]
        with stage(state, "complete"):
            html = assemble_page(
                state["content"], state["mapping"], state.get("html_blocks") or [], state["query"], state["layout"].id
            )
            await asyncio.to_thread(save_page, settings.pages_dir, slug, html)
            page_url = settings.page_path(slug)
            state["emitter"].complete(page_url)
        return {"stage": "complete", "page_html": html, "page_url": page_url}

    return _run
