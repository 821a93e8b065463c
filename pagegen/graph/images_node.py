# graph/images_node.py
from __future__ import annotations
from typing import Any, Dict

from pagegen.graph.deps import Collaborators
from pagegen.graph.stage import stage
from pagegen.render.image_requests import build_image_requests


def images_node(collab: Collaborators):
    async def _run(state: Dict[str, Any]) -> Dict[str, Any]:
        em = state["emitter"]
        with stage(state, "building_image_requests"):
            requests = build_image_requests(state["content"], state.get("decisions"))
        with stage(state, "streaming_image_placeholders"):
            for req in requests:
                em.image_placeholder(req.id, req.block_id)
        images = []
        if requests:
            with stage(state, "generating_images"):
                images = list(await collab.generate_images(requests, state["slug"]))
            with stage(state, "streaming_image_ready"):
                for img in images:
                    em.image_ready(img.id, img.url)
        return {"stage": "streaming_image_ready", "image_requests": requests, "images": images}

    return _run
