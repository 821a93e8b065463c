# render/image_requests.py
from __future__ import annotations
from typing import Dict, List, Optional

from pagegen.core.logging import get_logger
from pagegen.render.images import plan_block_images
from pagegen.schemas.content import GeneratedContent
from pagegen.schemas.images import ImageDecision, ImageRequest

logger = get_logger("pagegen.render.image_requests")


def build_image_requests(
    content: GeneratedContent,
    decisions: Optional[Dict[str, ImageDecision]] = None,
) -> List[ImageRequest]:
    decisions = decisions or {}
    requests: List[ImageRequest] = []
    for block in content.blocks:
        for plan in plan_block_images(block, decisions.get(block.id)):
            if not plan.generate:
                continue
            requests.append(
                ImageRequest(
                    id=plan.image_id,
                    block_id=block.id,
                    prompt=plan.prompt or "",
                    aspect_ratio=plan.aspect_ratio,
                    size=plan.size,
                )
            )
    logger.info("IMAGE_REQUESTS count=%s blocks=%s", len(requests), len({r.block_id for r in requests}))
    return requests
