# render/mapping.py
from __future__ import annotations
from typing import List

from pagegen.core.errors import BlockMappingError
from pagegen.core.logging import get_logger
from pagegen.schemas.content import GeneratedContent
from pagegen.schemas.layout import BlockMapping, LayoutSlot, SlotBinding

logger = get_logger("pagegen.render.mapping")


def derive_block_mapping(content: GeneratedContent, slots: List[LayoutSlot]) -> BlockMapping:
    """Bind content blocks to template slots by position, checking count and type."""
    if len(content.blocks) != len(slots):
        raise BlockMappingError(
            f"Generated {len(content.blocks)} blocks for a layout with {len(slots)} slots"
        )
    bindings: List[SlotBinding] = []
    for i, (slot, block) in enumerate(zip(slots, content.blocks)):
        if block.type != slot.block_type:
            raise BlockMappingError(
                f"Block {block.id!r} at position {i} is {block.type!r}, layout expects {slot.block_type!r}"
            )
        bindings.append(SlotBinding(slot=slot, block_id=block.id, content_index=i))
    logger.info("BLOCK_MAPPING slots=%s", len(bindings))
    return BlockMapping(bindings=bindings)
