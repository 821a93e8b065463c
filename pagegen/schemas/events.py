# schemas/events.py
from __future__ import annotations
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

EventType = Literal[
    "layout", "block-start", "block-content", "block-complete",
    "image-placeholder", "image-ready", "generation-complete", "error",
]


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"type"})


class LayoutEvent(_Event):
    type: Literal["layout"] = "layout"
    blocks: List[str]


class BlockStartEvent(_Event):
    type: Literal["block-start"] = "block-start"
    block_id: str = Field(alias="blockId")
    block_type: str = Field(alias="blockType")
    position: int


class BlockContentEvent(_Event):
    type: Literal["block-content"] = "block-content"
    block_id: str = Field(alias="blockId")
    html: str
    partial: bool = False
    section_style: Optional[str] = Field(default=None, alias="sectionStyle")


class BlockCompleteEvent(_Event):
    type: Literal["block-complete"] = "block-complete"
    block_id: str = Field(alias="blockId")


class ImagePlaceholderEvent(_Event):
    type: Literal["image-placeholder"] = "image-placeholder"
    image_id: str = Field(alias="imageId")
    block_id: str = Field(alias="blockId")


class ImageReadyEvent(_Event):
    type: Literal["image-ready"] = "image-ready"
    image_id: str = Field(alias="imageId")
    url: str


class GenerationCompleteEvent(_Event):
    type: Literal["generation-complete"] = "generation-complete"
    page_url: str = Field(alias="pageUrl")


class ErrorEvent(_Event):
    type: Literal["error"] = "error"
    code: str
    message: str
    recoverable: bool = False


SSEEvent = Annotated[
    Union[
        LayoutEvent,
        BlockStartEvent,
        BlockContentEvent,
        BlockCompleteEvent,
        ImagePlaceholderEvent,
        ImageReadyEvent,
        GenerationCompleteEvent,
        ErrorEvent,
    ],
    Field(discriminator="type"),
]
SSE_EVENT = TypeAdapter(SSEEvent)


def parse_event(data: dict) -> SSEEvent:
    return SSE_EVENT.validate_python(data)
