# schemas/state.py
from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field

from pagegen.schemas.content import ComplianceResult, GeneratedContent
from pagegen.schemas.images import GeneratedImage, ImageDecision, ImageRequest
from pagegen.schemas.intent import ExtractedEntities, IntentClassification, MergedContext, SessionContext
from pagegen.schemas.layout import BlockMapping, LayoutTemplate
from pagegen.schemas.retrieval import RetrievalContext

Stage = Literal[
    "classifying", "retrieving", "selecting_layout", "adjusting_layout",
    "generating_content", "deriving_block_mapping", "streaming_blocks",
    "building_image_requests", "streaming_image_placeholders", "generating_images",
    "streaming_image_ready", "validating_compliance", "complete", "failed",
]


class PipelineState(TypedDict, total=False):
    # identity
    run_id: str
    slug: str
    query: str
    stage: str

    # runtime only
    emitter: Any

    # stage outputs, each written once
    session: SessionContext
    merged: MergedContext
    intent: IntentClassification
    retrieval: RetrievalContext
    entities: ExtractedEntities
    layout_path: str
    layout: LayoutTemplate
    content: GeneratedContent
    decisions: Dict[str, ImageDecision]
    mapping: BlockMapping
    html_blocks: List[str]
    image_requests: List[ImageRequest]
    images: List[GeneratedImage]
    compliance: ComplianceResult
    page_html: str
    page_url: str


GenerationStatus = Literal["pending", "in_progress", "complete", "failed"]


class GenerationState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: GenerationStatus = "pending"
    query: str
    slug: str
    path: str
    created_at: float
    completed_at: Optional[float] = None
    error: Optional[str] = None
    page_url: Optional[str] = None
    expires_at: float = 0.0


class PageResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    slug: str
    page_url: str
    layout_id: str
    layout_path: str
    content: GeneratedContent
    mapping: BlockMapping
    images: List[GeneratedImage] = Field(default_factory=list)
    html: str = ""
    compliance: ComplianceResult = Field(default_factory=ComplianceResult)
    intent: IntentClassification
