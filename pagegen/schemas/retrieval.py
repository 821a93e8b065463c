# schemas/retrieval.py
from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChunkMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    content_type: str = "editorial"
    source_url: str = ""
    page_title: str = ""
    product_sku: Optional[str] = None
    image_url: Optional[str] = None


class RetrievedChunk(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    score: float = 0.0
    text: str = ""
    metadata: ChunkMetadata = Field(default_factory=ChunkMetadata)


class RetrievalContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    chunks: List[RetrievedChunk] = Field(default_factory=list)
    source_urls: List[str] = Field(default_factory=list)

    def count(self, content_type: str) -> int:
        return sum(1 for c in self.chunks if c.metadata.content_type == content_type)

    @property
    def has_product_info(self) -> bool:
        return self.count("product") > 0

    @property
    def has_recipes(self) -> bool:
        return self.count("recipe") > 0
