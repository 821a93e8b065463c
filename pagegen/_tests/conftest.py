"""Shared fixtures: settings under tmp_path, deterministic collaborators, sample content."""
import os
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.pop("OPENAI_API_KEY", None)

from pagegen.core.config import Settings
from pagegen.graph.deps import Collaborators
from pagegen.layouts.catalog import DEFAULT_CATALOG, flatten_slots
from pagegen.render.images import image_url
from pagegen.schemas.content import ComplianceResult, GeneratedContent
from pagegen.schemas.images import GeneratedImage
from pagegen.schemas.intent import Entities, ExtractedEntities, IntentClassification
from pagegen.schemas.layout import LayoutTemplate
from pagegen.schemas.retrieval import ChunkMetadata, RetrievalContext, RetrievedChunk

# item list key for the block types that carry repeated entries
ITEM_KEYS = {
    "cards": "cards",
    "columns": "columns",
    "product-cards": "products",
    "recipe-cards": "recipes",
    "recipe-grid": "recipes",
    "troubleshooting-steps": "steps",
    "recipe-steps": "steps",
    "feature-highlights": "features",
    "included-accessories": "accessories",
    "testimonials": "testimonials",
    "team-cards": "members",
    "faq": "items",
    "benefits-grid": "items",
    "diagnosis-card": "items",
}


def block_content(block_type: str, n_items: int = 3) -> Dict[str, Any]:
    key = ITEM_KEYS.get(block_type)
    if key is None:
        return {
            "headline": f"{block_type} headline",
            "title": f"{block_type} title",
            "productName": "Ascent A3500",
            "text": "Body copy.",
            "body": "First paragraph.\n\nSecond paragraph.",
            "imagePrompt": f"photo for {block_type}",
        }
    items = [
        {
            "title": f"Item {i}",
            "name": f"Item {i}",
            "headline": f"Item {i}",
            "question": f"Question {i}?",
            "answer": f"Answer {i}.",
            "description": f"Description {i}.",
            "instruction": f"Do step {i}.",
            "imagePrompt": f"photo of item {i}",
        }
        for i in range(n_items)
    ]
    return {"headline": f"{block_type} headline", key: items}


def content_for_layout(layout: LayoutTemplate, n_items: int = 3) -> GeneratedContent:
    blocks = [
        {"id": f"{slot.block_type}-{slot.position}", "type": slot.block_type, "content": block_content(slot.block_type, n_items)}
        for slot in flatten_slots(layout)
    ]
    return GeneratedContent.model_validate(
        {
            "headline": "Page headline",
            "subheadline": "Page subheadline",
            "blocks": blocks,
            "meta": {"title": "Meta title", "description": "Meta description"},
            "citations": [{"text": "Source", "sourceUrl": "https://www.vitamix.com/a3500", "sourceTitle": "A3500"}],
        }
    )


def chunk(i: int, content_type: str, **meta: Any) -> RetrievedChunk:
    return RetrievedChunk(
        id=f"c{i}",
        score=0.9 - i * 0.01,
        text=f"chunk {i} about {content_type}",
        metadata=ChunkMetadata(content_type=content_type, source_url=f"https://www.vitamix.com/{content_type}/{i}", **meta),
    )


def intent(
    intent_type: str = "general",
    layout_id: str = "lifestyle",
    confidence: float = 0.9,
    products: Optional[List[str]] = None,
    goals: Optional[List[str]] = None,
    ingredients: Optional[List[str]] = None,
    content_types: Optional[List[str]] = None,
) -> IntentClassification:
    return IntentClassification(
        intent_type=intent_type,
        confidence=confidence,
        layout_id=layout_id,
        content_types=content_types or ["editorial"],
        entities=Entities(products=products or [], goals=goals or [], ingredients=ingredients or []),
    )


async def _stub_images(requests, slug):
    return [GeneratedImage(id=r.id, url=image_url(slug, r.id), prompt=r.prompt, provider="stub") for r in requests]


def _stub_content(query, retrieval, intent_, layout, merged):
    return content_for_layout(layout)


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path, kb_root=tmp_path / "knowledge-base")


@pytest.fixture
def catalog():
    return DEFAULT_CATALOG


@pytest.fixture
def make_intent():
    return intent


@pytest.fixture
def make_chunk():
    return chunk


@pytest.fixture
def make_content():
    return content_for_layout


@pytest.fixture
def make_collaborators():
    """Factory for deterministic collaborators; pass overrides by name."""

    def _make(
        classification: Optional[IntentClassification] = None,
        retrieval: Optional[RetrievalContext] = None,
        **overrides: Any,
    ) -> Collaborators:
        fields = {
            "classify": AsyncMock(return_value=classification or intent()),
            "extract_entities": AsyncMock(return_value=ExtractedEntities()),
            "retrieve": AsyncMock(return_value=retrieval or RetrievalContext()),
            "generate_content": AsyncMock(side_effect=_stub_content),
            "generate_images": AsyncMock(side_effect=_stub_images),
            "check_compliance": AsyncMock(return_value=ComplianceResult(is_compliant=True, score=92)),
        }
        fields.update(overrides)
        return Collaborators(**fields)

    return _make


@pytest.fixture
def sink():
    """A send() callable that records envelopes."""

    class Sink(list):
        def __call__(self, ev):
            self.append(ev)

        @property
        def types(self) -> List[str]:
            return [e["event"] for e in self]

    return Sink()
