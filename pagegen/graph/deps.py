# graph/deps.py
"""The external collaborators one pipeline run talks to.

Every field is an async callable. Production wiring comes from
``default_collaborators``; tests pass deterministic stand-ins.
"""
from __future__ import annotations
from functools import partial
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict

from pagegen.agents.compliance_agent import check_compliance
from pagegen.agents.content_agent import generate_content
from pagegen.agents.entity_agent import extract_entities
from pagegen.agents.intent_agent import classify_intent
from pagegen.core.config import Settings
from pagegen.layouts.catalog import DEFAULT_CATALOG, LayoutCatalog
from pagegen.tools.media.image_router import generate_images
from pagegen.tools.rag.retriever import retrieve

AsyncFn = Callable[..., Awaitable[Any]]


class Collaborators(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    classify: AsyncFn                # (query, merged) -> IntentClassification
    extract_entities: AsyncFn        # (query) -> ExtractedEntities
    retrieve: AsyncFn                # (query, intent) -> RetrievalContext
    generate_content: AsyncFn        # (query, retrieval, intent, layout, merged) -> GeneratedContent
    generate_images: AsyncFn         # (requests, slug) -> list[GeneratedImage]
    check_compliance: AsyncFn        # (text) -> ComplianceResult


def default_collaborators(settings: Settings, catalog: LayoutCatalog = DEFAULT_CATALOG) -> Collaborators:
    return Collaborators(
        classify=partial(classify_intent, settings=settings, catalog=catalog),
        extract_entities=partial(extract_entities, settings=settings),
        retrieve=partial(retrieve, settings=settings),
        generate_content=partial(generate_content, settings=settings),
        generate_images=partial(generate_images, settings=settings),
        check_compliance=partial(check_compliance, settings=settings),
    )
