# tools/rag/retriever.py
from __future__ import annotations
import asyncio
import os
import re
from typing import List

from langchain_core.documents import Document

from pagegen.core.config import Settings
from pagegen.core.logging import get_logger
from pagegen.schemas.intent import IntentClassification
from pagegen.schemas.retrieval import ChunkMetadata, RetrievalContext, RetrievedChunk
from pagegen.tools.rag.kb_index import load_kb_vectorstore
from pagegen.tools.rag.planner import RetrievalPlan, plan_retrieval

logger = get_logger("pagegen.tools.rag.retriever")

SAME_SOURCE_PENALTY = 0.1
NEAR_DUPLICATE = 0.8


def _to_chunk(doc: Document, score: float) -> RetrievedChunk:
    md = dict(doc.metadata or {})
    return RetrievedChunk(
        id=str(md.get("chunk_id") or md.get("source") or "chunk"),
        score=float(score),
        text=doc.page_content,
        metadata=ChunkMetadata(
            content_type=str(md.get("content_type") or "editorial"),
            source_url=str(md.get("source_url") or ""),
            page_title=str(md.get("page_title") or ""),
            product_sku=md.get("product_sku") or None,
            image_url=md.get("image_url") or None,
        ),
    )


def _words(text: str) -> set:
    return set(re.split(r"\s+", (text or "").lower()))


def _jaccard(a: str, b: str) -> float:
    wa, wb = _words(a), _words(b)
    return len(wa & wb) / len(wa | wb) if wa | wb else 0.0


def boost_by_terms(chunks: List[RetrievedChunk], terms: List[str]) -> List[RetrievedChunk]:
    out = []
    for c in chunks:
        text = c.text.lower()
        hits = sum(1 for t in terms if t.lower() in text)
        out.append(c.model_copy(update={"score": c.score * (1 + min(hits * 0.15, 0.6))}))
    return sorted(out, key=lambda c: c.score, reverse=True)


def dedupe(chunks: List[RetrievedChunk], mode: str) -> List[RetrievedChunk]:
    if mode in ("by-sku", "by-url"):
        best: dict = {}
        for c in chunks:
            key = (c.metadata.product_sku if mode == "by-sku" else None) or c.metadata.source_url or c.id
            if key not in best or c.score > best[key].score:
                best[key] = c
        return sorted(best.values(), key=lambda c: c.score, reverse=True)

    selected: List[RetrievedChunk] = []
    for c in chunks:
        if any(_jaccard(c.text, s.text) > NEAR_DUPLICATE for s in selected):
            continue
        if any(s.metadata.source_url and s.metadata.source_url == c.metadata.source_url for s in selected):
            c = c.model_copy(update={"score": c.score * (1 - SAME_SOURCE_PENALTY)})
        selected.append(c)
    return sorted(selected, key=lambda c: c.score, reverse=True)


def apply_plan(plan: RetrievalPlan, hits: List[RetrievedChunk]) -> RetrievalContext:
    chunks = [c for c in hits if c.score >= plan.relevance_threshold]
    if plan.content_types:
        typed = [c for c in chunks if c.metadata.content_type in plan.content_types]
        chunks = typed or chunks
    if plan.boost_terms:
        chunks = boost_by_terms(chunks, plan.boost_terms)
    chunks = dedupe(chunks, plan.dedupe)[: plan.max_results]
    urls: List[str] = []
    for c in chunks:
        if c.metadata.source_url and c.metadata.source_url not in urls:
            urls.append(c.metadata.source_url)
    return RetrievalContext(chunks=chunks, source_urls=urls)


def search(plan: RetrievalPlan, settings: Settings) -> List[RetrievedChunk]:
    vs = load_kb_vectorstore(settings)
    k = max(plan.top_k, settings.retrieval_top_k)
    return [_to_chunk(d, s) for d, s in vs.similarity_search_with_relevance_scores(plan.semantic_query, k=k)]


async def retrieve(query: str, intent: IntentClassification, settings: Settings) -> RetrievalContext:
    """Ranked knowledge-base context. An unavailable index yields an empty context."""
    plan = plan_retrieval(query, intent)
    logger.info("RETRIEVAL_PLAN strategy=%s top_k=%s reason=%s", plan.strategy, plan.top_k, plan.reasoning)
    if not os.getenv("OPENAI_API_KEY"):
        logger.warning("RETRIEVAL_SKIPPED reason=missing_openai_key")
        return RetrievalContext()
    try:
        hits = await asyncio.to_thread(search, plan, settings)
    except RuntimeError as e:
        logger.warning("RETRIEVAL_UNAVAILABLE error=%s", e)
        return RetrievalContext()
    ctx = apply_plan(plan, hits)
    logger.info("RETRIEVAL_DONE raw=%s kept=%s sources=%s", len(hits), len(ctx.chunks), len(ctx.source_urls))
    return ctx
