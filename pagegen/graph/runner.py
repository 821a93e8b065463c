# graph/runner.py
from __future__ import annotations
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from langgraph.graph import StateGraph, END

from pagegen.core.config import Settings, load_settings
from pagegen.core.errors import error_code
from pagegen.core.logging import get_logger
from pagegen.graph.blocks_node import blocks_node
from pagegen.graph.classify_node import classify_node
from pagegen.graph.complete_node import complete_node
from pagegen.graph.compliance_node import compliance_node
from pagegen.graph.content_node import content_node
from pagegen.graph.context_node import context_node
from pagegen.graph.deps import Collaborators, default_collaborators
from pagegen.graph.images_node import images_node
from pagegen.graph.layout_node import layout_node
from pagegen.layouts.catalog import DEFAULT_CATALOG, LayoutCatalog
from pagegen.layouts.patterns import DEFAULT_RULES, SelectorRules
from pagegen.schemas.intent import SessionContext
from pagegen.schemas.state import PageResult, PipelineState
from pagegen.stream.emitter import Emitter

logger = get_logger("pagegen.graph.runner")

STAGES = ("classify", "context", "layout", "content", "blocks", "images", "compliance", "complete")


def build_pipeline_graph(
    collab: Collaborators,
    settings: Settings,
    catalog: LayoutCatalog = DEFAULT_CATALOG,
    rules: SelectorRules = DEFAULT_RULES,
):
    g = StateGraph(PipelineState)
    g.add_node("classify", classify_node(collab))
    g.add_node("context", context_node(collab))
    g.add_node("layout", layout_node(settings, catalog, rules))
    g.add_node("content", content_node(collab))
    g.add_node("blocks", blocks_node(settings))
    g.add_node("images", images_node(collab))
    g.add_node("compliance", compliance_node(collab, settings))
    g.add_node("complete", complete_node(settings))
    g.set_entry_point(STAGES[0])
    for a, b in zip(STAGES, STAGES[1:]):
        g.add_edge(a, b)
    g.add_edge(STAGES[-1], END)
    return g.compile()


def _result(out: Dict[str, Any]) -> PageResult:
    return PageResult(
        slug=out["slug"],
        page_url=out["page_url"],
        layout_id=out["layout"].id,
        layout_path=out["layout_path"],
        content=out["content"],
        mapping=out["mapping"],
        images=out.get("images") or [],
        html=out.get("page_html") or "",
        compliance=out["compliance"],
        intent=out["intent"],
    )


async def run_pipeline(
    query: str,
    slug: str,
    send: Callable[[Dict[str, Any]], None],
    session: Optional[SessionContext] = None,
    collaborators: Optional[Collaborators] = None,
    settings: Optional[Settings] = None,
    catalog: LayoutCatalog = DEFAULT_CATALOG,
    rules: SelectorRules = DEFAULT_RULES,
    run_id: Optional[str] = None,
) -> PageResult:
    """Run one query -> page generation, streaming events through ``send``.

    Any failure is turned into exactly one terminal ``error`` event and then
    re-raised. Events already streamed are not retracted.
    """
    settings = settings or load_settings()
    collab = collaborators or default_collaborators(settings, catalog)
    run_id = run_id or str(uuid4())[:8]
    em = Emitter(run_id=run_id, send=send)
    state: Dict[str, Any] = {
        "run_id": run_id,
        "slug": slug,
        "query": query,
        "stage": "classifying",
        "emitter": em,
        "session": session or SessionContext(),
    }
    logger.info("RUN_START run_id=%s slug=%s query_len=%s turns=%s", run_id, slug, len(query), len(state["session"].turns))
    app = build_pipeline_graph(collab, settings, catalog, rules)
    try:
        out = await app.ainvoke(state)
    except Exception as e:
        code = error_code(e)
        logger.error("RUN_FAILED run_id=%s slug=%s code=%s error=%s", run_id, slug, code, e)
        em.error(code, str(e) or type(e).__name__, recoverable=False)
        raise
    result = _result(out)
    logger.info(
        "RUN_DONE run_id=%s slug=%s layout=%s path=%s images=%s closed=%s",
        run_id,
        slug,
        result.layout_id,
        result.layout_path,
        len(result.images),
        em.closed,
    )
    return result
