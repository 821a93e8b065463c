# api/routes_generate.py
from __future__ import annotations
import asyncio
from typing import Optional
from urllib.parse import urlencode
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from pagegen.api.deps import get_collaborators, get_settings, get_state_store
from pagegen.core.config import Settings
from pagegen.core.constants import MAX_QUERY_CHARS
from pagegen.core.errors import GenerationInProgressError
from pagegen.core.logging import get_logger
from pagegen.core.slug import generate_slug
from pagegen.graph.deps import Collaborators
from pagegen.graph.runner import run_pipeline
from pagegen.session.generation_state import GenerationStateStore
from pagegen.session.store import append_turn, cleanup, clear_session, get_session, server_boot_id, turn_from_intent
from pagegen.stream.sse import sse_gen
from pagegen.tools.media.assets import page_exists

router = APIRouter()
logger = get_logger("pagegen.api.generate")

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class GenerateIn(BaseModel):
    query: str
    session_id: Optional[str] = None


class SessionClearIn(BaseModel):
    session_id: str


def _clean_query(query: Optional[str]) -> str:
    q = (query or "").strip()
    if not q:
        raise HTTPException(status_code=400, detail="Query required")
    if len(q) > MAX_QUERY_CHARS:
        raise HTTPException(status_code=400, detail=f"Query longer than {MAX_QUERY_CHARS} characters")
    return q


def _stream_url(slug: str, query: Optional[str] = None, session_id: Optional[str] = None) -> str:
    params = {"slug": slug}
    if query:
        params["query"] = query
    if session_id:
        params["session_id"] = session_id
    return f"/api/stream?{urlencode(params)}"


@router.post("/generate")
async def generate(
    inp: GenerateIn,
    settings: Settings = Depends(get_settings),
    store: GenerationStateStore = Depends(get_state_store),
):
    query = _clean_query(inp.query)
    slug = generate_slug(query)
    path = settings.page_path(slug)

    if page_exists(settings.pages_dir, slug):
        logger.info("GENERATE_EXISTS slug=%s", slug)
        return {"exists": True, "url": path, "slug": slug, "message": "Page already exists"}

    state = await store.get(path)
    if state is not None and state.status == "in_progress":
        logger.info("GENERATE_IN_PROGRESS slug=%s", slug)
        return {"inProgress": True, "url": path, "slug": slug, "streamUrl": _stream_url(slug)}

    logger.info("GENERATE_ACCEPTED slug=%s session_id=%s query_len=%s", slug, inp.session_id, len(query))
    return {"url": path, "slug": slug, "streamUrl": _stream_url(slug, query, inp.session_id)}


@router.get("/stream")
async def stream(
    slug: str,
    query: Optional[str] = None,
    session_id: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    collab: Collaborators = Depends(get_collaborators),
    store: GenerationStateStore = Depends(get_state_store),
):
    query = _clean_query(query)
    path = settings.page_path(slug)
    if page_exists(settings.pages_dir, slug):
        logger.info("STREAM_EXISTS slug=%s", slug)
        return {"exists": True, "url": path, "slug": slug, "message": "Page already exists"}

    began, state = await store.try_begin(path, query, slug)
    if not began:
        return JSONResponse(
            status_code=409,
            content={"inProgress": True, "url": path, "slug": state.slug, "code": GenerationInProgressError.code},
        )

    cleanup()
    session = get_session(session_id)
    q: asyncio.Queue = asyncio.Queue()
    loop = asyncio.get_running_loop()

    def send(ev):
        loop.call_soon_threadsafe(q.put_nowait, ev)

    run_id = str(uuid4())[:8]

    async def done():
        try:
            result = await run_pipeline(query, slug, send, session=session, collaborators=collab, settings=settings, run_id=run_id)
        except Exception as e:
            logger.error("STREAM_RUN_FAILED run_id=%s slug=%s error=%s", run_id, slug, e)
            await store.mark_failed(path, str(e) or type(e).__name__)
        else:
            await store.mark_complete(path, result.page_url)
            turns = append_turn(session_id, turn_from_intent(query, result.intent))
            logger.info("STREAM_RUN_DONE run_id=%s slug=%s session_turns=%s", run_id, slug, turns)
        finally:
            # queued behind any events send() already scheduled
            loop.call_soon_threadsafe(q.put_nowait, None)

    asyncio.create_task(done())
    return StreamingResponse(sse_gen(q), media_type="text/event-stream", headers=SSE_HEADERS)


@router.get("/session/meta")
def session_meta():
    return {"server_boot_id": server_boot_id()}


@router.post("/session/clear")
def session_clear(inp: SessionClearIn):
    existed = clear_session(inp.session_id)
    return {"ok": True, "cleared": existed, "session_id": inp.session_id}
