# stream/sse.py
from __future__ import annotations
import json
from typing import Any, AsyncGenerator, Dict

from pagegen.core.constants import SSE_RETRY_MS


def sse_pack(ev: Dict[str, Any]) -> str:
    data = json.dumps(ev.get("data") or {}, ensure_ascii=False)
    return f"id: {ev.get('id', 0)}\nevent: {ev.get('event', 'message')}\ndata: {data}\n\n"


async def sse_gen(queue) -> AsyncGenerator[str, None]:
    yield f"retry: {SSE_RETRY_MS}\n\n"
    while True:
        ev = await queue.get()
        if ev is None:
            break
        yield sse_pack(ev)
