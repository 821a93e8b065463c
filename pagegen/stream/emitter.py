# stream/emitter.py
from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional

from pagegen.core.logging import get_logger
from pagegen.schemas.events import SSEEvent, parse_event

logger = get_logger("pagegen.stream.emitter")

Send = Callable[[Dict[str, Any]], None]


class Emitter:
    """Typed SSE emitter for one run.

    Envelopes carry a per-run counter and no clock or random values, so the
    same run produces the same stream. A sink that raises is treated as a
    disconnected client: the emitter closes and later events are dropped.
    """

    def __init__(self, run_id: str, send: Send):
        self.run_id, self.send = run_id, send
        self.seq = 0
        self.closed = False

    def emit(self, type_: str, data: Optional[Dict[str, Any]] = None) -> bool:
        return self.emit_event(parse_event({"type": type_, **(data or {})}))

    def emit_event(self, ev: SSEEvent) -> bool:
        if self.closed:
            return False
        payload = ev.payload()
        self.seq += 1
        logger.info(
            "SSE_EMIT type=%s run_id=%s seq=%s keys=%s",
            ev.type,
            self.run_id,
            self.seq,
            ",".join(sorted(payload.keys())),
        )
        try:
            self.send({"id": self.seq, "event": ev.type, "data": payload})
        except Exception as e:
            self.closed = True
            logger.warning("SSE_SINK_CLOSED run_id=%s seq=%s error=%s", self.run_id, self.seq, e)
            return False
        return True

    # typed helpers, one per event tag

    def layout(self, blocks: List[str]) -> bool:
        return self.emit("layout", {"blocks": blocks})

    def block_start(self, block_id: str, block_type: str, position: int) -> bool:
        return self.emit("block-start", {"blockId": block_id, "blockType": block_type, "position": position})

    def block_content(self, block_id: str, html: str, section_style: Optional[str]) -> bool:
        return self.emit("block-content", {"blockId": block_id, "html": html, "partial": False, "sectionStyle": section_style})

    def block_complete(self, block_id: str) -> bool:
        return self.emit("block-complete", {"blockId": block_id})

    def image_placeholder(self, image_id: str, block_id: str) -> bool:
        return self.emit("image-placeholder", {"imageId": image_id, "blockId": block_id})

    def image_ready(self, image_id: str, url: str) -> bool:
        return self.emit("image-ready", {"imageId": image_id, "url": url})

    def complete(self, page_url: str) -> bool:
        return self.emit("generation-complete", {"pageUrl": page_url})

    def error(self, code: str, message: str, recoverable: bool = False) -> bool:
        return self.emit("error", {"code": code, "message": message, "recoverable": recoverable})
