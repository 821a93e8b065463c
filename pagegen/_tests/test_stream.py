"""Tests for SSE framing and the typed emitter."""
import asyncio
import json

import pytest
from pydantic import ValidationError

from pagegen.stream.emitter import Emitter
from pagegen.stream.sse import sse_gen, sse_pack


class TestSsePack:
    def test_frame(self):
        frame = sse_pack({"id": 3, "event": "image-ready", "data": {"imageId": "hero", "url": "/images/s/hero.png"}})
        assert frame == 'id: 3\nevent: image-ready\ndata: {"imageId": "hero", "url": "/images/s/hero.png"}\n\n'

    def test_data_is_single_line(self):
        frame = sse_pack({"id": 1, "event": "block-content", "data": {"html": "<div>\n<p>x</p>\n</div>"}})
        data_line = frame.split("\n")[2]
        assert json.loads(data_line[len("data: "):])["html"] == "<div>\n<p>x</p>\n</div>"


class TestSseGen:
    @pytest.mark.asyncio
    async def test_retry_then_events_until_none(self):
        q = asyncio.Queue()
        q.put_nowait({"id": 1, "event": "layout", "data": {"blocks": ["hero"]}})
        q.put_nowait(None)
        q.put_nowait({"id": 2, "event": "layout", "data": {"blocks": []}})
        frames = [f async for f in sse_gen(q)]
        assert frames[0] == "retry: 1500\n\n"
        assert len(frames) == 2
        assert frames[1].startswith("id: 1\nevent: layout\n")


class TestEmitter:
    def test_envelopes(self):
        sent = []
        em = Emitter("r1", sent.append)
        em.layout(["hero", "cta"])
        em.block_start("hero-0", "hero", 0)
        assert sent == [
            {"id": 1, "event": "layout", "data": {"blocks": ["hero", "cta"]}},
            {"id": 2, "event": "block-start", "data": {"blockId": "hero-0", "blockType": "hero", "position": 0}},
        ]

    def test_error_payload(self):
        sent = []
        Emitter("r1", sent.append).error("GENERATION_FAILED", "boom")
        assert sent[0]["data"] == {"code": "GENERATION_FAILED", "message": "boom", "recoverable": False}

    def test_unknown_event_rejected(self):
        with pytest.raises(ValidationError):
            Emitter("r1", lambda ev: None).emit("progress", {"pct": 50})

    def test_missing_field_rejected(self):
        with pytest.raises(ValidationError):
            Emitter("r1", lambda ev: None).emit("image-ready", {"imageId": "hero"})

    def test_sink_failure_closes(self):
        calls = []

        def sink(ev):
            calls.append(ev)
            raise BrokenPipeError()

        em = Emitter("r1", sink)
        assert em.complete("/discover/s") is False
        assert em.closed
        assert em.complete("/discover/s") is False
        assert len(calls) == 1
