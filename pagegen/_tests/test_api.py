"""HTTP surface tests with deterministic collaborators."""
import asyncio
import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from pagegen.api.app import app
from pagegen.api.deps import get_collaborators, get_settings, get_state_store
from pagegen.session.generation_state import GenerationStateStore
from pagegen.session.store import clear_session, get_session
from pagegen.tools.media.assets import save_image, save_page

SLUG = "soups-abc123"


def parse_sse(body):
    events = []
    for frame in body.split("\n\n"):
        fields = dict(line.split(": ", 1) for line in frame.splitlines() if ": " in line)
        if "event" in fields:
            events.append((fields["event"], json.loads(fields["data"])))
    return events


@pytest.fixture
def store():
    return GenerationStateStore()


@pytest.fixture
def client(settings, store, make_collaborators):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_collaborators] = lambda: make_collaborators()
    app.dependency_overrides[get_state_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def fixed_slug():
    with patch("pagegen.api.routes_generate.generate_slug", return_value=SLUG):
        yield SLUG


class TestGenerate:
    def test_accepts_new_query(self, client, fixed_slug):
        resp = client.post("/api/generate", json={"query": " soups ", "session_id": "s-1"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["url"] == f"/discover/{SLUG}"
        assert body["slug"] == SLUG
        assert body["streamUrl"] == f"/api/stream?slug={SLUG}&query=soups&session_id=s-1"

    def test_empty_query(self, client):
        assert client.post("/api/generate", json={"query": "   "}).status_code == 400

    def test_query_too_long(self, client):
        assert client.post("/api/generate", json={"query": "a" * 5000}).status_code == 400

    def test_existing_page(self, client, settings, fixed_slug):
        save_page(settings.pages_dir, SLUG, "<html></html>")
        body = client.post("/api/generate", json={"query": "soups"}).json()
        assert body["exists"] is True
        assert body["url"] == f"/discover/{SLUG}"

    def test_in_progress(self, client, store, fixed_slug):
        asyncio.run(store.try_begin(f"/discover/{SLUG}", "soups", SLUG))
        body = client.post("/api/generate", json={"query": "soups"}).json()
        assert body["inProgress"] is True
        assert body["streamUrl"] == f"/api/stream?slug={SLUG}"


class TestStream:
    def test_streams_and_saves(self, client, settings, store):
        resp = client.get("/api/stream", params={"slug": SLUG, "query": "soups"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        assert resp.text.startswith("retry: 1500\n\n")

        events = parse_sse(resp.text)
        assert events[0] == ("layout", {"blocks": ["hero", "cards", "split-content", "columns", "cta"]})
        assert events[-1] == ("generation-complete", {"pageUrl": f"/discover/{SLUG}"})
        assert [e for e, _ in events].count("image-ready") == 8

        state = asyncio.run(store.get(f"/discover/{SLUG}"))
        assert state.status == "complete"
        page = client.get(f"/discover/{SLUG}")
        assert page.status_code == 200
        assert "<!DOCTYPE html>" in page.text

    def test_records_session_turn(self, client):
        clear_session("s-stream")
        client.get("/api/stream", params={"slug": SLUG, "query": "mango smoothies", "session_id": "s-stream"})
        turns = get_session("s-stream").turns
        assert [t.query for t in turns] == ["mango smoothies"]
        clear_session("s-stream")

    def test_second_stream_conflicts(self, client, store):
        asyncio.run(store.try_begin(f"/discover/{SLUG}", "soups", SLUG))
        resp = client.get("/api/stream", params={"slug": SLUG, "query": "soups"})
        assert resp.status_code == 409
        assert resp.json()["code"] == "GENERATION_IN_PROGRESS"

    def test_failed_run_streams_error(self, settings, store, make_collaborators):
        from unittest.mock import AsyncMock

        from pagegen.core.errors import ContentGenerationError

        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_collaborators] = lambda: make_collaborators(
            generate_content=AsyncMock(side_effect=ContentGenerationError("no json"))
        )
        app.dependency_overrides[get_state_store] = lambda: store
        try:
            with TestClient(app) as c:
                resp = c.get("/api/stream", params={"slug": SLUG, "query": "soups"})
                events = parse_sse(resp.text)
                assert [e for e, _ in events] == ["layout", "error"]
                assert events[-1] == ("error", {"code": "CONTENT_GENERATION_FAILED", "message": "no json", "recoverable": False})
                assert asyncio.run(store.get(f"/discover/{SLUG}")).status == "failed"
                assert c.get(f"/discover/{SLUG}").status_code == 404
        finally:
            app.dependency_overrides.clear()

    def test_stored_page_is_not_regenerated(self, client, settings, store):
        save_page(settings.pages_dir, SLUG, "<html>kept</html>")
        resp = client.get("/api/stream", params={"slug": SLUG, "query": "soups"})
        assert resp.json() == {"exists": True, "url": f"/discover/{SLUG}", "slug": SLUG, "message": "Page already exists"}
        assert asyncio.run(store.get(f"/discover/{SLUG}")) is None
        assert client.get(f"/discover/{SLUG}").text == "<html>kept</html>"

    def test_requires_query(self, client):
        assert client.get("/api/stream", params={"slug": SLUG}).status_code == 400


class TestAssets:
    def test_missing_page(self, client):
        assert client.get("/discover/nothing-here").status_code == 404

    def test_page_in_progress(self, client, store):
        asyncio.run(store.try_begin(f"/discover/{SLUG}", "soups", SLUG))
        resp = client.get(f"/discover/{SLUG}")
        assert resp.status_code == 202
        assert resp.json() == {"inProgress": True, "slug": SLUG}

    def test_image(self, client, settings):
        save_image(settings.images_dir, SLUG, "hero", b"\x89PNG")
        resp = client.get(f"/images/{SLUG}/hero.png")
        assert resp.status_code == 200
        assert resp.content == b"\x89PNG"
        assert client.get(f"/images/{SLUG}/card-9.png").status_code == 404

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestSession:
    def test_meta(self, client):
        assert client.get("/api/session/meta").json()["server_boot_id"].startswith("boot_")

    def test_clear(self, client):
        body = client.post("/api/session/clear", json={"session_id": "never-used"}).json()
        assert body == {"ok": True, "cleared": False, "session_id": "never-used"}
