# api/routes_assets.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse

from pagegen.api.deps import get_settings, get_state_store
from pagegen.core.config import Settings
from pagegen.core.logging import get_logger
from pagegen.session.generation_state import GenerationStateStore
from pagegen.tools.media.assets import image_file, load_page

router = APIRouter()
logger = get_logger("pagegen.api.assets")


@router.get("/images/{slug}/{filename}")
def image(slug: str, filename: str, settings: Settings = Depends(get_settings)):
    image_id = filename[:-4] if filename.lower().endswith(".png") else filename
    path = image_file(settings.images_dir, slug, image_id)
    logger.info("IMAGE_REQUEST slug=%s filename=%s path=%s", slug, filename, path)
    if not path.exists():
        logger.warning("IMAGE_MISS slug=%s filename=%s", slug, filename)
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(path, media_type="image/png")


@router.get("/discover/{slug}")
async def discover(
    slug: str,
    settings: Settings = Depends(get_settings),
    store: GenerationStateStore = Depends(get_state_store),
):
    html = load_page(settings.pages_dir, slug)
    if html is not None:
        logger.info("PAGE_HIT slug=%s bytes=%s", slug, len(html))
        return HTMLResponse(html)
    state = await store.get(settings.page_path(slug))
    if state is not None and state.status == "in_progress":
        return JSONResponse(status_code=202, content={"inProgress": True, "slug": slug})
    logger.info("PAGE_MISS slug=%s", slug)
    raise HTTPException(status_code=404, detail="Page not found")


@router.get("/health")
def health():
    return {"status": "ok"}
