# tools/media/image_router.py
from __future__ import annotations
import asyncio
import base64
from typing import Dict, List, Optional

from pagegen.core.config import Settings
from pagegen.core.constants import DEFAULT_IMAGE_PROVIDER
from pagegen.core.logging import get_logger
from pagegen.render.images import image_url
from pagegen.schemas.images import GeneratedImage, ImageRequest
from pagegen.tools.media.assets import save_image
from pagegen.tools.media.image_tool import DalleImageProvider, OpenAIImageProvider

logger = get_logger("pagegen.media.router")

PLACEHOLDER_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="800" height="600" viewBox="0 0 800 600">'
    '<rect width="800" height="600" fill="#f3f1ee"/>'
    '<text x="400" y="300" font-family="sans-serif" font-size="24" fill="#9a948c" '
    'text-anchor="middle" dominant-baseline="middle">Image unavailable</text></svg>'
)


def placeholder_url() -> str:
    return "data:image/svg+xml;base64," + base64.b64encode(PLACEHOLDER_SVG.encode("utf-8")).decode("ascii")


def default_providers(settings: Settings) -> Dict[str, OpenAIImageProvider]:
    model = settings.image_model
    return {
        "openai": OpenAIImageProvider(
            model=model if not model.startswith("dall-e") else None,
            timeout_sec=settings.image_timeout_sec,
        ),
        "dalle": DalleImageProvider(
            model=model if model.startswith("dall-e") else None,
            timeout_sec=settings.image_timeout_sec,
        ),
    }


def resolve_provider(preferred: str, providers: Dict[str, OpenAIImageProvider]):
    """Preferred provider when registered and configured, else the default one."""
    p = providers.get((preferred or "").lower())
    if p is not None and p.available():
        return p
    fallback = providers[DEFAULT_IMAGE_PROVIDER]
    if p is not fallback:
        logger.warning("IMAGE_PROVIDER_FALLBACK requested=%s using=%s", preferred, fallback.name)
    return fallback


async def _one(
    req: ImageRequest,
    slug: str,
    provider,
    settings: Settings,
) -> GeneratedImage:
    try:
        data = await asyncio.wait_for(
            asyncio.to_thread(provider.generate, req.prompt, req.aspect_ratio),
            timeout=settings.image_timeout_sec,
        )
        await asyncio.to_thread(save_image, settings.images_dir, slug, req.id, data)
    except Exception as e:
        logger.warning("IMAGE_FAILED image_id=%s provider=%s error=%s", req.id, provider.name, e)
        return GeneratedImage(id=req.id, url=placeholder_url(), prompt=req.prompt, provider=provider.name, placeholder=True)
    url = image_url(slug, req.id, settings.image_base_url)
    logger.info("IMAGE_SAVED image_id=%s url=%s bytes=%s", req.id, url, len(data))
    return GeneratedImage(id=req.id, url=url, prompt=req.prompt, provider=provider.name)


async def generate_images(
    requests: List[ImageRequest],
    slug: str,
    settings: Settings,
    providers: Optional[Dict[str, OpenAIImageProvider]] = None,
) -> List[GeneratedImage]:
    """One concurrent batch; failures become placeholders and never raise.

    The returned list is in completion order.
    """
    if not requests:
        return []
    providers = providers or default_providers(settings)
    provider = resolve_provider(settings.image_provider, providers)
    done: List[GeneratedImage] = []

    async def run(req: ImageRequest) -> None:
        img = await _one(req, slug, provider, settings)
        done.append(img)

    await asyncio.gather(*(run(r) for r in requests))
    logger.info(
        "IMAGE_BATCH_DONE slug=%s provider=%s total=%s placeholders=%s",
        slug,
        provider.name,
        len(done),
        sum(1 for i in done if i.placeholder),
    )
    return done
