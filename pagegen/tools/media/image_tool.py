# tools/media/image_tool.py
from __future__ import annotations
import base64
import os
from typing import Dict, Optional

from openai import OpenAI

from pagegen.core.logging import get_logger

logger = get_logger("pagegen.media.image")

# aspect ratio -> pixel size accepted by each model family
GPT_IMAGE_SIZES: Dict[str, str] = {"1:1": "1024x1024", "3:4": "1024x1536", "2:3": "1024x1536"}
DALLE_SIZES: Dict[str, str] = {"1:1": "1024x1024", "3:4": "1024x1792", "2:3": "1024x1792"}


class OpenAIImageProvider:
    """Image bytes from the OpenAI Images API (b64 payloads)."""

    name = "openai"
    default_model = "gpt-image-1"
    sizes = GPT_IMAGE_SIZES
    landscape = "1536x1024"

    def __init__(self, model: Optional[str] = None, timeout_sec: float = 90.0):
        self.model = model or self.default_model
        self.timeout_sec = timeout_sec

    def available(self) -> bool:
        return bool(os.getenv("OPENAI_API_KEY"))

    def size_for(self, aspect_ratio: str) -> str:
        return self.sizes.get(aspect_ratio, self.landscape)

    def _request(self, prompt: str, size: str) -> dict:
        return {"model": self.model, "prompt": prompt, "size": size}

    def generate(self, prompt: str, aspect_ratio: str = "4:3") -> bytes:
        if not self.available():
            raise RuntimeError("Missing env var: OPENAI_API_KEY")
        size = self.size_for(aspect_ratio)
        logger.info(
            "IMAGE_REQUEST provider=%s model=%s size=%s prompt_len=%s timeout_sec=%s",
            self.name,
            self.model,
            size,
            len(prompt or ""),
            self.timeout_sec,
        )
        client = OpenAI(timeout=max(1.0, self.timeout_sec))
        r = client.images.generate(**self._request(prompt, size))
        if not getattr(r, "data", None) or not getattr(r.data[0], "b64_json", None):
            logger.error("IMAGE_RESPONSE_EMPTY provider=%s model=%s", self.name, self.model)
            raise RuntimeError("Image API returned no image bytes")
        return base64.b64decode(r.data[0].b64_json)


class DalleImageProvider(OpenAIImageProvider):
    name = "dalle"
    default_model = "dall-e-3"
    sizes = DALLE_SIZES
    landscape = "1792x1024"

    def _request(self, prompt: str, size: str) -> dict:
        return {**super()._request(prompt, size), "response_format": "b64_json"}
