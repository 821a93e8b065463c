# schemas/images.py
from __future__ import annotations
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

ImageSize = Literal["hero", "card", "column", "thumbnail"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ImageDecision(_Frozen):
    use_existing: bool = False
    existing_url: Optional[str] = None
    prompt: Optional[str] = None
    reason: str = ""


class ImageRequest(_Frozen):
    id: str
    block_id: str
    prompt: str
    aspect_ratio: str = "4:3"
    size: ImageSize = "card"


class GeneratedImage(_Frozen):
    id: str
    url: str
    prompt: str = ""
    provider: str = ""
    placeholder: bool = False
