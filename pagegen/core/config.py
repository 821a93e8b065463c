# core/config.py
from __future__ import annotations
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from pagegen.core.constants import (
    COMPLETE_TTL_SECS,
    COMPLIANCE_MIN_SCORE,
    DEFAULT_CONTENT_MODEL,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    HIGH_CONFIDENCE_THRESHOLD,
    STATE_TTL_SECS,
)


def bootstrap_env() -> None:
    """Load .env into environment variables."""
    load_dotenv()


class Settings(BaseModel):
    """Process-wide settings, read once and passed explicitly."""

    model_config = ConfigDict(frozen=True)

    high_confidence_threshold: float = HIGH_CONFIDENCE_THRESHOLD
    compliance_threshold: int = COMPLIANCE_MIN_SCORE

    intent_provider: str = DEFAULT_PROVIDER
    intent_model: str = DEFAULT_MODEL
    content_provider: str = DEFAULT_PROVIDER
    content_model: str = DEFAULT_CONTENT_MODEL

    image_provider: str = "openai"
    image_model: str = "gpt-image-1"
    image_timeout_sec: float = 90.0
    image_base_url: str = ""
    page_base_path: str = "/discover"

    data_dir: Path = Path("data")
    kb_root: Path = Path("data/knowledge-base")
    embedding_model: str = "text-embedding-3-small"
    retrieval_top_k: int = 8

    state_ttl_secs: int = STATE_TTL_SECS
    complete_ttl_secs: int = COMPLETE_TTL_SECS

    @property
    def images_dir(self) -> Path:
        return self.data_dir / "images"

    @property
    def pages_dir(self) -> Path:
        return self.data_dir / "pages"

    @property
    def index_dir(self) -> Path:
        return self.data_dir / "knowledge-base-index"

    def page_path(self, slug: str) -> str:
        return f"{self.page_base_path.rstrip('/')}/{slug}"


def _env(name: str, default: str) -> str:
    v = os.getenv(name, "").strip()
    return v or default


def settings_from_env() -> Settings:
    data_dir = Path(_env("DATA_DIR", "data"))
    return Settings(
        high_confidence_threshold=float(_env("LAYOUT_CONFIDENCE_THRESHOLD", str(HIGH_CONFIDENCE_THRESHOLD))),
        compliance_threshold=int(_env("COMPLIANCE_MIN_SCORE", str(COMPLIANCE_MIN_SCORE))),
        intent_provider=_env("INTENT_PROVIDER", DEFAULT_PROVIDER),
        intent_model=_env("INTENT_MODEL", DEFAULT_MODEL),
        content_provider=_env("CONTENT_PROVIDER", DEFAULT_PROVIDER),
        content_model=_env("CONTENT_MODEL", DEFAULT_CONTENT_MODEL),
        image_provider=_env("IMAGE_PROVIDER", "openai").lower(),
        image_model=_env("IMAGE_MODEL", "gpt-image-1"),
        image_timeout_sec=float(_env("IMAGE_API_TIMEOUT_SEC", "90")),
        image_base_url=_env("IMAGE_BASE_URL", "").rstrip("/"),
        page_base_path=_env("PAGE_BASE_PATH", "/discover"),
        data_dir=data_dir,
        kb_root=Path(_env("KB_ROOT_PATH", str(data_dir / "knowledge-base"))),
        embedding_model=_env("EMBEDDING_MODEL", "text-embedding-3-small"),
        retrieval_top_k=int(_env("RETRIEVAL_TOP_K", "8")),
        state_ttl_secs=int(_env("GENERATION_STATE_TTL_SECS", str(STATE_TTL_SECS))),
        complete_ttl_secs=int(_env("GENERATION_COMPLETE_TTL_SECS", str(COMPLETE_TTL_SECS))),
    )


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    bootstrap_env()
    return settings_from_env()
