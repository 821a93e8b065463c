# tools/media/assets.py
from __future__ import annotations
from pathlib import Path
import re
from typing import Optional

_SAFE = re.compile(r"[^A-Za-z0-9_-]+")


def safe_name(value: str, fallback: str = "item") -> str:
    return _SAFE.sub("_", str(value or "")).strip("_") or fallback


def image_file(images_dir: Path, slug: str, image_id: str) -> Path:
    return images_dir / safe_name(slug, "page") / f"{safe_name(image_id, 'image')}.png"


def save_image(images_dir: Path, slug: str, image_id: str, data: bytes) -> Path:
    p = image_file(images_dir, slug, image_id)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)
    return p


def page_file(pages_dir: Path, slug: str) -> Path:
    return pages_dir / f"{safe_name(slug, 'page')}.html"


def save_page(pages_dir: Path, slug: str, html: str) -> Path:
    p = page_file(pages_dir, slug)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(html, encoding="utf-8")
    return p


def load_page(pages_dir: Path, slug: str) -> Optional[str]:
    p = page_file(pages_dir, slug)
    if not p.exists():
        return None
    return p.read_text(encoding="utf-8")


def page_exists(pages_dir: Path, slug: str) -> bool:
    return page_file(pages_dir, slug).exists()
