# tools/rag/loaders.py
from __future__ import annotations
import re
from pathlib import Path
from typing import Any, Dict, List, Tuple

from langchain_core.documents import Document
from langchain_community.document_loaders import TextLoader

from pagegen.core.logging import get_logger

logger = get_logger("pagegen.tools.rag.loaders")

KB_ALLOWED_EXT = {".txt", ".md"}

# top-level folder under the knowledge base root -> content_type
FOLDER_TYPES = {
    "products": "product",
    "product": "product",
    "recipes": "recipe",
    "recipe": "recipe",
    "support": "support",
    "brand": "brand",
    "about": "brand",
}

_FRONT_MATTER = re.compile(r"\A---\s*\n(.*?)\n---\s*\n", re.DOTALL)
_META_KEYS = ("content_type", "source_url", "page_title", "product_sku", "image_url")


def split_front_matter(text: str) -> Tuple[Dict[str, str], str]:
    """`key: value` lines between leading `---` fences, and the remaining body."""
    m = _FRONT_MATTER.match(text or "")
    if not m:
        return {}, text or ""
    meta: Dict[str, str] = {}
    for line in m.group(1).splitlines():
        if ":" not in line:
            continue
        k, v = line.split(":", 1)
        k = k.strip().lower()
        if k in _META_KEYS and v.strip():
            meta[k] = v.strip().strip('"').strip("'")
    return meta, text[m.end():]


def _content_type_for(path: Path, root: Path) -> str:
    try:
        first = path.relative_to(root).parts[0].lower()
    except (ValueError, IndexError):
        return "editorial"
    return FOLDER_TYPES.get(first, "editorial")


def load_docs(paths: List[Path], root: Path) -> List[Document]:
    docs: List[Document] = []
    for fp in paths:
        if not fp.exists() or fp.suffix.lower() not in KB_ALLOWED_EXT:
            continue
        try:
            loaded = TextLoader(str(fp), encoding="utf-8").load()
        except Exception as e:
            # Skip unreadable documents instead of failing the full index build.
            logger.warning("KB_DOC_SKIPPED path=%s error=%s", fp, e)
            continue
        for d in loaded:
            meta, body = split_front_matter(d.page_content)
            md: Dict[str, Any] = {
                "source": str(fp),
                "content_type": _content_type_for(fp, root),
                "page_title": fp.stem.replace("-", " ").replace("_", " ").title(),
                "source_url": "",
            }
            md.update(meta)
            docs.append(Document(page_content=body, metadata=md))
    return docs
