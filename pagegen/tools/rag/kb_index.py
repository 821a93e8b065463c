# tools/rag/kb_index.py
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from langchain_community.vectorstores import FAISS
from langchain_openai import OpenAIEmbeddings

from pagegen.core.config import Settings
from pagegen.core.logging import get_logger
from pagegen.tools.rag.chunker import chunk_docs
from pagegen.tools.rag.loaders import KB_ALLOWED_EXT, load_docs

logger = get_logger("pagegen.tools.rag.kb_index")

_VS_CACHE: Dict[str, Any] = {"sig": "", "vs": None}


def _faiss_dir(settings: Settings) -> Path:
    return settings.index_dir / "faiss"


def _stamp_file(settings: Settings) -> Path:
    return settings.index_dir / "stamp.json"


def kb_files(root: Path) -> List[Path]:
    if not root.exists():
        return []
    return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in KB_ALLOWED_EXT)


def _chunk_params() -> Dict[str, int]:
    return {
        "chunk_size": int(os.getenv("KB_RAG_CHUNK_SIZE", "900")),
        "chunk_overlap": int(os.getenv("KB_RAG_CHUNK_OVERLAP", "150")),
    }


def _stamp_for(files: List[Path], settings: Settings) -> Dict[str, Any]:
    mtimes = [int(p.stat().st_mtime_ns) for p in files] or [0]
    return {
        "count": len(files),
        "latest_mtime_ns": max(mtimes),
        "root": str(settings.kb_root),
        "embedding_model": settings.embedding_model,
        **_chunk_params(),
    }


def _read_stamp(settings: Settings) -> Optional[Dict[str, Any]]:
    f = _stamp_file(settings)
    if not f.exists():
        return None
    try:
        return json.loads(f.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None


def ensure_kb_index(settings: Settings, force: bool = False) -> Dict[str, Any]:
    """Rebuild the FAISS index when the knowledge base changed since the last stamp."""
    if not os.getenv("OPENAI_API_KEY"):
        raise RuntimeError("Missing env var: OPENAI_API_KEY (embeddings)")

    files = kb_files(settings.kb_root)
    if not files:
        return {"ok": False, "error": f"No KB files found in {settings.kb_root}"}

    wanted = _stamp_for(files, settings)
    if not force and _faiss_dir(settings).exists() and _read_stamp(settings) == wanted:
        return {"ok": True, "rebuilt": False, "files": len(files)}

    docs = load_docs(files, settings.kb_root)
    if not docs:
        return {"ok": False, "error": "No readable KB documents found"}

    chunks = chunk_docs(docs, **_chunk_params())
    vs = FAISS.from_documents(chunks, OpenAIEmbeddings(model=settings.embedding_model))
    _faiss_dir(settings).mkdir(parents=True, exist_ok=True)
    vs.save_local(str(_faiss_dir(settings)))
    _stamp_file(settings).write_text(json.dumps(wanted, indent=2), encoding="utf-8")
    logger.info("KB_INDEX_BUILT files=%s docs=%s chunks=%s", len(files), len(docs), len(chunks))
    return {"ok": True, "rebuilt": True, "files": len(files), "docs": len(docs), "chunks": len(chunks)}


def load_kb_vectorstore(settings: Settings) -> FAISS:
    state = ensure_kb_index(settings)
    if not state.get("ok"):
        raise RuntimeError(str(state.get("error", "KB index unavailable")))
    sig = json.dumps(_read_stamp(settings) or {}, sort_keys=True)
    if _VS_CACHE.get("vs") is not None and _VS_CACHE.get("sig") == sig:
        return _VS_CACHE["vs"]
    vs = FAISS.load_local(
        str(_faiss_dir(settings)),
        OpenAIEmbeddings(model=settings.embedding_model),
        allow_dangerous_deserialization=True,
    )
    _VS_CACHE["sig"] = sig
    _VS_CACHE["vs"] = vs
    return vs
