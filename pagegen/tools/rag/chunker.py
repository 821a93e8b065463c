# tools/rag/chunker.py
from __future__ import annotations
from typing import List

from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter


def chunk_docs(
    docs: List[Document],
    chunk_size: int = 900,
    chunk_overlap: int = 150,
) -> List[Document]:
    """Split documents; every chunk keeps its parent's metadata plus a `chunk_id`."""
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        separators=["\n## ", "\n\n", "\n", " ", ""],
    )
    chunks = splitter.split_documents(docs)
    seen: dict = {}
    for c in chunks:
        src = str(c.metadata.get("source", "doc"))
        n = seen.get(src, 0)
        seen[src] = n + 1
        c.metadata["chunk_id"] = f"{src}#{n}"
    return chunks
