# llm/gemini_llm.py
from __future__ import annotations
from typing import Optional

from langchain_google_genai import ChatGoogleGenerativeAI

from pagegen.llm.base import common_kwargs, require_env


def build_gemini(model: str, temperature: float, timeout: Optional[float] = None, json_mode: bool = False):
    # LangChain supports GOOGLE_API_KEY env (recommended)
    require_env("GOOGLE_API_KEY")
    kwargs = common_kwargs(temperature, timeout)
    if json_mode:
        kwargs["response_mime_type"] = "application/json"
    return ChatGoogleGenerativeAI(model=model, **kwargs)
