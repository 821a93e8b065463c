# llm/openai_llm.py
from __future__ import annotations
from typing import Optional

from langchain_openai import ChatOpenAI

from pagegen.llm.base import common_kwargs, require_env


def build_openai(model: str, temperature: float, timeout: Optional[float] = None, json_mode: bool = False):
    require_env("OPENAI_API_KEY")
    llm = ChatOpenAI(model=model, **common_kwargs(temperature, timeout))
    if json_mode:
        return llm.bind(response_format={"type": "json_object"})
    return llm
