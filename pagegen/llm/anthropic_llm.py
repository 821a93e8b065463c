# llm/anthropic_llm.py
from __future__ import annotations
from typing import Optional

from langchain_anthropic import ChatAnthropic

from pagegen.llm.base import common_kwargs, require_env


def build_anthropic(model: str, temperature: float, timeout: Optional[float] = None, json_mode: bool = False):
    require_env("ANTHROPIC_API_KEY")
    # no native JSON mode; prompts ask for a bare object and extract_json tolerates prose
    return ChatAnthropic(model=model, max_tokens=8192, **common_kwargs(temperature, timeout))
