# core/jsonx.py
from __future__ import annotations
import json
import re
from typing import Any, Dict

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", flags=re.IGNORECASE)


def strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", (text or "").strip())


def extract_json(text: str) -> Dict[str, Any]:
    """Best-effort: parse full text, else parse the first {...} block.

    Model output often arrives wrapped in markdown fences or with a sentence
    of prose before the object. Raises ValueError when nothing parses to a dict.
    """
    text = strip_fences(text)
    if not text:
        raise ValueError("Empty LLM output")

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        a = text.find("{")
        b = text.rfind("}")
        if a == -1 or b == -1 or b <= a:
            raise ValueError("No JSON object found in LLM output")
        try:
            data = json.loads(text[a : b + 1])
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed JSON in LLM output: {e.msg}") from e

    if not isinstance(data, dict):
        raise ValueError("LLM output is not a JSON object")
    return data
