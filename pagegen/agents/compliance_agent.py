# agents/compliance_agent.py
from __future__ import annotations
import re
from typing import Any, Dict, List, Tuple

from pagegen.core.config import Settings
from pagegen.core.jsonx import extract_json
from pagegen.core.logging import get_logger
from pagegen.llm.factory import ainvoke_text
from pagegen.schemas.content import ComplianceResult, GeneratedContent

logger = get_logger("pagegen.agents.compliance")

BANNED_PATTERNS: Tuple[Tuple[re.Pattern, str], ...] = tuple(
    (re.compile(p, re.IGNORECASE), s)
    for p, s in (
        (r"\bcheap\b", "value"),
        (r"\bbudget\b", "accessible"),
        (r"\bjust\b", "[remove or rephrase]"),
        (r"\bsimply\b", "[remove or rephrase]"),
        (r"\bbasically\b", "[remove or rephrase]"),
        (r"\bhack\b", "tip"),
        (r"\binsane\b", "impressive"),
        (r"\bepic\b", "exceptional"),
        (r"\bawesome\b", "excellent"),
        (r"\bcrazy\b", "remarkable"),
        (r"\bkiller\b", "outstanding"),
        (r"\bgame-?changer\b", "transformative"),
        (r"\brevolutionary\b", "innovative"),
    )
)

COMPLIANCE_PROMPT = (
    "You review copy for the Vitamix brand voice: premium, professional yet accessible, confident, "
    "no discount language, no minimizing words, no hype or slang, no unsubstantiated health claims.\n"
    'Return ONLY JSON: {"isCompliant": bool, "score": 0-100, "issues": ["..."]}\n\n'
)

_TEXT_KEYS = ("headline", "subheadline", "text", "body", "description", "title", "question", "answer", "quote")
_LIST_KEYS = ("cards", "columns", "items", "recipes", "products", "features", "steps", "tips", "testimonials")


def extract_full_text(content: GeneratedContent) -> str:
    parts: List[str] = [content.headline, content.subheadline]

    def walk(d: Dict[str, Any]) -> None:
        for k in _TEXT_KEYS:
            v = d.get(k)
            if isinstance(v, str) and v:
                parts.append(v)
        for k in _LIST_KEYS:
            for item in d.get(k) or []:
                if isinstance(item, dict):
                    walk(item)
                elif isinstance(item, str):
                    parts.append(item)

    for block in content.blocks:
        walk(block.content or {})
    return "\n".join(p for p in parts if p)


def scan_banned(text: str) -> List[str]:
    issues = []
    for pattern, suggestion in BANNED_PATTERNS:
        m = pattern.search(text or "")
        if m:
            issues.append(f'Avoid "{m.group(0)}" (use: {suggestion})')
    return issues


def _parse(raw: str) -> ComplianceResult:
    data = extract_json(raw)
    score = int(max(0, min(100, float(data.get("score", 85)))))
    issues = [str(i) for i in data.get("issues") or [] if str(i).strip()]
    return ComplianceResult(is_compliant=bool(data.get("isCompliant", True)), score=score, issues=issues)


async def check_compliance(text: str, settings: Settings) -> ComplianceResult:
    """Advisory brand-voice check. Failures count as compliant."""
    banned = scan_banned(text)
    try:
        raw = await ainvoke_text(
            settings.intent_provider,
            settings.intent_model,
            f"{COMPLIANCE_PROMPT}Copy:\n{text[:8000]}\n",
            temperature=0.0,
            json_mode=True,
        )
        result = _parse(raw)
    except Exception as e:
        logger.warning("COMPLIANCE_CHECK_FAILED error=%s -> default", e)
        result = ComplianceResult()
    if banned:
        result = ComplianceResult(is_compliant=False, score=result.score, issues=[*result.issues, *banned])
    return result
