# graph/compliance_node.py
from __future__ import annotations
from typing import Any, Dict

from pagegen.agents.compliance_agent import extract_full_text
from pagegen.core.config import Settings
from pagegen.core.logging import get_logger
from pagegen.graph.deps import Collaborators
from pagegen.graph.stage import stage
from pagegen.schemas.content import ComplianceResult

logger = get_logger("pagegen.graph.compliance")


def compliance_node(collab: Collaborators, settings: Settings):
    async def _run(state: Dict[str, Any]) -> Dict[str, Any]:
        with stage(state, "validating_compliance"):
            try:
                result = await collab.check_compliance(extract_full_text(state["content"]))
            except Exception as e:
                logger.warning("COMPLIANCE_UNAVAILABLE error=%s -> compliant", e)
                result = ComplianceResult()
            if result.score < settings.compliance_threshold or not result.is_compliant:
                logger.warning(
                    "COMPLIANCE_BELOW_THRESHOLD score=%s threshold=%s issues=%s",
                    result.score,
                    settings.compliance_threshold,
                    "; ".join(result.issues[:5]),
                )
            else:
                logger.info("COMPLIANCE_OK score=%s", result.score)
        return {"stage": "validating_compliance", "compliance": result}

    return _run
