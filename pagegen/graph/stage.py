# graph/stage.py
from __future__ import annotations
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from pagegen.core.logging import get_logger

logger = get_logger("pagegen.graph.stage")


@contextmanager
def stage(state: Dict[str, Any], name: str) -> Iterator[None]:
    run_id = state.get("run_id")
    t0 = time.perf_counter()
    logger.info("STAGE_START stage=%s run_id=%s", name, run_id)
    try:
        yield
    except Exception as e:
        logger.error("STAGE_FAILED stage=%s run_id=%s error=%s", name, run_id, type(e).__name__)
        raise
    logger.info("STAGE_DONE stage=%s run_id=%s ms=%.1f", name, run_id, (time.perf_counter() - t0) * 1000)
