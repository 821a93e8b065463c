# session/store.py
from __future__ import annotations
import time
from uuid import uuid4
from typing import Any, Dict, Optional

from pagegen.core.constants import MAX_SESSION_TURNS
from pagegen.schemas.intent import IntentClassification, SessionContext, SessionTurn


_sessions: Dict[str, Dict[str, Any]] = {}
TTL_SECS = 60 * 30
SERVER_BOOT_ID = f"boot_{int(time.time())}_{str(uuid4())[:8]}"


def get_session(session_id: Optional[str]) -> SessionContext:
    if not session_id:
        return SessionContext()
    s = _sessions.get(session_id)
    if not s:
        return SessionContext()
    s["ts"] = time.time()
    return SessionContext(turns=list(s.get("turns") or []))


def turn_from_intent(query: str, intent: IntentClassification) -> SessionTurn:
    return SessionTurn(query=query, intent=intent.intent_type, entities=intent.entities)


def append_turn(session_id: Optional[str], turn: SessionTurn) -> int:
    if not session_id:
        return 0
    s = _sessions.setdefault(session_id, {"turns": [], "ts": time.time()})
    s["turns"] = [*s.get("turns", []), turn][-MAX_SESSION_TURNS:]
    s["ts"] = time.time()
    return len(s["turns"])


def cleanup() -> None:
    now = time.time()
    for k in list(_sessions.keys()):
        if now - _sessions[k].get("ts", now) > TTL_SECS:
            _sessions.pop(k, None)


def clear_session(session_id: str) -> bool:
    existed = session_id in _sessions
    _sessions.pop(session_id, None)
    return existed


def server_boot_id() -> str:
    return SERVER_BOOT_ID
