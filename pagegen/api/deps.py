# api/deps.py
from __future__ import annotations
from functools import lru_cache

from fastapi import Depends

from pagegen.core.config import Settings, load_settings
from pagegen.graph.deps import Collaborators, default_collaborators
from pagegen.session.generation_state import GenerationStateStore


def get_settings() -> Settings:
    return load_settings()


def get_collaborators(settings: Settings = Depends(get_settings)) -> Collaborators:
    return default_collaborators(settings)


@lru_cache(maxsize=1)
def _state_store() -> GenerationStateStore:
    s = load_settings()
    return GenerationStateStore(ttl_secs=s.state_ttl_secs, complete_ttl_secs=s.complete_ttl_secs)


def get_state_store() -> GenerationStateStore:
    return _state_store()
