# api/app.py
from __future__ import annotations
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pagegen.core.config import bootstrap_env
from pagegen.api.routes_generate import router as generate_router
from pagegen.api.routes_assets import router as assets_router

bootstrap_env()
app = FastAPI(title="pagegen API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)

app.include_router(generate_router, prefix="/api")
app.include_router(assets_router)
