# src/pingguard/api/app.py
"""
FastAPI application wiring.

Business logic lives in `pingguard.ingestion` and `pingguard.scoring`; this module only
builds the app. Run with `uvicorn pingguard.api.app:app`.
"""

from __future__ import annotations

from fastapi import FastAPI

from pingguard.config.settings import get_settings
from pingguard.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title=f"{get_settings().app.name} API", version="0.1.0")
app.include_router(router)
