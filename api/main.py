"""
HTTP API for the aiaio admin tooling.

Usage:
    uvicorn api.main:app --reload --port 8000
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aiaio_core import __version__
from aiaio_core.config import configure_logging

from .routes import admin, assets, dashboard, prompts, storage, videos

configure_logging()
logger = logging.getLogger(__name__)

ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
logger.info("🚀 Starting API in environment: %s", ENVIRONMENT)

app = FastAPI(
    title="aiaio Admin API",
    description="Asset review, video publishing and playlist maintenance",
    version=__version__,
)

cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
cors_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assets.router)
app.include_router(videos.router)
app.include_router(admin.router)
app.include_router(storage.router)
app.include_router(dashboard.router)
app.include_router(prompts.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "aiaio-admin-api"}


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": "aiaio-admin-api",
        "version": __version__,
    }
