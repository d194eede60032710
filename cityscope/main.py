"""Application entry point for the Cityscope web front end."""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Iterable

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import get_settings
from .services import SessionStore
from .ui import router as ui_router

logger = logging.getLogger(__name__)

settings = get_settings()
APP_NAME = settings.app_name
API_VERSION = settings.api_version

UI_STATIC_ROOT = Path(__file__).resolve().parent / "ui" / "static"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared HTTP clients and the dashboard session store."""

    app.state.backend_client = httpx.AsyncClient(
        base_url=settings.backend_api_url,
        timeout=settings.backend_timeout,
    )
    app.state.image_client = httpx.AsyncClient(timeout=settings.backend_timeout)
    app.state.session_store = SessionStore(idle_seconds=settings.session_idle_seconds)
    logger.info("Using backend API at %s", settings.backend_api_url)

    yield

    await app.state.session_store.clear()
    await app.state.image_client.aclose()
    await app.state.backend_client.aclose()


app = FastAPI(title=APP_NAME, version=API_VERSION, lifespan=lifespan)

cors_origins = os.getenv("CORS_ORIGINS")
if cors_origins:
    origins: Iterable[str] = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]
else:
    origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ui_router)


@app.get("/api", tags=["system"])
def api_info() -> dict[str, str]:
    return {"service": APP_NAME, "version": API_VERSION}


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Report which backend API this front end talks to."""

    return {"status": "ok", "backend_api_url": settings.backend_api_url}


app.mount("/assets", StaticFiles(directory=str(UI_STATIC_ROOT)), name="assets")
