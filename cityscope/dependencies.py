"""Request-scoped accessors for objects created during application startup."""
from __future__ import annotations

import httpx
from fastapi import Request

from .config import get_settings
from .services.session_service import SessionStore


async def get_backend_client(request: Request) -> httpx.AsyncClient:
    """Shared client pointed at the Cityscope backend API."""
    return request.app.state.backend_client


async def get_image_client(request: Request) -> httpx.AsyncClient:
    """Client used to fetch remote images for the optimization route."""
    return request.app.state.image_client


async def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_token(request: Request) -> str | None:
    return request.cookies.get(get_settings().token_cookie_name) or None


__all__ = ["get_backend_client", "get_image_client", "get_session_store", "get_token"]
