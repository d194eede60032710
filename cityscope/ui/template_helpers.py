"""Utilities for rendering UI templates with shared context."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from ..config import get_settings
from . import components
from .components.layout import STATIC_VERSION

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

_BASE_COMPONENTS = {
    "cards": components.cards,
    "feedback": components.feedback,
    "forms": components.forms,
    "layout": components.layout,
}


def render_template(
    request: Request,
    template_name: str,
    context: dict[str, Any] | None = None,
    *,
    status_code: int = 200,
):
    """Return a TemplateResponse with shared UI context."""

    settings = get_settings()
    base_context: dict[str, Any] = {
        "request": request,
        "app_name": settings.app_name,
        "components": _BASE_COMPONENTS,
        "static_version": STATIC_VERSION,
        "page_title": "",
    }
    if context:
        base_context.update(context)

    return templates.TemplateResponse(request, template_name, base_context, status_code=status_code)
