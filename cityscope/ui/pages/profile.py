"""Profile completion page."""
from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, Form, Request, Response, status
from fastapi.responses import HTMLResponse, RedirectResponse

from ...clients import HttpHook, RequestConfig
from ...config import Settings, get_settings
from ...constants import PROFILE_BIO_MAX_LENGTH, PROFILE_NAME_MAX_LENGTH
from ...dependencies import get_backend_client, get_session_store, get_token
from ...schemas import ApiResponse, ProfileApiResponse
from ...services import ProfileForm, SessionStore
from ..template_helpers import render_template

router = APIRouter()

logger = logging.getLogger(__name__)

PROFILE_ENDPOINT = "/api/profile"


def _render(request: Request, form: ProfileForm, settings: Settings, *, status_code: int = 200) -> Response:
    return render_template(
        request,
        "profile.html",
        {
            "page_title": "Complete Your Profile",
            "form": form,
            "city_options": [(city, city) for city in settings.available_cities],
            "name_max_length": PROFILE_NAME_MAX_LENGTH,
            "bio_max_length": PROFILE_BIO_MAX_LENGTH,
        },
        status_code=status_code,
    )


@router.get("/profile", response_class=HTMLResponse)
async def profile(request: Request, settings: Settings = Depends(get_settings)) -> Response:
    form = ProfileForm(cities=tuple(settings.available_cities))
    return _render(request, form, settings)


@router.post("/profile", response_class=HTMLResponse)
async def complete_profile(
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    bio: str = Form(""),
    city: str = Form(""),
    client: httpx.AsyncClient = Depends(get_backend_client),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Validate the profile form and forward it to ``PUT /api/profile``."""

    form = ProfileForm(cities=tuple(settings.available_cities))
    form.update({"first_name": first_name, "last_name": last_name, "bio": bio, "city": city})
    if not form.begin_submit():
        return _render(request, form, settings, status_code=status.HTTP_400_BAD_REQUEST)

    hook = HttpHook(client, ApiResponse[ProfileApiResponse], token=get_token(request))
    result = await hook.send_request(RequestConfig(url=PROFILE_ENDPOINT, method="PUT", data=form.payload()))
    if result is None:
        message = hook.error.message if hook.error is not None else ""
        form.finish_submit(message or "Failed to update profile")
        return _render(request, form, settings, status_code=status.HTTP_502_BAD_GATEWAY)

    form.finish_submit()
    logger.info("Profile updated for city %s", form.city)

    # The dashboard session was built for the previous home city.
    session_id = request.cookies.get(settings.session_cookie_name)
    if session_id:
        await store.discard(session_id)

    response = RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(settings.city_cookie_name, form.city, httponly=True, samesite="lax", path="/")
    return response
