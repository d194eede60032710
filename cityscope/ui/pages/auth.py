"""Authentication page: signup (default) and login."""
from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, Form, Request, Response, status
from fastapi.responses import HTMLResponse, RedirectResponse

from ...clients import HttpHook, RequestConfig
from ...config import Settings, get_settings
from ...dependencies import get_backend_client, get_session_store
from ...schemas import ApiResponse, AuthPayload
from ...services import AuthForm, SessionStore
from ..template_helpers import render_template

router = APIRouter()

logger = logging.getLogger(__name__)


def _render(request: Request, form: AuthForm, *, status_code: int = 200) -> Response:
    return render_template(
        request,
        "auth.html",
        {
            "page_title": "Sign in" if form.is_login else "Sign up",
            "form": form,
        },
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse)
@router.get("/auth", response_class=HTMLResponse)
async def auth_page(request: Request, mode: str = "signup") -> Response:
    return _render(request, AuthForm(is_login=mode == "login"))


@router.post("/auth", response_class=HTMLResponse)
async def submit_auth(
    request: Request,
    mode: str = Form("signup"),
    action: str = Form("submit"),
    email: str = Form(""),
    password: str = Form(""),
    client: httpx.AsyncClient = Depends(get_backend_client),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    form = AuthForm(is_login=mode == "login")
    if action == "toggle":
        form.toggle_mode()
        return _render(request, form)

    form.update({"email": email, "password": password})
    if not form.begin_submit():
        return _render(request, form, status_code=status.HTTP_400_BAD_REQUEST)

    path = settings.auth_login_path if form.is_login else settings.auth_signup_path
    hook = HttpHook(client, ApiResponse[AuthPayload])
    result = await hook.send_request(RequestConfig(url=path, method="POST", data=form.payload()))
    if result is None or result.data is None:
        message = hook.error.message if hook.error is not None else ""
        form.finish_submit(message or "Authentication failed")
        return _render(request, form, status_code=status.HTTP_502_BAD_GATEWAY)

    form.finish_submit()
    payload = result.data
    logger.info("%s succeeded for user %s", "Login" if form.is_login else "Signup", payload.user.id)

    session_id = request.cookies.get(settings.session_cookie_name)
    if session_id:
        await store.discard(session_id)

    target = "/profile" if payload.is_new_user else "/dashboard"
    response = RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(settings.token_cookie_name, payload.token, httponly=True, samesite="lax", path="/")
    response.set_cookie(settings.user_cookie_name, payload.user.id, httponly=True, samesite="lax", path="/")
    if payload.user.city:
        response.set_cookie(settings.city_cookie_name, payload.user.city, httponly=True, samesite="lax", path="/")
    return response
