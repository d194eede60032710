"""Dashboard: the city feed, its filters, engagement actions, and the compose modal."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

import httpx
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse

from ...config import Settings, get_settings
from ...constants import CREATE_POST_UNEXPECTED_MESSAGE, DEFAULT_POST_TYPE
from ...dependencies import get_backend_client, get_session_store, get_token
from ...schemas import POST_TYPE_CONFIGS
from ...services import DashboardSession, ImageRejected, SelectedImage, SessionStore
from ..template_helpers import render_template

router = APIRouter(prefix="/dashboard")

logger = logging.getLogger(__name__)

COMPOSE_ACTIONS = ("open", "cancel", "attach", "remove-image", "submit")


@dataclass
class DashboardContext:
    session_id: str
    session: DashboardSession
    settings: Settings

    def attach(self, response: Response) -> Response:
        response.set_cookie(
            self.settings.session_cookie_name,
            self.session_id,
            httponly=True,
            samesite="lax",
            path="/",
        )
        return response

    def redirect(self) -> Response:
        return self.attach(RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER))


async def get_dashboard(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    client: httpx.AsyncClient = Depends(get_backend_client),
    settings: Settings = Depends(get_settings),
) -> DashboardContext:
    """Resolve (or start) the dashboard session behind the request's cookie."""

    session_id = request.cookies.get(settings.session_cookie_name) or uuid.uuid4().hex
    token = get_token(request)
    user_city = request.cookies.get(settings.city_cookie_name) or settings.default_city

    session = await store.get_or_create(
        session_id,
        lambda: DashboardSession.create(client, user_city=user_city, token=token),
    )
    return DashboardContext(session_id=session_id, session=session, settings=settings)


@router.get("", response_class=HTMLResponse)
async def dashboard(request: Request, ctx: DashboardContext = Depends(get_dashboard)) -> Response:
    """Render the community feed, fetching it on first visit."""

    session = ctx.session
    await session.feed.mount()
    response = render_template(
        request,
        "dashboard.html",
        {
            "page_title": "Community Feed",
            "session": session,
            "feed": session.feed,
            "cities": ctx.settings.available_cities,
            "post_types": POST_TYPE_CONFIGS,
            "viewer_id": request.cookies.get(ctx.settings.user_cookie_name),
        },
    )
    return ctx.attach(response)


@router.post("/refresh")
async def refresh_feed(ctx: DashboardContext = Depends(get_dashboard)) -> Response:
    await ctx.session.feed.refresh()
    return ctx.redirect()


@router.post("/filters")
async def update_filters(
    ctx: DashboardContext = Depends(get_dashboard),
    post_type: str = Form("all", alias="postType"),
    city: str = Form(""),
) -> Response:
    feed = ctx.session.feed
    try:
        changed = await feed.set_filters(filter_type=post_type, location_filter=city)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if changed:
        feed.mounted = True
    return ctx.redirect()


@router.post("/posts/{post_id}/like")
async def like_post(post_id: str, ctx: DashboardContext = Depends(get_dashboard)) -> Response:
    await ctx.session.feed.toggle_like(post_id)
    return ctx.redirect()


@router.post("/posts/{post_id}/dislike")
async def dislike_post(post_id: str, ctx: DashboardContext = Depends(get_dashboard)) -> Response:
    await ctx.session.feed.toggle_dislike(post_id)
    return ctx.redirect()


async def _read_upload(upload: UploadFile | None) -> SelectedImage | None:
    if upload is None or not (upload.filename or "").strip():
        return None
    data = await upload.read()
    if not data:
        return None
    return SelectedImage(
        filename=upload.filename or "image",
        content_type=(upload.content_type or "application/octet-stream").strip(),
        data=data,
    )


@router.post("/compose")
async def compose(
    ctx: DashboardContext = Depends(get_dashboard),
    action: str = Form(...),
    content: str = Form(""),
    post_type: str = Form(DEFAULT_POST_TYPE, alias="postType"),
    city: str = Form(""),
    image: UploadFile | None = File(None),
) -> Response:
    """Apply one compose-modal action, then redirect back to the feed."""

    if action not in COMPOSE_ACTIONS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown action: {action}")

    session = ctx.session
    modal = session.compose

    if action == "open":
        modal.open()
        return ctx.redirect()
    if action == "cancel":
        modal.close()
        return ctx.redirect()

    modal.set_content(content)
    try:
        modal.set_post_type(post_type)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if city:
        modal.set_city(city)

    if action == "remove-image":
        modal.remove_image()
        return ctx.redirect()

    selected = await _read_upload(image)
    if selected is not None:
        try:
            modal.select_image(selected)
        except ImageRejected as exc:
            session.alert = str(exc)
            return ctx.redirect()

    if action == "submit" and modal.can_submit:
        try:
            session.alert = await session.feed.create_post(modal)
        except Exception:  # pragma: no cover - unexpected failures surface as an alert
            logger.exception("Error creating post")
            session.alert = CREATE_POST_UNEXPECTED_MESSAGE
    return ctx.redirect()


@router.get("/previews/{preview_id}")
async def preview_image(
    preview_id: str,
    request: Request,
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Serve the bytes behind a not-yet-revoked preview URL."""

    session_id = request.cookies.get(settings.session_cookie_name)
    session = await store.get(session_id) if session_id else None
    image = session.previews.resolve(preview_id) if session is not None else None
    if image is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preview not found")
    return Response(content=image.data, media_type=image.content_type, headers={"Cache-Control": "no-store"})


@router.post("/sidebar")
async def toggle_sidebar(ctx: DashboardContext = Depends(get_dashboard), is_open: bool = Form(..., alias="open")) -> Response:
    ctx.session.is_sidebar_open = is_open
    return ctx.redirect()


@router.post("/tab")
async def select_tab(ctx: DashboardContext = Depends(get_dashboard), tab: str = Form(...)) -> Response:
    if tab not in ("home", "profile"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown tab: {tab}")
    session = ctx.session
    session.active_tab = tab
    session.is_sidebar_open = False
    if tab == "profile":
        return ctx.attach(RedirectResponse("/profile", status_code=status.HTTP_303_SEE_OTHER))
    return ctx.redirect()


@router.post("/alert/dismiss")
async def dismiss_alert(ctx: DashboardContext = Depends(get_dashboard)) -> Response:
    ctx.session.dismiss_alert()
    return ctx.redirect()
