"""End-to-end tests for the server-rendered pages against a fake backend."""
from __future__ import annotations

import re
from io import BytesIO

import httpx
from fastapi.testclient import TestClient
from PIL import Image

from cityscope.constants import INVALID_IMAGE_TYPE_MESSAGE
from conftest import FakeBackend, envelope, json_body, png_bytes, post_json, user_json

PREVIEW_PATTERN = re.compile(r"/dashboard/previews/([0-9a-f]{32})")


def _serve_feed(backend: FakeBackend, *posts: dict) -> None:
    backend.on("GET", "/api/posts/feed", envelope({"posts": list(posts)}))


def test_health_and_api_info(app_client: TestClient) -> None:
    assert app_client.get("/health").json()["status"] == "ok"
    assert app_client.get("/api").json()["service"] == "Cityscope"


def test_dashboard_renders_feed_for_home_city(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend, post_json("p1", content="Best vada pav near the station"))

    response = app_client.get("/dashboard")

    assert response.status_code == 200
    assert "Best vada pav near the station" in response.text
    assert 'data-post-id="p1"' in response.text
    assert "cityscope_session" in response.cookies
    params = backend.calls("GET", "/api/posts/feed")[0].url.params
    assert dict(params) == {"sortBy": "newest"}

    app_client.get("/dashboard")
    assert len(backend.calls("GET", "/api/posts/feed")) == 1


def test_dashboard_empty_state_names_city(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend)
    app_client.cookies.set("cityscope_city", "Mumbai")

    response = app_client.get("/dashboard")

    assert "No posts in Mumbai" in response.text
    assert 'data-role="feed-empty"' in response.text


def test_dashboard_shows_feed_error(app_client: TestClient, backend: FakeBackend) -> None:
    backend.on("GET", "/api/posts/feed", {"success": False, "message": "Database unavailable"}, status_code=500)

    response = app_client.get("/dashboard")

    assert response.status_code == 200
    assert "Database unavailable" in response.text


def test_refresh_refetches_feed(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend)
    app_client.get("/dashboard")

    app_client.post("/dashboard/refresh")

    assert len(backend.calls("GET", "/api/posts/feed")) == 2


def test_filters_trigger_single_refetch(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend, post_json("h1", postType="help", city="Pune"))

    response = app_client.post("/dashboard/filters", data={"postType": "help", "city": "Pune"})

    assert response.status_code == 200
    assert response.url.path == "/dashboard"
    calls = backend.calls("GET", "/api/posts/feed")
    assert len(calls) == 1
    assert calls[0].url.params["postType"] == "help"
    assert calls[0].url.params["city"] == "Pune"
    assert "Community Feed" in response.text
    assert "- Pune" in response.text


def test_unknown_filter_type_is_rejected(app_client: TestClient, backend: FakeBackend) -> None:
    response = app_client.post("/dashboard/filters", data={"postType": "gossip", "city": ""})

    assert response.status_code == 400
    assert backend.requests == []


def test_like_replaces_post_with_server_copy(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend, post_json("p1"), post_json("p2"))
    backend.on("POST", "/api/posts/p2/like", envelope({"post": post_json("p2", likes=["u-1"])}))
    app_client.cookies.set("cityscope_user", "u-1")
    app_client.cookies.set("cityscope_token", "tok")
    app_client.get("/dashboard")

    response = app_client.post("/dashboard/posts/p2/like")

    like_call = backend.calls("POST", "/api/posts/p2/like")[0]
    assert like_call.headers["Authorization"] == "Bearer tok"
    html = response.text
    assert html.index('data-post-id="p1"') < html.index('data-post-id="p2"')
    assert 'action="/dashboard/posts/p2/like"' in html
    assert html.count('aria-pressed="true"') == 1


def test_compose_attach_preview_and_submit(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend, post_json("old"))
    backend.on("POST", "/api/posts", envelope({"post": post_json("new", content="Lantern walk at 7", postType="event")}))
    app_client.get("/dashboard")
    image = png_bytes(20, 10)

    opened = app_client.post("/dashboard/compose", data={"action": "open"})
    assert 'data-role="create-post-modal"' in opened.text

    attached = app_client.post(
        "/dashboard/compose",
        data={"action": "attach", "content": "Lantern walk at 7", "postType": "event", "city": "Surat"},
        files={"image": ("lantern.png", image, "image/png")},
    )
    match = PREVIEW_PATTERN.search(attached.text)
    assert match is not None
    preview_url = match.group(0)

    preview = app_client.get(preview_url)
    assert preview.status_code == 200
    assert preview.content == image
    assert preview.headers["cache-control"] == "no-store"

    submitted = app_client.post(
        "/dashboard/compose",
        data={"action": "submit", "content": "Lantern walk at 7", "postType": "event", "city": "Surat"},
    )

    create_call = backend.calls("POST", "/api/posts")[0]
    assert create_call.headers["content-type"].startswith("multipart/form-data")
    assert b'filename="lantern.png"' in create_call.content
    assert b"event" in create_call.content
    html = submitted.text
    assert html.index('data-post-id="new"') < html.index('data-post-id="old"')
    assert 'data-role="create-post-modal"' not in html
    assert app_client.get(preview_url).status_code == 404


def test_compose_blank_submit_sends_nothing(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend)
    app_client.post("/dashboard/compose", data={"action": "open"})

    response = app_client.post("/dashboard/compose", data={"action": "submit", "content": "   ", "postType": "help"})

    assert response.status_code == 200
    assert backend.calls("POST", "/api/posts") == []
    assert 'data-role="create-post-modal"' in response.text


def test_compose_failure_raises_alert_until_dismissed(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend)
    backend.on("POST", "/api/posts", {"success": False, "message": "City is required"}, status_code=400)
    app_client.post("/dashboard/compose", data={"action": "open"})

    failed = app_client.post("/dashboard/compose", data={"action": "submit", "content": "Hi", "postType": "update"})

    assert 'role="alertdialog"' in failed.text
    assert "Failed to create post: City is required" in failed.text
    assert 'data-role="create-post-modal"' in failed.text

    dismissed = app_client.post("/dashboard/alert/dismiss")
    assert 'role="alertdialog"' not in dismissed.text


def test_compose_rejects_non_image_upload(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend)
    app_client.post("/dashboard/compose", data={"action": "open"})

    response = app_client.post(
        "/dashboard/compose",
        data={"action": "attach", "content": "", "postType": "recommend"},
        files={"image": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert INVALID_IMAGE_TYPE_MESSAGE in response.text
    assert PREVIEW_PATTERN.search(response.text) is None


def test_compose_cancel_closes_modal(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend)
    app_client.post("/dashboard/compose", data={"action": "open"})

    response = app_client.post("/dashboard/compose", data={"action": "cancel"})

    assert 'data-role="create-post-modal"' not in response.text


def test_unknown_preview_is_not_found(app_client: TestClient) -> None:
    assert app_client.get("/dashboard/previews/" + "0" * 32).status_code == 404


def test_profile_tab_redirects_to_profile_page(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend)

    response = app_client.post("/dashboard/tab", data={"tab": "profile"})

    assert response.url.path == "/profile"
    assert "Complete Your Profile" in response.text


def test_profile_validation_blocks_request(app_client: TestClient, backend: FakeBackend) -> None:
    response = app_client.post("/profile", data={"first_name": "", "last_name": "Patel", "bio": "", "city": ""})

    assert response.status_code == 400
    assert "First name is required" in response.text
    assert "Please select a city" in response.text
    assert backend.requests == []


def test_profile_update_sets_city_and_returns_to_dashboard(app_client: TestClient, backend: FakeBackend) -> None:
    backend.on("PUT", "/api/profile", envelope({"user": user_json(city="Pune")}))
    _serve_feed(backend)
    app_client.cookies.set("cityscope_token", "tok")

    response = app_client.post(
        "/profile", data={"first_name": "Asha", "last_name": "Patel", "bio": "Chai lover", "city": "Pune"}
    )

    assert response.url.path == "/dashboard"
    assert "No posts in Pune" in response.text
    update_call = backend.calls("PUT", "/api/profile")[0]
    assert update_call.headers["Authorization"] == "Bearer tok"
    assert json_body(update_call) == {"firstName": "Asha", "lastName": "Patel", "bio": "Chai lover", "city": "Pune"}


def test_profile_api_failure_shows_banner(app_client: TestClient, backend: FakeBackend) -> None:
    backend.on("PUT", "/api/profile", {"success": False, "message": "Token expired"}, status_code=401)

    response = app_client.post("/profile", data={"first_name": "Asha", "last_name": "Patel", "city": "Surat"})

    assert response.status_code == 502
    assert "Profile Update Failed" in response.text
    assert "Token expired" in response.text


def test_landing_page_defaults_to_signup(app_client: TestClient) -> None:
    response = app_client.get("/")

    assert response.status_code == 200
    assert "Join Cityscope" in response.text
    assert 'name="mode" value="signup"' in response.text


def test_auth_toggle_switches_to_login(app_client: TestClient, backend: FakeBackend) -> None:
    response = app_client.post("/auth", data={"mode": "signup", "action": "toggle", "email": "a@b.co"})

    assert "Welcome back" in response.text
    assert 'name="mode" value="login"' in response.text
    assert backend.requests == []


def test_auth_validation_blocks_request(app_client: TestClient, backend: FakeBackend) -> None:
    response = app_client.post("/auth", data={"mode": "login", "email": "nope", "password": "123"})

    assert response.status_code == 400
    assert "Please enter a valid email address" in response.text
    assert backend.requests == []


def test_signup_of_new_user_goes_to_profile(app_client: TestClient, backend: FakeBackend) -> None:
    backend.on("POST", "/api/auth/signup", envelope({"user": user_json(), "token": "fresh-token", "isNewUser": True}))

    response = app_client.post("/auth", data={"mode": "signup", "email": "asha@example.com", "password": "secret1"})

    assert response.url.path == "/profile"
    assert json_body(backend.requests[0]) == {"email": "asha@example.com", "password": "secret1"}
    assert response.history[0].cookies["cityscope_token"] == "fresh-token"


def test_login_of_existing_user_goes_to_dashboard(app_client: TestClient, backend: FakeBackend) -> None:
    backend.on(
        "POST",
        "/api/auth/login",
        envelope({"user": user_json(city="Ahmedabad"), "token": "tok", "isNewUser": False}),
    )
    _serve_feed(backend)

    response = app_client.post("/auth", data={"mode": "login", "email": "asha@example.com", "password": "secret1"})

    assert response.url.path == "/dashboard"
    assert "No posts in Ahmedabad" in response.text
    assert backend.calls("GET", "/api/posts/feed")[0].headers["Authorization"] == "Bearer tok"


def test_login_failure_shows_banner(app_client: TestClient, backend: FakeBackend) -> None:
    backend.on("POST", "/api/auth/login", {"success": False, "message": "Invalid credentials"}, status_code=401)

    response = app_client.post("/auth", data={"mode": "login", "email": "asha@example.com", "password": "secret1"})

    assert response.status_code == 502
    assert "Authentication Failed" in response.text
    assert "Invalid credentials" in response.text


def test_image_route_resizes_allowed_remote_image(app_client: TestClient) -> None:
    from cityscope.dependencies import get_image_client
    from cityscope.main import app

    source = png_bytes(1200, 600)
    image_http = httpx.AsyncClient(
        transport=httpx.MockTransport(
            lambda request: httpx.Response(200, content=source, headers={"content-type": "image/png"})
        )
    )
    app.dependency_overrides[get_image_client] = lambda: image_http

    response = app_client.get(
        "/_image",
        params={"url": "https://images.unsplash.com/photo.png", "w": 640, "q": 80},
        headers={"accept": "image/png"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.headers["cache-control"] == "public, max-age=60"
    assert Image.open(BytesIO(response.content)).size == (640, 320)

    rejected = app_client.get("/_image", params={"url": "https://evil.example.com/a.png", "w": 640})
    assert rejected.status_code == 400


def test_images_settled_before_script_runs_are_resolved_on_ready(app_client: TestClient, backend: FakeBackend) -> None:
    _serve_feed(backend, post_json("p1", image="https://images.unsplash.com/stall.png"))

    page = app_client.get("/dashboard")
    script = app_client.get("/assets/js/cityscope.js")

    assert 'data-smart-image' in page.text
    assert "window.cityscope && window.cityscope.imageLoaded(this)" in page.text
    assert script.status_code == 200
    assert 'querySelectorAll("[data-smart-image] img")' in script.text
    assert "img.complete" in script.text
    assert "naturalWidth > 0" in script.text
    ready_handler = script.text.split('addEventListener("DOMContentLoaded"', 1)[1]
    assert "settleImages();" in ready_handler
