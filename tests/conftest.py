"""Shared fixtures: a scripted stand-in for the Cityscope backend API."""
from __future__ import annotations

import json
from collections.abc import Callable
from io import BytesIO
from typing import Any, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

BACKEND_URL = "http://backend.test"

Handler = Callable[[httpx.Request], Any]


def post_json(post_id: str = "p1", **overrides: Any) -> dict[str, Any]:
    """Return a post document shaped like the backend's JSON."""

    document: dict[str, Any] = {
        "_id": post_id,
        "content": f"Post {post_id}",
        "postType": "recommend",
        "author": {"_id": "u-author", "firstName": "Asha", "lastName": "Patel", "isVerified": False},
        "city": "Surat",
        "likes": [],
        "dislikes": [],
        "replies": [],
        "createdAt": "2026-10-19T10:00:00Z",
    }
    document.update(overrides)
    return document


def user_json(**overrides: Any) -> dict[str, Any]:
    document: dict[str, Any] = {
        "_id": "u-1",
        "email": "asha@example.com",
        "firstName": "Asha",
        "lastName": "Patel",
        "bio": "",
        "isVerified": False,
    }
    document.update(overrides)
    return document


def envelope(data: Any = None, *, success: bool = True, message: str = "ok", error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    return body


def png_bytes(width: int = 32, height: int = 16, color: str = "red") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeBackend:
    """Routes requests by ``(method, path)`` and records every request it sees."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._dispatch)

    def on(self, method: str, path: str, handler: Handler | dict[str, Any], *, status_code: int = 200) -> None:
        if callable(handler):
            self.routes[(method.upper(), path)] = handler
        else:
            body = handler
            self.routes[(method.upper(), path)] = lambda request: httpx.Response(status_code, json=body)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    def _dispatch(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"success": False, "message": f"No route for {request.url.path}"})
        return handler(request)


def json_body(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content.decode("utf-8"))


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def http_client(backend: FakeBackend) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=backend.transport, base_url=BACKEND_URL)


@pytest.fixture
def app_client(backend: FakeBackend) -> Iterator[TestClient]:
    """Yield a TestClient whose backend calls are answered by ``backend``."""

    from cityscope.dependencies import get_backend_client
    from cityscope.main import app

    backend_http = httpx.AsyncClient(transport=backend.transport, base_url=BACKEND_URL)
    app.dependency_overrides[get_backend_client] = lambda: backend_http
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
