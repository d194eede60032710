import asyncio
import logging

import httpx
import pytest

from cityscope.clients import ApiError, FilePart, FormPayload, HttpHook, RequestConfig
from cityscope.schemas import ApiResponse, PostApiResponse, PostsFeedResponse
from conftest import BACKEND_URL, FakeBackend, envelope, json_body, post_json


def test_send_request_decodes_envelope_and_sends_bearer_token(backend: FakeBackend, http_client: httpx.AsyncClient) -> None:
    backend.on("GET", "/api/posts/feed", envelope({"posts": [post_json("p1"), post_json("p2")]}))
    hook = HttpHook(http_client, ApiResponse[PostsFeedResponse], token="secret")
    seen: list[ApiResponse[PostsFeedResponse]] = []

    result = asyncio.run(hook.send_request(RequestConfig(url="/api/posts/feed"), on_success=seen.append))

    assert result is not None
    assert [post.id for post in result.data.posts] == ["p1", "p2"]
    assert seen == [result]
    assert hook.data is result
    assert hook.error is None
    assert hook.is_loading is False
    assert backend.requests[0].headers["Authorization"] == "Bearer secret"


def test_send_request_omits_authorization_without_token(backend: FakeBackend, http_client: httpx.AsyncClient) -> None:
    backend.on("GET", "/api/posts/feed", envelope({"posts": []}))
    hook = HttpHook(http_client, ApiResponse[PostsFeedResponse])

    asyncio.run(hook.send_request(RequestConfig(url="/api/posts/feed")))

    assert "Authorization" not in backend.requests[0].headers


def test_error_status_uses_backend_message(
    backend: FakeBackend, http_client: httpx.AsyncClient, caplog: pytest.LogCaptureFixture
) -> None:
    backend.on("POST", "/api/posts", {"success": False, "message": "Content is required"}, status_code=400)
    hook = HttpHook(http_client, ApiResponse[PostApiResponse])
    errors: list[ApiError] = []

    caplog.set_level(logging.WARNING)
    result = asyncio.run(
        hook.send_request(RequestConfig(url="/api/posts", method="POST", data={"content": ""}), on_error=errors.append)
    )

    assert result is None
    assert hook.error is not None
    assert hook.error.message == "Content is required"
    assert hook.error.status_code == 400
    assert errors == [hook.error]
    assert hook.is_loading is False
    assert "POST /api/posts failed" in caplog.text


def test_error_status_without_body_gets_generic_message(backend: FakeBackend, http_client: httpx.AsyncClient) -> None:
    backend.on("GET", "/api/posts/feed", lambda request: httpx.Response(503, text="down"))
    hook = HttpHook(http_client, ApiResponse[PostsFeedResponse])

    asyncio.run(hook.send_request(RequestConfig(url="/api/posts/feed")))

    assert hook.error is not None
    assert hook.error.message == "Request failed with status 503"


def test_unsuccessful_envelope_is_an_error(backend: FakeBackend, http_client: httpx.AsyncClient) -> None:
    backend.on("POST", "/api/posts/p1/like", envelope(success=False, message="nope", error="Post not found"))
    hook = HttpHook(http_client, ApiResponse[PostApiResponse])

    result = asyncio.run(hook.send_request(RequestConfig(url="/api/posts/p1/like", method="POST")))

    assert result is None
    assert hook.error is not None
    assert hook.error.message == "Post not found"


def test_network_failure_is_reported_not_raised() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url=BACKEND_URL)
    hook = HttpHook(client, ApiResponse[PostsFeedResponse])

    result = asyncio.run(hook.send_request(RequestConfig(url="/api/posts/feed")))

    assert result is None
    assert hook.error is not None
    assert hook.error.message.startswith("Network error:")
    assert hook.is_loading is False


def test_mapping_body_is_sent_as_json(backend: FakeBackend, http_client: httpx.AsyncClient) -> None:
    backend.on("PUT", "/api/profile", envelope({"user": {"_id": "u-1"}}))
    hook = HttpHook(http_client, ApiResponse[dict])

    asyncio.run(hook.send_request(RequestConfig(url="/api/profile", method="put", data={"firstName": "Asha"})))

    request = backend.requests[0]
    assert request.method == "PUT"
    assert request.headers["content-type"] == "application/json"
    assert json_body(request) == {"firstName": "Asha"}


def test_form_payload_is_sent_as_multipart(backend: FakeBackend, http_client: httpx.AsyncClient) -> None:
    backend.on("POST", "/api/posts", envelope({"post": post_json("new")}))
    hook = HttpHook(http_client, ApiResponse[PostApiResponse])
    payload = FormPayload(
        fields={"content": "Fresh samosas", "postType": "recommend", "city": "Surat"},
        files={"image": FilePart(filename="stall.png", content=b"png-bytes", content_type="image/png")},
    )

    result = asyncio.run(hook.send_request(RequestConfig(url="/api/posts", method="POST", data=payload)))

    assert result is not None
    request = backend.requests[0]
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert b'name="content"' in request.content
    assert b"Fresh samosas" in request.content
    assert b'filename="stall.png"' in request.content
    assert b"png-bytes" in request.content
