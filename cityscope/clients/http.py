"""Request helper wrapping calls to the Cityscope backend API.

``HttpHook`` mirrors the loading/error/data state a page needs while a request
is in flight and reports the outcome through optional callbacks. Request
failures never raise; they are captured as :class:`ApiError`.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx
from pydantic import ValidationError

from ..schemas import ApiResponse

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=ApiResponse)


class ApiError(RuntimeError):
    """Raised (and reported) when a backend request does not succeed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class FilePart:
    filename: str
    content: bytes
    content_type: str


@dataclass
class FormPayload:
    """Body sent as ``multipart/form-data``."""

    fields: dict[str, str] = field(default_factory=dict)
    files: dict[str, FilePart] = field(default_factory=dict)


@dataclass
class RequestConfig:
    url: str
    method: str = "GET"
    data: Mapping[str, Any] | FormPayload | None = None
    headers: Mapping[str, str] | None = None


def _extract_message(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    for key in ("message", "error", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class HttpHook(Generic[ResponseT]):
    """Send one kind of request and remember the latest outcome."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        response_model: type[ResponseT],
        *,
        token: str | None = None,
    ) -> None:
        self._client = client
        self._response_model = response_model
        self._token = token
        self.is_loading = False
        self.error: ApiError | None = None
        self.data: ResponseT | None = None

    def _headers(self, extra: Mapping[str, str] | None) -> dict[str, str]:
        headers: dict[str, str] = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _body_kwargs(data: Mapping[str, Any] | FormPayload | None) -> dict[str, Any]:
        if data is None:
            return {}
        if isinstance(data, FormPayload):
            kwargs: dict[str, Any] = {"data": dict(data.fields)}
            if data.files:
                kwargs["files"] = {
                    name: (part.filename, part.content, part.content_type) for name, part in data.files.items()
                }
            return kwargs
        return {"json": dict(data)}

    def _decode(self, response: httpx.Response) -> ResponseT:
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            message = _extract_message(body) or f"Request failed with status {response.status_code}"
            raise ApiError(message, status_code=response.status_code)

        if body is None:
            raise ApiError("Invalid response from server", status_code=response.status_code)

        try:
            envelope = self._response_model.model_validate(body)
        except ValidationError as exc:
            raise ApiError("Unexpected response from server", status_code=response.status_code) from exc

        if not envelope.success:
            message = envelope.error or envelope.message or "Request failed"
            raise ApiError(message, status_code=response.status_code)
        return envelope

    async def send_request(
        self,
        config: RequestConfig,
        on_success: Callable[[ResponseT], None] | None = None,
        on_error: Callable[[ApiError], None] | None = None,
    ) -> ResponseT | None:
        """Perform ``config`` and return the decoded envelope, or ``None`` on failure."""

        self.is_loading = True
        self.error = None
        try:
            response = await self._client.request(
                config.method.upper(),
                config.url,
                headers=self._headers(config.headers),
                **self._body_kwargs(config.data),
            )
            payload = self._decode(response)
        except ApiError as exc:
            return self._fail(config, exc, on_error)
        except httpx.HTTPError as exc:
            return self._fail(config, ApiError(f"Network error: {exc}"), on_error)
        finally:
            self.is_loading = False

        self.data = payload
        if on_success is not None:
            on_success(payload)
        return payload

    def _fail(
        self,
        config: RequestConfig,
        error: ApiError,
        on_error: Callable[[ApiError], None] | None,
    ) -> None:
        logger.warning(
            "%s %s failed (status=%s): %s",
            config.method.upper(),
            config.url,
            error.status_code,
            error.message,
        )
        self.error = error
        if on_error is not None:
            on_error(error)
        return None


__all__ = ["ApiError", "FilePart", "FormPayload", "HttpHook", "RequestConfig"]
