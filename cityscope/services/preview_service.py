"""In-memory object URLs for image previews awaiting upload."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

logger = logging.getLogger(__name__)

OBJECT_URL_PREFIX = "blob:cityscope/"
PREVIEW_ROUTE = "/dashboard/previews/"


@dataclass(frozen=True)
class SelectedImage:
    """A file picked in the compose form, held until the post is submitted."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def preview_id(url: str) -> str | None:
    """Return the registry key embedded in a ``blob:`` URL, if any."""

    if not url.startswith(OBJECT_URL_PREFIX):
        return None
    key = url[len(OBJECT_URL_PREFIX):]
    return key or None


def preview_path(url: str) -> str | None:
    """Map an object URL onto the route that serves its bytes."""

    key = preview_id(url)
    return f"{PREVIEW_ROUTE}{key}" if key else None


class ObjectUrlRegistry:
    """Hands out ``blob:`` URLs for selected images until they are revoked."""

    def __init__(self) -> None:
        self._entries: dict[str, SelectedImage] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and preview_id(url) in self._entries

    def create_object_url(self, image: SelectedImage) -> str:
        key = uuid.uuid4().hex
        self._entries[key] = image
        return f"{OBJECT_URL_PREFIX}{key}"

    def resolve(self, url_or_id: str) -> SelectedImage | None:
        key = preview_id(url_or_id) or url_or_id
        return self._entries.get(key)

    def revoke_object_url(self, url: str) -> None:
        key = preview_id(url)
        if key is None:
            return
        if self._entries.pop(key, None) is not None:
            logger.debug("Revoked preview %s", key)

    def revoke_all(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count


__all__ = [
    "OBJECT_URL_PREFIX",
    "ObjectUrlRegistry",
    "PREVIEW_ROUTE",
    "SelectedImage",
    "preview_id",
    "preview_path",
]
