"""Image display state and the remote image optimization pipeline."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from io import BytesIO
from typing import Iterable
from urllib.parse import urlencode, urlparse

import httpx
from fastapi.concurrency import run_in_threadpool
from PIL import Image, UnidentifiedImageError

from ..config import RemotePattern, Settings, get_settings
from .preview_service import preview_path

logger = logging.getLogger(__name__)

OPTIMIZE_ROUTE = "/_image"
DEFAULT_RENDER_WIDTH = 828
MAX_UPSTREAM_REDIRECTS = 3

_PILLOW_FORMATS = {
    "image/webp": "WEBP",
    "image/avif": "AVIF",
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/gif": "GIF",
}


class ImageStatus(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ImageOptimizationError(RuntimeError):
    """Raised when a remote image cannot be proxied."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message)
        self.status_code = status_code


def is_unoptimized_source(src: str) -> bool:
    """Local previews are served as-is."""

    return src.startswith(("blob:", "data:"))


@lru_cache(maxsize=64)
def _glob_to_regex(pattern: str, separator: str) -> re.Pattern[str]:
    parts: list[str] = []
    index = 0
    while index < len(pattern):
        if pattern.startswith("**", index):
            parts.append(".*")
            index += 2
        elif pattern[index] == "*":
            parts.append(f"[^{re.escape(separator)}]*")
            index += 1
        else:
            parts.append(re.escape(pattern[index]))
            index += 1
    return re.compile("^" + "".join(parts) + "$")


def _hostname_matches(hostname: str, pattern: str) -> bool:
    if pattern.startswith("**."):
        suffix = pattern[2:]
        return hostname.endswith(suffix) and len(hostname) > len(suffix)
    return bool(_glob_to_regex(pattern, ".").match(hostname))


def matches_remote_pattern(url: str, patterns: Iterable[RemotePattern]) -> bool:
    parsed = urlparse(url)
    hostname = parsed.hostname or ""
    if not hostname:
        return False
    try:
        port = str(parsed.port) if parsed.port else ""
    except ValueError:
        return False
    path = parsed.path or "/"

    for pattern in patterns:
        if pattern.protocol and parsed.scheme != pattern.protocol:
            continue
        if not _hostname_matches(hostname, pattern.hostname):
            continue
        if pattern.port != port:
            continue
        if not _glob_to_regex(pattern.pathname, "/").match(path):
            continue
        return True
    return False


def choose_width(requested: int, allowed: list[int]) -> int:
    """Smallest configured width that covers ``requested``."""

    for width in sorted(allowed):
        if width >= requested:
            return width
    return max(allowed)


def optimized_url(src: str, *, width: int, quality: int) -> str:
    return f"{OPTIMIZE_ROUTE}?{urlencode({'url': src, 'w': width, 'q': quality})}"


class SmartImage:
    """Loading/error state for one rendered image; resets when its source changes."""

    def __init__(self, src: str, alt: str = "", *, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self.src = src
        self.alt = alt
        self.status = ImageStatus.LOADING

    @property
    def unoptimized(self) -> bool:
        return is_unoptimized_source(self.src)

    @property
    def is_loading(self) -> bool:
        return self.status is ImageStatus.LOADING

    @property
    def has_error(self) -> bool:
        return self.status is ImageStatus.ERROR

    def set_src(self, src: str) -> None:
        if src != self.src:
            self.src = src
            self.status = ImageStatus.LOADING

    def handle_load(self) -> None:
        self.status = ImageStatus.LOADED

    def handle_error(self) -> None:
        self.status = ImageStatus.ERROR

    def resolved_src(self, width: int = DEFAULT_RENDER_WIDTH) -> str:
        if self.src.startswith("blob:"):
            return preview_path(self.src) or self.src
        if self.unoptimized:
            return self.src
        if matches_remote_pattern(self.src, self._settings.image_remote_patterns):
            return optimized_url(
                self.src,
                width=choose_width(width, self._settings.allowed_widths),
                quality=self._settings.image_default_quality,
            )
        return self.src


@dataclass(frozen=True)
class OptimizedImage:
    content: bytes
    content_type: str


def _negotiate_format(accept: str, formats: Iterable[str]) -> str | None:
    Image.init()
    for mime in formats:
        if mime in accept and _PILLOW_FORMATS.get(mime) in Image.SAVE:
            return mime
    return None


def _transcode(raw: bytes, source_type: str, *, width: int, quality: int, target_type: str | None) -> OptimizedImage:
    try:
        image = Image.open(BytesIO(raw))
        image.load()
    except (Image.DecompressionBombError, UnidentifiedImageError, OSError) as exc:
        raise ImageOptimizationError("Upstream response is not a decodable image") from exc

    if getattr(image, "is_animated", False):
        return OptimizedImage(content=raw, content_type=source_type)

    output_type = target_type or source_type
    output_format = _PILLOW_FORMATS.get(output_type) or image.format or "PNG"
    try:
        if image.width > width:
            height = max(1, round(image.height * width / image.width))
            image = image.resize((width, height), Image.Resampling.LANCZOS)
        if output_format == "JPEG" and image.mode not in ("RGB", "L"):
            image = image.convert("RGB")

        buffer = BytesIO()
        save_kwargs = {"quality": quality} if output_format in ("JPEG", "WEBP", "AVIF") else {}
        image.save(buffer, format=output_format, **save_kwargs)
    except (OSError, ValueError, KeyError) as exc:
        raise ImageOptimizationError(f"Image could not be re-encoded as {output_format}") from exc

    content_type = output_type if output_type in _PILLOW_FORMATS else f"image/{output_format.lower()}"
    return OptimizedImage(content=buffer.getvalue(), content_type=content_type)


async def _fetch_upstream(client: httpx.AsyncClient, url: str, *, settings: Settings) -> tuple[bytes, str]:
    """GET ``url``, re-checking every redirect hop against the allow-list and capping the body size."""

    current = url
    for _ in range(MAX_UPSTREAM_REDIRECTS + 1):
        async with client.stream("GET", current, follow_redirects=False) as response:
            if response.is_redirect:
                target = str(response.url.join(response.headers.get("location", "")))
                if not matches_remote_pattern(target, settings.image_remote_patterns):
                    logger.warning("Refusing redirect from %s to %s", current, target)
                    raise ImageOptimizationError("Image redirect target is not allowed", status_code=400)
                current = target
                continue

            response.raise_for_status()
            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) > settings.image_max_upstream_bytes:
                    raise ImageOptimizationError("Upstream image is too large")
            source_type = response.headers.get("content-type", "application/octet-stream").split(";")[0].strip()
            return bytes(body), source_type
    raise ImageOptimizationError("Too many redirects fetching upstream image")


async def fetch_optimized_image(
    client: httpx.AsyncClient,
    url: str,
    *,
    width: int,
    quality: int,
    accept: str = "",
    settings: Settings | None = None,
) -> OptimizedImage:
    """Fetch an allow-listed remote image and resize/re-encode it for ``width``."""

    settings = settings or get_settings()
    if is_unoptimized_source(url) or not matches_remote_pattern(url, settings.image_remote_patterns):
        raise ImageOptimizationError("Image URL is not allowed", status_code=400)
    if width not in settings.allowed_widths:
        raise ImageOptimizationError(f"Width {width} is not configured", status_code=400)
    if not 1 <= quality <= 100:
        raise ImageOptimizationError("Quality must be between 1 and 100", status_code=400)

    try:
        raw, source_type = await _fetch_upstream(client, url, settings=settings)
    except httpx.HTTPError as exc:
        logger.warning("Failed to fetch remote image %s: %s", url, exc)
        raise ImageOptimizationError("Upstream image could not be fetched") from exc

    if source_type == "image/svg+xml":
        return OptimizedImage(content=raw, content_type=source_type)

    target_type = _negotiate_format(accept, settings.image_formats)
    return await run_in_threadpool(
        _transcode,
        raw,
        source_type,
        width=width,
        quality=quality,
        target_type=target_type,
    )


__all__ = [
    "DEFAULT_RENDER_WIDTH",
    "ImageOptimizationError",
    "ImageStatus",
    "OPTIMIZE_ROUTE",
    "OptimizedImage",
    "SmartImage",
    "choose_width",
    "fetch_optimized_image",
    "is_unoptimized_source",
    "matches_remote_pattern",
    "optimized_url",
]
