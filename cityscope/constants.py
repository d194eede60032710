"""Project-wide constant values."""
from __future__ import annotations

from typing import Literal

PostTypeValue = Literal["recommend", "help", "update", "event"]
FilterType = Literal["all", "recommend", "help", "update", "event"]
ActiveTab = Literal["home", "profile"]

POST_TYPES: tuple[str, ...] = ("recommend", "help", "update", "event")
DEFAULT_POST_TYPE = "recommend"
FEED_SORT_ORDER = "newest"

POST_CONTENT_MAX_LENGTH = 280
PROFILE_NAME_MAX_LENGTH = 50
PROFILE_BIO_MAX_LENGTH = 160
PASSWORD_MIN_LENGTH = 6

ALLOWED_IMAGE_TYPES: tuple[str, ...] = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")
MAX_IMAGE_BYTES = 5 * 1024 * 1024

INVALID_IMAGE_TYPE_MESSAGE = "Please select a valid image file (JPEG, PNG, GIF, or WebP)"
IMAGE_TOO_LARGE_MESSAGE = "Please select an image smaller than 5MB"
CREATE_POST_FAILED_PREFIX = "Failed to create post: "
CREATE_POST_UNEXPECTED_MESSAGE = "Failed to create post. Please try again."

__all__ = [
    "ActiveTab",
    "ALLOWED_IMAGE_TYPES",
    "CREATE_POST_FAILED_PREFIX",
    "CREATE_POST_UNEXPECTED_MESSAGE",
    "DEFAULT_POST_TYPE",
    "FEED_SORT_ORDER",
    "FilterType",
    "IMAGE_TOO_LARGE_MESSAGE",
    "INVALID_IMAGE_TYPE_MESSAGE",
    "MAX_IMAGE_BYTES",
    "PASSWORD_MIN_LENGTH",
    "POST_CONTENT_MAX_LENGTH",
    "POST_TYPES",
    "PROFILE_BIO_MAX_LENGTH",
    "PROFILE_NAME_MAX_LENGTH",
    "PostTypeValue",
]
