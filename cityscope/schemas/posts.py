"""Pydantic schemas for posts returned by the Cityscope backend."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidatorFunctionWrapHandler, field_validator

from ..constants import POST_CONTENT_MAX_LENGTH, PostTypeValue

logger = logging.getLogger(__name__)


class Author(BaseModel):
    """Denormalized author snapshot embedded in posts and replies."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, alias="_id")
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str | None = None
    bio: str | None = None
    is_verified: bool = Field(default=False, alias="isVerified")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Reply(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    content: str
    author: Author
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class Post(BaseModel):
    """A single feed entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    content: str = Field(..., max_length=POST_CONTENT_MAX_LENGTH)
    post_type: PostTypeValue = Field(..., alias="postType")
    author: Author
    city: str
    likes: list[str] = Field(default_factory=list)
    dislikes: list[str] = Field(default_factory=list)
    replies: list[Reply] = Field(default_factory=list)
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    image: str | None = None
    is_active: bool | None = Field(default=None, alias="isActive")

    def liked_by(self, user_id: str | None) -> bool:
        return bool(user_id) and user_id in self.likes

    def disliked_by(self, user_id: str | None) -> bool:
        return bool(user_id) and user_id in self.dislikes


class PostTypeConfig(BaseModel):
    """Display metadata for a post type."""

    value: PostTypeValue
    label: str
    color: str


POST_TYPE_CONFIGS: tuple[PostTypeConfig, ...] = (
    PostTypeConfig(value="recommend", label="📍 Recommend a place", color="bg-green-100 text-green-800"),
    PostTypeConfig(value="help", label="🆘 Ask for help", color="bg-orange-100 text-orange-800"),
    PostTypeConfig(value="update", label="📢 Share update", color="bg-blue-100 text-blue-800"),
    PostTypeConfig(value="event", label="🎉 Event announcement", color="bg-purple-100 text-purple-800"),
)


def get_post_type_config(value: str) -> PostTypeConfig:
    """Return the display config for ``value``, falling back to the first type."""

    for config in POST_TYPE_CONFIGS:
        if config.value == value:
            return config
    return POST_TYPE_CONFIGS[0]


class PostsFeedResponse(BaseModel):
    posts: list[Post] = Field(default_factory=list)

    @field_validator("posts", mode="wrap")
    @classmethod
    def _skip_malformed_posts(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> list[Post]:
        """Validate entries one by one so a single bad post does not blank the feed."""

        if not isinstance(value, list):
            return handler(value)
        posts: list[Post] = []
        for index, item in enumerate(value):
            try:
                posts.extend(handler([item]))
            except ValidationError as exc:
                post_id = item.get("_id") if isinstance(item, dict) else None
                logger.warning("Skipping malformed feed entry %d (id=%s): %d errors", index, post_id, exc.error_count())
        return posts


class PostApiResponse(BaseModel):
    post: Post


__all__ = [
    "Author",
    "POST_TYPE_CONFIGS",
    "Post",
    "PostApiResponse",
    "PostTypeConfig",
    "PostsFeedResponse",
    "Reply",
    "get_post_type_config",
]
