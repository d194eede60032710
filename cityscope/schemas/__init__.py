"""Convenience exports for schema layer."""
from .envelope import ApiResponse
from .posts import (
    POST_TYPE_CONFIGS,
    Author,
    Post,
    PostApiResponse,
    PostTypeConfig,
    PostsFeedResponse,
    Reply,
    get_post_type_config,
)
from .profiles import AuthPayload, AuthRequest, ProfileApiResponse, ProfileUpdateRequest, UserProfile

__all__ = [
    "ApiResponse",
    "AuthPayload",
    "AuthRequest",
    "Author",
    "POST_TYPE_CONFIGS",
    "Post",
    "PostApiResponse",
    "PostTypeConfig",
    "PostsFeedResponse",
    "ProfileApiResponse",
    "ProfileUpdateRequest",
    "Reply",
    "UserProfile",
    "get_post_type_config",
]
