"""Convenience exports for service layer."""
from .compose_service import CreatePostModal, ImageRejected, PostFormData, validate_image
from .feed_service import FeedController, build_feed_query, replace_post
from .form_service import AuthForm, FormStatus, ProfileForm
from .image_service import (
    ImageOptimizationError,
    ImageStatus,
    SmartImage,
    fetch_optimized_image,
    matches_remote_pattern,
)
from .preview_service import ObjectUrlRegistry, SelectedImage, preview_path
from .session_service import DashboardSession, SessionStore
from .time_service import ClientTimeDisplay, relative_time_label

__all__ = [
    "AuthForm",
    "ClientTimeDisplay",
    "CreatePostModal",
    "DashboardSession",
    "FeedController",
    "FormStatus",
    "ImageOptimizationError",
    "ImageRejected",
    "ImageStatus",
    "ObjectUrlRegistry",
    "PostFormData",
    "ProfileForm",
    "SelectedImage",
    "SessionStore",
    "SmartImage",
    "build_feed_query",
    "fetch_optimized_image",
    "matches_remote_pattern",
    "preview_path",
    "relative_time_label",
    "replace_post",
    "validate_image",
]
