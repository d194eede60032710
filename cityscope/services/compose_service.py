"""State for the create-post modal: form fields, image validation, previews."""
from __future__ import annotations

from dataclasses import dataclass

from ..clients import FilePart, FormPayload
from ..constants import (
    ALLOWED_IMAGE_TYPES,
    DEFAULT_POST_TYPE,
    IMAGE_TOO_LARGE_MESSAGE,
    INVALID_IMAGE_TYPE_MESSAGE,
    MAX_IMAGE_BYTES,
    POST_CONTENT_MAX_LENGTH,
    POST_TYPES,
)
from .preview_service import ObjectUrlRegistry, SelectedImage


class ImageRejected(ValueError):
    """Raised when a selected file is not an acceptable post image."""


@dataclass
class PostFormData:
    content: str = ""
    post_type: str = DEFAULT_POST_TYPE
    city: str = ""
    image: SelectedImage | None = None
    image_preview: str = ""


def validate_image(image: SelectedImage) -> None:
    """Raise ``ImageRejected`` unless ``image`` is an allowed type under 5 MB."""

    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise ImageRejected(INVALID_IMAGE_TYPE_MESSAGE)
    if image.size > MAX_IMAGE_BYTES:
        raise ImageRejected(IMAGE_TOO_LARGE_MESSAGE)


class CreatePostModal:
    """Controlled compose form.

    Every path that retires a preview (replacement, removal, cancel, reset
    after a successful submit) releases its object URL.
    """

    def __init__(self, *, user_city: str, previews: ObjectUrlRegistry) -> None:
        self.user_city = user_city
        self.previews = previews
        self.is_open = False
        self.is_submitting = False
        self.form = PostFormData(city=user_city)

    @property
    def can_submit(self) -> bool:
        return bool(self.form.content.strip()) and not self.is_submitting

    @property
    def remaining_characters(self) -> int:
        return POST_CONTENT_MAX_LENGTH - len(self.form.content)

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.reset()

    def set_content(self, content: str) -> None:
        self.form.content = content[:POST_CONTENT_MAX_LENGTH]

    def set_post_type(self, post_type: str) -> None:
        if post_type not in POST_TYPES:
            raise ValueError(f"Unknown post type: {post_type}")
        self.form.post_type = post_type

    def set_city(self, city: str) -> None:
        self.form.city = city

    def select_image(self, image: SelectedImage) -> str:
        """Attach ``image`` and return its preview URL.

        Rejected files raise ``ImageRejected`` and leave the form untouched.
        """

        validate_image(image)
        self._release_preview()
        preview = self.previews.create_object_url(image)
        self.form.image = image
        self.form.image_preview = preview
        return preview

    def remove_image(self) -> None:
        self._release_preview()
        self.form.image = None
        self.form.image_preview = ""

    def reset(self) -> None:
        self._release_preview()
        self.form = PostFormData(city=self.user_city)
        self.is_open = False
        self.is_submitting = False

    def build_payload(self) -> FormPayload:
        payload = FormPayload(
            fields={
                "content": self.form.content.strip(),
                "postType": self.form.post_type,
                "city": self.form.city,
            }
        )
        image = self.form.image
        if image is not None:
            payload.files["image"] = FilePart(
                filename=image.filename,
                content=image.data,
                content_type=image.content_type,
            )
        return payload

    def _release_preview(self) -> None:
        if self.form.image_preview:
            self.previews.revoke_object_url(self.form.image_preview)


__all__ = ["CreatePostModal", "ImageRejected", "PostFormData", "validate_image"]
