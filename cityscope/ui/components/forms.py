"""Form field components and the create-post modal."""
from __future__ import annotations

from typing import Iterable

from markupsafe import Markup, escape

from ...constants import ALLOWED_IMAGE_TYPES, POST_CONTENT_MAX_LENGTH
from ...schemas import PostTypeConfig
from ...services.compose_service import CreatePostModal
from ...services.image_service import SmartImage
from .feedback import smart_image

_INPUT_BASE = (
    "w-full rounded-lg border px-4 py-3 text-gray-900 focus:border-indigo-500 focus:ring-2 focus:ring-indigo-500"
)


def _border(error: str | None) -> str:
    return "border-red-500" if error else "border-gray-300"


def field_error(error: str | None) -> Markup:
    if not error:
        return Markup("")
    return Markup(f"<p class=\"mt-1 text-sm text-red-600\" data-role=\"field-error\">{escape(error)}</p>")


def text_input(
    name: str,
    *,
    label: str,
    value: str = "",
    placeholder: str = "",
    type_: str = "text",
    error: str | None = None,
    required: bool = True,
    max_length: int | None = None,
) -> Markup:
    required_mark = " <span class=\"text-red-500\">*</span>" if required else ""
    maxlength_attr = f" maxlength=\"{max_length}\"" if max_length else ""
    return Markup(
        f"""
        <div>
            <label for=\"{name}\" class=\"mb-2 block text-sm font-medium text-gray-700\">{escape(label)}{required_mark}</label>
            <input id=\"{name}\" name=\"{name}\" type=\"{type_}\" value=\"{escape(value)}\" placeholder=\"{escape(placeholder)}\"{maxlength_attr}
                   class=\"{_INPUT_BASE} {_border(error)}\">
            {field_error(error)}
        </div>
        """
    )


def textarea(
    name: str,
    *,
    label: str,
    value: str = "",
    placeholder: str = "",
    rows: int = 4,
    max_length: int | None = None,
    error: str | None = None,
) -> Markup:
    maxlength_attr = f" maxlength=\"{max_length}\"" if max_length else ""
    counter = (
        f"<div class=\"mt-1 text-right text-sm text-gray-500\">{len(value)}/{max_length}</div>" if max_length else ""
    )
    return Markup(
        f"""
        <div>
            <label for=\"{name}\" class=\"mb-2 block text-sm font-medium text-gray-700\">{escape(label)}</label>
            <textarea id=\"{name}\" name=\"{name}\" rows=\"{rows}\" placeholder=\"{escape(placeholder)}\"{maxlength_attr}
                      class=\"{_INPUT_BASE} {_border(error)} resize-none\">{escape(value)}</textarea>
            {counter}
            {field_error(error)}
        </div>
        """
    )


def select(
    name: str,
    *,
    label: str,
    options: Iterable[tuple[str, str]],
    selected: str = "",
    placeholder: str | None = None,
    error: str | None = None,
) -> Markup:
    rendered: list[str] = []
    if placeholder is not None:
        rendered.append(f"<option value=\"\">{escape(placeholder)}</option>")
    for value, text in options:
        flag = " selected" if value == selected else ""
        rendered.append(f"<option value=\"{escape(value)}\"{flag}>{escape(text)}</option>")
    return Markup(
        f"""
        <div>
            <label for=\"{name}\" class=\"mb-2 block text-sm font-medium text-gray-700\">{escape(label)}</label>
            <select id=\"{name}\" name=\"{name}\" class=\"{_INPUT_BASE} {_border(error)}\">{''.join(rendered)}</select>
            {field_error(error)}
        </div>
        """
    )


def create_post_modal(
    modal: CreatePostModal,
    *,
    cities: Iterable[str],
    post_types: Iterable[PostTypeConfig],
) -> Markup:
    """Compose dialog; renders nothing while the modal is closed."""

    if not modal.is_open:
        return Markup("")

    form = modal.form
    if form.image_preview:
        preview = Markup(
            f"""
            <div class=\"relative\" data-role=\"image-preview\">
                {smart_image(SmartImage(form.image_preview, alt="Preview"), container_class="relative h-48 w-full")}
                <button type=\"submit\" name=\"action\" value=\"remove-image\" class=\"absolute right-2 top-2 rounded-full bg-red-500 p-1 text-white hover:bg-red-600\" aria-label=\"Remove image\">✕</button>
            </div>
            """
        )
    else:
        preview = Markup(
            f"""
            <label class=\"flex cursor-pointer flex-col items-center justify-center rounded-lg border-2 border-dashed border-gray-300 p-6 text-gray-500 hover:border-indigo-400\">
                <span class=\"text-3xl\">🖼</span>
                <span class=\"mt-2 text-sm\">Click to upload an image (max 5MB)</span>
                <input type=\"file\" name=\"image\" accept=\"{','.join(ALLOWED_IMAGE_TYPES)}\" class=\"hidden\" onchange=\"this.form.querySelector('[data-role=attach]').click()\">
            </label>
            <button type=\"submit\" name=\"action\" value=\"attach\" data-role=\"attach\" class=\"mt-2 text-sm text-indigo-600\">Attach image</button>
            """
        )

    submit_disabled = "" if modal.can_submit else " disabled"
    submit_label = "Posting..." if modal.is_submitting else "Post"
    return Markup(
        f"""
        <div class=\"fixed inset-0 z-50 flex items-center justify-center bg-black bg-opacity-50 p-4\" role=\"dialog\" aria-modal=\"true\" data-role=\"create-post-modal\">
            <div class=\"max-h-[90vh] w-full max-w-lg overflow-y-auto rounded-2xl bg-white shadow-xl\">
                <form method=\"post\" action=\"/dashboard/compose\" enctype=\"multipart/form-data\" class=\"p-6\">
                    <div class=\"mb-6 flex items-center justify-between\">
                        <h2 class=\"text-xl font-bold text-gray-900\">Create New Post</h2>
                        <button type=\"submit\" name=\"action\" value=\"cancel\" class=\"rounded-lg p-2 transition-colors hover:bg-gray-100\" aria-label=\"Close\">✕</button>
                    </div>
                    <div class=\"space-y-4\">
                        {textarea("content", label="What's happening in your neighborhood?", value=form.content, placeholder="Share your thoughts, recommendations, or ask for help...", rows=5, max_length=POST_CONTENT_MAX_LENGTH)}
                        {select("postType", label="Post Type", options=[(config.value, config.label) for config in post_types], selected=form.post_type)}
                        {select("city", label="City", options=[(city, city) for city in cities], selected=form.city)}
                        <div>
                            <span class=\"mb-2 block text-sm font-medium text-gray-700\">Add Image (Optional)</span>
                            {preview}
                        </div>
                    </div>
                    <div class=\"mt-6 flex space-x-3\">
                        <button type=\"submit\" name=\"action\" value=\"cancel\" class=\"flex-1 rounded-lg border border-gray-300 px-4 py-3 text-gray-700 transition-colors hover:bg-gray-50\">Cancel</button>
                        <button type=\"submit\" name=\"action\" value=\"submit\" class=\"flex flex-1 items-center justify-center space-x-2 rounded-lg bg-indigo-600 px-4 py-3 text-white transition-colors hover:bg-indigo-700 disabled:cursor-not-allowed disabled:opacity-50\" data-role=\"submit-post\"{submit_disabled}>
                            <span>➤</span><span>{submit_label}</span>
                        </button>
                    </div>
                </form>
            </div>
        </div>
        """
    )


__all__ = ["create_post_modal", "field_error", "select", "text_input", "textarea"]
