"""Feedback elements: loaders, empty state, alerts, and the smart image widget."""
from __future__ import annotations

from markupsafe import Markup, escape

from ...services.image_service import SmartImage

IMAGE_FALLBACK_TEXT = "Image not available"


def loading_state() -> Markup:
    return Markup(
        """
        <div class=\"flex justify-center py-12\" data-role=\"feed-loading\">
            <div class=\"h-8 w-8 animate-spin rounded-full border-b-2 border-indigo-600\"></div>
        </div>
        """
    )


def empty_state(*, city: str) -> Markup:
    return Markup(
        f"""
        <div class=\"py-12 text-center\" data-role=\"feed-empty\">
            <div class=\"mx-auto mb-4 h-16 w-16 rounded-full bg-gray-100 p-4 text-3xl\">💬</div>
            <h3 class=\"mb-2 text-lg font-medium text-gray-900\">No posts in {escape(city)}</h3>
            <p class=\"mb-4 text-gray-500\">Be the first to share something with your community!</p>
            <form method=\"post\" action=\"/dashboard/compose\">
                <input type=\"hidden\" name=\"action\" value=\"open\">
                <button type=\"submit\" class=\"rounded-lg bg-indigo-600 px-6 py-2 text-white transition-colors hover:bg-indigo-700\">Create First Post</button>
            </form>
        </div>
        """
    )


def error_banner(*, title: str, message: str) -> Markup:
    return Markup(
        f"""
        <div class=\"flex items-start space-x-2 rounded-lg border border-red-200 bg-red-50 p-3\" role=\"alert\">
            <span class=\"mt-0.5 text-red-500\">⚠</span>
            <div class=\"flex-1\">
                <p class=\"text-sm font-medium text-red-800\">{escape(title)}</p>
                <p class=\"mt-1 text-sm text-red-600\">{escape(message)}</p>
            </div>
        </div>
        """
    )


def alert_dialog(message: str) -> Markup:
    """Blocking alert; the page stays inert until it is dismissed."""

    return Markup(
        f"""
        <div class=\"fixed inset-0 z-[60] flex items-center justify-center bg-black bg-opacity-50 p-4\" role=\"alertdialog\" aria-modal=\"true\">
            <div class=\"w-full max-w-sm rounded-2xl bg-white p-6 shadow-xl\">
                <p class=\"mb-6 text-gray-900\">{escape(message)}</p>
                <form method=\"post\" action=\"/dashboard/alert/dismiss\" class=\"text-right\">
                    <button type=\"submit\" class=\"rounded-lg bg-indigo-600 px-4 py-2 text-white hover:bg-indigo-700\">OK</button>
                </form>
            </div>
        </div>
        """
    )


def image_fallback(*, container_class: str = "relative h-64 w-full") -> Markup:
    return Markup(
        f"""
        <div class=\"{escape(container_class)} flex items-center justify-center rounded-lg border-2 border-dashed border-gray-300 bg-gray-100\" data-role=\"image-fallback\">
            <div class=\"text-center text-gray-500\">
                <div class=\"mx-auto mb-2 text-4xl opacity-50\">🖼</div>
                <p class=\"text-sm\">{IMAGE_FALLBACK_TEXT}</p>
            </div>
        </div>
        """
    )


def smart_image(image: SmartImage, *, container_class: str = "relative h-64 w-full", width: int | None = None) -> Markup:
    """Render ``image`` with a spinner until it loads and a fallback panel on error."""

    if image.has_error:
        return image_fallback(container_class=container_class)

    src = image.resolved_src(width) if width else image.resolved_src()
    spinner = (
        """<div class=\"absolute inset-0 flex items-center justify-center bg-gray-100\" data-role=\"image-spinner\">
                <div class=\"h-8 w-8 animate-spin rounded-full border-b-2 border-indigo-600\"></div>
            </div>"""
        if image.is_loading
        else ""
    )
    opacity = "opacity-0" if image.is_loading else "opacity-100"
    unoptimized = "true" if image.unoptimized else "false"
    return Markup(
        f"""
        <div class=\"{escape(container_class)} overflow-hidden rounded-lg bg-gray-100\" data-smart-image data-unoptimized=\"{unoptimized}\">
            {spinner}
            <img src=\"{escape(src)}\" alt=\"{escape(image.alt)}\" loading=\"lazy\"
                 class=\"h-full w-full object-contain transition-opacity duration-300 {opacity}\"
                 onload=\"window.cityscope && window.cityscope.imageLoaded(this)\"
                 onerror=\"window.cityscope && window.cityscope.imageFailed(this)\">
            <template data-role=\"image-fallback-template\">{image_fallback(container_class=container_class)}</template>
        </div>
        """
    )


__all__ = [
    "IMAGE_FALLBACK_TEXT",
    "alert_dialog",
    "empty_state",
    "error_banner",
    "image_fallback",
    "loading_state",
    "smart_image",
]
