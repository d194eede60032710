"""Card-style components for the feed: posts, replies, and time labels."""
from __future__ import annotations

from datetime import datetime

from markupsafe import Markup, escape

from ...schemas import Post, Reply, get_post_type_config
from ...services.image_service import SmartImage
from ...services.time_service import ClientTimeDisplay, utcnow
from .feedback import smart_image


def time_display(date: datetime, *, now: datetime | None = None) -> Markup:
    """Relative label refreshed in the browser once a minute."""

    display = ClientTimeDisplay(date, clock=(lambda: now) if now else utcnow)
    display.mount()
    return Markup(
        f"<time datetime=\"{escape(date.isoformat())}\" data-relative-time>{escape(display.render())}</time>"
    )


def post_type_badge(post_type: str) -> Markup:
    config = get_post_type_config(post_type)
    return Markup(
        f"<span class=\"rounded-full px-3 py-1 text-xs font-medium {config.color}\">{escape(config.label)}</span>"
    )


def verified_badge() -> Markup:
    return Markup(
        """<span class=\"flex h-4 w-4 items-center justify-center rounded-full bg-blue-500\" title=\"Verified\"><span class=\"text-xs text-white\">✓</span></span>"""
    )


def reply_item(reply: Reply, *, now: datetime | None = None) -> Markup:
    return Markup(
        f"""
        <div class=\"flex space-x-3\" data-reply-id=\"{escape(reply.id)}\">
            <div class=\"rounded-full bg-gray-200 p-1.5 text-gray-600\">👤</div>
            <div class=\"flex-1\">
                <div class=\"rounded-lg bg-gray-50 p-3\">
                    <div class=\"mb-1 flex items-center space-x-2\">
                        <span class=\"text-sm font-medium text-gray-900\">{escape(reply.author.display_name)}</span>
                        <span class=\"text-xs text-gray-500\">{time_display(reply.created_at, now=now)}</span>
                    </div>
                    <p class=\"text-sm text-gray-700\">{escape(reply.content)}</p>
                </div>
            </div>
        </div>
        """
    )


def _engagement_button(*, post_id: str, action: str, icon: str, count: int, active: bool, active_class: str) -> Markup:
    palette = active_class if active else "text-gray-600 hover:bg-gray-50"
    pressed = "true" if active else "false"
    return Markup(
        f"""
        <form method=\"post\" action=\"/dashboard/posts/{escape(post_id)}/{action}\">
            <button type=\"submit\" class=\"flex items-center space-x-2 rounded-lg px-3 py-2 transition-colors {palette}\" aria-pressed=\"{pressed}\" data-action=\"{action}\">
                <span>{icon}</span>
                <span class=\"text-sm font-medium\">{count}</span>
            </button>
        </form>
        """
    )


def post_card(post: Post, *, viewer_id: str | None = None, now: datetime | None = None) -> Markup:
    """Return a post card ready for inline rendering."""

    author = post.author
    verified = verified_badge() if author.is_verified else ""
    image_block = (
        Markup("<div class=\"mb-4\">")
        + smart_image(SmartImage(post.image, alt="Post image"))
        + Markup("</div>")
        if post.image
        else ""
    )
    replies_block = ""
    if post.replies:
        replies_html = "".join(reply_item(reply, now=now) for reply in post.replies)
        replies_block = f"<div class=\"mt-4 space-y-3 border-t border-gray-100 pt-4\">{replies_html}</div>"

    like_button = _engagement_button(
        post_id=post.id,
        action="like",
        icon="❤",
        count=len(post.likes),
        active=post.liked_by(viewer_id),
        active_class="bg-red-50 text-red-600",
    )
    dislike_button = _engagement_button(
        post_id=post.id,
        action="dislike",
        icon="👎",
        count=len(post.dislikes),
        active=post.disliked_by(viewer_id),
        active_class="bg-gray-100 text-gray-700",
    )

    return Markup(
        f"""
        <article class=\"overflow-hidden rounded-xl border border-gray-200 bg-white shadow-sm\" data-post-id=\"{escape(post.id)}\">
            <div class=\"p-4 lg:p-6\">
                <div class=\"mb-4 flex items-start justify-between\">
                    <div class=\"flex items-center space-x-3\">
                        <div class=\"rounded-full bg-gray-200 p-2 text-gray-600\">👤</div>
                        <div>
                            <div class=\"flex items-center space-x-2\">
                                <h3 class=\"font-semibold text-gray-900\">{escape(author.display_name)}</h3>
                                {verified}
                            </div>
                            <div class=\"flex items-center space-x-2 text-sm text-gray-500\">
                                {time_display(post.created_at, now=now)}
                                <span>•</span>
                                <span>📍 {escape(post.city)}</span>
                            </div>
                        </div>
                    </div>
                    {post_type_badge(post.post_type)}
                </div>
                <p class=\"mb-4 whitespace-pre-line leading-relaxed text-gray-900\">{escape(post.content)}</p>
                {image_block}
                <div class=\"flex items-center justify-between border-t border-gray-100 pt-4\">
                    <div class=\"flex items-center space-x-6\">
                        {like_button}
                        {dislike_button}
                        <span class=\"flex items-center space-x-2 rounded-lg px-3 py-2 text-gray-600\">
                            <span>💬</span>
                            <span class=\"text-sm font-medium\">{len(post.replies)}</span>
                        </span>
                    </div>
                </div>
                {replies_block}
            </div>
        </article>
        """
    )


__all__ = ["post_card", "post_type_badge", "reply_item", "time_display", "verified_badge"]
