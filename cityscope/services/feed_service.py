"""Feed state for the dashboard: filters, the post list, and engagement round trips."""
from __future__ import annotations

import logging
from urllib.parse import urlencode

import httpx

from ..clients import ApiError, HttpHook, RequestConfig
from ..constants import CREATE_POST_FAILED_PREFIX, FEED_SORT_ORDER, POST_TYPES, FilterType
from ..schemas import ApiResponse, Post, PostApiResponse, PostsFeedResponse
from .compose_service import CreatePostModal

logger = logging.getLogger(__name__)

FEED_ENDPOINT = "/api/posts/feed"
POSTS_ENDPOINT = "/api/posts"


def build_feed_query(filter_type: str, location_filter: str, user_city: str) -> dict[str, str]:
    """Query parameters for the feed request; ``sortBy`` is always sent."""

    params: dict[str, str] = {}
    if filter_type != "all":
        params["postType"] = filter_type
    if location_filter and location_filter != user_city:
        params["city"] = location_filter
    params["sortBy"] = FEED_SORT_ORDER
    return params


def replace_post(posts: list[Post], updated: Post) -> list[Post]:
    """Return ``posts`` with the entry sharing ``updated.id`` swapped in place."""

    return [updated if post.id == updated.id else post for post in posts]


class FeedController:
    """Owns the dashboard's post list.

    Responses replace whole posts (or the whole list); nothing is applied
    speculatively. Each feed fetch carries a generation number so a response
    from a superseded filter combination is dropped instead of overwriting a
    newer one.
    """

    def __init__(self, client: httpx.AsyncClient, *, user_city: str, token: str | None = None) -> None:
        self.user_city = user_city
        self.posts: list[Post] = []
        self.filter_type: FilterType = "all"
        self.location_filter = ""
        self.is_loading = False
        self.mounted = False
        self.error: str | None = None
        self._generation = 0

        self._feed_http = HttpHook(client, ApiResponse[PostsFeedResponse], token=token)
        self._create_http = HttpHook(client, ApiResponse[PostApiResponse], token=token)
        self._like_http = HttpHook(client, ApiResponse[PostApiResponse], token=token)
        self._dislike_http = HttpHook(client, ApiResponse[PostApiResponse], token=token)

    @property
    def active_city(self) -> str:
        return self.location_filter or self.user_city

    def build_feed_url(self) -> str:
        query = urlencode(build_feed_query(self.filter_type, self.location_filter, self.user_city))
        return f"{FEED_ENDPOINT}?{query}"

    async def mount(self) -> None:
        if self.mounted:
            return
        self.mounted = True
        await self.fetch_feed()

    async def refresh(self) -> None:
        await self.fetch_feed()

    async def set_filters(self, *, filter_type: str | None = None, location_filter: str | None = None) -> bool:
        """Apply filter changes; fetches only when something actually changed."""

        changed = False
        if filter_type is not None and filter_type != self.filter_type:
            if filter_type != "all" and filter_type not in POST_TYPES:
                raise ValueError(f"Unknown post type filter: {filter_type}")
            self.filter_type = filter_type
            changed = True
        if location_filter is not None and location_filter != self.location_filter:
            self.location_filter = location_filter
            changed = True
        if changed:
            await self.fetch_feed()
        return changed

    async def fetch_feed(self) -> None:
        self._generation += 1
        generation = self._generation
        self.is_loading = True
        self.error = None

        def _apply(response: ApiResponse[PostsFeedResponse]) -> None:
            if generation != self._generation:
                logger.info("Discarding stale feed response (generation %d < %d)", generation, self._generation)
                return
            if response.data is not None:
                self.posts = list(response.data.posts)

        def _report(error: ApiError) -> None:
            if generation == self._generation:
                self.error = error.message

        await self._feed_http.send_request(RequestConfig(url=self.build_feed_url()), _apply, _report)
        if generation == self._generation:
            self.is_loading = False

    def replace_post(self, updated: Post) -> None:
        self.posts = replace_post(self.posts, updated)

    async def _toggle(self, hook: HttpHook[ApiResponse[PostApiResponse]], post_id: str, action: str) -> Post | None:
        response = await hook.send_request(RequestConfig(url=f"{POSTS_ENDPOINT}/{post_id}/{action}", method="POST"))
        if response is None or response.data is None:
            return None
        self.replace_post(response.data.post)
        return response.data.post

    async def toggle_like(self, post_id: str) -> Post | None:
        return await self._toggle(self._like_http, post_id, "like")

    async def toggle_dislike(self, post_id: str) -> Post | None:
        return await self._toggle(self._dislike_http, post_id, "dislike")

    async def create_post(self, modal: CreatePostModal) -> str | None:
        """Submit the compose form; returns an alert message on failure.

        Blank content is a no-op. On success the new post is prepended and the
        modal is reset, which releases its preview URL.
        """

        if not modal.form.content.strip() or modal.is_submitting:
            return None

        modal.is_submitting = True
        try:
            response = await self._create_http.send_request(
                RequestConfig(url=POSTS_ENDPOINT, method="POST", data=modal.build_payload())
            )
        finally:
            modal.is_submitting = False

        if response is None:
            error = self._create_http.error
            message = error.message if error is not None else "Unknown error"
            return f"{CREATE_POST_FAILED_PREFIX}{message}"

        if response.data is not None:
            self.posts = [response.data.post, *self.posts]
            modal.reset()
        return None


__all__ = ["FEED_ENDPOINT", "FeedController", "POSTS_ENDPOINT", "build_feed_query", "replace_post"]
