"""Layout building blocks for the dashboard: sidebar, mobile header, feed header."""
from __future__ import annotations

import os
from typing import Iterable

from markupsafe import Markup, escape

from ...schemas import PostTypeConfig

STATIC_VERSION = os.getenv("STATIC_ASSET_VERSION", "20250601")

NAV_TABS = (
    ("home", "🏠", "Home", "/dashboard"),
    ("profile", "👤", "Profile", "/profile"),
)


def _tab_link(*, key: str, icon: str, label: str, href: str, active: bool) -> str:
    state = "bg-indigo-50 text-indigo-700" if active else "text-gray-700 hover:bg-gray-50"
    current = ' aria-current="page"' if active else ""
    return (
        f"<form method=\"post\" action=\"/dashboard/tab\">"
        f"<input type=\"hidden\" name=\"tab\" value=\"{key}\">"
        f"<button type=\"submit\" class=\"flex w-full items-center space-x-3 rounded-lg px-4 py-3 text-left transition-colors {state}\"{current} data-href=\"{href}\">"
        f"<span>{icon}</span><span>{label}</span></button></form>"
    )


def sidebar(*, is_open: bool, active_tab: str, user_city: str) -> Markup:
    """Navigation column; slides in on small screens when ``is_open``."""

    overlay = (
        """<form method=\"post\" action=\"/dashboard/sidebar\" class=\"lg:hidden\">
            <input type=\"hidden\" name=\"open\" value=\"false\">
            <button type=\"submit\" class=\"fixed inset-0 z-40 bg-black bg-opacity-50\" aria-label=\"Close menu\"></button>
        </form>"""
        if is_open
        else ""
    )
    position = "translate-x-0" if is_open else "-translate-x-full lg:translate-x-0"
    tabs = "".join(
        _tab_link(key=key, icon=icon, label=label, href=href, active=active_tab == key)
        for key, icon, label, href in NAV_TABS
    )
    return Markup(
        f"""
        {overlay}
        <aside class=\"fixed inset-y-0 left-0 z-50 w-64 transform bg-white shadow-lg transition-transform duration-300 ease-in-out lg:static {position}\" data-role=\"sidebar\" data-open=\"{'true' if is_open else 'false'}\">
            <div class=\"flex h-full flex-col\">
                <div class=\"flex items-center justify-between border-b p-6\">
                    <div class=\"flex items-center space-x-3\">
                        <div class=\"rounded-lg bg-indigo-600 p-2 text-white\">📍</div>
                        <h1 class=\"text-xl font-bold text-gray-900\">Cityscope</h1>
                    </div>
                    <form method=\"post\" action=\"/dashboard/sidebar\" class=\"lg:hidden\">
                        <input type=\"hidden\" name=\"open\" value=\"false\">
                        <button type=\"submit\" class=\"rounded-lg p-2 hover:bg-gray-100\" aria-label=\"Close menu\">✕</button>
                    </form>
                </div>
                <nav class=\"flex-1 space-y-2 p-4\">
                    {tabs}
                    <form method=\"post\" action=\"/dashboard/compose\">
                        <input type=\"hidden\" name=\"action\" value=\"open\">
                        <button type=\"submit\" class=\"flex w-full items-center space-x-3 rounded-lg px-4 py-3 text-gray-700 transition-colors hover:bg-gray-50\">
                            <span>➕</span><span>New Post</span>
                        </button>
                    </form>
                </nav>
                <div class=\"border-t p-4\">
                    <p class=\"text-sm text-gray-500\">📍 {escape(user_city)}</p>
                </div>
            </div>
        </aside>
        """
    )


def mobile_header() -> Markup:
    return Markup(
        """
        <header class=\"flex items-center justify-between border-b bg-white p-4 shadow-sm lg:hidden\">
            <form method=\"post\" action=\"/dashboard/sidebar\">
                <input type=\"hidden\" name=\"open\" value=\"true\">
                <button type=\"submit\" class=\"rounded-lg p-2 hover:bg-gray-100\" aria-label=\"Open menu\">☰</button>
            </form>
            <h1 class=\"text-lg font-bold text-gray-900\">Cityscope</h1>
            <form method=\"post\" action=\"/dashboard/compose\">
                <input type=\"hidden\" name=\"action\" value=\"open\">
                <button type=\"submit\" class=\"rounded-lg bg-indigo-600 p-2 text-white hover:bg-indigo-700\" aria-label=\"New post\">➕</button>
            </form>
        </header>
        """
    )


def _option(value: str, label: str, *, selected: bool) -> str:
    flag = " selected" if selected else ""
    return f"<option value=\"{escape(value)}\"{flag}>{escape(label)}</option>"


def feed_header(
    *,
    location_filter: str,
    filter_type: str,
    user_city: str,
    cities: Iterable[str],
    post_types: Iterable[PostTypeConfig],
) -> Markup:
    """Title plus the location and post-type filters."""

    subtitle = (
        f"<span class=\"ml-2 text-lg font-normal text-gray-600\">- {escape(location_filter)}</span>"
        if location_filter and location_filter != user_city
        else ""
    )
    city_options = [_option("", f"My City ({user_city})", selected=not location_filter)]
    city_options.extend(
        _option(city, city, selected=location_filter == city) for city in cities if city != user_city
    )
    type_options = [_option("all", "All Posts", selected=filter_type == "all")]
    type_options.extend(
        _option(config.value, config.label, selected=filter_type == config.value) for config in post_types
    )

    return Markup(
        f"""
        <div class=\"border-b bg-white p-4 shadow-sm lg:p-6\">
            <div class=\"mx-auto max-w-2xl\">
                <div class=\"mb-4 flex items-center justify-between\">
                    <h2 class=\"text-2xl font-bold text-gray-900\">Community Feed{subtitle}</h2>
                    <form method=\"post\" action=\"/dashboard/compose\" class=\"hidden lg:block\">
                        <input type=\"hidden\" name=\"action\" value=\"open\">
                        <button type=\"submit\" class=\"flex items-center space-x-2 rounded-lg bg-indigo-600 px-4 py-2 text-white transition-colors hover:bg-indigo-700\">
                            <span>➕</span><span>New Post</span>
                        </button>
                    </form>
                </div>
                <form method=\"post\" action=\"/dashboard/filters\" class=\"space-y-3\" data-role=\"feed-filters\">
                    <div class=\"flex items-center space-x-3\">
                        <label for=\"filter-city\" class=\"text-sm font-medium text-gray-700\">Location:</label>
                        <select id=\"filter-city\" name=\"city\" onchange=\"this.form.submit()\" class=\"rounded-md border border-gray-300 px-3 py-1.5 text-sm\">
                            {''.join(city_options)}
                        </select>
                    </div>
                    <div class=\"flex items-center space-x-3\">
                        <label for=\"filter-type\" class=\"text-sm font-medium text-gray-700\">Type:</label>
                        <select id=\"filter-type\" name=\"postType\" onchange=\"this.form.submit()\" class=\"rounded-md border border-gray-300 px-3 py-1.5 text-sm\">
                            {''.join(type_options)}
                        </select>
                    </div>
                    <noscript><button type=\"submit\" class=\"text-sm text-indigo-600\">Apply</button></noscript>
                </form>
            </div>
        </div>
        """
    )


__all__ = ["NAV_TABS", "STATIC_VERSION", "feed_header", "mobile_header", "sidebar"]
