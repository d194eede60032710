"""
Runtime configuration helpers for the Cityscope web front end.

Loads the backend API location and static UI configuration from the .env
file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class RemotePattern(BaseModel):
    """Remote image source that may be routed through the optimization pipeline."""

    protocol: str = "https"
    hostname: str
    port: str = ""
    pathname: str = "/**"


DEFAULT_REMOTE_PATTERNS = [
    RemotePattern(hostname="res.cloudinary.com"),
    RemotePattern(hostname="**.cloudinary.com"),
    RemotePattern(hostname="images.unsplash.com"),
    RemotePattern(hostname="via.placeholder.com"),
    RemotePattern(protocol="http", hostname="localhost", port="3000"),
    RemotePattern(protocol="https", hostname="localhost", port="3000"),
]


class Settings(BaseSettings):
    backend_api_url: str = Field(default="http://localhost:5000", alias="BACKEND_API_URL")
    backend_timeout: float = Field(default=10.0, alias="BACKEND_TIMEOUT")

    app_name: str = Field(default="Cityscope", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")

    auth_login_path: str = Field(default="/api/auth/login", alias="AUTH_LOGIN_PATH")
    auth_signup_path: str = Field(default="/api/auth/signup", alias="AUTH_SIGNUP_PATH")

    session_cookie_name: str = Field(default="cityscope_session", alias="SESSION_COOKIE_NAME")
    token_cookie_name: str = Field(default="cityscope_token", alias="TOKEN_COOKIE_NAME")
    city_cookie_name: str = Field(default="cityscope_city", alias="CITY_COOKIE_NAME")
    user_cookie_name: str = Field(default="cityscope_user", alias="USER_COOKIE_NAME")
    session_idle_seconds: int = Field(default=60 * 60, alias="SESSION_IDLE_SECONDS")

    default_city: str = Field(default="Surat", alias="DEFAULT_CITY")
    available_cities: list[str] = Field(
        default_factory=lambda: ["Ahmedabad", "Mumbai", "Pune", "Surat"],
        alias="AVAILABLE_CITIES",
    )

    # Image optimization pipeline
    image_remote_patterns: list[RemotePattern] = Field(
        default_factory=lambda: list(DEFAULT_REMOTE_PATTERNS),
        alias="IMAGE_REMOTE_PATTERNS",
    )
    image_formats: list[str] = Field(default_factory=lambda: ["image/webp", "image/avif"], alias="IMAGE_FORMATS")
    image_device_sizes: list[int] = Field(
        default_factory=lambda: [640, 750, 828, 1080, 1200, 1920, 2048, 3840],
        alias="IMAGE_DEVICE_SIZES",
    )
    image_sizes: list[int] = Field(
        default_factory=lambda: [16, 32, 48, 64, 96, 128, 256, 384],
        alias="IMAGE_SIZES",
    )
    image_minimum_cache_ttl: int = Field(default=60, alias="IMAGE_MINIMUM_CACHE_TTL")
    image_default_quality: int = Field(default=75, alias="IMAGE_DEFAULT_QUALITY")
    image_max_upstream_bytes: int = Field(default=10 * 1024 * 1024, alias="IMAGE_MAX_UPSTREAM_BYTES")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def allowed_widths(self) -> list[int]:
        return sorted(set(self.image_sizes) | set(self.image_device_sizes))


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["RemotePattern", "Settings", "get_settings"]
